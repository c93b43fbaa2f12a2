"""Note command scheduling and the flute player."""
from .commands import CommandKind, NoteCommand, SchedulingContext
from .command_queue import CommandQueue
from .flute_player import FlutePlayer, ConfigurationError

__all__ = [
    'CommandKind', 'NoteCommand', 'SchedulingContext',
    'CommandQueue', 'FlutePlayer', 'ConfigurationError',
]
