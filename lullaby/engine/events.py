"""
Player notification channels.

Purely observational: listeners (animation, UI, logging) never feed back
into scheduling. Emission is synchronous in the player's thread.
"""

from PyQt5.QtCore import QObject, pyqtSignal


class PlayerEvents(QObject):
    """Signals broadcast by a FlutePlayer."""

    note_started = pyqtSignal(object, object)      # NoteColour, MusicalNote
    note_stopped = pyqtSignal(object, object)      # NoteColour, MusicalNote
    command_received = pyqtSignal(object)          # NoteCommand (new queue head)
    command_cancelled = pyqtSignal(object)         # NoteCommand (never executed)
    state_entered = pyqtSignal(object, object)     # PlayingState, FlutePlayer
