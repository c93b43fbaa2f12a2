"""
Command Queue - ordered, self-cancelling queue of pending NoteCommands

Invariant after every mutation:
- sorted by execution time (ascending, stable on ties)
- no adjacent pair (a, b) where a.should_cancel(b)

A cancelled pair normally loses its later-sorted command. Two pending
starts are the exception: the one issued last survives, since only the
most recent press should sound.

Re-sorted on every insertion. Depth is bounded by the number of colours.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from lullaby.engine.commands import NoteCommand, SchedulingContext
from lullaby.utils.logger import logger


class CommandQueue:
    """
    Pending commands of one player.

    All player knowledge comes through callbacks, so the queue holds no
    reference to its owner.
    """

    def __init__(
        self,
        get_context: Callable[[], SchedulingContext],
        execute: Callable[[NoteCommand, float], None],
        on_received: Optional[Callable[[NoteCommand], None]] = None,
        on_cancelled: Optional[Callable[[NoteCommand], None]] = None,
    ):
        """
        Args:
            get_context: Callback returning the current scheduling context
            execute: Callback executing a due command (command, now)
            on_received: Called with the new head whenever it changes
            on_cancelled: Called with each command removed without executing
        """
        self._get_context = get_context
        self._execute = execute
        self._on_received = on_received
        self._on_cancelled = on_cancelled

        self._commands: List[NoteCommand] = []

    def __len__(self) -> int:
        return len(self._commands)

    def __bool__(self) -> bool:
        return bool(self._commands)

    @property
    def head(self) -> Optional[NoteCommand]:
        """Next command in line, or None when empty."""
        return self._commands[0] if self._commands else None

    def snapshot(self) -> Tuple[NoteCommand, ...]:
        """Current queue contents in execution order."""
        return tuple(self._commands)

    def clear(self):
        self._commands.clear()

    # =========================================================================
    # MUTATION
    # =========================================================================

    def enqueue(self, command: NoteCommand):
        """Add a command, then re-sort and prune."""
        self._commands.append(command)
        first = self._commands[0]

        logger.command(f"Enqueued {command.describe()}")
        self.resort()

        # Pruning always leaves at least one command
        head = self._commands[0]
        if head is not first or head is command:
            self._notify_received(head)

    def resort(self):
        """Sort by fresh execution times, then drop cancelled commands."""
        ctx = self._get_context()
        # list.sort is stable, ties keep insertion order
        self._commands.sort(key=lambda c: c.execution_time(ctx))

        i = 0
        while i < len(self._commands) - 1:
            current = self._commands[i]
            following = self._commands[i + 1]
            if not current.should_cancel(following, ctx):
                i += 1
                continue

            if (current.is_start and following.is_start
                    and following.time_issued > current.time_issued):
                # Two pending starts: the fresher press wins
                victim, survivor = current, following
                del self._commands[i]
                # New neighbours (i-1, i) need checking
                i = max(i - 1, 0)
            else:
                victim, survivor = following, current
                del self._commands[i + 1]

            logger.command(f"Cancelled {victim.describe()}", details=f"by {survivor.describe()}")
            if self._on_cancelled is not None:
                self._on_cancelled(victim)

    # =========================================================================
    # EXECUTION
    # =========================================================================

    def tick(self, now: float):
        """Execute every command due at `now`, in order."""
        while self._commands and self._commands[0].should_execute(now, self._get_context()):
            command = self._commands.pop(0)
            logger.command(f"Executing {command.describe()}", details=f"now={now:.3f}")
            self._execute(command, now)

            if self._commands:
                self._notify_received(self._commands[0])

    def _notify_received(self, command: NoteCommand):
        if self._on_received is not None:
            self._on_received(command)
