"""
Note Commands

A NoteCommand is one pending START or STOP for a note colour. The set of
command kinds is closed, so behaviour is dispatched on the kind tag rather
than through subclasses.

Commands never hold a reference to the player. Everything they need to know
about the player (current state and delays) arrives as a SchedulingContext.

Key rules:
- START execution time depends on the player state when it is computed,
  so it is recomputed on every sort and never cached.
- A command is due strictly after its execution time.
- A command cancels a later-sorted one when it executes earlier and was
  issued later. START also cancels any other START. STOP only cancels a
  START for its own colour.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from lullaby.model.note import NoteColour
from lullaby.model.player import PlayingState, PlayerTiming


class CommandKind(Enum):
    """What a command does when executed."""
    START = auto()
    STOP = auto()


@dataclass(frozen=True)
class SchedulingContext:
    """Snapshot of the player state commands are evaluated against."""
    state: PlayingState
    timing: PlayerTiming


@dataclass(frozen=True, eq=False)
class NoteCommand:
    """
    Pending start or stop of a note colour.

    Identity matters: two commands with equal fields issued by two separate
    input edges are still two commands, so equality is by identity.
    """
    kind: CommandKind
    colour: NoteColour
    time_issued: float
    delayed: bool = True

    @classmethod
    def start(cls, colour: NoteColour, time_issued: float, delayed: bool = True) -> "NoteCommand":
        return cls(CommandKind.START, colour, time_issued, delayed)

    @classmethod
    def stop(cls, colour: NoteColour, time_issued: float, delayed: bool = True) -> "NoteCommand":
        return cls(CommandKind.STOP, colour, time_issued, delayed)

    @property
    def is_start(self) -> bool:
        return self.kind is CommandKind.START

    @property
    def is_stop(self) -> bool:
        return self.kind is CommandKind.STOP

    def execution_time(self, ctx: SchedulingContext) -> float:
        """Time at which the command should execute, given the current state."""
        if not self.delayed:
            return self.time_issued

        timing = ctx.timing
        if self.is_stop:
            return self.time_issued + timing.delay_stop

        if ctx.state is PlayingState.RESTING:
            return self.time_issued + timing.delay_start
        if ctx.state in (PlayingState.PLAYING, PlayingState.STOPPED):
            return self.time_issued + timing.delay_switch
        return self.time_issued

    def should_execute(self, now: float, ctx: SchedulingContext) -> bool:
        """Whether the command is due. Not yet due exactly at its deadline."""
        return now > self.execution_time(ctx)

    def should_cancel(self, other: "NoteCommand", ctx: SchedulingContext) -> bool:
        """Whether this command makes `other` (sorted right after it) moot."""
        # A fresher command pre-empts a stale one that would fire later
        preempts = (
            self.execution_time(ctx) < other.execution_time(ctx)
            and self.time_issued > other.time_issued
        )

        if self.is_start:
            # Only one note can be getting ready at once
            return preempts or other.is_start

        # Releasing one key must not cancel another key's pending press
        return preempts and other.is_start and other.colour == self.colour

    def describe(self) -> str:
        prefix = "delayed " if self.delayed else ""
        return f"{prefix}{self.kind.name} {self.colour.name} @ {self.time_issued:.3f}"
