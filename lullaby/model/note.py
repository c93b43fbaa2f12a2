"""
Note Data Models

- NoteColour: the fixed set of tone classes a player can trigger
- MusicalNote: immutable (tone, volume) pair handed to an instrument
- KeyEdge: a single press/release edge observed on an input control
- NO_VOICE: voice handle meaning "no voice"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


NO_VOICE = -1


class NoteColour(IntEnum):
    """Tone class selected by one input control. Value is the table index."""
    RED = 0
    ORANGE = 1
    YELLOW = 2
    GREEN = 3
    BLUE = 4
    INDIGO = 5
    VIOLET = 6

    @classmethod
    def count(cls) -> int:
        return len(cls)


@dataclass(frozen=True)
class MusicalNote:
    """Sound to play: MIDI tone number and volume in [0, 1]."""
    tone: int
    volume: float = 1.0

    def __post_init__(self):
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"volume must be in [0, 1], got {self.volume}")


@dataclass(frozen=True)
class KeyEdge:
    """Press or release of the control bound to a colour."""
    colour: NoteColour
    pressed: bool
