"""
Player Data Models

- PlayingState: PLAYING / STOPPED / GETTING_READY / RESTING
- PlayerTiming: the four delays driving command scheduling
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto

from lullaby.config import (
    DELAY_START_DEFAULT,
    DELAY_SWITCH_DEFAULT,
    DELAY_STOP_DEFAULT,
    DELAY_REST_DEFAULT,
)


class PlayingState(Enum):
    """Playing state machine states."""
    PLAYING = auto()
    STOPPED = auto()
    GETTING_READY = auto()  # declared, no transition enters it yet
    RESTING = auto()


@dataclass(frozen=True)
class PlayerTiming:
    """Scheduling delays in seconds (all non-negative)."""
    delay_start: float = DELAY_START_DEFAULT
    delay_switch: float = DELAY_SWITCH_DEFAULT
    delay_stop: float = DELAY_STOP_DEFAULT
    delay_rest: float = DELAY_REST_DEFAULT

    def __post_init__(self):
        for name in ("delay_start", "delay_switch", "delay_stop", "delay_rest"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite non-negative number, got {value}")
