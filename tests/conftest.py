"""Pytest configuration - shared fixtures for the flute player tests.

PyQt5 signals are connected directly to plain Python recorders. Emission
happens in the test thread, so no QApplication or event loop is needed.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Tuple

import pytest
from PyQt5.QtWidgets import QApplication

from lullaby.audio.voice_pool import VoicePool
from lullaby.engine.flute_player import FlutePlayer
from lullaby.model.player import PlayerTiming

ROOT = Path(__file__).resolve().parents[1]

# Widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def pytest_sessionstart(session):
    os.chdir(ROOT)


class PlayerEventRecorder:
    """Records every notification of a FlutePlayer, in emission order."""

    def __init__(self, player: FlutePlayer):
        self.events: List[Tuple] = []
        player.events.command_received.connect(
            lambda command: self.events.append(("command_received", command)))
        player.events.command_cancelled.connect(
            lambda command: self.events.append(("command_cancelled", command)))
        player.events.note_started.connect(
            lambda colour, note: self.events.append(("note_started", colour, note)))
        player.events.note_stopped.connect(
            lambda colour, note: self.events.append(("note_stopped", colour, note)))
        player.events.state_entered.connect(
            lambda state, owner: self.events.append(("state_entered", state)))

    def of(self, kind: str) -> List[Tuple]:
        """Payloads (without the kind tag) of one notification kind."""
        return [event[1:] for event in self.events if event[0] == kind]

    def kinds(self) -> List[str]:
        return [event[0] for event in self.events]

    def clear(self):
        self.events.clear()


# Fixtures used by multiple test files

@pytest.fixture(scope="session")
def qapp():
    """Single QApplication for tests that need timers or widgets."""
    return QApplication.instance() or QApplication([])


@pytest.fixture
def project_root():
    """Return path to project root."""
    return ROOT


@pytest.fixture
def timing():
    """delay_start=0.5, delay_switch=0.0, delay_stop=0.2, delay_rest=1.0"""
    return PlayerTiming(delay_start=0.5, delay_switch=0.0, delay_stop=0.2, delay_rest=1.0)


@pytest.fixture
def voice_pool():
    return VoicePool(num_voices=4)


@pytest.fixture
def player(voice_pool, timing):
    """Player set up and resting, volume 0.8."""
    p = FlutePlayer(voice_pool, timing=timing, volume=0.8)
    p.setup()
    return p


@pytest.fixture
def recorder(player):
    return PlayerEventRecorder(player)
