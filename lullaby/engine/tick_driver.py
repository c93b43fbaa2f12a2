"""
Tick Driver - runs the flute player once per frame

Single writer: every tick drains the key edges and hands them to the
player together with the current monotonic time.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from PyQt5.QtCore import QObject, QTimer

from lullaby.config import TICK_INTERVAL_MS
from lullaby.engine.flute_player import FlutePlayer
from lullaby.input.keyboard_input import KeyboardInput
from lullaby.utils.logger import logger


class TickDriver(QObject):
    """QTimer-driven per-frame update of a FlutePlayer."""

    def __init__(
        self,
        player: FlutePlayer,
        keyboard: Optional[KeyboardInput] = None,
        clock: Callable[[], float] = time.monotonic,
        interval_ms: int = TICK_INTERVAL_MS,
        parent=None,
    ):
        super().__init__(parent)
        self._player = player
        self._keyboard = keyboard
        self._clock = clock
        self._interval_ms = interval_ms

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self):
        if not self._player.is_ready:
            self._player.setup()
        self._timer.start(self._interval_ms)
        logger.info(f"Tick driver started ({self._interval_ms} ms)", component="PLAYER")

    def stop(self):
        self._timer.stop()
        logger.info("Tick driver stopped", component="PLAYER")

    def _on_timeout(self):
        self.step(self._clock())

    def step(self, now: float):
        """Run one tick at `now`."""
        edges = self._keyboard.drain() if self._keyboard is not None else []
        self._player.update(now, edges)
