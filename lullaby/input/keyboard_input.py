"""
KeyboardInput - Qt key events to note colour edges

Installed as an application-level event filter so the flute keys work
whatever widget has focus. Press/release edges are buffered until the tick
driver drains them; auto-repeat presses are ignored so holding a key is a
single press.
"""
from __future__ import annotations

from typing import Dict, List, Sequence, Set

from PyQt5.QtCore import QObject, QEvent, Qt

from lullaby.model.note import KeyEdge, NoteColour
from lullaby.utils.logger import logger


def key_code(name: str) -> int:
    """Qt key code for a key name such as 'A', 'Space' or 'F1'."""
    if len(name) == 1:
        name = name.upper()
    code = getattr(Qt, f"Key_{name}", None)
    if code is None:
        raise ValueError(f"Unknown key name: {name!r}")
    return int(code)


class KeyboardInput(QObject):
    """Buffers key edges for the colours bound in a key table."""

    def __init__(self, keys: Sequence[str], parent=None):
        """
        Args:
            keys: One key name per NoteColour, in colour order
        """
        super().__init__(parent)
        if len(keys) != NoteColour.count():
            raise ValueError(
                f"keys must have one entry per note colour ({NoteColour.count()}), got {len(keys)}"
            )
        self._colour_by_key: Dict[int, NoteColour] = {
            key_code(name): NoteColour(i) for i, name in enumerate(keys)
        }
        if len(self._colour_by_key) != NoteColour.count():
            raise ValueError(f"keys must bind each note colour to its own key, got {list(keys)}")
        self._held: Set[int] = set()
        self._edges: List[KeyEdge] = []

    def handles(self, key: int) -> bool:
        return key in self._colour_by_key

    def handle_key(self, key: int, pressed: bool, auto_repeat: bool = False) -> bool:
        """Record an edge for a bound key. Returns True if the key is bound."""
        colour = self._colour_by_key.get(key)
        if colour is None:
            return False
        if auto_repeat:
            return True

        if pressed:
            if key in self._held:
                return True
            self._held.add(key)
        else:
            if key not in self._held:
                return True
            self._held.discard(key)

        self._edges.append(KeyEdge(colour, pressed))
        return True

    def drain(self) -> List[KeyEdge]:
        """Edges observed since the last drain, in arrival order."""
        edges, self._edges = self._edges, []
        return edges

    def release_all(self):
        """Queue releases for every held key (focus lost, window hidden)."""
        for key in list(self._held):
            self.handle_key(key, pressed=False)
        logger.debug("Released all held flute keys", component="INPUT")

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        """Intercept bound key events before widgets see them."""
        if event.type() not in (QEvent.KeyPress, QEvent.KeyRelease):
            return False
        return self.handle_key(
            event.key(),
            pressed=event.type() == QEvent.KeyPress,
            auto_repeat=event.isAutoRepeat(),
        )
