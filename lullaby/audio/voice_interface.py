"""
Voice Interface - the instrument contract the flute player drives

Voices are addressed by integer handles. NO_VOICE (-1) is returned when a
note cannot be started (no free voice, tone out of range, transport down).
"""

from abc import ABC, abstractmethod

from lullaby.model.note import MusicalNote


class VoiceInterface(ABC):
    """Polyphonic instrument as seen by the player."""

    @abstractmethod
    def play_note(self, note: MusicalNote) -> int:
        """Start a note on a free voice. Returns the voice handle or NO_VOICE."""
        raise NotImplementedError()

    @abstractmethod
    def stop_note(self, voice: int) -> bool:
        """Release a sounding voice. Returns False if nothing was stopped."""
        raise NotImplementedError()

    @abstractmethod
    def get_note(self, voice: int) -> MusicalNote:
        """Note currently held by a voice."""
        raise NotImplementedError()

    @abstractmethod
    def can_play(self, note: MusicalNote) -> bool:
        """Advisory: whether the note is playable at all."""
        raise NotImplementedError()

    @abstractmethod
    def can_stop(self, voice: int) -> bool:
        """Advisory: whether the voice is currently sounding."""
        raise NotImplementedError()

    @property
    @abstractmethod
    def number_voices(self) -> int:
        raise NotImplementedError()

    @number_voices.setter
    @abstractmethod
    def number_voices(self, value: int):
        raise NotImplementedError()

    @property
    def last_error(self) -> str:
        """Explanation of the most recent failure (empty if none)."""
        return ""
