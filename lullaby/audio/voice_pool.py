"""
Voice Pool - in-process polyphonic voice bookkeeping

Implements the VoiceInterface contract without producing sound. Used as the
headless instrument and as the base of the OSC and MIDI instruments, which
override the _send_* hooks to reach real synthesis.

Voice handles are slot indices 0..number_voices-1. A new note always takes
the lowest free slot.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from lullaby.audio.voice_interface import VoiceInterface
from lullaby.config import DEFAULT_NUM_VOICES, MAX_NUM_VOICES, TONE_MIN, TONE_MAX
from lullaby.model.note import MusicalNote, NO_VOICE
from lullaby.utils.logger import logger


class VoicePool(VoiceInterface):
    """Fixed number of voice slots, each empty or holding one note."""

    def __init__(
        self,
        num_voices: int = DEFAULT_NUM_VOICES,
        tone_min: int = TONE_MIN,
        tone_max: int = TONE_MAX,
    ):
        if tone_min > tone_max:
            raise ValueError(f"tone_min {tone_min} is above tone_max {tone_max}")
        self._check_voice_count(num_voices)

        self.tone_min = tone_min
        self.tone_max = tone_max
        self._voices: List[Optional[MusicalNote]] = [None] * num_voices
        self._last_error = ""

    @staticmethod
    def _check_voice_count(value: int):
        if not 1 <= value <= MAX_NUM_VOICES:
            raise ValueError(f"number of voices must be 1-{MAX_NUM_VOICES}, got {value}")

    # =========================================================================
    # VOICE INTERFACE
    # =========================================================================

    def play_note(self, note: MusicalNote) -> int:
        if not self.can_play(note):
            self._last_error = f"tone {note.tone} outside {self.tone_min}-{self.tone_max}"
            return NO_VOICE

        voice = self._find_free_voice()
        if voice == NO_VOICE:
            self._last_error = f"all {len(self._voices)} voices busy"
            return NO_VOICE

        if not self._send_note_on(voice, note):
            self._last_error = f"voice {voice}: note on could not be sent"
            return NO_VOICE

        self._voices[voice] = note
        self._last_error = ""
        return voice

    def stop_note(self, voice: int) -> bool:
        if not self.can_stop(voice):
            self._last_error = f"voice {voice} is not sounding"
            return False

        note = self._voices[voice]
        # The slot is freed even if the message is lost, so it cannot leak
        self._voices[voice] = None
        if not self._send_note_off(voice, note):
            self._last_error = f"voice {voice}: note off could not be sent"
            return False

        self._last_error = ""
        return True

    def get_note(self, voice: int) -> MusicalNote:
        if not self.can_stop(voice):
            raise ValueError(f"voice {voice} is not sounding")
        return self._voices[voice]

    def can_play(self, note: MusicalNote) -> bool:
        return self.tone_min <= note.tone <= self.tone_max

    def can_stop(self, voice: int) -> bool:
        return 0 <= voice < len(self._voices) and self._voices[voice] is not None

    @property
    def number_voices(self) -> int:
        return len(self._voices)

    @number_voices.setter
    def number_voices(self, value: int):
        self._check_voice_count(value)
        current = len(self._voices)
        if value == current:
            return

        if value < current:
            # Release whatever sounds in the slots being removed
            for voice in range(value, current):
                if self._voices[voice] is not None:
                    self.stop_note(voice)
            del self._voices[value:]
        else:
            self._voices.extend([None] * (value - current))

        logger.debug(f"Voice count {current} -> {value}", component="VOICE")
        self._send_voice_count(value)

    @property
    def last_error(self) -> str:
        return self._last_error

    # =========================================================================
    # HELPERS
    # =========================================================================

    def active_voices(self) -> Dict[int, MusicalNote]:
        """Sounding voices by handle."""
        return {v: note for v, note in enumerate(self._voices) if note is not None}

    def all_notes_off(self):
        """Panic: release every sounding voice."""
        for voice in list(self.active_voices()):
            self.stop_note(voice)

    def _find_free_voice(self) -> int:
        for voice, note in enumerate(self._voices):
            if note is None:
                return voice
        return NO_VOICE

    # Transport hooks, overridden by instruments that produce sound

    def _send_note_on(self, voice: int, note: MusicalNote) -> bool:
        return True

    def _send_note_off(self, voice: int, note: MusicalNote) -> bool:
        return True

    def _send_voice_count(self, count: int):
        pass
