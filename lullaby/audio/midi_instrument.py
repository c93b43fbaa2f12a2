"""
MIDI Instrument - plays the flute voices on a MIDI output port

Each voice is sent on its own MIDI channel (voice 0 -> channel 1), so a
multitimbral synth can release one voice without touching the others.
Volume in [0, 1] is mapped to note-on velocity 1-127.
"""

from typing import List, Optional

import mido

from lullaby.audio.voice_pool import VoicePool
from lullaby.config import DEFAULT_NUM_VOICES, MIDI_PREFERRED_PORTS, MIDI_VELOCITY_MAX
from lullaby.model.note import MusicalNote
from lullaby.utils.logger import logger


def find_preferred_port(preferred_substrings: List[str] = None) -> Optional[str]:
    """
    Find a MIDI output port matching preferred substrings.

    Args:
        preferred_substrings: Priority list (default: MIDI_PREFERRED_PORTS)

    Returns:
        First matching port name or None
    """
    if preferred_substrings is None:
        preferred_substrings = MIDI_PREFERRED_PORTS

    outputs = mido.get_output_names()

    for substring in preferred_substrings:
        matches = [p for p in outputs if substring in p]
        if matches:
            logger.info(f"Found port matching '{substring}': {matches[0]}", component="MIDI")
            return matches[0]

    logger.warning(f"No preferred ports found. Available: {outputs}", component="MIDI")
    return None


def volume_to_velocity(volume: float) -> int:
    """Map volume in [0, 1] to note-on velocity 1-127 (velocity 0 is a note off)."""
    return max(1, min(MIDI_VELOCITY_MAX, int(round(volume * MIDI_VELOCITY_MAX))))


class MidiInstrument(VoicePool):
    """VoicePool whose voices are sent to a MIDI output port."""

    def __init__(self, num_voices: int = DEFAULT_NUM_VOICES, port=None, **kwargs):
        """
        Args:
            num_voices: Voice slots to manage (one MIDI channel each)
            port: Optional already-open mido output port
        """
        super().__init__(num_voices, **kwargs)
        self.port = port

    @property
    def connected(self) -> bool:
        return self.port is not None

    def open(self, port_name: Optional[str] = None) -> bool:
        """Open the named port, or the first preferred one."""
        port_name = port_name or find_preferred_port()
        if port_name is None:
            return False
        try:
            self.port = mido.open_output(port_name)
        except (IOError, ValueError) as e:
            logger.error(f"Failed to open MIDI port '{port_name}'", component="MIDI", details=str(e))
            self.port = None
            return False
        logger.info(f"Opened MIDI port: {port_name}", component="MIDI")
        return True

    def close(self):
        if self.port is None:
            return
        self.all_notes_off()
        self.port.close()
        self.port = None
        logger.info("MIDI port closed", component="MIDI")

    def _send(self, message) -> bool:
        if self.port is None:
            logger.midi("No port open, dropping message", details=str(message))
            return False
        try:
            self.port.send(message)
        except (IOError, ValueError) as e:
            logger.error("Failed to send MIDI message", component="MIDI", details=str(e))
            return False
        logger.midi(f"Sent {message}")
        return True

    def _send_note_on(self, voice: int, note: MusicalNote) -> bool:
        return self._send(mido.Message(
            'note_on', channel=voice, note=note.tone, velocity=volume_to_velocity(note.volume)
        ))

    def _send_note_off(self, voice: int, note: MusicalNote) -> bool:
        return self._send(mido.Message('note_off', channel=voice, note=note.tone, velocity=0))
