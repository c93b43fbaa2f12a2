"""
OSC Instrument
Plays the flute voices on a synthesis server (SuperCollider) over OSC

Messages (see OSC_PATHS):
- noteOn  [voice, tone, volume]
- noteOff [voice]
- count   [number_voices]
- allNotesOff []

Sends to the server on port 57120 by default.
"""

from pythonosc import udp_client

from lullaby.audio.voice_pool import VoicePool
from lullaby.config import DEFAULT_NUM_VOICES, OSC_HOST, OSC_SEND_PORT, OSC_PATHS
from lullaby.model.note import MusicalNote
from lullaby.utils.logger import logger


class OSCInstrument(VoicePool):
    """VoicePool whose voices are rendered by an OSC synthesis server."""

    def __init__(self, num_voices: int = DEFAULT_NUM_VOICES, client=None, **kwargs):
        """
        Args:
            num_voices: Voice slots to manage
            client: Optional pre-built OSC client (anything with send_message)
        """
        super().__init__(num_voices, **kwargs)
        self.client = client
        self._host = None
        self._port = None

    @property
    def connected(self) -> bool:
        return self.client is not None

    def connect(self, host=None, port=None) -> bool:
        """Create the UDP client and announce the voice count."""
        self._host = host or OSC_HOST
        self._port = port or OSC_SEND_PORT

        try:
            self.client = udp_client.SimpleUDPClient(self._host, self._port)
        except OSError as e:
            logger.error(f"Failed to create OSC client: {e}", component="OSC")
            self.client = None
            return False

        logger.info(f"Sending voices to {self._host}:{self._port}", component="OSC")
        self._send_voice_count(self.number_voices)
        return True

    def disconnect(self):
        if self.client is None:
            return
        self.all_notes_off()
        self._send(OSC_PATHS['all_notes_off'], [])
        self.client = None
        logger.info("OSC instrument disconnected", component="OSC")

    def _send(self, path: str, args: list) -> bool:
        if self.client is None:
            logger.osc(f"Not connected, dropping {path}", details=str(args))
            return False
        try:
            self.client.send_message(path, args)
        except OSError as e:
            logger.error(f"Failed to send {path}", component="OSC", details=str(e))
            return False
        logger.osc(f"Sent {path}", details=str(args))
        return True

    def _send_note_on(self, voice: int, note: MusicalNote) -> bool:
        return self._send(OSC_PATHS['voice_note_on'], [voice, note.tone, float(note.volume)])

    def _send_note_off(self, voice: int, note: MusicalNote) -> bool:
        return self._send(OSC_PATHS['voice_note_off'], [voice])

    def _send_voice_count(self, count: int):
        if self.client is not None:
            self._send(OSC_PATHS['voice_count'], [count])
