"""
Tests for MidiInstrument and port helpers
"""

from unittest.mock import MagicMock, patch

import mido
import pytest

from lullaby.audio.midi_instrument import (
    MidiInstrument,
    find_preferred_port,
    volume_to_velocity,
)
from lullaby.model.note import MusicalNote, NO_VOICE


@pytest.fixture
def mock_port():
    return MagicMock()


@pytest.fixture
def instrument(mock_port):
    return MidiInstrument(num_voices=4, port=mock_port)


class TestVelocity:

    def test_bounds(self):
        assert volume_to_velocity(1.0) == 127

    def test_silent_volume_still_starts_note(self):
        """Velocity 0 would be read as a note off."""
        assert volume_to_velocity(0.0) == 1

    def test_midpoint_rounds(self):
        assert volume_to_velocity(0.5) == 64


class TestMessages:

    def test_note_on_per_voice_channel(self, instrument, mock_port):
        instrument.play_note(MusicalNote(60))
        voice = instrument.play_note(MusicalNote(64, 0.5))
        sent = mock_port.send.call_args[0][0]
        assert sent == mido.Message('note_on', channel=voice, note=64, velocity=64)

    def test_zero_volume_note_on(self, instrument, mock_port):
        voice = instrument.play_note(MusicalNote(60, 0.0))
        sent = mock_port.send.call_args[0][0]
        assert sent.type == 'note_on'
        assert sent.velocity == 1
        assert instrument.can_stop(voice)

    def test_note_off(self, instrument, mock_port):
        voice = instrument.play_note(MusicalNote(62))
        instrument.stop_note(voice)
        sent = mock_port.send.call_args[0][0]
        assert sent.type == 'note_off'
        assert sent.channel == voice
        assert sent.note == 62

    def test_no_port_cannot_play(self):
        instrument = MidiInstrument(num_voices=2)
        assert instrument.play_note(MusicalNote(60)) == NO_VOICE

    def test_send_error_cannot_play(self, instrument, mock_port):
        mock_port.send.side_effect = IOError("device gone")
        assert instrument.play_note(MusicalNote(60)) == NO_VOICE

    def test_close_silences_and_closes(self, instrument, mock_port):
        instrument.play_note(MusicalNote(60))
        instrument.close()
        assert mock_port.send.call_args[0][0].type == 'note_off'
        mock_port.close.assert_called_once()
        assert not instrument.connected


class TestPorts:

    def test_find_preferred_port_priority(self):
        names = ["Midi Through Port-0", "IAC Driver Bus 1"]
        with patch("lullaby.audio.midi_instrument.mido.get_output_names", return_value=names):
            assert find_preferred_port(["IAC", "Through"]) == "IAC Driver Bus 1"

    def test_find_preferred_port_none(self):
        with patch("lullaby.audio.midi_instrument.mido.get_output_names", return_value=["Other"]):
            assert find_preferred_port(["IAC"]) is None

    def test_open_named_port(self):
        instrument = MidiInstrument(num_voices=2)
        with patch("lullaby.audio.midi_instrument.mido.open_output") as open_output:
            assert instrument.open("Synth")
        open_output.assert_called_once_with("Synth")
        assert instrument.connected

    def test_open_failure(self):
        instrument = MidiInstrument(num_voices=2)
        with patch("lullaby.audio.midi_instrument.mido.open_output",
                   side_effect=IOError("no such port")):
            assert instrument.open("Missing") is False
        assert not instrument.connected

    def test_open_without_available_port(self):
        instrument = MidiInstrument(num_voices=2)
        with patch("lullaby.audio.midi_instrument.mido.get_output_names", return_value=[]):
            assert instrument.open() is False
