"""
Tests for lullaby/config/__init__.py
Validates constants, tables and configuration integrity
"""

import pytest
from lullaby.config import (
    DELAY_START_DEFAULT,
    DELAY_SWITCH_DEFAULT,
    DELAY_STOP_DEFAULT,
    DELAY_REST_DEFAULT,
    VOLUME_DEFAULT,
    VOLUME_MIN,
    VOLUME_MAX,
    DEFAULT_TONES,
    DEFAULT_KEYS,
    TONE_MIN,
    TONE_MAX,
    MIN_PLAYER_VOICES,
    DEFAULT_NUM_VOICES,
    MAX_NUM_VOICES,
    OSC_SEND_PORT,
    OSC_PATHS,
)
from lullaby.input.keyboard_input import key_code
from lullaby.model.note import NoteColour
from lullaby.model.player import PlayerTiming


class TestTiming:
    """Default delays."""

    def test_delays_non_negative(self):
        for delay in (DELAY_START_DEFAULT, DELAY_SWITCH_DEFAULT,
                      DELAY_STOP_DEFAULT, DELAY_REST_DEFAULT):
            assert delay >= 0

    def test_default_timing_uses_config(self):
        timing = PlayerTiming()
        assert timing.delay_start == DELAY_START_DEFAULT
        assert timing.delay_rest == DELAY_REST_DEFAULT

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            PlayerTiming(delay_stop=-0.1)

    def test_non_finite_delay_rejected(self):
        with pytest.raises(ValueError):
            PlayerTiming(delay_start=float("nan"))

    def test_volume_default_in_range(self):
        assert VOLUME_MIN <= VOLUME_DEFAULT <= VOLUME_MAX


class TestTables:
    """Default colour tables."""

    def test_one_tone_per_colour(self):
        assert len(DEFAULT_TONES) == NoteColour.count()

    def test_tones_in_range(self):
        for tone in DEFAULT_TONES:
            assert TONE_MIN <= tone <= TONE_MAX

    def test_one_key_per_colour(self):
        assert len(DEFAULT_KEYS) == NoteColour.count()

    def test_keys_unique_and_known(self):
        assert len(set(DEFAULT_KEYS)) == len(DEFAULT_KEYS)
        for name in DEFAULT_KEYS:
            key_code(name)


class TestVoices:

    def test_voice_bounds(self):
        assert 2 <= MIN_PLAYER_VOICES <= DEFAULT_NUM_VOICES <= MAX_NUM_VOICES

    def test_voices_fit_midi_channels(self):
        assert MAX_NUM_VOICES <= 16


class TestOSC:

    def test_port_valid(self):
        assert 1024 < OSC_SEND_PORT < 65536

    def test_paths_unique(self):
        assert len(set(OSC_PATHS.values())) == len(OSC_PATHS)
