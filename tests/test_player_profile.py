"""
Tests for player profile schema, validation and storage
"""

import json

import pytest

from lullaby.config import DEFAULT_KEYS, DEFAULT_TONES
from lullaby.config.player_profile import (
    PROFILE_VERSION,
    PlayerProfile,
    ProfileValidationError,
    load_profile,
    save_profile,
    validate_profile,
)
from lullaby.model.player import PlayerTiming


def profile_data(**overrides):
    data = PlayerProfile().to_dict()
    data.update(overrides)
    return data


class TestPlayerProfile:
    """Dataclass defaults and serialisation."""

    def test_defaults(self):
        profile = PlayerProfile()
        assert profile.tones == DEFAULT_TONES
        assert profile.keys == DEFAULT_KEYS
        assert profile.volume == 1.0

    def test_default_lists_not_shared(self):
        a = PlayerProfile()
        a.tones[0] = 10
        assert PlayerProfile().tones[0] == DEFAULT_TONES[0]

    def test_timing(self):
        profile = PlayerProfile(delay_start=0.4, delay_switch=0.1, delay_stop=0.3, delay_rest=2.0)
        assert profile.timing() == PlayerTiming(0.4, 0.1, 0.3, 2.0)

    def test_to_dict_layout(self):
        data = PlayerProfile(delay_stop=0.25).to_dict()
        assert data["version"] == PROFILE_VERSION
        assert data["timing"]["delay_stop"] == 0.25
        assert set(data) == {"version", "timing", "volume", "tones", "keys"}

    def test_json_roundtrip(self):
        profile = PlayerProfile(delay_start=0.7, volume=0.3, keys=list("QWERTYU"))
        assert PlayerProfile.from_json(profile.to_json()) == profile

    def test_from_dict_fills_missing(self):
        profile = PlayerProfile.from_dict({"volume": 0.4})
        assert profile.volume == 0.4
        assert profile.tones == DEFAULT_TONES
        assert profile.delay_rest == PlayerProfile().delay_rest


class TestValidateProfile:
    """validate_profile errors and warnings."""

    def test_default_is_valid(self):
        is_valid, messages = validate_profile(PlayerProfile().to_dict())
        assert is_valid
        assert messages == []

    def test_empty_is_valid(self):
        is_valid, _ = validate_profile({})
        assert is_valid

    def test_negative_delay(self):
        is_valid, messages = validate_profile(profile_data(timing={"delay_stop": -0.1}))
        assert not is_valid
        assert any("delay_stop" in m for m in messages)

    def test_non_finite_delay(self):
        is_valid, _ = validate_profile(profile_data(timing={"delay_rest": float("inf")}))
        assert not is_valid

    def test_delay_wrong_type(self):
        is_valid, _ = validate_profile(profile_data(timing={"delay_start": "soon"}))
        assert not is_valid

    def test_timing_not_object(self):
        is_valid, _ = validate_profile(profile_data(timing=[0.5]))
        assert not is_valid

    def test_volume_out_of_range(self):
        is_valid, _ = validate_profile(profile_data(volume=1.2))
        assert not is_valid

    def test_short_tone_table(self):
        is_valid, messages = validate_profile(profile_data(tones=[60, 62]))
        assert not is_valid
        assert any("exactly 7" in m for m in messages)

    def test_tone_out_of_range(self):
        is_valid, _ = validate_profile(profile_data(tones=[60, 62, 64, 65, 67, 69, 200]))
        assert not is_valid

    def test_tone_bool_rejected(self):
        is_valid, _ = validate_profile(profile_data(tones=[True, 62, 64, 65, 67, 69, 71]))
        assert not is_valid

    def test_long_key_table(self):
        is_valid, _ = validate_profile(profile_data(keys=list("ASDFGHJK")))
        assert not is_valid

    def test_empty_key_name(self):
        is_valid, _ = validate_profile(profile_data(keys=["A", "", "D", "F", "G", "H", "J"]))
        assert not is_valid

    def test_duplicate_key_rejected(self):
        """A colour sharing its key with another could never be played."""
        is_valid, messages = validate_profile(profile_data(keys=["A", "a", "D", "F", "G", "H", "J"]))
        assert not is_valid
        assert any("more than one colour" in m for m in messages)

    def test_unknown_key_name_rejected(self):
        is_valid, messages = validate_profile(profile_data(keys=["space", "S", "D", "F", "G", "H", "J"]))
        assert not is_valid
        assert any("unknown key name" in m for m in messages)

    def test_named_keys_accepted(self):
        is_valid, _ = validate_profile(profile_data(keys=["Space", "F1", "D", "F", "G", "H", "J"]))
        assert is_valid

    def test_newer_version_is_warning(self):
        is_valid, messages = validate_profile(profile_data(version=PROFILE_VERSION + 1))
        assert is_valid
        assert "newer" in messages[0]

    def test_strict_raises(self):
        with pytest.raises(ProfileValidationError):
            validate_profile(profile_data(volume=-1), strict=True)


class TestStorage:
    """load_profile / save_profile."""

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_profile(tmp_path / "none.json") == PlayerProfile()

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "sub" / "player.json"
        profile = PlayerProfile(delay_switch=0.05, tones=[50, 52, 53, 55, 57, 58, 60])
        assert save_profile(profile, path) == path
        assert load_profile(path) == profile

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "player.json"
        path.write_text("{not json")
        with pytest.raises(ProfileValidationError):
            load_profile(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "player.json"
        path.write_text(json.dumps([1, 2, 3]))
        with pytest.raises(ProfileValidationError):
            load_profile(path)

    def test_duplicate_keys_rejected_on_load(self, tmp_path):
        path = tmp_path / "player.json"
        path.write_text(json.dumps(profile_data(keys=["A", "A", "D", "F", "G", "H", "J"])))
        with pytest.raises(ProfileValidationError):
            load_profile(path)

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "player.json"
        path.write_text(json.dumps(profile_data(keys=["A"])))
        with pytest.raises(ProfileValidationError):
            load_profile(path)

    def test_default_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LULLABY_CFG_DIR", str(tmp_path))
        path = save_profile(PlayerProfile(volume=0.6))
        assert path == tmp_path.resolve() / "player.json"
        assert load_profile().volume == 0.6
