"""
Player profile schema, validation and storage.

A profile holds the static per-player configuration: the four scheduling
delays, the note volume, and the colour -> tone / colour -> key tables.
It is loaded once at startup and copied into the player.
"""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

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
)
from lullaby.input.keyboard_input import key_code
from lullaby.model.note import NoteColour
from lullaby.model.player import PlayerTiming
from lullaby.utils.app_paths import get_profile_path
from lullaby.utils.logger import logger

PROFILE_VERSION = 1

DELAY_FIELDS = ("delay_start", "delay_switch", "delay_stop", "delay_rest")


@dataclass
class PlayerProfile:
    delay_start: float = DELAY_START_DEFAULT
    delay_switch: float = DELAY_SWITCH_DEFAULT
    delay_stop: float = DELAY_STOP_DEFAULT
    delay_rest: float = DELAY_REST_DEFAULT
    volume: float = VOLUME_DEFAULT
    tones: List[int] = field(default_factory=lambda: list(DEFAULT_TONES))
    keys: List[str] = field(default_factory=lambda: list(DEFAULT_KEYS))

    def timing(self) -> PlayerTiming:
        return PlayerTiming(
            delay_start=self.delay_start,
            delay_switch=self.delay_switch,
            delay_stop=self.delay_stop,
            delay_rest=self.delay_rest,
        )

    def to_dict(self) -> dict:
        return {
            "version": PROFILE_VERSION,
            "timing": {
                "delay_start": self.delay_start,
                "delay_switch": self.delay_switch,
                "delay_stop": self.delay_stop,
                "delay_rest": self.delay_rest,
            },
            "volume": self.volume,
            "tones": list(self.tones),
            "keys": list(self.keys),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerProfile":
        timing = data.get("timing", {})
        return cls(
            delay_start=timing.get("delay_start", DELAY_START_DEFAULT),
            delay_switch=timing.get("delay_switch", DELAY_SWITCH_DEFAULT),
            delay_stop=timing.get("delay_stop", DELAY_STOP_DEFAULT),
            delay_rest=timing.get("delay_rest", DELAY_REST_DEFAULT),
            volume=data.get("volume", VOLUME_DEFAULT),
            tones=list(data.get("tones", DEFAULT_TONES)),
            keys=list(data.get("keys", DEFAULT_KEYS)),
        )

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> "PlayerProfile":
        data = json.loads(json_str)
        return cls.from_dict(data)


class ProfileValidationError(Exception):
    """Raised when profile validation fails in strict mode."""
    pass


def validate_profile(data: dict, strict: bool = False) -> tuple:
    """
    Validate profile data.

    Table lengths that do not match the note colours are always errors: the
    player refuses to start with them.

    Args:
        data: Profile dictionary
        strict: If True, raise ProfileValidationError on any error

    Returns:
        (is_valid, errors_and_warnings)
    """
    errors = []
    warnings = []

    version = data.get("version", 1)
    if version > PROFILE_VERSION:
        warnings.append(f"Profile version {version} is newer than supported {PROFILE_VERSION}")

    timing = data.get("timing", {})
    if not isinstance(timing, dict):
        errors.append(f"timing must be an object, got {type(timing).__name__}")
        timing = {}
    for name in DELAY_FIELDS:
        if name not in timing:
            continue
        value, problem = _coerce_float(timing[name], f"timing.{name}")
        if problem:
            errors.append(problem)
        elif value < 0:
            errors.append(f"timing.{name} must be >= 0, got {value}")

    if "volume" in data:
        volume, problem = _coerce_float(data["volume"], "volume")
        if problem:
            errors.append(problem)
        elif not VOLUME_MIN <= volume <= VOLUME_MAX:
            errors.append(f"volume must be {VOLUME_MIN}-{VOLUME_MAX}, got {volume}")

    colours = NoteColour.count()

    tones = data.get("tones", DEFAULT_TONES)
    if not isinstance(tones, list):
        errors.append(f"tones must be a list, got {type(tones).__name__}")
    else:
        if len(tones) != colours:
            errors.append(f"tones must have exactly {colours} items, got {len(tones)}")
        for i, tone in enumerate(tones):
            if not isinstance(tone, int) or isinstance(tone, bool):
                errors.append(f"tones[{i}]: invalid type {type(tone).__name__}")
            elif not TONE_MIN <= tone <= TONE_MAX:
                errors.append(f"tones[{i}] must be {TONE_MIN}-{TONE_MAX}, got {tone}")

    keys = data.get("keys", DEFAULT_KEYS)
    if not isinstance(keys, list):
        errors.append(f"keys must be a list, got {type(keys).__name__}")
    else:
        if len(keys) != colours:
            errors.append(f"keys must have exactly {colours} items, got {len(keys)}")
        seen = set()
        for i, key in enumerate(keys):
            if not isinstance(key, str) or not key:
                errors.append(f"keys[{i}]: expected a key name, got {key!r}")
                continue
            try:
                code = key_code(key)
            except ValueError:
                errors.append(f"keys[{i}]: unknown key name '{key}'")
                continue
            # Each colour needs its own key to stay playable
            if code in seen:
                errors.append(f"keys[{i}]: '{key}' bound to more than one colour")
            seen.add(code)

    is_valid = len(errors) == 0

    if strict and not is_valid:
        raise ProfileValidationError(f"Invalid profile: {'; '.join(errors)}")

    return is_valid, errors + warnings


def _coerce_float(val, field_name: str) -> tuple:
    """
    Coerce value to a finite float.
    Returns (coerced_value, problem_message).
    """
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        return None, f"{field_name}: invalid type {type(val).__name__}"
    val = float(val)
    if not math.isfinite(val):
        return None, f"{field_name}: non-finite value rejected"
    return val, None


def load_profile(path: Optional[Path] = None) -> PlayerProfile:
    """
    Load and validate a profile. A missing file gives the default profile.

    Raises:
        ProfileValidationError: file content is not a valid profile
    """
    path = Path(path) if path is not None else get_profile_path()
    if not path.exists():
        logger.info(f"No profile at {path}, using defaults", component="CONFIG")
        return PlayerProfile()

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ProfileValidationError(f"Invalid profile JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ProfileValidationError(f"Invalid profile in {path}: expected an object")

    _, messages = validate_profile(data, strict=True)
    for message in messages:
        logger.warning(message, component="CONFIG")

    logger.info(f"Loaded profile {path}", component="CONFIG")
    return PlayerProfile.from_dict(data)


def save_profile(profile: PlayerProfile, path: Optional[Path] = None) -> Path:
    """Write a profile as JSON, creating the directory if needed."""
    path = Path(path) if path is not None else get_profile_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(profile.to_json())
    logger.info(f"Saved profile {path}", component="CONFIG")
    return path
