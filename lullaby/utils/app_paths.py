"""App path helpers (cross-platform).

SSOT for Lullaby app data paths.

Environment overrides (useful for portable/dev launches):
- LULLABY_CFG_DIR: base dir containing player.json
"""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "Lullaby"
PROFILE_FILENAME = "player.json"


def _env_path(name: str) -> Path | None:
    v = os.environ.get(name)
    if not v:
        return None
    return Path(os.path.expanduser(v)).resolve()


def get_app_data_dir() -> Path:
    """Base app data dir."""
    cfg_dir = _env_path("LULLABY_CFG_DIR")
    if cfg_dir is not None:
        return cfg_dir
    return Path(user_data_dir(APP_NAME, appauthor=False, roaming=True)).resolve()


def get_profile_path() -> Path:
    return get_app_data_dir() / PROFILE_FILENAME
