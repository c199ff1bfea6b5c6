"""Platform-aware locations of the persisted configuration file."""

from __future__ import annotations

import os
import sys
from pathlib import Path

APP_DIR_NAME = "sss"
CONFIG_FILE_NAME = "config.toml"
CONFIG_DIR_ENV = "SSS_CONFIG_DIR"


def user_config_root() -> Path:
    """Return the per-user configuration root for the running platform."""

    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def config_dir() -> Path:
    """Return the application config directory with optional override for tests."""

    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return user_config_root() / APP_DIR_NAME


def config_file_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


__all__ = [
    "APP_DIR_NAME",
    "CONFIG_DIR_ENV",
    "CONFIG_FILE_NAME",
    "config_dir",
    "config_file_path",
    "user_config_root",
]
