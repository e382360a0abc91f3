"""Platform specific directories for configuration and cache files."""

from __future__ import annotations

import os
import sys
from pathlib import Path


class DirectoryError(Exception):
    """A requested base directory could not be found on the system."""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        super().__init__(f"Could not find the requested {directory} directory on the system")


def _home() -> Path:
    home = os.environ.get("HOME")
    if home is not None:
        return Path(home)
    try:
        return Path.home()
    except (RuntimeError, KeyError) as error:
        raise DirectoryError("home") from error


def _xdg_path(variable: str, fallback: str) -> Path:
    base = os.environ.get(variable)
    if base is not None:
        return Path(base) / "DungeonRS"
    home = os.environ.get("HOME")
    if home is not None:
        return Path(home) / fallback
    raise DirectoryError(variable)


def _windows_path(variable: str, folder: str, leaf: str) -> Path:
    base = os.environ.get(variable)
    if base is None:
        raise DirectoryError(folder)
    return Path(base) / leaf


def config_path() -> Path:
    """Return the directory holding the application's configuration."""
    if sys.platform == "darwin":
        return _home() / "Library/Application Support/DungeonRS/config"
    if sys.platform == "win32":
        return _windows_path("APPDATA", "RoamingAppData", "DungeonRS/config")
    return _xdg_path("XDG_CONFIG_HOME", ".config/DungeonRS")


def cache_path() -> Path:
    """Return the directory holding the application's cache."""
    if sys.platform == "darwin":
        return _home() / "Library/Cache/DungeonRS"
    if sys.platform == "win32":
        return _windows_path("LOCALAPPDATA", "LocalAppData", "DungeonRS/cache")
    return _xdg_path("XDG_CACHE_HOME", ".cache/DungeonRS")