import sys

import pytest

from dungeonrs.directories import DirectoryError, cache_path, config_path


@pytest.fixture
def linux(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    for name in ("XDG_CONFIG_HOME", "XDG_CACHE_HOME", "HOME"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_linux_config_uses_xdg(linux, tmp_path):
    linux.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert config_path() == tmp_path / "DungeonRS"


def test_linux_config_falls_back_to_home(linux, tmp_path):
    linux.setenv("HOME", str(tmp_path))
    assert config_path() == tmp_path / ".config/DungeonRS"


def test_linux_cache_uses_xdg(linux, tmp_path):
    linux.setenv("XDG_CACHE_HOME", str(tmp_path))
    assert cache_path() == tmp_path / "DungeonRS"


def test_linux_cache_falls_back_to_home(linux, tmp_path):
    linux.setenv("HOME", str(tmp_path))
    assert cache_path() == tmp_path / ".cache/DungeonRS"


def test_linux_without_any_base_directory(linux):
    with pytest.raises(DirectoryError, match="XDG_CONFIG_HOME") as info:
        config_path()
    assert info.value.directory == "XDG_CONFIG_HOME"
    with pytest.raises(DirectoryError, match="XDG_CACHE_HOME"):
        cache_path()


def test_macos_paths(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "darwin")
    monkeypatch.setenv("HOME", str(tmp_path))
    assert config_path() == tmp_path / "Library/Application Support/DungeonRS/config"
    assert cache_path() == tmp_path / "Library/Cache/DungeonRS"


def test_windows_paths(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setenv("APPDATA", str(tmp_path / "roaming"))
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "local"))
    assert config_path() == tmp_path / "roaming" / "DungeonRS/config"
    assert cache_path() == tmp_path / "local" / "DungeonRS/cache"


def test_windows_missing_folders(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.delenv("APPDATA", raising=False)
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    with pytest.raises(DirectoryError, match="RoamingAppData"):
        config_path()
    with pytest.raises(DirectoryError, match="LocalAppData"):
        cache_path()


def test_error_message():
    assert str(DirectoryError("home")) == (
        "Could not find the requested home directory on the system"
    )