import tomllib
from pathlib import Path

import pytest

from dungeonrs.config import Configuration, LogConfiguration
from dungeonrs.directories import config_path
from dungeonrs.serialization import DeserializeError
from dungeonrs.version import version


def test_log_configuration_defaults():
    config = LogConfiguration()
    assert config.filter == "io=trace"
    assert config.level == "info"


def test_configuration_defaults():
    config = Configuration()
    assert config.version == version()
    assert config.recents == []
    assert config.libraries == {}
    assert config.logging == LogConfiguration()


def test_save_and_load_round_trip(tmp_path):
    config = Configuration(
        recents=[Path("maps/inn.json")],
        libraries={"core": Path("assets/core")},
        logging=LogConfiguration(filter="io=debug", level="warn"),
    )
    config.save(tmp_path)
    assert Configuration.load(tmp_path) == config


def test_saved_file_is_toml(tmp_path):
    Configuration().save(tmp_path)
    data = tomllib.loads((tmp_path / "config.toml").read_text())
    assert data["version"] == str(version())
    assert data["logging"]["filter"] == "io=trace"


def test_missing_file_gives_defaults(tmp_path):
    assert Configuration.load(tmp_path) == Configuration()


def test_malformed_file_raises(tmp_path):
    (tmp_path / "config.toml").write_text("version = [")
    with pytest.raises(DeserializeError):
        Configuration.load(tmp_path)


def test_missing_field_raises(tmp_path):
    (tmp_path / "config.toml").write_text(
        'version = "0.0.1"\nrecents = []\n[libraries]\n'
    )
    with pytest.raises(DeserializeError):
        Configuration.load(tmp_path)


def test_from_dict_missing_field():
    with pytest.raises(ValueError):
        LogConfiguration.from_dict({"filter": "io=trace"})


def test_from_dict_wrong_type():
    data = Configuration().to_dict()
    data["recents"] = "not-a-list"
    with pytest.raises(TypeError):
        Configuration.from_dict(data)


def test_dict_round_trip():
    config = Configuration(libraries={"extra": Path("lib")})
    assert Configuration.from_dict(config.to_dict()) == config


def test_save_into_missing_directory_fails(tmp_path):
    with pytest.raises(FileNotFoundError):
        Configuration().save(tmp_path / "absent")


def test_default_directory(tmp_path, monkeypatch):
    for variable in ("HOME", "XDG_CONFIG_HOME", "APPDATA"):
        monkeypatch.setenv(variable, str(tmp_path))
    config_path().mkdir(parents=True)
    config = Configuration(recents=[Path("a.json")])
    config.save()
    assert Configuration.load() == config