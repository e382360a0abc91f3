"""The application's configuration and its persistence as TOML."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import semver

from dungeonrs.directories import config_path
from dungeonrs.serialization import SerializationFormat, deserialize, serialize_to
from dungeonrs.version import version

CONFIG_FILE_NAME = "config.toml"


def _field(data: Mapping[str, Any], name: str, kind: type) -> Any:
    if name not in data:
        raise ValueError(f"missing field `{name}`")
    value = data[name]
    if not isinstance(value, kind):
        raise TypeError(
            f"field `{name}` expected {kind.__name__}, found {type(value).__name__}"
        )
    return value


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"expected struct {what}, found {type(data).__name__}")
    return data


def _string(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} expected a string, found {type(value).__name__}")
    return value


@dataclass
class LogConfiguration:
    """How the application logs: per-target filter directives and a minimum level."""

    filter: str = "io=trace"
    level: str = "info"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LogConfiguration:
        """Build from a mapping; both fields are required."""
        data = _require_mapping(data, "LogConfiguration")
        return cls(filter=_field(data, "filter", str), level=_field(data, "level", str))


@dataclass
class Configuration:
    """Application configuration: version, recent files, asset libraries and logging."""

    version: semver.Version = field(default_factory=version)
    recents: list[Path] = field(default_factory=list)
    libraries: dict[str, Path] = field(default_factory=dict)
    logging: LogConfiguration = field(default_factory=LogConfiguration)

    @classmethod
    def load(cls, directory: Path | None = None) -> Configuration:
        """Read the configuration file, or return defaults if it cannot be opened.

        ``directory`` defaults to the platform configuration directory.
        """
        base = Path(directory) if directory is not None else config_path()
        try:
            content = (base / CONFIG_FILE_NAME).read_bytes()
        except OSError:
            return cls()
        return deserialize(content, SerializationFormat.TOML, cls)

    def save(self, directory: Path | None = None) -> None:
        """Write the configuration file into ``directory``, which must exist."""
        base = Path(directory) if directory is not None else config_path()
        with open(base / CONFIG_FILE_NAME, "wb") as file:
            serialize_to(self, SerializationFormat.TOML, file)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as plain data."""
        return {
            "version": str(self.version),
            "recents": [str(path) for path in self.recents],
            "libraries": {name: str(path) for name, path in self.libraries.items()},
            "logging": {"filter": self.logging.filter, "level": self.logging.level},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Configuration:
        """Build from a mapping; every field is required."""
        data = _require_mapping(data, "Configuration")
        parsed_version = semver.Version.parse(_field(data, "version", str))
        recents = [Path(_string(item, "recents")) for item in _field(data, "recents", list)]
        libraries = {
            _string(name, "library name"): Path(_string(path, "library path"))
            for name, path in _field(data, "libraries", Mapping).items()
        }
        logging = LogConfiguration.from_dict(_field(data, "logging", Mapping))
        return cls(
            version=parsed_version, recents=recents, libraries=libraries, logging=logging
        )