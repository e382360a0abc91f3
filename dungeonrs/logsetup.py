"""Builds the logging set-up of the application from its log configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from dungeonrs.config import LogConfiguration

DEFAULT_FILTER = "wgpu=error,naga=warn"
TRACE = 5

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}
_NUMBERED = {1: logging.ERROR, 2: logging.WARNING, 3: logging.INFO, 4: logging.DEBUG, 5: TRACE}
_OFF = logging.CRITICAL + 1
_NAMES = {TRACE: "TRACE", logging.WARNING: "WARN"}


def _parse_level(text: str) -> int | None:
    if text.isascii() and text.isdigit():
        return _NUMBERED.get(int(text))
    return _LEVELS.get(text.lower())


def _directives(spec: str) -> list[tuple[str | None, int]]:
    """Parse ``target=level`` pairs and bare levels; invalid entries are skipped."""
    parsed = []
    for directive in filter(None, (part.strip() for part in spec.split(","))):
        target, sep, level_text = directive.rpartition("=")
        if not sep:
            target = None
        level = _OFF if level_text.lower() == "off" else _parse_level(level_text)
        if level is None or (sep and not target):
            continue
        parsed.append((target, level))
    return parsed


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": _NAMES.get(record.levelno, record.levelname),
            "fields": {"message": record.getMessage()},
            "target": record.name,
            "threadName": record.threadName,
            "threadId": record.thread,
        }
        return json.dumps(payload)


@dataclass(frozen=True)
class LogPlugin:
    """A filter and minimum level to apply, plus an optional daily JSON log file."""

    filter: str
    level: int
    dev: bool = False
    directory: Path = Path("logs")

    def install(self, logger: logging.Logger | None = None) -> list[logging.Handler]:
        """Apply the levels to ``logger`` (the root logger by default) and its targets.

        Returns the handlers added, which is only the JSON file handler in dev mode.
        """
        logger = logger if logger is not None else logging.getLogger()
        logger.setLevel(self.level)
        for target, level in _directives(self.filter):
            if target is None:
                logger.setLevel(level)
            else:
                logger.getChild(target.replace("::", ".")).setLevel(level)

        handlers: list[logging.Handler] = []
        if self.dev:
            self.directory.mkdir(parents=True, exist_ok=True)
            handler = TimedRotatingFileHandler(
                self.directory / "dungeonrs", when="midnight", encoding="utf-8"
            )
            handler.setFormatter(_JsonFormatter())
            logger.addHandler(handler)
            handlers.append(handler)
        return handlers


def log_plugin(config: LogConfiguration) -> LogPlugin:
    """Build the logging plugin; an unknown level falls back to info."""
    level = _parse_level(config.level)
    return LogPlugin(
        filter=f"{DEFAULT_FILTER},{config.filter}",
        level=logging.INFO if level is None else level,
    )