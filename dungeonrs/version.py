"""The application's version as a semantic version."""

from __future__ import annotations

from functools import cache

import semver

_VERSION = "0.0.1"


@cache
def version() -> semver.Version:
    """Return the version of the software."""
    return semver.Version.parse(_VERSION)