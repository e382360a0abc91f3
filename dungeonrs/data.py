"""Components that make up a project's hierarchy: project, levels and layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Name:
    """A human-friendly name attached to an entity."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Transform:
    """The position of an entity; ``z`` orders layers."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    IDENTITY: ClassVar[Transform]

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float) -> Transform:
        """Build a transform at the given coordinates."""
        return cls(float(x), float(y), float(z))

    @property
    def translation(self) -> tuple[float, float, float]:
        """The coordinates as a tuple."""
        return (self.x, self.y, self.z)


Transform.IDENTITY = Transform()


@dataclass(frozen=True)
class Project:
    """Top-level marker; only entities beneath it are saved, loaded or exported."""

    @staticmethod
    def new(name: str) -> tuple[Name, Project, Transform]:
        """Return the bundle for a project named ``name``."""
        return (Name(name), Project(), Transform())


@dataclass(frozen=True)
class Level:
    """A separately editable part of a project, such as one floor of a building."""

    @staticmethod
    def new(name: str) -> tuple[Name, Level, Transform]:
        """Return the bundle for a level named ``name``."""
        return (Name(name), Level(), Transform())


@dataclass(frozen=True)
class Layer:
    """An editing plane within a level grouping items by purpose."""

    @staticmethod
    def new(name: str, transform: Transform) -> tuple[Name, Layer, Transform]:
        """Return the bundle for a layer named ``name`` placed at ``transform``."""
        return (Name(name), Layer(), transform)