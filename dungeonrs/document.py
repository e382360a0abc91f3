"""Serialisable snapshots of a project hierarchy used when saving and loading."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from dungeonrs.data import Layer, Level, Name, Transform
from dungeonrs.world import World


@dataclass
class DocumentLayer:
    """A layer: its name, its order (the transform's z) and its items."""

    name: str
    order: float
    items: list[Any] = field(default_factory=list)

    @classmethod
    def from_world(cls, world: World, layer: int) -> DocumentLayer:
        """Build from the layer entity ``layer``."""
        return cls(
            name=str(world.get(layer, Name)),
            order=world.get(layer, Transform).z,
            items=[],
        )


@dataclass
class DocumentLevel:
    """A level and the layers beneath it."""

    name: str
    layers: list[DocumentLayer] = field(default_factory=list)

    @classmethod
    def from_world(cls, world: World, level: int) -> DocumentLevel:
        """Build from the level entity ``level``; children that are not layers are skipped."""
        layers = [
            DocumentLayer.from_world(world, child)
            for child in world.children(level)
            if all(world.has(child, kind) for kind in (Layer, Name, Transform))
        ]
        return cls(name=str(world.get(level, Name)), layers=layers)


@dataclass
class Document:
    """A project and its levels, in a shape suited to serialisation."""

    name: str
    levels: list[DocumentLevel] = field(default_factory=list)

    @classmethod
    def from_world(cls, world: World, project: int) -> Document:
        """Build from the project entity ``project``; children that are not levels are skipped."""
        name = str(world.get(project, Name))
        levels = [
            DocumentLevel.from_world(world, child)
            for child in world.children(project)
            if world.has(child, Level) and world.has(child, Name)
        ]
        return cls(name=name, levels=levels)

    def to_dict(self) -> dict[str, Any]:
        """Return the document as plain data."""
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Document:
        """Build from plain data, validating every field."""
        data = _mapping(data, "Document")
        return cls(
            name=_string(data, "name"),
            levels=[_level(item) for item in _list(data, "levels")],
        )


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"expected struct {what}, found {type(data).__name__}")
    return data


def _require(data: Mapping[str, Any], name: str) -> Any:
    if name not in data:
        raise ValueError(f"missing field `{name}`")
    return data[name]


def _string(data: Mapping[str, Any], name: str) -> str:
    value = _require(data, name)
    if not isinstance(value, str):
        raise TypeError(f"field `{name}` expected a string, found {type(value).__name__}")
    return value


def _list(data: Mapping[str, Any], name: str) -> list[Any]:
    value = _require(data, name)
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"field `{name}` expected a sequence, found {type(value).__name__}")
    return list(value)


def _level(data: Any) -> DocumentLevel:
    data = _mapping(data, "DocumentLevel")
    return DocumentLevel(
        name=_string(data, "name"),
        layers=[_layer(item) for item in _list(data, "layers")],
    )


def _layer(data: Any) -> DocumentLayer:
    data = _mapping(data, "DocumentLayer")
    order = _require(data, "order")
    if isinstance(order, bool) or not isinstance(order, (int, float)):
        raise TypeError(f"field `order` expected a number, found {type(order).__name__}")
    items = _list(data, "items")
    if items:
        raise ValueError("document items have no known variants")
    return DocumentLayer(name=_string(data, "name"), order=float(order), items=[])