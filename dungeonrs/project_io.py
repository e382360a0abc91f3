"""Events and systems that save projects to disk and load them back."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dungeonrs.async_ecs import AsyncComponent, Sender, report_progress
from dungeonrs.data import Layer, Level, Project, Transform
from dungeonrs.document import Document
from dungeonrs.serialization import SerializationFormat, deserialize, serialize_to
from dungeonrs.world import App, Schedule, World

_log = logging.getLogger(__name__)


@dataclass
class LoadProjectEvent:
    """Request to load the project file at ``input``."""

    input: Path


@dataclass
class SaveProjectEvent:
    """Request to save the project entity ``project`` to ``output``."""

    project: int
    output: Path


@dataclass
class SaveProjectCompleteEvent:
    """Sent once the project entity ``project`` has been written to ``output``."""

    project: int
    output: Path


def _next_event(world: World, event_type: type) -> Any:
    return next(world.read_events(event_type), None)


def _layer_spec(layer: Any) -> tuple[Any, ...]:
    return (Layer.new(layer.name, Transform.from_xyz(0.0, 0.0, layer.order)), [])


def _level_spec(level: Any) -> tuple[Any, ...]:
    return (Level.new(level.name), [_layer_spec(layer) for layer in level.layers])


def handle_load_project_event(world: World) -> int | None:
    """Load the project of one pending :class:`LoadProjectEvent` into ``world``.

    Only one event is handled per call. Returns the spawned project entity,
    or None when no event was pending.
    """
    event = _next_event(world, LoadProjectEvent)
    if event is None:
        return None

    path = Path(event.input)
    try:
        content = path.read_bytes()
    except OSError as error:
        error.add_note(f"Failed to open project file: '{path}'")
        raise
    try:
        document = deserialize(content, SerializationFormat.JSON, Document)
    except Exception as error:
        error.add_note(f"Failed to parse project file '{path}'")
        raise

    return world.spawn(
        Project.new(document.name),
        children=[_level_spec(level) for level in document.levels],
    )


def _report_failure(error: Exception, _sender: Sender) -> None:
    _log.error("Saving project failed: %s", error)


def handle_save_project(world: World) -> int | None:
    """Start writing the project of one pending :class:`SaveProjectEvent` in the background.

    Returns the entity holding the :class:`AsyncComponent`, or None when no
    event was pending. Raises KeyError if the entity is not a project.
    """
    event = _next_event(world, SaveProjectEvent)
    if event is None:
        return None

    if not world.has(event.project, Project):
        raise KeyError(f"entity {event.project} is not a project")

    entity = event.project
    output = Path(event.output)
    document = Document.from_world(world, entity)

    def task(sender: Sender) -> None:
        try:
            file = open(output, "wb")
        except OSError as error:
            error.add_note(f"Failed to open {output} for writing savefile")
            raise
        with file:
            serialize_to(document, SerializationFormat.JSON, file)
        report_progress(sender, SaveProjectCompleteEvent(project=entity, output=output))

    return world.spawn(AsyncComponent.new_io(task, _report_failure))


class IOPlugin:
    """Registers the systems that save and load projects."""

    def build(self, app: App) -> None:
        """Add the save and load systems to the fixed post-update schedule."""
        app.add_systems(Schedule.FIXED_POST_UPDATE, handle_save_project)
        app.add_systems(Schedule.FIXED_POST_UPDATE, handle_load_project_event)