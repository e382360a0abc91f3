# dungeonrs

The core of a map editor for tabletop dungeons. A project holds levels
(for example the floors of a building), and each level holds layers
(walls, objects, lighting, ...). The package provides:

- `dungeonrs.world`: a small entity/component store. `World` holds entities
  with at most one component of each type, parent/child hierarchies,
  queries (`query`) and events (`send_event`, `read_events`). `App` wraps a
  `World`, builds plugins and runs systems per `Schedule`
  (`STARTUP`, `UPDATE`, `FIXED_POST_UPDATE`, `POST_UPDATE`).
- `dungeonrs.data`: the `Project`, `Level` and `Layer` markers, with `Name`
  and `Transform`. `Project.new`, `Level.new` and `Layer.new` return bundles
  (tuples of components) ready to spawn.
- `dungeonrs.serialization`: one interface over JSON, MessagePack and TOML.
- `dungeonrs.directories`: `config_path()` and `cache_path()` for the
  platform's configuration and cache directories.
- `dungeonrs.version`: `version()` returns the package version as a
  `semver.Version`.
- `dungeonrs.config`: `Configuration` and `LogConfiguration`, stored as TOML.
- `dungeonrs.logsetup`: builds a `LogPlugin` from a `LogConfiguration` and
  applies it to Python's `logging`.
- `dungeonrs.async_ecs`: background tasks (`AsyncComponent`) that send
  `CommandQueue`s back to the world, polled by `CorePlugin`.
- `dungeonrs.document`: `Document`, `DocumentLevel` and `DocumentLayer`,
  serialisable snapshots of a project hierarchy.
- `dungeonrs.project_io`: saving and loading projects through events
  (`SaveProjectEvent`, `LoadProjectEvent`, `SaveProjectCompleteEvent`),
  handled by systems that `IOPlugin` registers.

## Installation

```
pip install .
```

## Serialisation

```python
from dungeonrs.serialization import SerializationFormat, serialize, deserialize

serialize({"bar": "bar", "baz": 42}, SerializationFormat.TOML)
# b'bar = "bar"\nbaz = 42\n'

deserialize(b'{"bar": "baz", "baz": 123}', SerializationFormat.JSON)
# {'bar': 'baz', 'baz': 123}
```

- JSON is the default format and is written indented by two spaces.
- MessagePack writes dataclasses as arrays of their field values; reading
  accepts either arrays or maps for them.
- TOML requires the subject to be a table; `None` values are left out.

Passing a `target` type (such as a dataclass) to `deserialize` checks the
data against its field annotations and builds an instance; without it plain
data is returned. `serialize_to(subject, format, writer)` writes the bytes to
a binary file object and flushes it.

Every error is a subclass of `SerializationError`: `FormatUnavailableError`
(the library for the format is not installed), `SerializationIOError`,
`SerializeError` and `DeserializeError`.

## Building a project hierarchy

```python
from dungeonrs.world import World
from dungeonrs.data import Project, Level, Layer, Transform, Name

world = World()
project = world.spawn(
    Project.new("Roadside Inn"),
    children=[
        (Level.new("Ground Floor"), [(Layer.new("Walls", Transform()), [])]),
    ],
)
[level] = world.children(project)
world.get(level, Name)  # Name(value='Ground Floor')
```

A child is a component, a bundle, or a tuple in which a list holds that
child's own children. `despawn` removes an entity with all its descendants.

## Saving and loading a project

```python
from pathlib import Path
from dungeonrs.world import App
from dungeonrs.data import Project, Level, Layer, Transform
from dungeonrs.async_ecs import AsyncComponent, CorePlugin
from dungeonrs.project_io import (
    IOPlugin, LoadProjectEvent, SaveProjectCompleteEvent, SaveProjectEvent,
)

app = App()
app.add_plugins(CorePlugin(), IOPlugin())

project = app.world.spawn(
    Project.new("Roadside Inn"),
    children=[(Level.new("Ground Floor"), [(Layer.new("Walls", Transform()), [])])],
)

app.world.send_event(SaveProjectEvent(project, Path("inn.json")))
app.update()                       # starts writing in the background
for _, component in app.world.query(AsyncComponent):
    component.task.result()        # wait for the write to finish
app.update()                       # applies the task's commands
done = next(app.world.read_events(SaveProjectCompleteEvent))

app.world.send_event(LoadProjectEvent(Path("inn.json")))
app.update()
len(list(app.world.query(Project)))  # 2
```

Project files are JSON. Each system handles at most one pending event per
call. Saving runs on a background thread; once the file is written a
`SaveProjectCompleteEvent` reaches the world the next time
`handle_async_components` runs. A failed save is logged through the
`dungeonrs.project_io` logger. A failed load raises the underlying error
with a note naming the file.

## Configuration

```python
from pathlib import Path
from dungeonrs.config import Configuration

config = Configuration.load()   # defaults if config.toml cannot be read
config.recents.append(Path("inn.json"))
config.save()
```

The file is `config.toml` inside the directory given to `load`/`save`, or by
default inside `dungeonrs.directories.config_path()`: under
`$XDG_CONFIG_HOME/DungeonRS` (or `~/.config/DungeonRS`) on Linux,
`~/Library/Application Support/DungeonRS/config` on macOS and
`%APPDATA%\DungeonRS\config` on Windows. `save` does not create the
directory; it must exist.

## Logging

```python
from dungeonrs.config import LogConfiguration
from dungeonrs.logsetup import log_plugin

handlers = log_plugin(LogConfiguration()).install()
```

The filter is a comma separated list of `target=level` directives and bare
levels (`trace`, `debug`, `info`, `warn`, `error`, `off`); an unknown level
falls back to `info`. A `LogPlugin` built with `dev=True` additionally writes
JSON lines to a daily rotating file `dungeonrs` in its `directory`
(`logs` by default).

## What the package does not do

There is no editor window, camera, dock layout or other user interface, and
no command to start one. Layers carry no drawable items yet: saved layers
always have an empty `items` list, and loading a file whose layers list
items is rejected.

## Running the tests

```
pip install .[test]
pytest
```