"""A small entity-component store with hierarchy, events and scheduled systems."""

from __future__ import annotations

import itertools
from collections import defaultdict, deque
from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from typing import Any

System = Callable[["World"], Any]


class Schedule(Enum):
    """The points in a frame at which systems run."""

    STARTUP = "startup"
    UPDATE = "update"
    FIXED_POST_UPDATE = "fixed_post_update"
    POST_UPDATE = "post_update"


_FRAME = (Schedule.UPDATE, Schedule.FIXED_POST_UPDATE, Schedule.POST_UPDATE)


def _flatten(items: Iterable[Any]) -> Iterator[Any]:
    """Yield components, unpacking bundles (tuples) recursively."""
    for item in items:
        if isinstance(item, tuple):
            yield from _flatten(item)
        elif isinstance(item, list):
            raise TypeError("lists describe children; pass them through `children`")
        else:
            yield item


class World:
    """Entities holding at most one component of each type, arranged in a hierarchy.

    A child given to :meth:`spawn` is a component, a bundle (a tuple of components),
    or a tuple in which a list stands for that child's own children.
    """

    def __init__(self) -> None:
        self._ids = itertools.count()
        self._components: dict[int, dict[type, Any]] = {}
        self._children: dict[int, list[int]] = {}
        self._parents: dict[int, int] = {}
        self._events: defaultdict[type, deque] = defaultdict(deque)
        self.resources: dict[type, Any] = {}

    def spawn(self, *args: Any, children: Iterable[Any] = ()) -> int:
        """Create an entity with the given components and children; return its id."""
        store: dict[type, Any] = {}
        for component in _flatten(args):
            kind = type(component)
            if kind in store:
                raise ValueError(f"duplicate component {kind.__name__} in bundle")
            store[kind] = component
        entity = next(self._ids)
        self._components[entity] = store
        self._children[entity] = []
        for spec in children:
            self._spawn_child(entity, spec)
        return entity

    def _spawn_child(self, parent: int, spec: Any) -> None:
        items = spec if isinstance(spec, tuple) else (spec,)
        components = [item for item in items if not isinstance(item, list)]
        nested = [child for item in items if isinstance(item, list) for child in item]
        child = self.spawn(*components, children=nested)
        self._children[parent].append(child)
        self._parents[child] = parent

    def despawn(self, entity: int) -> None:
        """Remove ``entity`` and all of its descendants."""
        if entity not in self._components:
            raise KeyError(f"entity {entity} does not exist")
        parent = self._parents.pop(entity, None)
        if parent is not None:
            self._children[parent].remove(entity)
        self._remove_tree(entity)

    def _remove_tree(self, entity: int) -> None:
        for child in self._children.pop(entity, []):
            self._parents.pop(child, None)
            self._remove_tree(child)
        del self._components[entity]

    def get(self, entity: int, component_type: type) -> Any:
        """Return the component of ``component_type`` on ``entity``."""
        try:
            return self._components[entity][component_type]
        except KeyError:
            raise KeyError(
                f"entity {entity} has no {component_type.__name__} component"
            ) from None

    def has(self, entity: int, component_type: type) -> bool:
        """Whether ``entity`` exists and holds a component of ``component_type``."""
        return component_type in self._components.get(entity, {})

    def children(self, entity: int) -> list[int]:
        """Return the children of ``entity`` in spawn order."""
        if entity not in self._children:
            raise KeyError(f"entity {entity} does not exist")
        return list(self._children[entity])

    def query(self, *args: type) -> Iterator[tuple[Any, ...]]:
        """Yield ``(entity, *components)`` for every entity holding all given types."""
        for entity, store in list(self._components.items()):
            if all(kind in store for kind in args):
                yield (entity, *(store[kind] for kind in args))

    def send_event(self, event: Any) -> None:
        """Queue ``event`` for readers of its type."""
        self._events[type(event)].append(event)

    def read_events(self, event_type: type) -> Iterator[Any]:
        """Yield queued events of ``event_type``, consuming each as it is taken."""
        queue = self._events[event_type]
        while queue:
            yield queue.popleft()


class App:
    """Holds a :class:`World`, its plugins and the systems run on each update."""

    def __init__(self) -> None:
        self.world = World()
        self._schedules: defaultdict[Schedule, list[System]] = defaultdict(list)
        self._plugins: set[type] = set()
        self._started = False

    def add_plugins(self, *args: Any) -> App:
        """Build each plugin (a class or an instance) into the app; each type only once."""
        for plugin in _flatten(args):
            if isinstance(plugin, type):
                plugin = plugin()
            kind = type(plugin)
            if kind in self._plugins:
                raise ValueError(f"plugin {kind.__name__} was already added")
            self._plugins.add(kind)
            plugin.build(self)
        return self

    def add_systems(self, schedule: Schedule, *args: System) -> App:
        """Register systems to run in ``schedule``."""
        self._schedules[schedule].extend(args)
        return self

    def insert_resource(self, resource: Any) -> App:
        """Store ``resource`` in the world, replacing one of the same type."""
        self.world.resources[type(resource)] = resource
        return self

    def resource(self, resource_type: type) -> Any:
        """Return the resource of ``resource_type``."""
        try:
            return self.world.resources[resource_type]
        except KeyError:
            raise KeyError(f"resource {resource_type.__name__} does not exist") from None

    def run_schedule(self, schedule: Schedule) -> None:
        """Run every system of ``schedule`` once, in registration order."""
        for system in list(self._schedules[schedule]):
            system(self.world)

    def update(self) -> None:
        """Run one frame; the first frame runs the startup systems beforehand."""
        if not self._started:
            self._started = True
            self.run_schedule(Schedule.STARTUP)
        for schedule in _FRAME:
            self.run_schedule(schedule)