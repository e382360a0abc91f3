"""Core of a dungeon map editor: an entity/component world, project data, configuration, serialisation and project saving and loading."""

__version__ = "0.0.1"