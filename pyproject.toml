[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dungeonrs"
version = "0.0.1"
description = "Core of a dungeon map editor: an entity/component world, project data, configuration, serialisation and project saving and loading."
requires-python = ">=3.11"
keywords = ["map editor", "dungeon", "ecs", "serialization", "tabletop", "msgpack", "toml"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Editors",
]
dependencies = [
    "msgpack",
    "tomli-w",
    "semver",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["dungeonrs"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
