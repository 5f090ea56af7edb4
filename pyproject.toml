[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shardserver"
version = "0.1.0"
description = "World-state building blocks for a role-playing game shard server: gump layouts, spatial indexing, navigation and client view tracking."
requires-python = ">=3.10"
dependencies = []
keywords = ["game-server", "mmorpg", "shard", "spatial-index", "gump"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["shardserver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
