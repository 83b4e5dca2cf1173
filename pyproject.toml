[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lockpick"
version = "0.1.0"
description = "Red-black trees, ordered sets, slab allocation, lock graphs, visit tables and a tree-shaped test reporter"
requires-python = ">=3.10"
dependencies = []
keywords = ["red-black tree", "ordered set", "slab", "locking", "hash table", "test reporter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lockpick"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
