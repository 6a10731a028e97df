[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "structkit"
version = "0.1.0"
description = "In-memory and thread-safe data structures: Bloom filter, LRU cache, skip list, optimistic locks, adaptive radix tree and more."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "bloom-filter",
    "lru-cache",
    "skip-list",
    "radix-tree",
    "optimistic-lock",
    "treiber-stack",
    "data-structures",
]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
structkit-versions = "structkit.versions:main"
structkit-snapshot = "structkit.snapshot:main"
structkit-stack = "structkit.stack:main"
structkit-worker = "structkit.worker:main"

[tool.hatch.build.targets.wheel]
packages = ["structkit"]

[tool.pytest.ini_options]
addopts = "-ra"
