[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deichain"
version = "0.1.0"
description = "A small proof-of-work blockchain simulation with miners, validators, a transaction pool and statistics"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "blockchain",
    "proof-of-work",
    "simulation",
    "mining",
    "sha256",
    "threads",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Life",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
deichain = "deichain.controller:main"

[tool.hatch.build.targets.wheel]
packages = ["deichain"]

[tool.hatch.build.targets.sdist]
include = ["deichain", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
