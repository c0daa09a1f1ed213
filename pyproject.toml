[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cmania"
version = "0.1.0"
description = "A rhythm game engine for osu!mania beatmaps that draws into a text terminal: parsing, scoring, difficulty rating, replays and text-mode rendering."
requires-python = ">=3.10"
dependencies = []
keywords = ["rhythm-game", "osu", "mania", "terminal", "beatmap", "game"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cmania"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
