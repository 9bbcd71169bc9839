[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "animadb"
version = "0.1.0"
description = "Localised string tables, search, C++ struct declaration reading and save-file sections for game data tables"
requires-python = ">=3.10"
dependencies = []
keywords = ["game data", "data table", "localisation", "string table", "save file"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Localization",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["animadb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
