[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hexthello"
version = "0.98.0"
description = "Othello on a hexagonal board: rules engine, networked match server, AI client and a desktop game server"
requires-python = ">=3.10"
dependencies = []
keywords = ["othello", "reversi", "hexagonal", "board-game", "minimax", "alpha-beta", "game-server"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: X11 Applications :: Tk",
    "Intended Audience :: Education",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
hexthello-client = "hexthello.client:main"
hexthello-server = "hexthello.server:main"
hexthello-gui = "hexthello.gui:main"

[tool.hatch.build.targets.wheel]
packages = ["hexthello"]

[tool.hatch.build.targets.sdist]
include = ["hexthello", "tests", "pyproject.toml", "README.md"]

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
