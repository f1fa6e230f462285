[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "floatbot"
version = "0.1.0"
description = "Chat-bot feature logic: games, fortunes, sign-in scores, sleep tracking, quotations and picture lookups"
requires-python = ">=3.10"
dependencies = [
    "requests",
    "lxml",
    "pillow",
]
keywords = ["chatbot", "wordle", "tarot", "sign-in", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["floatbot"]

[tool.pytest.ini_options]
addopts = "-ra"
