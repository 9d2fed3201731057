[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "relanote"
version = "0.1.0"
description = "Lexer, hover documentation and MIDI rendering for the relanote relative-interval music language"
requires-python = ">=3.10"
dependencies = []
keywords = ["music", "midi", "lexer", "intervals", "microtones"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["relanote"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
