[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "midiloop"
version = "0.1.0"
description = "A loop-based MIDI sequencing engine: looping tracks, mute and record bindings, queued output requests and tick/frame timing."
requires-python = ">=3.10"
dependencies = []
keywords = ["midi", "looper", "sequencer", "music", "loop", "mmc"]
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
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["midiloop"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
