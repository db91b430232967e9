[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toolbelt"
version = "0.1.0"
description = "Small helpers for command-line programs: file I/O, in-memory buffers, base64 streams, subprocess output handling, sandboxing, logging and option values."
requires-python = ">=3.10"
dependencies = []
keywords = ["utilities", "io", "base64", "subprocess", "sandbox", "bubblewrap", "logging", "flags"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
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
packages = ["toolbelt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
