[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "timetracker"
version = "0.2.2"
description = "Building blocks for an application usage time tracker: duration formatting, time ranges, input validation, timeouts and retries, and permission checks."
requires-python = ">=3.10"
dependencies = []
keywords = ["time-tracking", "productivity", "validation", "retry", "timeout", "permissions"]
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
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["timetracker"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
