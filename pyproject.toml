[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "barstatus"
version = "1.1.0"
description = "Status line monitor for window manager bars, with a client for the window manager's IPC socket"
requires-python = ">=3.10"
keywords = ["status", "statusbar", "monitor", "window-manager", "ipc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Utilities",
]
dependencies = [
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
barstatus = "barstatus.cli:main"
barstatus-msg = "barstatus.ipc:main"

[tool.hatch.build.targets.wheel]
packages = ["barstatus"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
