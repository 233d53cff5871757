[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "robotctl"
version = "0.1.0"
description = "Hardware-free control logic for a two-wheeled robot: PID controllers, encoder telemetry, motor drive and a text command protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["robot", "pid", "motor", "encoder", "control"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Typing :: Typed",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["robotctl"]

[tool.pytest.ini_options]
addopts = "-ra"
