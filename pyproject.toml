[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sensormon"
version = "0.1.0"
description = "Serial port monitor that parses sensor messages and feeds them to indicators"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["serial", "com port", "sensor", "monitor", "mcp9803", "temperature"]
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
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sensormon = "sensormon.monitor:main"

[tool.hatch.build.targets.wheel]
packages = ["sensormon"]

[tool.pytest.ini_options]
addopts = "-ra"
