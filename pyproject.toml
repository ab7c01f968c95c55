[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xts1"
version = "0.1.0"
description = "Modbus RTU driver and statistics demo for the XT-S1 time-of-flight distance sensor"
requires-python = ">=3.10"
keywords = ["modbus", "rtu", "serial", "distance-sensor", "tof", "xt-s1"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]
dependencies = [
    "pyserial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
xts1-demo = "xts1.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["xts1"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
