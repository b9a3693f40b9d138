[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smarthouse"
version = "0.1.0"
description = "Host-side client, interactive shell and device simulator for a small serial/Bluetooth smart-house controller"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = [
    "smart-house",
    "home-automation",
    "serial",
    "bluetooth",
    "rfcomm",
    "gpio",
    "pwm",
    "adc",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
smarthouse = "smarthouse.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["smarthouse"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
