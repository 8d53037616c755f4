[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "twsefeed"
version = "0.1.0"
description = "Parser for Taiwan Stock Exchange market data feed packets (Format 1 and Format 6)"
requires-python = ">=3.10"
dependencies = []
keywords = ["twse", "market-data", "bcd", "stock", "quotes", "parser"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
twsefeed = "twsefeed.app:main"

[tool.hatch.build.targets.wheel]
packages = ["twsefeed"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
