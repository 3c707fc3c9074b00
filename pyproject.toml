[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sharpeopt"
version = "0.1.0"
description = "Portfolio weight optimisation by genetic algorithm, maximising the Sharpe ratio under sum, bound and target-return constraints."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "portfolio",
    "optimisation",
    "sharpe-ratio",
    "genetic-algorithm",
    "efficient-frontier",
    "finance",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Financial and Insurance Industry",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sharpeopt = "sharpeopt.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sharpeopt"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
