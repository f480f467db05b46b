[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scorekit"
version = "0.1.0"
description = "Security scorecard results: policy parsing, aggregate scoring and table, JSON and SARIF reports"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["security", "scorecard", "sarif", "supply-chain", "policy"]
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
    "Topic :: Security",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["scorekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
