[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "starbytes"
version = "0.4.0"
description = "Syntax tree, semantic analysis and bytecode format for the Starbytes programming language"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "compiler",
    "semantic-analysis",
    "symbol-table",
    "bytecode",
    "programming-language",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["starbytes"]

[tool.hatch.build.targets.sdist]
include = ["starbytes", "tests", "README.md"]

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
