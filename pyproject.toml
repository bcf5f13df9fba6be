[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "djotlex"
version = "0.1.0"
description = "A tokenizer for the Djot markup language producing flat, paired block and inline token streams"
requires-python = ">=3.10"
dependencies = []
keywords = ["djot", "markup", "tokenizer", "lexer"]
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
    "Topic :: Text Processing :: Markup",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["djotlex"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
