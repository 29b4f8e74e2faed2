[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cfasm"
version = "0.1.0"
description = "Assembler for CF virtual machine assembly text, with syntax tree types for the CF language"
requires-python = ">=3.10"
dependencies = []
keywords = ["assembler", "virtual machine", "bytecode", "object", "syntax tree"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Assemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cfasm"]

[tool.pytest.ini_options]
addopts = "-ra"
