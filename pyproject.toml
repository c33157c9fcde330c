[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "boilkit"
version = "0.1.0"
description = "Schema-driven model code generation: column inference, naming aliases and Jinja2 template output"
requires-python = ">=3.10"
dependencies = [
    "jinja2",
]
keywords = ["orm", "code-generation", "sql", "templates", "schema", "jinja2"]
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
    "Topic :: Database",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["boilkit*"]

[tool.pytest.ini_options]
addopts = "-ra"
