[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "problemdetails"
version = "0.2.0"
description = "RFC 7807 Problem Details for HTTP APIs, with Starlette integration and safe 500 handling"
requires-python = ">=3.10"
keywords = ["rfc7807", "problem-details", "http", "api", "errors", "starlette"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "starlette",
    "uvicorn",
]

[project.optional-dependencies]
test = [
    "pytest",
    "httpx",
]

[project.scripts]
problemdetails-example = "problemdetails.example_app:main"

[tool.hatch.build.targets.wheel]
packages = ["problemdetails"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
