[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatapi"
version = "0.1.0"
description = "A small HTTP JSON API for chats and their messages, backed by PostgreSQL"
requires-python = ">=3.10"
keywords = ["chat", "http", "api", "rest", "postgresql", "flask", "sqlalchemy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "flask",
    "werkzeug",
    "pyyaml",
    "sqlalchemy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
chatapi = "chatapi.app:main"

[tool.hatch.build.targets.wheel]
packages = ["chatapi"]

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
ignore_missing_imports = true
