[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deferq"
version = "0.1.0"
description = "A simple in-memory work queue with delayed tasks, served over a line-based TCP protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["queue", "work queue", "delayed tasks", "tcp", "job server"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
deferq = "deferq.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["deferq"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
