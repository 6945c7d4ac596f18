[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tigeropen"
version = "0.1.0"
description = "Tiger Brokers OpenAPI building blocks: request signing, quote and trade call wrappers, and push-protocol framing, messages and dispatch."
requires-python = ">=3.10"
keywords = ["tiger", "openapi", "sdk", "trading", "stock", "push", "protobuf"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Office/Business :: Financial :: Investment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "cryptography>=41",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
    "hypothesis>=6.90",
]

[tool.hatch.build.targets.wheel]
packages = ["tigeropen"]

[tool.hatch.build.targets.sdist]
include = ["tigeropen", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
