[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shopsvc"
version = "0.1.0"
description = "Product catalogue and user address services for an online shop: domain rules, SQLite-backed stores, repositories and RPC-style service layers."
requires-python = ">=3.10"
keywords = [
    "ecommerce",
    "shop",
    "product",
    "catalogue",
    "audit",
    "address",
    "jwt",
    "uuid",
    "sqlite",
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
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["shopsvc"]

[tool.hatch.build.targets.sdist]
include = [
    "shopsvc",
    "tests",
    "pyproject.toml",
    "README.md",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
