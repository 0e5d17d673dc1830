[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bftkit"
version = "0.1.0"
description = "Hashing, Merkle roots, signing keys, XChaCha20-Poly1305, ASCII armor, ABCI event decoding and flow-rate limiting for BFT consensus tooling"
requires-python = ">=3.10"
keywords = [
    "merkle",
    "sha256",
    "ed25519",
    "secp256k1",
    "xchacha20poly1305",
    "armor",
    "abci",
    "flowrate",
    "consensus",
    "blockchain",
]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]
dependencies = [
    "cryptography",
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["bftkit"]

[tool.hatch.build.targets.sdist]
include = ["bftkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
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
