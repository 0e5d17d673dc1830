"""Hashing, Merkle roots, signing keys, AEAD, ASCII armor, ABCI events and flow-rate limiting."""

__version__ = "0.1.0"