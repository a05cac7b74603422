"""Exceptions raised by CSV writers."""
from __future__ import annotations


class InvalidChunkError(ValueError):
    """A chunk, or the value stored under one of its keys, has an unsupported shape."""


class WriterClosedError(RuntimeError):
    """The writer or channel was already ended or destroyed."""


__all__ = ["InvalidChunkError", "WriterClosedError"]
