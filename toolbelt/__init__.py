"""Helpers for strings, errors, buffers, base64 streams, file I/O, logging, processes, sandboxing and option values."""

__version__ = "0.1.0"