#!/usr/bin/env python3
# henshell/db/__init__.py
from __future__ import annotations

"""
Package for configuration and the database session.

Provides:
- Configuration loader with environment variable overrides (`config`).
- SQLite-backed session handed to dispatched commands (`session`).
"""


from .config import AppConfig, load_config, DEFAULTS
from .session import SQLSession, MEMORY_URL

__all__ = [
    "AppConfig",
    "load_config",
    "DEFAULTS",
    "SQLSession",
    "MEMORY_URL",
]
