#!/usr/bin/env python3
# henshell/plugins/__init__.py
from __future__ import annotations

"""
Built-in command groups.

Each subpackage exports COMMAND/COMMANDS from its entrypoint.py; the loader
registers them into the shell's dispatcher.
"""
