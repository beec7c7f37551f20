#!/usr/bin/env python3
# henshell/__init__.py
from __future__ import annotations
"""
henshell package.

An interactive SQL shell: statements are assembled from input lines,
dispatched to pluggable commands, and completed on [TAB].

Notes:
- Do NOT wire the interface here; 'henshell.commands' and
  'henshell.interface' expose their APIs via their own __init__.py files.
"""

__version__ = "0.4.0"
