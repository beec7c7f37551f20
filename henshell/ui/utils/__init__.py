#!/usr/bin/env python3
# henshell/ui/utils/__init__.py
from __future__ import annotations
from .ansi import ANSI, strip_ansi, enable_windows_vt, colorize
from .console import PRINT_MUTEX, print_line

__all__ = [
    "ANSI",
    "strip_ansi",
    "enable_windows_vt",
    "colorize",
    "PRINT_MUTEX",
    "print_line",
]
