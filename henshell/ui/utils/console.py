#!/usr/bin/env python3
# henshell/ui/utils/console.py
from __future__ import annotations

import sys
import threading

# Single shared print mutex for all UI output (results and log records).
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file=None, flush: bool = False) -> None:
    """Thread-safe single-line print; resolves sys.stdout at call time."""
    target = file if file is not None else sys.stdout
    with PRINT_MUTEX:
        target.write(f"{text}\n")
        if flush:
            target.flush()
