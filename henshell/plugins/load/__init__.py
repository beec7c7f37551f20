# henshell/plugins/load/__init__.py
from __future__ import annotations

CATEGORY_DESCRIPTION = "Run commands from script files."
