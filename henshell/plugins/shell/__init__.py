# henshell/plugins/shell/__init__.py
from __future__ import annotations

CATEGORY_DESCRIPTION = "Help, exit and other commands about the shell itself."
