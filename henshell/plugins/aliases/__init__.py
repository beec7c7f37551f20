# henshell/plugins/aliases/__init__.py
from __future__ import annotations

CATEGORY_DESCRIPTION = "Aliases for frequently used commands."
