# henshell/plugins/sql/__init__.py
from __future__ import annotations

CATEGORY_DESCRIPTION = "SQL statements sent to the current session."
