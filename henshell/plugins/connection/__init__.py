# henshell/plugins/connection/__init__.py
from __future__ import annotations

CATEGORY_DESCRIPTION = "Open and close the database session."
