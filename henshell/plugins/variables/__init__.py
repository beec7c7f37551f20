# henshell/plugins/variables/__init__.py
from __future__ import annotations

CATEGORY_DESCRIPTION = "User variables, substituted as $NAME or ${NAME}."
