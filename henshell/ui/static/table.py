#!/usr/bin/env python3
# henshell/ui/static/table.py
from __future__ import annotations

from numbers import Number
from typing import List, Optional, Sequence

from henshell.ui.utils import print_line, strip_ansi

NULL_TEXT = "[NULL]"


def _cell_text(value: object) -> str:
    return NULL_TEXT if value is None else str(value)


def _column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    """Visual widths ignoring ANSI sequences."""
    widths: List[int] = []
    for row in rows:
        for index, cell in enumerate(row):
            length = len(strip_ansi(cell))
            if index >= len(widths):
                widths.append(length)
            else:
                widths[index] = max(widths[index], length)
    return widths


def format_table(
    rows: Sequence[Sequence[object]],
    headers: Optional[Sequence[object]] = None,
    *,
    padding: int = 1,
    border: bool = True,
) -> str:
    """
    Return an ASCII table; numeric columns are right aligned, None shows as [NULL].
    """
    text_rows = [[_cell_text(cell) for cell in row] for row in rows]
    text_headers = [str(h) for h in headers] if headers is not None else None
    widths = _column_widths(([text_headers] if text_headers else []) + text_rows)
    numeric = [
        bool(rows) and all(isinstance(row[i], Number) or row[i] is None for row in rows)
        for i in range(len(widths))
    ]
    pad = " " * padding

    def render_row(row: Sequence[str], align: bool = True) -> str:
        parts = []
        for index, cell in enumerate(row):
            fill = " " * (widths[index] - len(strip_ansi(cell)))
            text = f"{fill}{cell}" if align and numeric[index] else f"{cell}{fill}"
            parts.append(f"{pad}{text}{pad}")
        return "|" + "|".join(parts) + "|"

    rule = "+" + "+".join("-" * (w + 2 * padding) for w in widths) + "+"
    lines: List[str] = [rule] if border else []
    if text_headers is not None:
        lines.append(render_row(text_headers, align=False))
        lines.append(rule)
    lines.extend(render_row(row) for row in text_rows)
    if border:
        lines.append(rule)
    return "\n".join(lines)


def print_table(
    rows: Sequence[Sequence[object]],
    headers: Optional[Sequence[object]] = None,
    *,
    padding: int = 1,
    border: bool = True,
    file=None,
) -> None:
    """Print a formatted table to the given file (stdout by default)."""
    print_line(format_table(rows, headers, padding=padding, border=border), file=file)
