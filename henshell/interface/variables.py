#!/usr/bin/env python3
# henshell/interface/variables.py
from __future__ import annotations

"""
User variable substitution.

`$NAME` and `${NAME}` are replaced by the value from a mapping; `$$`
produces a literal dollar sign. Unknown variables are left untouched.
"""

import logging
from typing import Mapping, Optional

log = logging.getLogger(__name__)


def is_identifier_part(char: str) -> bool:
    return char.isalnum() or char == "_"


def substitute(text: str, variables: Optional[Mapping[str, str]]) -> str:
    """Return `text` with all known variables replaced."""
    if not variables or "$" not in text:
        return text

    result: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        start = text.find("$", pos)
        if start < 0:
            result.append(text[pos:])
            break
        result.append(text[pos:start])

        if text.startswith("$$", start):
            result.append("$")
            pos = start + 2
            continue

        has_brace = text.startswith("${", start)
        name_start = start + (2 if has_brace else 1)
        name_end = name_start
        while name_end < length and is_identifier_part(text[name_end]):
            name_end += 1
        name = text[name_start:name_end]
        end = name_end

        if has_brace:
            close = text.find("}", name_end)
            if close < 0:
                if name in variables:
                    log.warning("missing '}' for variable '%s'.", name)
                result.append(text[start:])
                break
            end = close + 1

        if not name:
            result.append(text[start:end])
        elif name in variables:
            result.append(variables[name])
        else:
            log.warning("variable '%s' not set.", name)
            result.append(text[start:end])
        pos = end

    return "".join(result)
