#!/usr/bin/env python3
# henshell/interface/parser.py
from __future__ import annotations

"""
Argument parsing helpers for function commands.

Responsibilities:
- Tokenize a parameter string into shell-like tokens.
- Bind tokens to a callable signature with type coercion based on annotations.
- Render compact usage strings from a function signature.
"""

import inspect
import shlex
from typing import Any, get_args, get_origin


def tokenize(command_line: str) -> list[str]:
    """Split a raw parameter string into tokens using POSIX rules."""
    return shlex.split(command_line, posix=True)


def split_current_token(raw_input: str) -> tuple[list[str], str]:
    """
    Return (parts, current_prefix).

    Behavior:
      - Use shlex.split for shell-like parsing (POSIX).
      - If trailing whitespace exists, append an empty token to signal a new one.
      - On malformed quotes, fall back to whitespace splitting.
    """
    if not raw_input:
        return [], ""

    try:
        parts = shlex.split(raw_input, posix=True)
    except ValueError:
        parts = raw_input.split()
    if raw_input[-1].isspace():
        parts.append("")
    current_prefix = parts[-1] if parts else ""
    return parts, current_prefix


def _coerce_value(text_value: str, annotation: Any) -> Any:
    """
    Convert a string to the annotated type when reasonable.

    Supported coercions:
        - str/Any/inspect._empty -> original text
        - bool -> accepts '1,true,yes,y,on' (case-insensitive)
        - int/float -> cast via constructor (ValueError on bad input)
    """
    # postponed annotations arrive as strings
    if isinstance(annotation, str):
        annotation = {"int": int, "float": float, "bool": bool}.get(annotation, str)
    if annotation in (inspect._empty, str, Any):
        return text_value
    if annotation is bool:
        return text_value.lower() in ("1", "true", "yes", "y", "on")
    if annotation in (int, float):
        return annotation(text_value)
    return text_value


def _parameters(func: Any, skip_context: bool) -> list[inspect.Parameter]:
    parameters = list(inspect.signature(func).parameters.values())
    return parameters[1:] if skip_context else parameters


def bind_args(func: Any, tokens: list[str], *,
              skip_context: bool = False) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """
    Bind a flat token list to the signature of `func`.

    Supports:
        - positional tokens
        - key=value tokens for keyword-only or normal parameters
        - *args (VAR_POSITIONAL) with optional element annotation via typing.Tuple[T, ...]

    With `skip_context` the first parameter is left out (filled by the caller).
    """
    parameters = _parameters(func, skip_context)
    keyword_names = {p.name for p in parameters
                     if p.kind in (p.KEYWORD_ONLY, p.POSITIONAL_OR_KEYWORD)}

    positional_tokens: list[str] = []
    kw_tokens_raw: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if sep and key in keyword_names:
            kw_tokens_raw[key] = value
        else:
            positional_tokens.append(token)

    bound_positional: list[Any] = []
    bound_keywords: dict[str, Any] = {}
    positional_index = 0
    var_positional: inspect.Parameter | None = None

    for parameter in parameters:
        if parameter.kind is parameter.VAR_POSITIONAL:
            var_positional = parameter
            continue

        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            if parameter.name in kw_tokens_raw:
                # given as key=value; everything after it must go by keyword too
                bound_keywords[parameter.name] = _coerce_value(
                    kw_tokens_raw.pop(parameter.name), parameter.annotation)
            elif bound_keywords:
                if parameter.default is inspect._empty:
                    raise TypeError(f"Missing required argument: {parameter.name}")
            elif positional_index < len(positional_tokens):
                bound_positional.append(_coerce_value(
                    positional_tokens[positional_index], parameter.annotation))
                positional_index += 1
            elif parameter.default is not inspect._empty:
                bound_positional.append(parameter.default)
            else:
                raise TypeError(f"Missing required argument: {parameter.name}")
        elif parameter.kind is parameter.KEYWORD_ONLY:
            if parameter.name in kw_tokens_raw:
                bound_keywords[parameter.name] = _coerce_value(
                    kw_tokens_raw.pop(parameter.name), parameter.annotation)
            elif parameter.default is inspect._empty:
                raise TypeError(
                    f"Missing required keyword-only argument: {parameter.name}")

    remaining = positional_tokens[positional_index:]
    if var_positional is not None:
        element_annotation: Any = str
        args_ = get_args(var_positional.annotation) or ()
        if get_origin(var_positional.annotation) is tuple and args_:
            element_annotation = args_[0]
        bound_positional.extend(_coerce_value(item, element_annotation) for item in remaining)
    elif remaining:
        raise TypeError("Too many positional arguments.")

    return tuple(bound_positional), bound_keywords


def build_usage(command_name: str, func: Any, *, skip_context: bool = False) -> str:
    """
    Render a compact usage string based on `func` signature.

    Examples:
        'connect <url> [name] [timeout=...] [args...]'
    """
    usage_parts: list[str] = []

    for parameter in _parameters(func, skip_context):
        if parameter.kind is parameter.VAR_POSITIONAL:
            usage_parts.append(f"[{parameter.name}...]")
            continue

        token = f"<{parameter.name}>" if parameter.default is inspect._empty else f"[{parameter.name}]"
        if parameter.kind is parameter.KEYWORD_ONLY:
            token = f"[{parameter.name}=...]"
        usage_parts.append(token)

    return f"{command_name} " + " ".join(usage_parts) if usage_parts else command_name
