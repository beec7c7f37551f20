#!/usr/bin/env python3
# henshell/commands/__init__.py
from __future__ import annotations

"""
Package for command management and registration.

Provides:
- The capability contract (`Command`, `FunctionCommand`, `ExecResult`,
  `ExecutionListener`).
- The name-indexed registry (`CommandRegistry`) and the `command` decorator.

This package re-exports public APIs from:
- command_types.py
- commands.py
"""


# Re-export from submodules
from .command_types import (
    Command,
    CommandCallback,
    CommandConfigurationError,
    ExecResult,
    ExecutionListener,
    FunctionCommand,
)
from .commands import CommandRegistry, command

__all__ = [
    "Command",
    "CommandCallback",
    "CommandConfigurationError",
    "ExecResult",
    "ExecutionListener",
    "FunctionCommand",
    "CommandRegistry",
    "command",
]
