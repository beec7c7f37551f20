#!/usr/bin/env python3
# henshell/interface/__init__.py
from __future__ import annotations

"""
Package for statement assembly, command dispatch and the interactive loop.

Provides:
- StatementAssembler: delimiter / quote / comment aware statement buffer.
- Dispatcher: longest-prefix command resolution and the execution protocol.
- CompletionEngine: variable, command-name and per-command completion.
- ShellContext: the read / assemble / dispatch loop.
- CLI frontends (prompt_toolkit / readline / plain) and the plugin loader.
"""


from .parser import tokenize, bind_args, build_usage, split_current_token
from .variables import substitute
from .assembler import StatementAssembler, ScanState
from .dispatcher import Dispatcher, WILDCARD
from .completion import CompletionEngine, NO_MORE_CANDIDATES, readline_completer
from .shell import ShellContext, LineState
from .loader import load_commands, category_description
from .cli import BaseCLI, PromptToolkitCLI, ReadlineCLI, make_cli, HISTORY_FILE_PATH

__all__ = [
    # parser
    "tokenize",
    "bind_args",
    "build_usage",
    "split_current_token",
    # variables
    "substitute",
    # assembler
    "StatementAssembler",
    "ScanState",
    # dispatcher
    "Dispatcher",
    "WILDCARD",
    # completion
    "CompletionEngine",
    "NO_MORE_CANDIDATES",
    "readline_completer",
    # shell
    "ShellContext",
    "LineState",
    # loader
    "load_commands",
    "category_description",
    # cli
    "BaseCLI",
    "PromptToolkitCLI",
    "ReadlineCLI",
    "make_cli",
    "HISTORY_FILE_PATH",
]
