#!/usr/bin/env python3
# henshell/interface/shell.py
from __future__ import annotations

"""
Interactive read / assemble / dispatch loop.

ShellContext is handed to every command on registration; it carries the
registry, dispatcher, assembler, user variables and the current session.
There is no module level instance.
"""

import logging
import re
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from henshell.commands import CommandRegistry
from henshell.interface.assembler import StatementAssembler
from henshell.interface.completion import CompletionEngine
from henshell.interface.dispatcher import Dispatcher
from henshell.interface.variables import substitute

if TYPE_CHECKING:  # pragma: no cover
    from henshell.db.config import AppConfig
    from henshell.interface.cli import BaseCLI

log = logging.getLogger(__name__)

DEFAULT_PROMPT = "henshell> "

# 'rem'ark lines, only at the very beginning of the line
_REMARK = re.compile(r"rem(\s|$)", re.IGNORECASE)


class LineState(Enum):
    EXECUTED = 1
    EMPTY = 2
    INCOMPLETE = 3


class ShellContext:
    """State of one shell: commands, buffers, variables and the session."""

    def __init__(self, config: "AppConfig | None" = None, *,
                 interactive: bool = True) -> None:
        self.config = config
        self.interactive = interactive
        self.quiet = bool(config and config.quiet) or not interactive
        self.verbose = False

        self.registry = CommandRegistry()
        self.dispatcher = Dispatcher(self, self.registry)
        self.assembler = StatementAssembler(
            remove_comments=config.remove_comments if config else True)
        self.variables: Dict[str, str] = {}
        self.session: Any = None
        self.completion = CompletionEngine(
            self.dispatcher,
            variable_names=lambda: self.variables.keys(),
            session_provider=lambda: self.session,
        )

        self._history_lines: List[str] = []
        self._terminated = False
        self._already_shut_down = False
        self.set_prompt((config.prompt if config and config.prompt else DEFAULT_PROMPT)
                        if interactive else "")

    # ---------------------------------------------------------------------------
    # Prompt
    # ---------------------------------------------------------------------------

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt
        # continuation lines are indented to the prompt's width
        self.empty_prompt = " " * len(prompt)

    # ---------------------------------------------------------------------------
    # Buffers
    # ---------------------------------------------------------------------------

    def push_buffer(self) -> None:
        """Keep the current partial statement aside, e.g. to run a script."""
        self.assembler.push()

    def pop_buffer(self) -> None:
        self.assembler.pop()

    def partial_line(self, current: str = "") -> str:
        """Lines of the pending statement plus what is being typed now."""
        return "".join(line + "\n" for line in self._history_lines) + current

    def substitute(self, text: str) -> str:
        return substitute(text, self.variables)

    # ---------------------------------------------------------------------------
    # Execution
    # ---------------------------------------------------------------------------

    def execute_line(self, line: str) -> LineState:
        """Feed one input line; execute every statement it completes."""
        if _REMARK.match(line):
            return LineState.EMPTY

        self.assembler.append(line + "\n")
        result = LineState.INCOMPLETE
        while self.assembler.has_next():
            complete_command = self.substitute(self.assembler.next())
            command_obj = self.dispatcher.get_command_from(complete_command)
            if command_obj is None:
                self.assembler.consumed()
                # a trailing newline after 'cmd;' must not hide the execution
                if result is not LineState.EXECUTED:
                    result = LineState.EMPTY
            elif not command_obj.is_complete(complete_command):
                self.assembler.cont()
                result = LineState.INCOMPLETE
            else:
                self.dispatcher.execute(self.session, complete_command)
                self.assembler.consumed()
                result = LineState.EXECUTED
        if result is LineState.INCOMPLETE and not self.assembler.buffered_text.strip():
            result = LineState.EMPTY
        return result

    def interrupt(self) -> None:
        """Drop the partially typed statement (current context only)."""
        self._history_lines.clear()
        self.assembler.discard()

    def run(self, cli: "BaseCLI") -> None:
        """Read lines from `cli` until terminated or end of input."""
        display_prompt = self.prompt
        while not self._terminated:
            try:
                line = cli.get_line(display_prompt)
            except KeyboardInterrupt:
                log.warning("discarded current command line; press [CTRL-D] to exit")
                self.interrupt()
                display_prompt = self.prompt
                continue
            except EOFError:
                if self.session is not None:
                    self.dispatcher.execute(self.session, "disconnect")
                    display_prompt = self.prompt
                    continue
                break

            if line is None:
                continue

            self._history_lines.append(line)
            try:
                state = self.execute_line(line)
            except KeyboardInterrupt:
                log.warning("interrupted")
                self.interrupt()
                state = LineState.EMPTY

            if state is LineState.INCOMPLETE:
                display_prompt = self.empty_prompt
            else:
                display_prompt = self.prompt
                self._history_lines.clear()

    def terminate(self) -> None:
        self._terminated = True

    @property
    def terminated(self) -> bool:
        return self._terminated

    def shutdown(self) -> None:
        """Called once at the very end."""
        if self._already_shut_down:
            return
        try:
            self.dispatcher.shutdown()
            if self.session is not None:
                self.session.close()
                self.session = None
        finally:
            self._already_shut_down = True
