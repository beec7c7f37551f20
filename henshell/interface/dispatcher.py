#!/usr/bin/env python3
# henshell/interface/dispatcher.py
from __future__ import annotations

"""
Command dispatch.

Resolution is a longest-prefix match over the registry's sorted name index,
so that commands can be typed without a separator before their arguments
(e.g. '@script.sql') and a short name like 'de' never shadows 'describe'.

Execution protocol (execute):
  1) strip trailing ';' and whitespace; nothing left -> no-op
  2) resolve the command (falling back to the "" wildcard)
  3) refuse session-requiring commands while not connected
  4) inform before-listeners, run the command, inform after-listeners
  5) report SYNTAX_ERROR / EXEC_FAILED
Nothing raised by a command escapes this module, except interrupts
and exits, which are re-raised after the after-listeners ran.
"""

import logging
import re
from typing import TYPE_CHECKING, Any, Iterator, List, Optional

from henshell.commands import Command, CommandRegistry, ExecResult, ExecutionListener

if TYPE_CHECKING:  # pragma: no cover
    from henshell.interface.shell import ShellContext

log = logging.getLogger(__name__)

WILDCARD = ""

# separators for the last-resort command label
_TOKEN_SPLIT = re.compile(r"[ ;\t\n\r\f]+")


class Dispatcher:
    """Resolves command units to commands and executes them."""

    def __init__(self, context: "ShellContext | None" = None,
                 registry: CommandRegistry | None = None) -> None:
        self.context = context
        self.registry = registry if registry is not None else CommandRegistry()
        self._listeners: List[ExecutionListener] = []
        self._batch_count = 0

    # ---------------------------------------------------------------------------
    # Registration
    # ---------------------------------------------------------------------------

    def register(self, command_obj: Command) -> None:
        self.registry.register(command_obj)
        command_obj.init(self.context)

    def unregister(self, command_obj: Command) -> None:
        self.registry.unregister(command_obj)
        command_obj.unregistered()

    def register_additional_command(self, name: str, command_obj: Command) -> None:
        self.registry.register_additional_command(name, command_obj)

    def unregister_additional_command(self, name: str) -> None:
        self.registry.unregister_additional_command(name)

    def contains_command(self, name: str) -> bool:
        return self.registry.contains(name)

    def registered_commands(self) -> Iterator[Command]:
        """Commands in the sequence they have been added."""
        return iter(self.registry.commands())

    # ---------------------------------------------------------------------------
    # Batch mode
    # ---------------------------------------------------------------------------

    def start_batch(self) -> None:
        """Reading from a script: failed commands get echoed."""
        self._batch_count += 1

    def end_batch(self) -> None:
        self._batch_count = max(0, self._batch_count - 1)

    def is_in_batch(self) -> bool:
        return self._batch_count > 0

    # ---------------------------------------------------------------------------
    # Listeners
    # ---------------------------------------------------------------------------

    def add_execution_listener(self, listener: ExecutionListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_execution_listener(self, listener: ExecutionListener) -> bool:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def _inform_before_listeners(self, session: Any, raw_input: str) -> None:
        for listener in list(self._listeners):
            try:
                listener.before_execution(session, raw_input)
            except Exception:
                log.exception("execution listener %r failed", listener)

    def _inform_after_listeners(self, session: Any, raw_input: str, result: ExecResult) -> None:
        for listener in list(self._listeners):
            try:
                listener.after_execution(session, raw_input, result)
            except Exception:
                log.exception("execution listener %r failed", listener)

    # ---------------------------------------------------------------------------
    # Resolution
    # ---------------------------------------------------------------------------

    def get_command_name_from(self, complete_cmd: Optional[str]) -> Optional[str]:
        """
        Extract the command name, even without a delimiter between the
        command and its arguments ('@file', '?').
        """
        if not complete_cmd:
            return None
        cmd = complete_cmd.lower()
        start_char = cmd[0]
        longest_match: Optional[str] = None
        for name in self.registry.names_from(start_char):
            lowered = name.lower()
            if not lowered.startswith(start_char):
                break
            if cmd.startswith(lowered):
                longest_match = name

        if longest_match is None:
            # unknown command: first whitespace delimited word as label
            tokens = [t for t in _TOKEN_SPLIT.split(complete_cmd) if t]
            return tokens[0] if tokens else None
        return longest_match

    resolve = get_command_name_from

    def _command_for_name(self, name: Optional[str]) -> Optional[Command]:
        if name is None:
            return None
        command_obj = self.registry.get(name)
        if command_obj is None:
            # "" matches everything
            command_obj = self.registry.get(WILDCARD)
        return command_obj

    def get_command_from(self, complete_cmd: Optional[str]) -> Optional[Command]:
        return self._command_for_name(self.get_command_name_from(complete_cmd))

    # ---------------------------------------------------------------------------
    # Execution
    # ---------------------------------------------------------------------------

    def execute(self, session: Any, given_command: Optional[str]) -> Optional[ExecResult]:
        """Execute one command unit; returns the result code or None for no-ops."""
        if given_command is None:
            return None

        cmd = given_command.strip().rstrip("; \t\r\n\f")
        if not cmd:
            return None

        cmd_name = self.get_command_name_from(cmd)
        command_obj = self._command_for_name(cmd_name)
        if command_obj is None or cmd_name is None:
            log.debug("no command for %r", cmd)
            return None

        if session is None and command_obj.requires_valid_session(cmd_name):
            log.error("not connected.")
            return None

        params = cmd[len(cmd_name):]
        self._inform_before_listeners(session, given_command)
        try:
            result = command_obj.execute(session, cmd_name, params)
        except Exception:
            log.exception("Error in command execution: %s", cmd_name)
            result = ExecResult.EXEC_FAILED
        except BaseException:
            # interrupts still reach the read loop, listeners see the failure first
            self._inform_after_listeners(session, given_command, ExecResult.EXEC_FAILED)
            raise
        self._inform_after_listeners(session, given_command, result)

        if result == ExecResult.SYNTAX_ERROR:
            synopsis = command_obj.synopsis(cmd_name)
            if synopsis is not None:
                log.error("usage: %s", synopsis)
            else:
                log.error("syntax error.")
        elif result == ExecResult.EXEC_FAILED:
            # scripts are not echoed; name the statement that failed
            if self.is_in_batch():
                log.error("-- failed command: ")
                log.error("%s", given_command)
        return result

    def shutdown(self) -> None:
        for command_obj in self.registry.commands():
            try:
                command_obj.shutdown()
            except Exception:
                log.debug("shutdown of %r failed", command_obj, exc_info=True)
