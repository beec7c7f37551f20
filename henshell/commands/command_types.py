#!/usr/bin/env python3
# henshell/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- ExecResult: the result code every command execution ends with.
- ExecutionListener: passive observers notified around each execution.
- Command: the capability contract pluggable commands implement.
- FunctionCommand: a Command wrapping a plain function (see `command`).
"""

import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from henshell.interface.dispatcher import Dispatcher
    from henshell.interface.shell import ShellContext

log = logging.getLogger(__name__)


class CommandConfigurationError(ValueError):
    """A command could not be registered (e.g. a name is already bound)."""


class ExecResult(IntEnum):
    SUCCESS = 0
    SYNTAX_ERROR = 1
    EXEC_FAILED = 2


class ExecutionListener(Protocol):
    """Informed before and after every dispatched command."""

    def before_execution(self, session: Any, raw_input: str) -> None:  # pragma: no cover - signature only
        ...

    def after_execution(self, session: Any, raw_input: str, result: ExecResult) -> None:  # pragma: no cover
        ...


class CommandCallback(Protocol):
    """Protocol for any command function."""

    def __call__(self, *args: Any, **kwargs: Any) -> Any:  # pragma: no cover - signature only
        ...


class Command:
    """
    Base class for user level commands.

    Override what is necessary. Defaults: participates in completion, always
    complete on newline or semicolon, requires a session, no completion, no
    synopsis.
    """

    #: names handled by this command; "" is the wildcard matching anything unclaimed
    command_names: tuple[str, ...] = ()

    def __init__(self) -> None:
        self.context: Optional["ShellContext"] = None

    def names(self) -> tuple[str, ...]:
        return tuple(self.command_names)

    def init(self, context: "ShellContext | None") -> None:
        """Called once by the dispatcher when the command is registered."""
        self.context = context

    def unregistered(self) -> None:
        """Called by the dispatcher after every name of the command was unbound."""

    def participate_in_completion(self) -> bool:
        return True

    def execute(self, session: Any, name: str, params: str) -> ExecResult:
        raise NotImplementedError

    def complete(self, dispatcher: "Dispatcher", partial_line: str,
                 last_word: str) -> Optional[Iterable[str]]:
        return None

    def is_complete(self, text: str) -> bool:
        """`text` carries its delimiter (newline or semicolon) at the end."""
        return True

    def requires_valid_session(self, name: str) -> bool:
        return True

    def short_description(self) -> Optional[str]:
        return None

    def synopsis(self, name: str) -> Optional[str]:
        return None

    def long_description(self, name: str) -> Optional[str]:
        return None

    def shutdown(self) -> None:
        pass

    @staticmethod
    def argument_count(params: str) -> int:
        """Number of whitespace separated words in `params`."""
        return len(params.split())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(map(repr, self.names()))})"


class FunctionCommand(Command):
    """
    A Command backed by a plain function.

    Important fields:
        name: Primary command name.
        description: Short, user-facing description.
        example: One-line example usage string (optional).
        callback: Function implementing the command.
        category: Logical group for help output.
        completers: Mapping for completions ('pos0', 'pos*' or keyword names).
        aliases: Extra names resolving to the same command.
        needs_session: Whether a database session must be active.
    """

    def __init__(
        self,
        name: str,
        callback: CommandCallback,
        *,
        description: str = "",
        example: str = "",
        category: str = "general",
        completers: Mapping[str, Callable[..., Iterable[str]]] | None = None,
        aliases: Iterable[str] = (),
        needs_session: bool = False,
        pass_context: bool = False,
    ) -> None:
        super().__init__()
        self.name = name
        self.callback = callback
        self.description = description
        self.example = example
        self.category = category
        self.completers = dict(completers or {})
        self.aliases = list(aliases)
        self.needs_session = needs_session
        self.pass_context = pass_context
        self.module = getattr(callback, "__module__", "")

    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    def requires_valid_session(self, name: str) -> bool:
        return self.needs_session

    def short_description(self) -> Optional[str]:
        return self.description or None

    def synopsis(self, name: str) -> Optional[str]:
        from henshell.interface.parser import build_usage
        return build_usage(name, self.callback, skip_context=self.pass_context)

    def execute(self, session: Any, name: str, params: str) -> ExecResult:
        from henshell.interface.parser import bind_args, tokenize

        try:
            positional, keywords = bind_args(
                self.callback, tokenize(params), skip_context=self.pass_context)
        except (TypeError, ValueError) as exc:
            log.error("%s: %s", name, exc)
            return ExecResult.SYNTAX_ERROR

        if self.pass_context:
            positional = (self.context, *positional)
        return _normalize_result(self.callback(*positional, **keywords))

    def complete(self, dispatcher: "Dispatcher", partial_line: str,
                 last_word: str) -> Optional[Iterable[str]]:
        from henshell.interface.parser import split_current_token

        parts, current = split_current_token(partial_line)
        arguments = parts[1:]
        if "=" in current:
            key, value_prefix = current.split("=", 1)
            provider = self.completers.get(key)
            if provider is None:
                return None
            return (f"{key}={value}" for value in provider(
                text=value_prefix, argv=arguments, index=None, context=self.context))

        positional = [token for token in arguments if "=" not in token]
        index = max(0, len(positional) - 1)
        provider = self.completers.get(f"pos{index}") or self.completers.get("pos*")
        if provider is None:
            return None
        return provider(text=current, argv=arguments, index=index, context=self.context)


def _normalize_result(value: Any) -> ExecResult:
    """Map a callback return value onto an ExecResult, printing plain text."""
    if isinstance(value, ExecResult):
        return value
    if value is None or value is True:
        return ExecResult.SUCCESS
    if value is False:
        return ExecResult.EXEC_FAILED
    if isinstance(value, int):
        # unknown codes count as success, nothing to report
        return ExecResult(value) if value in ExecResult._value2member_map_ else ExecResult.SUCCESS
    from henshell.ui import print_line
    print_line(str(value))
    return ExecResult.SUCCESS
