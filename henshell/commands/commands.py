#!/usr/bin/env python3
# henshell/commands/commands.py
from __future__ import annotations

"""
Command registry and decorator utilities.

This module provides:
- CommandRegistry: commands in registration order plus a sorted name index.
- command: decorator turning a function into a FunctionCommand.
"""

import bisect
import inspect
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from henshell.commands.command_types import Command, CommandConfigurationError, FunctionCommand


class CommandRegistry:
    """
    Holds all command definitions.

    Names are stored case-preserved; the index is ordered by the lowercased
    name so that resolution and completion can scan a prefix range only.
    """

    def __init__(self) -> None:
        # Commands in sequence of registration
        self._commands: List[Command] = []
        # Name -> Command (registered names and additional alias names)
        self._commands_by_name: Dict[str, Command] = {}
        # Sorted (lowercased name, name) pairs
        self._index: List[Tuple[str, str]] = []

    # ---------------- Registration ----------------

    def register(self, command_obj: Command) -> None:
        """Bind every name the command declares; nothing is bound on collision."""
        names = list(command_obj.names())
        seen: set[str] = set()
        for name in names:
            if name in self._commands_by_name or name in seen:
                raise CommandConfigurationError(
                    f"attempt to register command '{name}', that is already used")
            seen.add(name)

        self._commands.append(command_obj)
        for name in names:
            self._bind(name, command_obj)

    def unregister(self, command_obj: Command) -> None:
        """Remove the command and every name bound to that exact instance."""
        self._commands = [c for c in self._commands if c is not command_obj]
        for name in [n for n, c in self._commands_by_name.items() if c is command_obj]:
            self._unbind(name)

    def register_additional_command(self, name: str, command_obj: Command) -> None:
        """Bind a single extra name (aliases); may shadow an existing binding."""
        if name in self._commands_by_name:
            self._unbind(name)
        self._bind(name, command_obj)

    def unregister_additional_command(self, name: str) -> None:
        if name in self._commands_by_name:
            self._unbind(name)

    def _bind(self, name: str, command_obj: Command) -> None:
        self._commands_by_name[name] = command_obj
        bisect.insort(self._index, (name.lower(), name))

    def _unbind(self, name: str) -> None:
        del self._commands_by_name[name]
        position = bisect.bisect_left(self._index, (name.lower(), name))
        del self._index[position]

    # ---------------- Lookup ----------------

    def contains(self, name: str) -> bool:
        return name in self._commands_by_name

    __contains__ = contains

    def get(self, name: str) -> Optional[Command]:
        """Return the command bound to exactly this name, or None."""
        return self._commands_by_name.get(name)

    def commands(self) -> list[Command]:
        """Registered commands in the sequence they were added."""
        return list(self._commands)

    def names(self) -> list[str]:
        """All bound names, sorted case-insensitively."""
        return [name for _, name in self._index]

    def names_from(self, key: str) -> Iterator[str]:
        """Sorted names starting with the first entry not below `key` (lowercased)."""
        start = bisect.bisect_left(self._index, (key.lower(),))
        for position in range(start, len(self._index)):
            yield self._index[position][1]

    def __len__(self) -> int:
        return len(self._commands_by_name)

    # ---------------- Categories ----------------

    def categories(self) -> dict[str, list[Command]]:
        """Group commands by category for help output."""
        grouped: dict[str, list[Command]] = {}
        for cmd in self._commands:
            grouped.setdefault(getattr(cmd, "category", "general"), []).append(cmd)
        return grouped


def command(
    *,
    name: str | None = None,
    description: str | None = None,
    example: str | None = None,
    category: str | None = None,
    completers: Mapping[str, Callable[..., Iterable[str]]] | None = None,
    aliases: list[str] | None = None,
    needs_session: bool = False,
    pass_context: bool = False,
) -> Callable[[Callable[..., Any]], FunctionCommand]:
    """
    Decorator turning a function into a FunctionCommand.

    - Function name is transformed from snake_case to kebab-case for `name` if not provided.
    - With `pass_context=True` the shell context is passed as first argument.
    - The result still has to be exported (COMMAND/COMMANDS) to get loaded.
    """

    def wrapper(func: Callable[..., Any]) -> FunctionCommand:
        signature = inspect.signature(func)
        if pass_context and not signature.parameters:
            raise CommandConfigurationError(
                f"{func.__name__} takes no context parameter")

        return FunctionCommand(
            (name or func.__name__).replace("_", "-"),
            func,
            description=(description or (func.__doc__ or "")).strip(),
            example=example or "",
            category=category or "general",
            completers=completers,
            aliases=aliases or [],
            needs_session=needs_session,
            pass_context=pass_context,
        )

    return wrapper
