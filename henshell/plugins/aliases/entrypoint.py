# henshell/plugins/aliases/entrypoint.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Set

from henshell.commands import Command, ExecResult
from henshell.ui import print_line, print_table

log = logging.getLogger(__name__)


class AliasCommand(Command):
    """
    alias / unalias.

    Every alias name is bound to this command through the dispatcher's
    additional-command bindings; executing it dispatches the aliased text
    followed by the given parameters. An alias may shadow an existing
    command, which comes back with `unalias`.
    """

    command_names = ("alias", "unalias")
    category = "aliases"

    def __init__(self) -> None:
        super().__init__()
        self._aliases: Dict[str, str] = {}
        self._shadowed: Dict[str, Command] = {}
        self._executing: Set[str] = set()

    @property
    def aliases(self) -> Dict[str, str]:
        return dict(self._aliases)

    # ---------- alias management ----------

    def put_alias(self, name: str, target: str) -> None:
        dispatcher = self.context.dispatcher
        existing = dispatcher.registry.get(name)
        if existing is not None and existing is not self and name not in self._shadowed:
            self._shadowed[name] = existing
        self._aliases[name] = target
        dispatcher.register_additional_command(name, self)

    def remove_alias(self, name: str) -> bool:
        if name not in self._aliases:
            return False
        del self._aliases[name]
        dispatcher = self.context.dispatcher
        dispatcher.unregister_additional_command(name)
        shadowed = self._shadowed.pop(name, None)
        if shadowed is not None:
            dispatcher.register_additional_command(name, shadowed)
        return True

    def unregistered(self) -> None:
        # names taken over by an alias go back to their commands
        for name, shadowed in self._shadowed.items():
            registry = self.context.dispatcher.registry
            still_registered = any(c is shadowed for c in registry.commands())
            if still_registered and name not in registry:
                registry.register_additional_command(name, shadowed)
        self._aliases.clear()
        self._shadowed.clear()

    def _expand(self, name: str, params: str = "") -> str:
        return self._aliases[name] + params

    # ---------- Command ----------

    def requires_valid_session(self, name: str) -> bool:
        return False

    def is_complete(self, text: str) -> bool:
        dispatcher = self.context.dispatcher
        name = dispatcher.get_command_name_from(text)
        if name not in self._aliases:
            return True
        expanded = self._expand(name, text[len(name):])
        target = dispatcher.get_command_from(expanded)
        return target is None or target is self or target.is_complete(expanded)

    def execute(self, session: Any, name: str, params: str) -> ExecResult:
        if name in self._aliases:
            return self._execute_alias(session, name, params)

        if name == "unalias":
            names = params.split()
            if not names:
                return ExecResult.SYNTAX_ERROR
            result = ExecResult.SUCCESS
            for alias in names:
                if not self.remove_alias(alias):
                    print_line(f"unknown alias '{alias}'")
                    result = ExecResult.EXEC_FAILED
            return result

        words = params.split(None, 1)
        if not words:
            rows = sorted(self._aliases.items())
            if rows:
                print_table(rows, headers=["Alias", "Execute"])
            return ExecResult.SUCCESS
        if len(words) < 2:
            return ExecResult.SYNTAX_ERROR
        alias, target = words[0], words[1].strip()
        if alias in self.command_names:
            print_line(f"cannot alias '{alias}'")
            return ExecResult.EXEC_FAILED
        self.put_alias(alias, target)
        return ExecResult.SUCCESS

    def _execute_alias(self, session: Any, name: str, params: str) -> ExecResult:
        if name in self._executing:
            log.error("alias '%s' refers to itself.", name)
            return ExecResult.EXEC_FAILED
        self._executing.add(name)
        try:
            result = self.context.dispatcher.execute(session, self._expand(name, params))
        finally:
            self._executing.discard(name)
        return ExecResult.SUCCESS if result is None else result

    def complete(self, dispatcher, partial_line: str, last_word: str) -> Optional[Iterable[str]]:
        name = dispatcher.get_command_name_from(partial_line.strip())
        if name == "unalias":
            return (alias for alias in sorted(self._aliases) if alias.startswith(last_word))
        if name in self._aliases:
            expanded = self._expand(name, partial_line.lstrip()[len(name):])
            target = dispatcher.get_command_from(expanded)
            if target is not None and target is not self:
                return target.complete(dispatcher, expanded, last_word)
        return None

    def short_description(self) -> str:
        return "create and remove command aliases"

    def synopsis(self, name: str) -> str:
        if name == "unalias":
            return "unalias <alias-name>..."
        if name in self._aliases:
            return f"{name} -> {self._aliases[name]}"
        return "alias [<alias-name> <command-string>]"


COMMAND = AliasCommand
