# henshell/plugins/variables/entrypoint.py
from __future__ import annotations

from typing import Any, Iterable, Optional

from henshell.commands import Command, ExecResult
from henshell.interface.parser import tokenize
from henshell.ui import print_line, print_table

LAST_COMMAND_VARIABLE = "_HENSHELL_LAST_COMMAND"


class VariableCommand(Command):
    """
    set-var / unset-var.

    Also listens to executions to keep the last successful command in
    `_HENSHELL_LAST_COMMAND`.
    """

    command_names = ("set-var", "unset-var")
    category = "variables"

    def init(self, context) -> None:
        super().init(context)
        if context is not None:
            context.dispatcher.add_execution_listener(self)

    @property
    def variables(self) -> dict[str, str]:
        return self.context.variables if self.context is not None else {}

    # ---------- ExecutionListener ----------

    def before_execution(self, session: Any, raw_input: str) -> None:
        pass

    def after_execution(self, session: Any, raw_input: str, result: ExecResult) -> None:
        if result == ExecResult.SUCCESS and raw_input.strip():
            self.variables[LAST_COMMAND_VARIABLE] = raw_input.strip()

    # ---------- Command ----------

    def requires_valid_session(self, name: str) -> bool:
        return False

    def execute(self, session: Any, name: str, params: str) -> ExecResult:
        try:
            args = tokenize(params)
        except ValueError:
            return ExecResult.SYNTAX_ERROR

        if name == "unset-var":
            if len(args) != 1:
                return ExecResult.SYNTAX_ERROR
            if self.variables.pop(args[0], None) is None:
                print_line(f"unknown variable '{args[0]}'")
                return ExecResult.EXEC_FAILED
            return ExecResult.SUCCESS

        if not args:
            rows = sorted(self.variables.items())
            if rows:
                print_table(rows, headers=["Variable", "Value"])
            return ExecResult.SUCCESS
        if len(args) == 1:
            value = self.variables.get(args[0])
            if value is None:
                print_line(f"unknown variable '{args[0]}'")
                return ExecResult.EXEC_FAILED
            print_line(value)
            return ExecResult.SUCCESS
        self.variables[args[0]] = " ".join(args[1:])
        return ExecResult.SUCCESS

    def complete(self, dispatcher, partial_line: str, last_word: str) -> Optional[Iterable[str]]:
        # only the variable name (first argument) is completed
        if self.argument_count(partial_line) > (2 if last_word else 1):
            return None
        return (name for name in sorted(self.variables) if name.startswith(last_word))

    def short_description(self) -> str:
        return "set or unset user variables"

    def synopsis(self, name: str) -> str:
        if name == "unset-var":
            return "unset-var <variable>"
        return "set-var [<variable> [<value>]]"

    def long_description(self, name: str) -> str:
        if name == "unset-var":
            return "\tRemove a variable."
        return ("\tWithout argument, list all variables; with a name, show its value;\n"
                "\twith name and value, set it. Use variables as $NAME or ${NAME};\n"
                "\t$$ gives a literal dollar sign.")


COMMAND = VariableCommand
