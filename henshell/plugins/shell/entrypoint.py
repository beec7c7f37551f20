# henshell/plugins/shell/entrypoint.py
from __future__ import annotations

import time
from typing import Iterable

from henshell.commands import ExecResult, command
from henshell.interface.loader import category_description
from henshell.ui import colorize, print_line, print_table


def _command_names(*, text: str, context, **_: object) -> Iterable[str]:
    """Completion provider: registered names (aliases included)."""
    for name in context.registry.names_from(text):
        if not name.startswith(text):
            return
        if name:
            yield name


def _describe(command_obj) -> str:
    return (command_obj.short_description() or "").strip()


def _plugin_package(context) -> str:
    config = getattr(context, "config", None)
    return config.plugin_package if config is not None else "henshell.plugins"


def _print_category(context, category: str, commands) -> None:
    rows = []
    for command_obj in commands:
        names = [n for n in command_obj.names() if n]
        if not names or not command_obj.participate_in_completion():
            continue
        rows.append([" | ".join(names), _describe(command_obj)])
    if not rows:
        return
    heading = colorize(category, "bold")
    description = category_description(_plugin_package(context), category)
    print_line(f"{heading} - {description}" if description else heading)
    print_table(rows, headers=["Command", "Description"])


# ---------- help ----------
@command(
    name="help",
    description="Provide help for commands or command categories.",
    example="help connect",
    category="shell",
    aliases=["?"],
    completers={"pos0": _command_names},
    pass_context=True,
)
def help_(context, name: str = "") -> ExecResult:
    registry = context.registry
    categories = registry.categories()
    if not name:
        for category in sorted(categories):
            _print_category(context, category, categories[category])
        print_line("Type 'help <command>' for more information on a specific command.")
        return ExecResult.SUCCESS

    command_obj = registry.get(name)
    if command_obj is None:
        if name in categories:
            _print_category(context, name, categories[name])
            return ExecResult.SUCCESS
        print_line(f"Help: unknown command '{name}'")
        return ExecResult.EXEC_FAILED

    synopsis = command_obj.synopsis(name)
    print_line(colorize(synopsis or name, "bold"))
    description = command_obj.long_description(name) or _describe(command_obj)
    if description:
        print_line(description)
    return ExecResult.SUCCESS


# ---------- exit ----------
@command(
    name="exit",
    description="Exit the shell.",
    category="shell",
    aliases=["quit"],
    pass_context=True,
)
def exit_(context) -> ExecResult:
    context.terminate()
    return ExecResult.SUCCESS


# ---------- echo ----------
@command(
    name="echo",
    description="Print the given text; useful in scripts.",
    example="echo connected to $DB",
    category="shell",
    aliases=["prompt"],
    pass_context=True,
)
def echo(context, *text: str) -> ExecResult:
    print_line(" ".join(text))
    return ExecResult.SUCCESS


# ---------- status ----------
@command(
    name="status",
    description="Show the state of the current session.",
    category="shell",
    needs_session=True,
    pass_context=True,
)
def status(context) -> ExecResult:
    session = context.session
    uptime = time.strftime("%H:%M:%S", time.gmtime(session.uptime()))
    print_table(
        [
            ["URL", session.url],
            ["Database", session.database_info],
            ["Uptime", uptime],
            ["Statements", session.statement_count],
        ],
        headers=["Property", "Value"],
    )
    return ExecResult.SUCCESS


COMMANDS = [help_, exit_, echo, status]
