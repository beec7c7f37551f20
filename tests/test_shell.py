from __future__ import annotations

import io

from henshell.db import AppConfig
from henshell.interface.cli import BaseCLI
from henshell.interface.shell import DEFAULT_PROMPT, LineState, ShellContext


def test_statement_over_several_lines(connected: ShellContext) -> None:
    assert connected.execute_line("create table t (a int)") is LineState.INCOMPLETE
    assert connected.execute_line(";") is LineState.EXECUTED
    assert connected.session.table_names() == ["t"]


def test_several_statements_in_one_line(connected: ShellContext, capsys) -> None:
    state = connected.execute_line("create table t (a int); insert into t values (42); select a from t;")

    assert state is LineState.EXECUTED
    assert "| 42 |" in capsys.readouterr().out


def test_slash_line_terminates_statement(connected: ShellContext, capsys) -> None:
    assert connected.execute_line("select 7") is LineState.INCOMPLETE
    assert connected.execute_line("/") is LineState.EXECUTED
    assert "| 7 |" in capsys.readouterr().out


def test_remark_and_blank_lines(shell: ShellContext) -> None:
    assert shell.execute_line("rem this is ignored;") is LineState.EMPTY
    assert shell.execute_line("REM") is LineState.EMPTY
    assert shell.execute_line("   ") is LineState.EMPTY
    assert shell.assembler.buffered_text.strip() == ""


def test_variables_are_substituted_before_dispatch(connected: ShellContext, capsys) -> None:
    connected.execute_line("set-var TABLE numbers")
    connected.execute_line("create table $TABLE (n int);")
    connected.execute_line("insert into ${TABLE} values (3);")

    assert connected.session.table_names() == ["numbers"]
    assert connected.variables["_HENSHELL_LAST_COMMAND"] == "insert into numbers values (3);"


def test_interrupt_discards_partial_statement(connected: ShellContext) -> None:
    connected.execute_line("select")
    connected.interrupt()

    assert connected.assembler.buffered_text == ""
    assert connected.execute_line("select 1;") is LineState.EXECUTED


def test_run_stops_at_exit(shell: ShellContext, capsys) -> None:
    cli = BaseCLI(io.StringIO("echo one\nexit\necho two\n"))

    with cli:
        shell.run(cli)

    out = capsys.readouterr().out
    assert "one" in out
    assert "two" not in out
    assert shell.terminated


def test_run_disconnects_on_end_of_input(shell: ShellContext) -> None:
    cli = BaseCLI(io.StringIO("connect\n"))

    shell.run(cli)

    assert shell.session is None
    assert not shell.terminated


def test_prompts() -> None:
    interactive = ShellContext(AppConfig(prompt="db> "))
    assert interactive.prompt == "db> "
    assert interactive.empty_prompt == "    "

    assert ShellContext().prompt == DEFAULT_PROMPT
    assert ShellContext(interactive=False).prompt == ""


def test_shutdown_closes_session(connected: ShellContext) -> None:
    session = connected.session
    connected.shutdown()

    assert session.closed
    assert connected.session is None


def test_prompt_toolkit_completer(shell: ShellContext) -> None:
    from prompt_toolkit.document import Document

    from henshell.interface.cli import make_completer

    completer = make_completer(shell)
    shell.variables["TABLE"] = "t"

    words = [c.text for c in completer.get_completions(Document("hel"), None)]
    assert words == ["help"]
    completion = next(iter(completer.get_completions(Document("echo $TA"), None)))
    assert (completion.text, completion.start_position) == ("$TABLE", -3)


def test_double_dollar_prints_literal_dollar(shell: ShellContext, capsys) -> None:
    assert shell.execute_line("echo costs $$5") is LineState.EXECUTED
    assert capsys.readouterr().out == "costs $5\n"
    assert shell.assembler.buffered_text.strip() == ""


def test_trailing_comment_does_not_start_continuation(connected: ShellContext, capsys) -> None:
    connected.assembler.remove_comments = False

    assert connected.execute_line("select 3; -- note") is LineState.EXECUTED
    assert "| 3 |" in capsys.readouterr().out
    assert connected.execute_line("-- only a remark") is LineState.EMPTY
    assert connected.assembler.buffered_text.strip() == ""
