from __future__ import annotations

from pathlib import Path

from henshell.commands import ExecResult
from henshell.interface.loader import category_description, load_commands
from henshell.interface.shell import LineState, ShellContext
from henshell.plugins.sql.entrypoint import SQLCommand
from henshell.ui import strip_ansi


# ---------- loader ----------

def test_builtin_commands_are_loaded(shell: ShellContext) -> None:
    registry = shell.registry

    for name in ("help", "?", "exit", "quit", "echo", "status", "set-var", "unset-var",
                 "alias", "unalias", "load", "@", "@@", "connect", "disconnect", "", "select"):
        assert name in registry, name
    assert set(registry.categories()) == {"aliases", "connection", "load", "shell", "sql", "variables"}


def test_each_shell_gets_its_own_commands() -> None:
    first, second = ShellContext(interactive=False), ShellContext(interactive=False)
    load_commands(first.dispatcher)
    load_commands(second.dispatcher)

    assert first.registry.get("load") is not second.registry.get("load")
    assert first.registry.get("help") is not second.registry.get("help")
    assert first.registry.get("help").context is first
    assert second.registry.get("help").context is second


def test_category_description() -> None:
    assert category_description("henshell.plugins", "sql")
    assert category_description("henshell.plugins", "nope") == ""


# ---------- shell commands ----------

def test_help_lists_commands_by_category(shell: ShellContext, capsys) -> None:
    assert shell.dispatcher.execute(None, "help") is ExecResult.SUCCESS
    out = strip_ansi(capsys.readouterr().out)
    assert "help | ?" in out
    assert "connect" in out
    assert "connection - Open and close the database session." in out
    assert out.index("aliases -") < out.index("shell -")


def test_help_for_category(shell: ShellContext, capsys) -> None:
    assert shell.dispatcher.execute(None, "help connection") is ExecResult.SUCCESS
    out = strip_ansi(capsys.readouterr().out)
    assert "connection - Open and close the database session." in out
    assert "disconnect" in out
    assert "set-var" not in out


def test_help_for_single_command(shell: ShellContext, capsys) -> None:
    assert shell.dispatcher.execute(None, "?load") is ExecResult.SUCCESS
    assert "load <filename>" in capsys.readouterr().out
    assert shell.dispatcher.execute(None, "help nothing") is ExecResult.EXEC_FAILED


def test_echo(shell: ShellContext, capsys) -> None:
    shell.execute_line("echo hello   'big world'")

    assert capsys.readouterr().out == "hello big world\n"


def test_status_requires_session(shell: ShellContext, caplog, capsys) -> None:
    shell.execute_line("status")
    assert "not connected." in caplog.text

    shell.execute_line("connect")
    shell.execute_line("status")
    assert ":memory:" in capsys.readouterr().out


# ---------- variables ----------

def test_set_and_unset_variables(shell: ShellContext, capsys) -> None:
    shell.execute_line("set-var GREETING 'hello there'")
    shell.execute_line("set-var GREETING")
    assert capsys.readouterr().out == "hello there\n"

    assert shell.dispatcher.execute(None, "unset-var GREETING") is ExecResult.SUCCESS
    assert "GREETING" not in shell.variables
    assert shell.dispatcher.execute(None, "unset-var GREETING") is ExecResult.EXEC_FAILED


def test_variable_names_complete(shell: ShellContext) -> None:
    shell.variables.update({"ALPHA": "1", "BETA": "2"})

    assert shell.completion.candidates("A", "set-var A") == ["ALPHA"]
    assert shell.completion.candidates("$B", "echo $B") == ["$BETA"]


# ---------- aliases ----------

def test_alias_expands_with_parameters(connected: ShellContext, capsys) -> None:
    connected.execute_line("create table t (a int); insert into t values (5);")
    connected.execute_line("alias av select a from")
    capsys.readouterr()

    connected.execute_line("av t;")
    assert "| 5 |" in capsys.readouterr().out


def test_alias_statement_waits_for_delimiter(connected: ShellContext, capsys) -> None:
    connected.execute_line("alias sel select")
    capsys.readouterr()

    assert connected.execute_line("sel 41 + 1") is LineState.INCOMPLETE
    connected.execute_line(";")
    assert "42" in capsys.readouterr().out


def test_unalias_restores_shadowed_command(shell: ShellContext, capsys) -> None:
    echo = shell.registry.get("echo")
    shell.execute_line("alias echo help")
    assert shell.registry.get("echo") is not echo

    shell.execute_line("unalias echo")
    assert shell.registry.get("echo") is echo
    assert shell.dispatcher.execute(None, "unalias echo") is ExecResult.EXEC_FAILED


def test_unregistering_aliases_restores_shadowed_commands(shell: ShellContext) -> None:
    echo = shell.registry.get("echo")
    aliases = shell.registry.get("alias")
    shell.execute_line("alias echo help")
    shell.execute_line("alias hi echo hi")

    shell.dispatcher.unregister(aliases)

    assert shell.registry.get("echo") is echo
    assert "hi" not in shell.registry
    assert "alias" not in shell.registry
    assert aliases.aliases == {}

def test_self_referencing_alias_fails(shell: ShellContext, caplog) -> None:
    shell.execute_line("alias loop loop")

    assert shell.dispatcher.execute(None, "loop") is ExecResult.EXEC_FAILED
    assert "refers to itself" in caplog.text


# ---------- load ----------

def test_load_runs_script_in_batch_mode(connected: ShellContext, tmp_path: Path, caplog) -> None:
    script = tmp_path / "setup.sql"
    script.write_text(
        "-- create some data\n"
        "create table t (a int);\n"
        "insert into t\n"
        "  values (1);\n"
        "select * from missing;\n",
        encoding="utf-8",
    )

    assert connected.dispatcher.execute(connected.session, f"@{script}") is ExecResult.SUCCESS

    rows = connected.session.execute("select a from t")[1]
    assert rows == [(1,)]
    messages = [record.getMessage() for record in caplog.records]
    assert "-- failed command: " in messages
    assert not connected.dispatcher.is_in_batch()
    assert connected.assembler.depth == 0


def test_load_keeps_partial_statement(connected: ShellContext, tmp_path: Path) -> None:
    script = tmp_path / "inner.sql"
    script.write_text("create table inner_t (a int);\n", encoding="utf-8")

    connected.execute_line("create table outer_t")
    connected.dispatcher.execute(connected.session, f"load '{script}'")
    connected.execute_line("(b int);")

    assert connected.session.table_names() == ["inner_t", "outer_t"]


def test_nested_script_relative_to_caller(connected: ShellContext, tmp_path: Path) -> None:
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "main.sql").write_text("@@child.sql\n", encoding="utf-8")
    (sub / "child.sql").write_text("create table child (a int);\n", encoding="utf-8")

    connected.dispatcher.execute(connected.session, f"start {sub / 'main.sql'}")

    assert connected.session.table_names() == ["child"]


def test_recursive_load_is_refused(shell: ShellContext, tmp_path: Path, caplog) -> None:
    script = tmp_path / "self.sql"
    script.write_text(f"@{script}\n", encoding="utf-8")

    assert shell.dispatcher.execute(None, f"@{script}") is ExecResult.SUCCESS
    assert "recursive inclusion" in caplog.text


def test_load_missing_file(shell: ShellContext, tmp_path: Path) -> None:
    assert shell.dispatcher.execute(None, f"load {tmp_path / 'nope.sql'}") is ExecResult.EXEC_FAILED
    assert shell.dispatcher.execute(None, "load") is ExecResult.SYNTAX_ERROR


def test_load_completes_file_names(shell: ShellContext, tmp_path: Path) -> None:
    (tmp_path / "report.sql").write_text("", encoding="utf-8")
    prefix = f"{tmp_path}/rep"

    assert shell.completion.candidates(prefix, f"load {prefix}") == [f"{tmp_path}/report.sql"]


# ---------- connection / sql ----------

def test_connect_to_file_and_disconnect(shell: ShellContext, tmp_path: Path) -> None:
    database = tmp_path / "app.db"
    shell.execute_line(f"connect {database}")
    shell.execute_line("create table t (a int);")
    shell.execute_line("disconnect")

    assert shell.session is None
    shell.execute_line(f"connect {database}")
    assert shell.session.table_names() == ["t"]


def test_sql_errors_are_reported(connected: ShellContext, caplog) -> None:
    assert connected.dispatcher.execute(connected.session, "select * from nowhere;") \
        is ExecResult.EXEC_FAILED
    assert "no such table" in caplog.text


def test_sql_null_and_affected_rows(connected: ShellContext, capsys) -> None:
    connected.quiet = False
    connected.execute_line("create table t (a int, b text);")
    connected.execute_line("insert into t values (1, null), (2, 'x');")
    connected.execute_line("select * from t;")

    out = capsys.readouterr().out
    assert "affected 2 row(s)" in out
    assert "[NULL]" in out
    assert "2 row(s) in result" in out


def test_commit_and_rollback(connected: ShellContext) -> None:
    connected.execute_line("create table t (a int);")
    connected.execute_line("commit")
    connected.execute_line("insert into t values (1);")
    connected.execute_line("rollback")

    assert connected.session.execute("select count(*) from t")[1] == [(0,)]


def test_trigger_body_is_one_statement(connected: ShellContext) -> None:
    connected.execute_line("create table t (a int); create table log (a int);")
    connected.execute_line("create trigger tr after insert on t begin")
    connected.execute_line("  insert into log values (new.a);")
    connected.execute_line("end;")
    connected.execute_line("insert into t values (9);")

    assert connected.session.execute("select a from log")[1] == [(9,)]


def test_sql_statement_boundaries() -> None:
    sql = SQLCommand()

    assert sql.is_complete("select 1;")
    assert not sql.is_complete("select 1\n")
    assert sql.is_complete("select 1\n/\n")
    assert sql.is_complete("commit\n")
    assert SQLCommand.statement_text("select", " 1\n/") == "select 1"


def test_sql_completes_table_names(connected: ShellContext) -> None:
    connected.execute_line("create table users (a int); create table teams (a int);")

    assert connected.completion.candidates("u", "select * from u") == ["users"]
    assert connected.completion.candidates("", "select * from ") == ["teams", "users"]
    assert connected.completion.candidates("x", "select x") == []
