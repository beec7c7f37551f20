from __future__ import annotations

import pytest

from henshell.interface.assembler import ScanState, StatementAssembler


def _drain(assembler: StatementAssembler) -> list[str]:
    statements = []
    while assembler.has_next():
        statements.append(assembler.next())
        assembler.consumed()
    return statements


def test_single_statement_keeps_delimiter() -> None:
    assembler = StatementAssembler()
    assembler.append("select 1;")

    assert assembler.has_next()
    assert assembler.next() == "select 1;"
    assembler.consumed()
    assert not assembler.has_next()


def test_next_without_candidate_raises() -> None:
    assembler = StatementAssembler()
    assembler.append("select")

    with pytest.raises(LookupError):
        assembler.next()


def test_several_statements_on_one_line() -> None:
    assembler = StatementAssembler()
    assembler.append("select 1; select 2;\n")

    assert _drain(assembler) == ["select 1;", "select 2;"]


def test_newline_proposes_candidate() -> None:
    assembler = StatementAssembler()
    assembler.append("help\n")

    assert assembler.next() == "help\n"


def test_leading_whitespace_and_empty_statements_are_skipped() -> None:
    assembler = StatementAssembler()
    assembler.append("  \n ;;\n   select 1;\n")

    assert _drain(assembler) == ["select 1;"]


def test_delimiters_inside_quotes_are_content() -> None:
    assembler = StatementAssembler()
    assembler.append("select 'a;b', \"c;\nd\";\n")

    assert _drain(assembler) == ["select 'a;b', \"c;\nd\";"]


def test_double_dollar_is_plain_content() -> None:
    assembler = StatementAssembler()
    assembler.append("echo costs $$5\nselect '$$;';\n")

    assert _drain(assembler) == ["echo costs $$5\n", "select '$$;';"]
    assert assembler.scan_state is ScanState.NEW_STATEMENT


def test_cont_turns_delimiter_into_content() -> None:
    assembler = StatementAssembler()
    assembler.append("select *\n")

    assert assembler.next() == "select *\n"
    assembler.cont()
    assert not assembler.has_next()
    assert assembler.scan_state is ScanState.STATEMENT

    assembler.append("from t;\n")
    assert assembler.next() == "select *\nfrom t;"


def test_consumed_keeps_unscanned_rest() -> None:
    assembler = StatementAssembler()
    assembler.append("select 1; select")

    assert assembler.next() == "select 1;"
    assembler.consumed()
    assert not assembler.has_next()
    assert assembler.buffered_text.strip() == "select"


def test_discard_drops_partial_statement() -> None:
    assembler = StatementAssembler()
    assembler.append("select *\n")
    assembler.next()
    assembler.cont()

    assembler.discard()
    assert assembler.buffered_text == ""
    assert assembler.scan_state is ScanState.NEW_STATEMENT


def test_push_pop_restores_partial_statement() -> None:
    assembler = StatementAssembler()
    assembler.append("select *\n")
    assembler.next()
    assembler.cont()
    before = assembler.buffered_text

    assembler.push()
    assert assembler.depth == 1
    assert assembler.buffered_text == ""
    assembler.append("select 2;\n")
    assert _drain(assembler) == ["select 2;"]
    assembler.pop()

    assert assembler.depth == 0
    assert assembler.buffered_text == before
    assembler.append("from t;\n")
    assert assembler.next() == "select *\nfrom t;"


def test_pop_without_push_raises() -> None:
    with pytest.raises(RuntimeError):
        StatementAssembler().pop()


def test_comments_kept_by_default() -> None:
    assembler = StatementAssembler()
    assembler.append("select /* a; b */ 1;\n")

    assert _drain(assembler) == ["select /* a; b */ 1;"]


def test_line_comment_hides_semicolon() -> None:
    assembler = StatementAssembler()
    assembler.append("select 1 -- no; split\n")

    assert assembler.next() == "select 1 -- no; split\n"


def test_remove_comments() -> None:
    assembler = StatementAssembler(remove_comments=True)
    assembler.append("select /* a; b */ 1; -- trailing\n")

    assert _drain(assembler) == ["select   1;"]


def test_comment_only_line_is_dropped_when_removing_comments() -> None:
    assembler = StatementAssembler(remove_comments=True)
    assembler.append("-- just a remark\n")

    assert not assembler.has_next()


def test_comment_only_statement_is_dropped_when_keeping_comments() -> None:
    assembler = StatementAssembler()
    assembler.append("select 1; -- trailing note\n/* block */;\n")

    assert _drain(assembler) == ["select 1;"]
    assert assembler.buffered_text.strip() == ""


def test_waits_for_lookahead_on_possible_comment_start() -> None:
    assembler = StatementAssembler()
    assembler.append("select 1 -")
    assert not assembler.has_next()

    assembler.append("- c;\n")
    # the ';' is inside the line comment
    assert assembler.next() == "select 1 -- c;\n"
