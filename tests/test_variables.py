from __future__ import annotations

from henshell.interface.variables import substitute


def test_plain_and_braced_names() -> None:
    variables = {"TABLE": "users", "N": "10"}

    assert substitute("select * from $TABLE limit ${N};", variables) == \
        "select * from users limit 10;"
    assert substitute("${TABLE}_archive", variables) == "users_archive"


def test_double_dollar_is_literal() -> None:
    assert substitute("echo $$TABLE costs $$5", {"TABLE": "users"}) == "echo $TABLE costs $5"


def test_unknown_variable_left_untouched(caplog) -> None:
    assert substitute("echo $MISSING ${ALSO}", {"X": "1"}) == "echo $MISSING ${ALSO}"
    assert "MISSING" in caplog.text


def test_missing_closing_brace_keeps_rest() -> None:
    assert substitute("echo ${X and more", {"X": "1"}) == "echo ${X and more"


def test_without_variables_text_is_unchanged() -> None:
    assert substitute("price: $5 $$", {}) == "price: $5 $$"
    assert substitute("a $ b", {"A": "x"}) == "a $ b"
