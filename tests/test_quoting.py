from __future__ import annotations

import shlex

from panefan.quoting import quote, quote_one


def test_empty_input_yields_empty_string() -> None:
    assert quote([]) == ""


def test_values_are_single_quoted_and_space_joined() -> None:
    assert quote(["a", "b c"]) == "'a' 'b c'"


def test_embedded_single_quote_is_escaped() -> None:
    assert quote_one("it's") == "'it'\"'\"'s'"
    assert shlex.split(quote(["it's", "x"])) == ["it's", "x"]


def test_newlines_are_stripped() -> None:
    assert quote(["line1\nline2\r"]) == "'line1line2'"


def test_shell_metacharacters_stay_literal() -> None:
    values = ["$HOME", "`id`", "a;b", "*", ""]
    assert shlex.split(quote(values)) == values
