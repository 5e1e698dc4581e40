"""Tests for the criteria classifier and WHERE fragment builder"""

import pytest

from qbeview.core.condition_builder import (
    ImpliedEquals, RawOperator, build_condition, build_row_condition, classify_criteria
)

COL = "`users`.`age`"


@pytest.mark.parametrize("criteria, expected", [
    ("> 100", RawOperator("> 100")),
    ("<= 5", RawOperator("<= 5")),
    ("= 7", RawOperator("= 7")),
    ("<> 'x'", RawOperator("<> 'x'")),
    ("LIKE '%a%'", RawOperator("LIKE '%a%'")),
    ("like 'a%'", RawOperator("like 'a%'")),
    ("IS NULL", RawOperator("IS NULL")),
    ("is not null", RawOperator("is not null")),
    ("42", ImpliedEquals("42")),
    ("'alice'", ImpliedEquals("'alice'")),
    ("NOT NULL", ImpliedEquals("NOT NULL")),
])
def test_classify_criteria(criteria, expected):
    assert classify_criteria(criteria) == expected


def test_classify_trims_whitespace():
    assert classify_criteria("   > 3  ") == RawOperator("> 3")
    assert classify_criteria("  9 ") == ImpliedEquals("9")


def test_keyword_prefix_is_not_a_word_match():
    # Prefix sniffing only: anything starting with IS or LIKE passes through
    assert classify_criteria("island") == RawOperator("island")
    assert classify_criteria("ISBN") == RawOperator("ISBN")
    assert classify_criteria("likely") == RawOperator("likely")


def test_operator_is_preserved():
    assert build_condition(COL, "> 100") == "`users`.`age` > 100"


def test_implicit_equality():
    assert build_condition(COL, "42") == "`users`.`age` = 42"


def test_bare_text_is_not_quoted():
    assert build_condition("`users`.`name`", "alice") == "`users`.`name` = alice"


def test_malformed_criteria_passes_through():
    assert build_condition(COL, "> > ) (") == "`users`.`age` > > ) ("


def test_row_with_both_criteria_is_parenthesized():
    assert build_row_condition(COL, "1", "2") == "(`users`.`age` = 1 OR `users`.`age` = 2)"


def test_row_with_mixed_operators():
    assert build_row_condition(COL, "< 18", "> 65") == "(`users`.`age` < 18 OR `users`.`age` > 65)"


def test_row_with_only_criteria():
    assert build_row_condition(COL, "42", "") == "`users`.`age` = 42"


def test_row_with_only_or_criteria():
    assert build_row_condition(COL, "", "IS NULL") == "`users`.`age` IS NULL"


def test_row_with_no_criteria():
    assert build_row_condition(COL, "", "") is None
    assert build_row_condition(COL, "   ", " ") is None
