"""Tests for numeric normalization of table cells."""

import math

import pytest

from deck_planner.numeric import is_number, normalize_number


# ============================================================
# PARSING
# ============================================================

@pytest.mark.parametrize("raw, expected", [
    ("500", 500.0),
    ("$500", 500.0),
    ("1,234.50", 1234.5),
    ("  42.5  ", 42.5),
    ("$ 1 200", 1200.0),
    ("-75", -75.0),
    (".5", 0.5),
    ("12abc", 12.0),
])
def test_normalize_plain_values(raw, expected):
    assert normalize_number(raw) == expected


def test_accounting_negative():
    assert normalize_number("(1,234.50)") == -1234.50
    assert normalize_number("($500)") == -500.0


def test_parentheses_override_explicit_sign():
    assert normalize_number("(-500)") == -500.0
    assert normalize_number("(+500)") == -500.0


def test_partial_parentheses_are_not_negative():
    # Only a fully wrapped value is an accounting negative
    assert normalize_number("(500") == 500.0


def test_numbers_pass_through():
    assert normalize_number(7) == 7.0
    assert normalize_number(2.25) == 2.25


# ============================================================
# NOT-A-NUMBER
# ============================================================

@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "$", "()", "N/A", True, False])
def test_unparseable_values_are_nan(raw):
    assert math.isnan(normalize_number(raw))


def test_is_number():
    assert is_number("$1,200")
    assert is_number("0")
    assert not is_number("")
    assert not is_number(None)
