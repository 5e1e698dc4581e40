"""Condition Builder - Turns raw grid criteria text into WHERE fragments

Criteria text is sniffed, not parsed. A leading comparison symbol or the
keywords LIKE / IS mean the user typed their own operator; anything else is
compared for equality. The right-hand side is never quoted or validated.
"""

from dataclasses import dataclass
from typing import Optional, Union

from qbeview.utils.constants import CriteriaPrefix


@dataclass(frozen=True)
class RawOperator:
    """Criteria that carries its own operator, e.g. '> 100' or "LIKE 'a%'" """
    text: str

    def render(self, column_ref: str) -> str:
        return f"{column_ref} {self.text}"


@dataclass(frozen=True)
class ImpliedEquals:
    """Criteria that is a bare value, compared with '='"""
    text: str

    def render(self, column_ref: str) -> str:
        return f"{column_ref} = {self.text}"


Criterion = Union[RawOperator, ImpliedEquals]


def classify_criteria(criteria: str) -> Criterion:
    """
    Classify one criteria string

    Args:
        criteria: Raw text typed into a Criteria or Or cell

    Returns:
        RawOperator when the trimmed text starts with >, <, = or
        (case-insensitively) LIKE or IS, otherwise ImpliedEquals
    """
    trimmed = criteria.strip()
    if trimmed.startswith(CriteriaPrefix.SYMBOLS):
        return RawOperator(trimmed)
    if trimmed.upper().startswith(CriteriaPrefix.KEYWORDS):
        return RawOperator(trimmed)
    return ImpliedEquals(trimmed)


def build_condition(column_ref: str, criteria: str) -> str:
    """Render a single criteria string against a quoted column reference"""
    return classify_criteria(criteria).render(column_ref)


def build_row_condition(column_ref: str, criteria: str, or_criteria: str = "") -> Optional[str]:
    """
    Build the WHERE contribution of one grid row

    Args:
        column_ref: Quoted, qualified column reference
        criteria: Primary criteria text
        or_criteria: Secondary criteria text, OR-combined with the primary

    Returns:
        The fragment, or None when both criteria are empty
    """
    has_criteria = bool(criteria and criteria.strip())
    has_or = bool(or_criteria and or_criteria.strip())

    if has_criteria and has_or:
        return f"({build_condition(column_ref, criteria)} OR {build_condition(column_ref, or_criteria)})"
    if has_criteria:
        return build_condition(column_ref, criteria)
    if has_or:
        return build_condition(column_ref, or_criteria)
    return None
