"""WHERE-condition evaluation against table rows.

A condition is either a single term ``attribute operator value`` or a set of
parenthesised terms. Grouped terms are combined uniformly: OR when the text
contains the word OR anywhere, AND otherwise. There is no nesting and no
per-pair precedence.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from tabdb.errors import DatabaseOperationError

_TERM_RE = re.compile(
    r"\s*([A-Za-z_][A-Za-z0-9_]*)\s*(==|!=|>=|<=|>|<|LIKE)\s*(.+?)\s*",
    re.IGNORECASE | re.DOTALL,
)
_GROUP_RE = re.compile(r"\(([^)]+)\)")

OPERATORS = ("==", "!=", ">", "<", ">=", "<=", "LIKE")


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == "'" and value[-1] == "'":
        return value[1:-1]
    return value


def _to_float(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None


def compare(cell: str, operator: str, value: str) -> bool:
    """Compare a cell against a condition value.

    Numeric when both sides parse as floats, string-based otherwise.
    """
    op = operator.upper()
    left = _to_float(cell)
    right = _to_float(value)
    if left is not None and right is not None:
        if op == "==":
            return left == right
        elif op == "!=":
            return left != right
        elif op == ">":
            return left > right
        elif op == "<":
            return left < right
        elif op == ">=":
            return left >= right
        elif op == "<=":
            return left <= right
        return False

    if op == "LIKE":
        return value in cell
    elif op == "==":
        return cell == value
    elif op == "!=":
        return cell != value
    elif op == ">":
        return cell > value
    elif op == "<":
        return cell < value
    elif op == ">=":
        return cell >= value
    elif op == "<=":
        return cell <= value
    return False


def is_grouped(condition: str) -> bool:
    return "(" in condition or ")" in condition


class ConditionEvaluator:
    """Evaluates condition text against rows of one header.

    Problems inside grouped conditions do not abort evaluation: the term is
    false and a message is appended to ``diagnostics``. An ungrouped
    condition with the same problem raises DatabaseOperationError.
    """

    def __init__(self) -> None:
        self.diagnostics: list[str] = []

    def validate(self, condition: str | None, header: Sequence[str]) -> None:
        """Raise if an ungrouped condition cannot apply to *header*."""
        if not condition or not condition.strip():
            return
        if is_grouped(condition) and _GROUP_RE.search(condition):
            return
        attribute, _, _ = self._split_term(condition, strict=True)
        if self._column_index(attribute, header) is None:
            raise DatabaseOperationError(f"Condition attribute not found: {attribute}")

    def evaluate(self, condition: str | None, header: Sequence[str], row: Sequence[str]) -> bool:
        """Return True when *row* satisfies *condition*."""
        if condition is None or not condition.strip():
            return True

        if not is_grouped(condition):
            return self._evaluate_term(condition, header, row, strict=True)

        terms = [group.strip() for group in _GROUP_RE.findall(condition)]
        if not terms:
            return self._evaluate_term(condition, header, row, strict=True)

        results = (self._evaluate_term(term, header, row, strict=False) for term in terms)
        if " OR " in condition.upper():
            return any(results)
        return all(results)

    def _evaluate_term(self, term: str, header: Sequence[str], row: Sequence[str], strict: bool) -> bool:
        parts = self._split_term(term, strict)
        if parts is None:
            return False
        attribute, operator, value = parts

        index = self._column_index(attribute, header)
        if index is None:
            message = f"Condition attribute not found: {attribute}"
            if strict:
                raise DatabaseOperationError(message)
            self._report(message)
            return False

        cell = row[index] if index < len(row) else ""
        return compare(cell, operator, value)

    def _split_term(self, term: str, strict: bool) -> tuple[str, str, str] | None:
        match = _TERM_RE.fullmatch(term)
        if match is None:
            message = f"Invalid condition format: {term.strip()}"
            if strict:
                raise DatabaseOperationError(message)
            self._report(message)
            return None
        attribute, operator, value = match.groups()
        return attribute, operator, _strip_quotes(value)

    @staticmethod
    def _column_index(attribute: str, header: Sequence[str]) -> int | None:
        lowered = attribute.lower()
        for i, name in enumerate(header):
            if name.lower() == lowered:
                return i
        return None

    def _report(self, message: str) -> None:
        if message not in self.diagnostics:
            self.diagnostics.append(message)


def evaluate_condition(condition: str | None, header: Sequence[str], row: Sequence[str]) -> bool:
    """Convenience function: evaluate one condition against one row."""
    return ConditionEvaluator().evaluate(condition, header, row)
