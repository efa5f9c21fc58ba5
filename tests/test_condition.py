"""Tests for WHERE-condition evaluation."""

import pytest

from tabdb.condition import ConditionEvaluator, compare, evaluate_condition
from tabdb.errors import DatabaseOperationError

HEADER = ["id", "name", "mark"]
SIMON = ["1", "Simon", "65"]
SION = ["2", "Sion", "55"]


class TestCompare:
    """Tests for comparing a cell against a value."""

    def test_numeric_comparison(self):
        """Test that numeric cells compare as numbers."""
        assert compare("55", "<", "60")
        assert not compare("65", "<", "60")
        assert compare("10", ">", "9")
        assert compare("60", "==", "60.0")
        assert compare("60", ">=", "60")
        assert compare("59.5", "<=", "60")

    def test_string_comparison(self):
        """Test that non-numeric cells compare as case-sensitive strings."""
        assert compare("Simon", "==", "Simon")
        assert not compare("simon", "==", "Simon")
        assert compare("Simon", "!=", "Sion")
        assert compare("b", ">", "a")
        # Lexicographic when either side is not numeric
        assert compare("10", "<", "9a")

    def test_like_is_substring_match(self):
        """Test that LIKE is a case-sensitive substring match."""
        assert compare("Simon", "LIKE", "imo")
        assert compare("Simon", "like", "Si")
        assert not compare("Simon", "LIKE", "si")

    def test_like_on_numbers_is_false(self):
        """Test that LIKE never matches numeric cells."""
        assert not compare("123", "LIKE", "2")


class TestSingleTerm:
    """Tests for ungrouped conditions."""

    def test_empty_condition_matches(self):
        """Test that a missing or blank condition matches every row."""
        assert evaluate_condition(None, HEADER, SIMON)
        assert evaluate_condition("  ", HEADER, SIMON)

    def test_numeric_term(self):
        """Test a single numeric comparison term."""
        assert evaluate_condition("mark < 60", HEADER, SION)
        assert not evaluate_condition("mark < 60", HEADER, SIMON)

    def test_attribute_is_case_insensitive(self):
        """Test attribute is case insensitive."""
        assert evaluate_condition("MARK < 60", HEADER, SION)

    def test_quoted_value(self):
        """Test that quotes are stripped from the comparison value."""
        assert evaluate_condition("name == 'Simon'", HEADER, SIMON)
        assert not evaluate_condition("name == 'Simon'", HEADER, SION)

    def test_boolean_values_compare_as_text(self):
        """Test boolean values compare as text."""
        header = ["id", "name", "pass"]
        assert not evaluate_condition("pass != TRUE", header, ["1", "Steve", "TRUE"])
        assert evaluate_condition("pass != TRUE", header, ["2", "Rob", "FALSE"])

    def test_unknown_attribute_raises(self):
        """Test that an unknown attribute in a single term raises."""
        with pytest.raises(DatabaseOperationError, match="Condition attribute not found: age"):
            evaluate_condition("age > 3", HEADER, SIMON)

    def test_malformed_term_raises(self):
        """Test that a term without a valid operator raises."""
        with pytest.raises(DatabaseOperationError, match="Invalid condition format: mark = 60"):
            evaluate_condition("mark = 60", HEADER, SIMON)


class TestGroupedConditions:
    """Tests for parenthesised terms combined by AND or OR."""

    def test_and(self):
        """Test combining two groups with AND."""
        condition = "( mark > 50 ) AND ( name LIKE 'Si' )"
        assert evaluate_condition(condition, HEADER, SIMON)
        assert evaluate_condition(condition, HEADER, SION)
        assert not evaluate_condition("(mark > 60) AND (name LIKE 'Si')", HEADER, SION)

    def test_or(self):
        """Test combining two groups with OR."""
        condition = "(mark > 60) OR (name == 'Sion')"
        assert evaluate_condition(condition, HEADER, SIMON)
        assert evaluate_condition(condition, HEADER, SION)
        assert not evaluate_condition(condition, HEADER, ["3", "Chris", "40"])

    def test_or_anywhere_governs_all_groups(self):
        """Test that a single OR turns every combination into OR."""
        condition = "(mark > 60) AND (name == 'Chris') OR (id == 9)"
        assert evaluate_condition(condition, HEADER, SIMON)

    def test_lowercase_or(self):
        """Test that a lowercase or combines groups."""
        assert evaluate_condition("(mark > 60) or (id == 2)", HEADER, SION)

    def test_unknown_attribute_is_false_with_diagnostic(self):
        """Test that an unknown attribute in a group is false and recorded."""
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate("(age > 1) OR (mark > 50)", HEADER, SIMON)
        assert not evaluator.evaluate("(age > 1) AND (mark > 50)", HEADER, SIMON)
        assert evaluator.diagnostics == ["Condition attribute not found: age"]

    def test_malformed_group_is_false_with_diagnostic(self):
        """Test that a malformed group is false and recorded."""
        evaluator = ConditionEvaluator()
        assert not evaluator.evaluate("(mark 60) AND (id == 1)", HEADER, SIMON)
        assert evaluator.diagnostics == ["Invalid condition format: mark 60"]


class TestValidate:
    """Tests for up-front validation of a condition against a header."""

    def test_ungrouped_unknown_attribute(self):
        """Test validating an ungrouped term with an unknown attribute."""
        with pytest.raises(DatabaseOperationError, match="Condition attribute not found"):
            ConditionEvaluator().validate("age > 3", HEADER)

    def test_ungrouped_malformed(self):
        """Test validating a malformed ungrouped term."""
        with pytest.raises(DatabaseOperationError, match="Invalid condition format"):
            ConditionEvaluator().validate("mark", HEADER)

    def test_grouped_is_not_validated(self):
        """Test that grouped conditions are not validated up front."""
        ConditionEvaluator().validate("(age > 3) AND (foo)", HEADER)

    def test_missing_condition(self):
        """Test that validating no condition succeeds."""
        ConditionEvaluator().validate(None, HEADER)
