"""Tests for the statement lexer."""

import pytest

from tabdb.errors import LexicalError
from tabdb.parsing.lexer import RESERVED_KEYWORDS, QueryLexer, Token, tokenize


def kinds(text: str) -> list[str]:
    return [tok.kind for tok in tokenize(text)]


class TestTokenKinds:
    """Tests for the token kinds produced by the lexer."""

    def test_simple_select(self):
        """Test a minimal SELECT statement."""
        assert kinds("SELECT * FROM t;") == ["SELECT", "STAR", "FROM", "IDENTIFIER", "END", "EOF"]

    def test_keywords_are_case_insensitive(self):
        """Test that keywords match in any case and are upper-cased."""
        tokens = tokenize("select * From t;")
        assert tokens[0] == Token("SELECT", "SELECT", 0)
        assert tokens[2].kind == "FROM"
        assert tokens[2].text == "FROM"

    def test_keyword_prefix_is_identifier(self):
        """Test that a word merely starting with a keyword stays an identifier."""
        tokens = tokenize("selector;")
        assert tokens[0].kind == "IDENTIFIER"
        assert tokens[0].text == "selector"

    def test_identifier_keeps_case(self):
        """Test that identifiers keep their case."""
        tokens = tokenize("USE MySchool;")
        assert tokens[1] == Token("IDENTIFIER", "MySchool", 4)

    def test_string_literal_strips_quotes(self):
        """Test that string literals lose their quotes."""
        tokens = tokenize("'Hello World';")
        assert tokens[0].kind == "STRING"
        assert tokens[0].text == "Hello World"

    def test_numbers(self):
        """Test integer and float literals, including signs."""
        tokens = tokenize("1.5 -3 +7 42;")
        assert [(t.kind, t.text) for t in tokens[:4]] == [
            ("FLOAT", "1.5"),
            ("INTEGER", "-3"),
            ("INTEGER", "+7"),
            ("INTEGER", "42"),
        ]

    def test_boolean_and_null_literals(self):
        """Test boolean and null literals."""
        tokens = tokenize("true FALSE null;")
        assert [(t.kind, t.text) for t in tokens[:3]] == [
            ("BOOLEAN", "TRUE"),
            ("BOOLEAN", "FALSE"),
            ("NULL", "NULL"),
        ]

    def test_comparison_operators(self):
        """Test that two-character operators are not split."""
        assert kinds("a == 1 != 2 >= 3 <= 4 > 5 < 6 = 7;")[:-2] == [
            "IDENTIFIER",
            "EQEQ", "INTEGER",
            "NEQ", "INTEGER",
            "GTE", "INTEGER",
            "LTE", "INTEGER",
            "GT", "INTEGER",
            "LT", "INTEGER",
            "EQ", "INTEGER",
        ]

    def test_operator_without_spaces(self):
        """Test an operator with no surrounding spaces."""
        assert kinds("mark<60;")[:3] == ["IDENTIFIER", "LT", "INTEGER"]

    def test_punctuation(self):
        """Test punctuation tokens."""
        assert kinds("(a, b);") == ["LPAREN", "IDENTIFIER", "COMMA", "IDENTIFIER", "RPAREN", "END", "EOF"]

    def test_positions(self):
        """Test that token positions are character offsets."""
        tokens = tokenize("USE d;")
        assert [t.pos for t in tokens] == [0, 4, 5, 6]

    def test_newlines_are_skipped(self):
        """Test that newlines are skipped."""
        assert kinds("SELECT *\nFROM t;") == ["SELECT", "STAR", "FROM", "IDENTIFIER", "END", "EOF"]

    def test_reserved_keywords_set(self):
        """Test the set of reserved keywords."""
        assert "select" in RESERVED_KEYWORDS
        assert "like" in RESERVED_KEYWORDS


class TestLexerErrors:
    """Tests for lexical errors."""

    def test_missing_semicolon(self):
        """Test that a statement must end with a semicolon."""
        with pytest.raises(LexicalError, match="';' is expected") as exc:
            tokenize("SELECT * FROM t")
        assert exc.value.position == len("SELECT * FROM t")

    def test_more_than_one_semicolon(self):
        """Test that a statement may hold only one semicolon."""
        with pytest.raises(LexicalError, match="more than one ';'") as exc:
            tokenize("USE a; USE b;")
        assert exc.value.position == 12

    def test_unrecognized_character(self):
        """Test that an unrecognized character raises."""
        with pytest.raises(LexicalError, match="Unrecognized character '#'") as exc:
            tokenize("SELECT # FROM t;")
        assert exc.value.position == 7

    def test_semicolon_inside_string_is_not_end(self):
        """Test that a semicolon inside a string does not end the statement."""
        tokens = tokenize("'a;b';")
        assert tokens[0].text == "a;b"
        assert [t.kind for t in tokens].count("END") == 1

    def test_lexer_instance_reusable_after_error(self):
        """Test that one lexer can tokenize again after raising."""
        lexer = QueryLexer()
        lexer.build()
        with pytest.raises(LexicalError):
            lexer.tokenize("USE a")
        assert [t.kind for t in lexer.tokenize("USE a;")] == ["USE", "IDENTIFIER", "END", "EOF"]

    def test_unterminated_string(self):
        """Test that an unterminated string raises."""
        with pytest.raises(LexicalError, match="Unrecognized character '''"):
            tokenize("INSERT INTO t VALUES ('abc);")
