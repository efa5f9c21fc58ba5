"""Lexer for tabdb statements."""

from __future__ import annotations

from dataclasses import dataclass

import ply.lex as lex

from tabdb.errors import LexicalError


@dataclass(frozen=True)
class Token:
    """A single lexeme of a statement."""

    kind: str  # ply token type: "SELECT", "IDENTIFIER", "END", ...
    text: str  # keyword text upper-cased, string literals without quotes
    pos: int = 0  # character offset in the statement


# Token kinds that carry a literal value
LITERAL_KINDS = frozenset({"STRING", "INTEGER", "FLOAT", "BOOLEAN", "NULL"})


class QueryLexer:
    """Lexer for tokenizing tabdb statements."""

    # Reserved keywords (case-insensitive)
    reserved = {
        "use": "USE",
        "create": "CREATE",
        "database": "DATABASE",
        "table": "TABLE",
        "drop": "DROP",
        "alter": "ALTER",
        "insert": "INSERT",
        "into": "INTO",
        "values": "VALUES",
        "select": "SELECT",
        "from": "FROM",
        "where": "WHERE",
        "update": "UPDATE",
        "set": "SET",
        "delete": "DELETE",
        "join": "JOIN",
        "and": "AND",
        "or": "OR",
        "on": "ON",
        "add": "ADD",
        "like": "LIKE",
        # Lexically keywords, emitted as literals
        "null": "NULL",
        "true": "BOOLEAN",
        "false": "BOOLEAN",
    }

    tokens = [
        "IDENTIFIER",
        "FLOAT",
        "INTEGER",
        "STRING",
        "END",
        "LPAREN",
        "RPAREN",
        "COMMA",
        "EQ",
        "EQEQ",
        "NEQ",
        "LT",
        "LTE",
        "GT",
        "GTE",
        "STAR",
    ] + sorted(set(reserved.values()))

    # Simple tokens - PLY sorts string-defined tokens longest-first
    t_END = r";"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_COMMA = r","
    t_EQEQ = r"=="
    t_EQ = r"="
    t_NEQ = r"!="
    t_LTE = r"<="
    t_LT = r"<"
    t_GTE = r">="
    t_GT = r">"
    t_STAR = r"\*"

    t_ignore = " \t\r"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[A-Za-z][A-Za-z0-9_]*"
        # Whole-word match, so SELECTOR stays an identifier
        kind = self.reserved.get(t.value.lower())
        if kind is not None:
            t.type = kind
            t.value = t.value.upper()
        return t

    # Must come before INTEGER so that 1.5 is not split
    def t_FLOAT(self, t: lex.LexToken) -> lex.LexToken:
        r"[+-]?\d+\.\d+"
        return t

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"[+-]?\d+"
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"'[^']*'"
        t.value = t.value[1:-1]
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise LexicalError(f"Unrecognized character '{t.value[0]}' at position {t.lexpos}", t.lexpos)

    # --- Lexer methods ---

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        kwargs.setdefault("errorlog", lex.NullLogger())
        self.lexer = lex.lex(module=self, **kwargs)

    def tokenize(self, data: str) -> list[Token]:
        """Tokenize one statement.

        The result holds every token including the single END (';') token,
        followed by an EOF sentinel.
        """
        if self.lexer is None:
            self.build()
        self.lexer.input(data)
        tokens: list[Token] = []
        while True:
            tok = self.lexer.token()
            if tok is None:
                break
            tokens.append(Token(tok.type, tok.value, tok.lexpos))

        ends = [tok for tok in tokens if tok.kind == "END"]
        if not ends:
            raise LexicalError("Invalid syntax: ';' is expected", len(data))
        if len(ends) > 1:
            raise LexicalError("Invalid syntax: more than one ';' found", ends[1].pos)

        tokens.append(Token("EOF", "", len(data)))
        return tokens


# Module-level set of reserved words (lowercase) for use by other modules
RESERVED_KEYWORDS: frozenset[str] = frozenset(QueryLexer.reserved.keys())

_lexer: QueryLexer | None = None


def tokenize(data: str) -> list[Token]:
    """Convenience function: tokenize a statement with a shared lexer."""
    global _lexer
    if _lexer is None:
        _lexer = QueryLexer()
        _lexer.build()
    return _lexer.tokenize(data)
