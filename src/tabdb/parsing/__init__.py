"""Parsing module for tabdb statements."""

from tabdb.parsing.cursor import Cursor
from tabdb.parsing.lexer import QueryLexer, Token, tokenize
from tabdb.parsing.parser import CommandParser, parse
from tabdb.parsing.script import split_statements, strip_comments

__all__ = [
    "CommandParser",
    "Cursor",
    "QueryLexer",
    "Token",
    "parse",
    "split_statements",
    "strip_comments",
    "tokenize",
]
