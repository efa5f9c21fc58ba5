"""Exception hierarchy for tabdb statements."""

from __future__ import annotations


class TabDBError(Exception):
    """Base class for every error a single statement can raise.

    ``position`` is the character offset in the statement the error points
    at, when one is known.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class LexicalError(TabDBError):
    """Unrecognized character, or a statement without exactly one ';'."""


class QuerySyntaxError(TabDBError):
    """Token sequence does not match the grammar of the dispatched command."""


class InvalidCommandError(TabDBError):
    """Leading keyword is not one of the supported commands."""


class DatabaseOperationError(TabDBError):
    """A well-formed command could not be applied to the stored data."""
