"""tabdb - A miniature file-based relational query engine."""

from tabdb.engine import DatabaseEngine, QueryResult, Session
from tabdb.errors import (
    DatabaseOperationError,
    InvalidCommandError,
    LexicalError,
    QuerySyntaxError,
    TabDBError,
)
from tabdb.interpreter import Interpreter, format_result
from tabdb.parsing import CommandParser
from tabdb.storage import StorageManager
from tabdb.table import Header, Row, Table

__version__ = "0.1.0"

__all__ = [
    # Main API
    "Interpreter",
    "format_result",
    "CommandParser",
    "DatabaseEngine",
    "QueryResult",
    "Session",
    # Storage
    "StorageManager",
    "Table",
    "Header",
    "Row",
    # Errors
    "TabDBError",
    "LexicalError",
    "QuerySyntaxError",
    "InvalidCommandError",
    "DatabaseOperationError",
]
