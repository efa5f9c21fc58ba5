"""Statement interpreter: parse, execute and format one statement at a time."""

from __future__ import annotations

from pathlib import Path

from tabdb.engine import DatabaseEngine, QueryResult, Session
from tabdb.errors import TabDBError
from tabdb.parsing.parser import CommandParser
from tabdb.storage import StorageManager


def format_result(result: QueryResult) -> str:
    """Render a successful result as response text.

    ``[OK]`` first, then the tab-separated header and data lines when the
    command produced a table, then one ``[WARNING]`` line per diagnostic.
    Every line ends with a newline.
    """
    lines = ["[OK]"]
    if result.columns:
        lines.append("\t".join(result.columns))
        lines.extend("\t".join(row) for row in result.rows)
    lines.extend(f"[WARNING] {warning}" for warning in result.warnings)
    return "".join(f"{line}\n" for line in lines)


class Interpreter:
    """Holds the session for a sequence of statements against one root."""

    def __init__(self, root_dir: Path = Path("databases")) -> None:
        self.storage = StorageManager(root_dir)
        self.session = Session()
        self.parser = CommandParser()
        self.engine = DatabaseEngine(self.storage, self.session)

    @property
    def root_dir(self) -> Path:
        return self.storage.root_dir

    def execute(self, text: str) -> QueryResult:
        """Parse and execute one statement; errors propagate."""
        command = self.parser.parse(text)
        return self.engine.execute(command)

    def handle(self, text: str) -> str:
        """Execute one statement and return its response text.

        Never raises for statement errors: they become ``[ERROR] <message>``.
        """
        try:
            result = self.execute(text)
        except TabDBError as e:
            return f"[ERROR] {e}\n"
        except OSError as e:
            return f"[ERROR] {e.strerror or e}\n"
        return format_result(result)

    def list_databases(self) -> list[str]:
        return self.storage.list_databases()

    def list_tables(self) -> list[str]:
        """Tables of the selected database, or an empty list without one."""
        if self.session.path is None:
            return []
        return self.storage.list_tables(self.session.path)
