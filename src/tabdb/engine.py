"""Operation engine: applies parsed commands to the stored tables."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from tabdb.condition import ConditionEvaluator
from tabdb.errors import DatabaseOperationError
from tabdb.parsing.commands import (
    AlterTableCommand,
    Command,
    CreateDatabaseCommand,
    CreateTableCommand,
    DeleteCommand,
    DropDatabaseCommand,
    DropTableCommand,
    InsertCommand,
    JoinCommand,
    SelectCommand,
    UpdateCommand,
    UseCommand,
)
from tabdb.storage import StorageManager
from tabdb.table import ID_COLUMN, Table


@dataclass
class QueryResult:
    """Result of executing one command.

    ``columns`` is empty for commands that produce no table output.
    """

    columns: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class Session:
    """The currently selected database."""

    database: str | None = None
    path: Path | None = None

    @property
    def active(self) -> bool:
        return self.database is not None

    def select(self, database: str, path: Path) -> None:
        self.database = database
        self.path = path

    def clear(self) -> None:
        self.database = None
        self.path = None


class DatabaseEngine:
    """Executes commands against the databases of one storage root.

    Every table operation reads the table file, changes it in memory and
    rewrites it before returning. Nothing is written when an operation fails.
    """

    def __init__(self, storage: StorageManager, session: Session | None = None) -> None:
        self.storage = storage
        self.session = session if session is not None else Session()

    def execute(self, command: Command) -> QueryResult:
        """Execute a command and return its result."""
        if isinstance(command, UseCommand):
            return self.use_database(command.database)
        elif isinstance(command, CreateDatabaseCommand):
            return self.create_database(command.database)
        elif isinstance(command, CreateTableCommand):
            return self.create_table(command.table, command.columns)
        elif isinstance(command, DropDatabaseCommand):
            return self.drop_database(command.database)
        elif isinstance(command, DropTableCommand):
            return self.drop_table(command.table)
        elif isinstance(command, AlterTableCommand):
            return self.alter_table(command.table, command.alteration, command.column)
        elif isinstance(command, InsertCommand):
            return self.insert_into_table(command.table, command.values)
        elif isinstance(command, SelectCommand):
            return self.select_from_table(command.table, command.columns, command.condition)
        elif isinstance(command, UpdateCommand):
            return self.update_table(command.table, command.assignments, command.condition)
        elif isinstance(command, DeleteCommand):
            return self.delete_from_table(command.table, command.condition)
        elif isinstance(command, JoinCommand):
            return self.join_tables(
                command.left_table,
                command.right_table,
                command.left_attribute,
                command.right_attribute,
            )
        else:
            raise ValueError(f"Unknown command type: {type(command)}")

    # --- Helpers ---

    def _require_session(self) -> Path:
        if not self.session.active or self.session.path is None:
            raise DatabaseOperationError("No database selected")
        return self.session.path

    def _table_path(self, name: str) -> Path:
        return self.storage.table_path(self._require_session(), name)

    def _load(self, name: str) -> tuple[Table, Path]:
        path = self._table_path(name)
        if not path.is_file():
            raise DatabaseOperationError(f"Table does not exist: {name}")
        return Table.read_from(name, path), path

    # --- Databases ---

    def use_database(self, name: str) -> QueryResult:
        if not self.storage.database_exists(name):
            raise DatabaseOperationError(f"Database doesn't exist: {name}")
        self.session.select(name, self.storage.database_path(name))
        return QueryResult()

    def create_database(self, name: str) -> QueryResult:
        if self.storage.database_path(name).exists():
            raise DatabaseOperationError(f"Database already exists: {name}")
        path = self.storage.create_database(name)
        self.session.select(name, path)
        return QueryResult()

    def drop_database(self, name: str) -> QueryResult:
        if not self.storage.database_exists(name):
            raise DatabaseOperationError(f"Database doesn't exist: {name}")
        self.storage.drop_database(name)
        if self.session.database == name:
            self.session.clear()
        return QueryResult()

    # --- Tables ---

    def create_table(self, name: str, columns: Sequence[str] = ()) -> QueryResult:
        path = self._table_path(name)
        if path.exists():
            raise DatabaseOperationError(f"Table already exists: {name}")

        # id is always the first column, whether declared or not
        attributes = [c for c in columns if c != ID_COLUMN]
        seen: set[str] = set()
        for attribute in attributes:
            if attribute in seen:
                raise DatabaseOperationError(f"Duplicate attribute name: {attribute}")
            seen.add(attribute)

        Table(name, [ID_COLUMN, *attributes]).write_to(path)
        return QueryResult()

    def drop_table(self, name: str) -> QueryResult:
        path = self._table_path(name)
        if not path.is_file():
            raise DatabaseOperationError(f"Table does not exist: {name}")
        path.unlink()
        return QueryResult()

    def alter_table(self, name: str, alteration: str, column: str) -> QueryResult:
        table, path = self._load(name)
        kind = alteration.upper()
        if kind == "ADD":
            table.add_column(column)
        elif kind == "DROP":
            if column == ID_COLUMN:
                raise DatabaseOperationError("Cannot drop the id attribute")
            table.delete_column(column)
        else:
            raise DatabaseOperationError(f"Unknown alteration type: {alteration}")
        table.write_to(path)
        return QueryResult()

    # --- Rows ---

    def insert_into_table(self, name: str, values: Sequence[str]) -> QueryResult:
        table, path = self._load(name)
        expected = len(table.headers) - 1
        if len(values) != expected:
            raise DatabaseOperationError(
                f"Table {name} expects {expected} values, got {len(values)}"
            )
        # Not renumbered on delete, so ids can repeat after a delete
        next_id = len(table) + 1
        table.add_row([str(next_id), *values])
        table.write_to(path)
        return QueryResult()

    def select_from_table(
        self, name: str, columns: Sequence[str], condition: str | None = None
    ) -> QueryResult:
        table, _ = self._load(name)
        header = table.header_names()
        evaluator = ConditionEvaluator()
        evaluator.validate(condition, header)

        projected = table if list(columns) == ["*"] else table.project(columns)
        rows = [
            projected.rows[i].values()
            for i, row in enumerate(table.rows)
            if evaluator.evaluate(condition, header, row.values())
        ]
        return QueryResult(
            columns=projected.header_names(),
            rows=rows,
            warnings=evaluator.diagnostics,
        )

    def update_table(
        self, name: str, assignments: Sequence[tuple[str, str]], condition: str
    ) -> QueryResult:
        table, path = self._load(name)
        for column, _ in assignments:
            if column == ID_COLUMN:
                raise DatabaseOperationError("Cannot update the id attribute")
            if not table.contains_column(column):
                raise DatabaseOperationError(f"Update failed, attribute not found: {column}")

        header = table.header_names()
        evaluator = ConditionEvaluator()
        evaluator.validate(condition, header)

        for i, row in enumerate(list(table.rows)):
            if evaluator.evaluate(condition, header, row.values()):
                for column, value in assignments:
                    table.update_cell(i, column, value)

        table.write_to(path)
        return QueryResult(warnings=evaluator.diagnostics)

    def delete_from_table(self, name: str, condition: str) -> QueryResult:
        table, path = self._load(name)
        header = table.header_names()
        evaluator = ConditionEvaluator()
        evaluator.validate(condition, header)

        doomed = [
            i for i, row in enumerate(table.rows)
            if evaluator.evaluate(condition, header, row.values())
        ]
        for i in reversed(doomed):
            table.delete_row_at(i)

        table.write_to(path)
        return QueryResult(warnings=evaluator.diagnostics)

    def join_tables(
        self, left_name: str, right_name: str, left_attribute: str, right_attribute: str
    ) -> QueryResult:
        left, _ = self._load(left_name)
        right, _ = self._load(right_name)

        left_key = left.lookup_column(left_attribute)
        if left_key is None:
            raise DatabaseOperationError(f"Attribute not found: {left_attribute} in {left_name}")
        right_key = right.lookup_column(right_attribute)
        if right_key is None:
            raise DatabaseOperationError(f"Attribute not found: {right_attribute} in {right_name}")

        # The join attribute and each side's own id are not projected
        left_columns = [h for h in left.headers if h.name not in (ID_COLUMN, left_attribute)]
        right_columns = [h for h in right.headers if h.name not in (ID_COLUMN, right_attribute)]

        columns = [ID_COLUMN]
        columns += [f"{left_name}.{h.name}" for h in left_columns]
        columns += [f"{right_name}.{h.name}" for h in right_columns]

        rows: list[list[str]] = []
        for left_row in left.rows:
            key = left_row.get(left_key)
            for right_row in right.rows:
                if right_row.get(right_key) != key:
                    continue
                rows.append(
                    [str(len(rows) + 1)]
                    + [left_row.get(h) for h in left_columns]
                    + [right_row.get(h) for h in right_columns]
                )
        return QueryResult(columns=columns, rows=rows)
