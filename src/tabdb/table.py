"""Table model: headers, rows and their tab-separated file form."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from tabdb.errors import DatabaseOperationError

ID_COLUMN = "id"


@dataclass(frozen=True)
class Header:
    """A column name. Equality is case-sensitive."""

    name: str


@dataclass(frozen=True)
class Row:
    """An immutable row snapshot: ordered (header, cell) pairs.

    Column and cell changes return a new Row, so a table swaps whole rows
    instead of editing them in place.
    """

    cells: tuple[tuple[Header, str], ...] = ()

    @classmethod
    def from_values(cls, headers: Sequence[Header], values: Sequence[str]) -> Row:
        if len(headers) != len(values):
            raise ValueError(f"Expected {len(headers)} values, got {len(values)}")
        return cls(tuple(zip(headers, values)))

    def headers(self) -> list[Header]:
        return [header for header, _ in self.cells]

    def values(self) -> list[str]:
        return [value for _, value in self.cells]

    def get(self, header: Header) -> str:
        for h, value in self.cells:
            if h == header:
                return value
        raise KeyError(header.name)

    def with_value(self, header: Header, value: str) -> Row:
        if header not in self.headers():
            raise KeyError(header.name)
        return Row(tuple((h, value if h == header else v) for h, v in self.cells))

    def with_column(self, header: Header, value: str = "") -> Row:
        return Row(self.cells + ((header, value),))

    def without_column(self, header: Header) -> Row:
        if header not in self.headers():
            raise KeyError(header.name)
        return Row(tuple((h, v) for h, v in self.cells if h != header))


class Table:
    """In-memory schema and data of one table.

    Every row always carries exactly the table's headers, in order.
    Column lookups by name are case-sensitive.
    """

    def __init__(self, name: str, headers: Iterable[str] = ()) -> None:
        self.name = name
        self.headers: list[Header] = [Header(h) for h in headers]
        self.rows: list[Row] = []

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        return f"Table({self.name!r}, headers={self.header_names()!r}, rows={len(self.rows)})"

    # --- Serialization ---

    @classmethod
    def read_from(cls, name: str, path: Path) -> Table:
        """Load a table from its tab-separated file."""
        if not path.exists():
            raise DatabaseOperationError(f"Table does not exist: {name}")
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise DatabaseOperationError(f"Error occurred while reading table {name}: {e}") from e

        if not lines:
            return cls(name, [ID_COLUMN])

        table = cls(name, lines[0].split("\t"))
        width = len(table.headers)
        for line_no, line in enumerate(lines[1:], start=2):
            values = line.split("\t")
            if len(values) < width:
                # A trailing empty cell is lost by editors that trim lines
                values.append("")
            if len(values) < width:
                raise DatabaseOperationError(
                    f"Malformed row on line {line_no} of table {name}: "
                    f"expected {width} fields, got {len(values) - 1}"
                )
            table.rows.append(Row.from_values(table.headers, values[:width]))
        return table

    def write_to(self, path: Path) -> None:
        """Rewrite the whole backing file."""
        try:
            path.write_text(self.to_text() + "\n", encoding="utf-8")
        except OSError as e:
            raise DatabaseOperationError(f"Error occurred while writing table {self.name}: {e}") from e

    def to_text(self) -> str:
        lines = ["\t".join(self.header_names())]
        lines.extend("\t".join(row.values()) for row in self.rows)
        return "\n".join(lines)

    # --- Columns ---

    def header_names(self) -> list[str]:
        return [header.name for header in self.headers]

    def lookup_column(self, name: str) -> Header | None:
        for header in self.headers:
            if header.name == name:
                return header
        return None

    def contains_column(self, name: str) -> bool:
        return self.lookup_column(name) is not None

    def add_column(self, name: str) -> None:
        if self.contains_column(name):
            raise DatabaseOperationError(f"Attribute already exists: {name}")
        header = Header(name)
        self.headers.append(header)
        self.rows = [row.with_column(header) for row in self.rows]

    def delete_column(self, name: str) -> None:
        header = self.lookup_column(name)
        if header is None:
            raise DatabaseOperationError(f"Attribute not found: {name}")
        self.headers.remove(header)
        self.rows = [row.without_column(header) for row in self.rows]

    def project(self, names: Sequence[str]) -> Table:
        """Return a copy keeping only *names*, in table column order."""
        for name in names:
            if not self.contains_column(name):
                raise DatabaseOperationError(f"Attribute not found: {name}")
        kept = [h for h in self.headers if h.name in names]
        result = Table(self.name)
        result.headers = kept
        result.rows = [Row.from_values(kept, [row.get(h) for h in kept]) for row in self.rows]
        return result

    # --- Rows ---

    def add_row(self, values: Sequence[str]) -> Row:
        """Append a row whose values line up with every header."""
        row = Row.from_values(self.headers, list(values))
        self.rows.append(row)
        return row

    def delete_row_at(self, index: int) -> None:
        del self.rows[index]

    def update_cell(self, index: int, column: str, value: str) -> None:
        header = self.lookup_column(column)
        if header is None:
            raise DatabaseOperationError(f"Attribute not found: {column}")
        self.rows[index] = self.rows[index].with_value(header, value)
