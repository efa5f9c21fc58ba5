"""Command values produced by the statement parser."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UseCommand:
    """USE <database>."""

    database: str


@dataclass(frozen=True)
class CreateDatabaseCommand:
    """CREATE DATABASE <database>."""

    database: str


@dataclass(frozen=True)
class CreateTableCommand:
    """CREATE TABLE <table> [(<column>, ...)]."""

    table: str
    columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class DropDatabaseCommand:
    """DROP DATABASE <database>."""

    database: str


@dataclass(frozen=True)
class DropTableCommand:
    """DROP TABLE <table>."""

    table: str


@dataclass(frozen=True)
class AlterTableCommand:
    """ALTER TABLE <table> ADD|DROP <column>."""

    table: str
    alteration: str  # "ADD" or "DROP"
    column: str


@dataclass(frozen=True)
class InsertCommand:
    """INSERT INTO <table> VALUES (<value>, ...)."""

    table: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class SelectCommand:
    """SELECT * | <column>, ... FROM <table> [WHERE <condition>]."""

    table: str
    columns: tuple[str, ...]  # ("*",) selects every column
    condition: str | None = None


@dataclass(frozen=True)
class UpdateCommand:
    """UPDATE <table> SET <column> = <value>, ... WHERE <condition>."""

    table: str
    assignments: tuple[tuple[str, str], ...]
    condition: str


@dataclass(frozen=True)
class DeleteCommand:
    """DELETE FROM <table> WHERE <condition>."""

    table: str
    condition: str


@dataclass(frozen=True)
class JoinCommand:
    """JOIN <table> AND <table> ON <attribute> AND <attribute>."""

    left_table: str
    right_table: str
    left_attribute: str
    right_attribute: str


Command = (
    UseCommand
    | CreateDatabaseCommand
    | CreateTableCommand
    | DropDatabaseCommand
    | DropTableCommand
    | AlterTableCommand
    | InsertCommand
    | SelectCommand
    | UpdateCommand
    | DeleteCommand
    | JoinCommand
)
