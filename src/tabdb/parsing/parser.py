"""Recursive-descent parser for tabdb statements.

Grammar (one statement per call, terminated by ';'):
  use_stmt     = USE IDENT
  create_stmt  = CREATE DATABASE IDENT
               | CREATE TABLE IDENT [ "(" ident_list ")" ]
  drop_stmt    = DROP DATABASE IDENT | DROP TABLE IDENT
  alter_stmt   = ALTER TABLE IDENT (ADD | DROP) IDENT
  insert_stmt  = INSERT INTO IDENT VALUES "(" value ("," value)* ")"
  select_stmt  = SELECT ("*" | ident_list) FROM IDENT [WHERE condition]
  update_stmt  = UPDATE IDENT SET IDENT "=" value ("," IDENT "=" value)*
                 WHERE condition
  delete_stmt  = DELETE FROM IDENT WHERE condition
  join_stmt    = JOIN IDENT AND IDENT ON IDENT AND IDENT

  ident_list   = IDENT ("," IDENT)*
  value        = STRING | INTEGER | FLOAT | BOOLEAN | NULL
  condition    = every token up to ';', evaluated by tabdb.condition
"""

from __future__ import annotations

from tabdb.errors import InvalidCommandError, QuerySyntaxError
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
from tabdb.parsing.cursor import Cursor
from tabdb.parsing.lexer import LITERAL_KINDS, QueryLexer


class CommandParser:
    """Parser turning one statement into a command value."""

    def __init__(self) -> None:
        self.lexer = QueryLexer()
        self.lexer.build()
        self._cursor: Cursor = None  # type: ignore

    def parse(self, text: str) -> Command:
        """Tokenize and parse a single statement."""
        self._cursor = Cursor(self.lexer.tokenize(text))
        keyword = self._cursor.current().text.upper()

        if keyword == "USE":
            return self._parse_use()
        elif keyword == "CREATE":
            return self._parse_create()
        elif keyword == "DROP":
            return self._parse_drop()
        elif keyword == "ALTER":
            return self._parse_alter()
        elif keyword == "INSERT":
            return self._parse_insert()
        elif keyword == "SELECT":
            return self._parse_select()
        elif keyword == "UPDATE":
            return self._parse_update()
        elif keyword == "DELETE":
            return self._parse_delete()
        elif keyword == "JOIN":
            return self._parse_join()
        first = self._cursor.current()
        raise InvalidCommandError(f"Invalid command type: {first.text}", first.pos)

    # --- Statement parsers ---

    def _parse_use(self) -> UseCommand:
        self._cursor.advance()  # USE
        name = self._identifier("Expected database name after USE")
        return self._finish(UseCommand(database=name))

    def _parse_create(self) -> CreateDatabaseCommand | CreateTableCommand:
        cursor = self._cursor
        cursor.advance()  # CREATE
        if cursor.at("DATABASE"):
            cursor.advance()
            name = self._identifier("Expected database name after CREATE DATABASE")
            return self._finish(CreateDatabaseCommand(database=name))
        if not cursor.at("TABLE"):
            raise QuerySyntaxError("Expected DATABASE or TABLE after CREATE", cursor.current().pos)

        cursor.advance()
        name = self._identifier("Expected table name after CREATE TABLE")
        columns: tuple[str, ...] = ()
        if cursor.at("LPAREN"):
            cursor.advance()
            columns = self._identifier_list("Expected attribute name in CREATE TABLE")
            cursor.expect("RPAREN", "Missing closing parenthesis in CREATE TABLE")
            cursor.advance()
        return self._finish(CreateTableCommand(table=name, columns=columns))

    def _parse_drop(self) -> DropDatabaseCommand | DropTableCommand:
        cursor = self._cursor
        cursor.advance()  # DROP
        if cursor.at("DATABASE"):
            cursor.advance()
            name = self._identifier("Expected database name after DROP DATABASE")
            return self._finish(DropDatabaseCommand(database=name))
        if cursor.at("TABLE"):
            cursor.advance()
            name = self._identifier("Expected table name after DROP TABLE")
            return self._finish(DropTableCommand(table=name))
        raise QuerySyntaxError("Expected DATABASE or TABLE after DROP", cursor.current().pos)

    def _parse_alter(self) -> AlterTableCommand:
        cursor = self._cursor
        cursor.advance()  # ALTER
        cursor.expect("TABLE", "Expected TABLE after ALTER")
        cursor.advance()
        table = self._identifier("Expected table name after ALTER TABLE")
        if not (cursor.at("ADD") or cursor.at("DROP")):
            raise QuerySyntaxError("Missing alteration type, expected ADD or DROP", cursor.current().pos)
        alteration = cursor.current().kind
        cursor.advance()
        column = self._identifier("Missing attribute name in ALTER TABLE")
        return self._finish(AlterTableCommand(table=table, alteration=alteration, column=column))

    def _parse_insert(self) -> InsertCommand:
        cursor = self._cursor
        cursor.advance()  # INSERT
        cursor.expect("INTO", "Expected INTO after INSERT")
        cursor.advance()
        table = self._identifier("Expected table name after INSERT INTO")
        cursor.expect("VALUES", "Expected VALUES after table name")
        cursor.advance()
        cursor.expect("LPAREN", "Expected '(' after VALUES")
        cursor.advance()
        values = [self._value()]
        while cursor.at("COMMA"):
            cursor.advance()
            values.append(self._value())
        cursor.expect("RPAREN", "Missing closing parenthesis in INSERT")
        cursor.advance()
        return self._finish(InsertCommand(table=table, values=tuple(values)))

    def _parse_select(self) -> SelectCommand:
        cursor = self._cursor
        cursor.advance()  # SELECT
        if cursor.at("STAR"):
            cursor.advance()
            columns: tuple[str, ...] = ("*",)
        else:
            columns = self._identifier_list("Expected '*' or attribute name after SELECT")
        cursor.expect("FROM", "Expected FROM after attribute list")
        cursor.advance()
        table = self._identifier("Expected table name after FROM")
        condition = None
        if cursor.at("WHERE"):
            cursor.advance()
            condition = self._condition()
        return self._finish(SelectCommand(table=table, columns=columns, condition=condition))

    def _parse_update(self) -> UpdateCommand:
        cursor = self._cursor
        cursor.advance()  # UPDATE
        table = self._identifier("Expected table name after UPDATE")
        cursor.expect("SET", "Expected SET after table name")
        cursor.advance()
        assignments = [self._assignment()]
        while cursor.at("COMMA"):
            cursor.advance()
            assignments.append(self._assignment())
        cursor.expect("WHERE", "Expected WHERE after assignments")
        cursor.advance()
        condition = self._condition()
        return self._finish(
            UpdateCommand(table=table, assignments=tuple(assignments), condition=condition)
        )

    def _parse_delete(self) -> DeleteCommand:
        cursor = self._cursor
        cursor.advance()  # DELETE
        cursor.expect("FROM", "Expected FROM after DELETE")
        cursor.advance()
        table = self._identifier("Expected table name after DELETE FROM")
        cursor.expect("WHERE", "Expected WHERE after table name")
        cursor.advance()
        condition = self._condition()
        return self._finish(DeleteCommand(table=table, condition=condition))

    def _parse_join(self) -> JoinCommand:
        cursor = self._cursor
        cursor.advance()  # JOIN
        left_table = self._identifier("Missing table name after JOIN")
        cursor.expect("AND", "Expected AND between table names")
        cursor.advance()
        right_table = self._identifier("Missing second table name")
        cursor.expect("ON", "Expected ON after table names")
        cursor.advance()
        left_attribute = self._identifier("Missing attribute name after ON")
        cursor.expect("AND", "Expected AND between attribute names")
        cursor.advance()
        right_attribute = self._identifier("Missing second attribute name")
        return self._finish(
            JoinCommand(
                left_table=left_table,
                right_table=right_table,
                left_attribute=left_attribute,
                right_attribute=right_attribute,
            )
        )

    # --- Sub-parsers ---

    def _identifier(self, message: str) -> str:
        name = self._cursor.expect("IDENTIFIER", message).text
        self._cursor.advance()
        return name

    def _identifier_list(self, message: str) -> tuple[str, ...]:
        names = [self._identifier(message)]
        while self._cursor.at("COMMA"):
            self._cursor.advance()
            names.append(self._identifier(message))
        return tuple(names)

    def _value(self) -> str:
        tok = self._cursor.current()
        if tok.kind not in LITERAL_KINDS:
            found = tok.text if tok.kind != "EOF" else "end of input"
            raise QuerySyntaxError(f"Expected a literal value, got '{found}'", tok.pos)
        self._cursor.advance()
        return tok.text

    def _assignment(self) -> tuple[str, str]:
        column = self._identifier("Expected attribute name in SET clause")
        self._cursor.expect("EQ", f"Expected '=' after {column}")
        self._cursor.advance()
        return column, self._value()

    def _condition(self) -> str:
        """Collect the remaining tokens as condition text."""
        parts: list[str] = []
        cursor = self._cursor
        while not (cursor.at("END") or cursor.at("EOF")):
            tok = cursor.current()
            parts.append(f"'{tok.text}'" if tok.kind == "STRING" else tok.text)
            cursor.advance()
        if not parts:
            raise QuerySyntaxError("Missing condition after WHERE", cursor.current().pos)
        return " ".join(parts)

    def _finish(self, command: Command) -> Command:
        self._cursor.expect("END", "Expected ';' at end of statement")
        return command


_parser: CommandParser | None = None


def parse(text: str) -> Command:
    """Convenience function: parse a statement with a shared parser."""
    global _parser
    if _parser is None:
        _parser = CommandParser()
    return _parser.parse(text)
