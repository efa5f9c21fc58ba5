"""Interactive REPL and script runner for tabdb statements."""

from __future__ import annotations

import argparse
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path

from tabdb.interpreter import Interpreter
from tabdb.parsing.script import split_statements, strip_comments

DEFAULT_ROOT = Path("databases")


def print_response(response: str) -> None:
    """Print a response, sending warning lines to stderr."""
    for line in response.splitlines():
        if line.startswith("[WARNING]"):
            print(line, file=sys.stderr)
        else:
            print(line)


def needs_continuation(line: str) -> bool:
    """Check if we need more input for this statement.

    A statement is complete when it ends with a semicolon outside a string.
    """
    stripped = line.strip()
    if not stripped:
        return False
    return not (stripped.endswith(";") and stripped.count("'") % 2 == 0)


def run_repl(root_dir: Path) -> int:
    """Run the interactive REPL."""
    print("tabdb REPL")
    print(f"Database root: {root_dir}")
    print("Type 'help' for commands, 'exit' to quit.\n")

    try:
        interpreter = Interpreter(root_dir)
    except OSError as e:
        print(f"Error opening database root: {e}", file=sys.stderr)
        return 1

    # Command history
    history_file = Path.home() / ".tabdb_history"
    try:
        readline.read_history_file(history_file)
    except OSError:
        pass

    try:
        while True:
            try:
                line = input("tabdb> ").strip()
            except EOFError:
                print()
                break

            if not line:
                continue

            # Handle special commands
            lower = line.lower().rstrip(";").strip()
            if lower == "exit" or lower == "quit":
                break
            elif lower == "help":
                print_help()
                continue
            elif lower == "databases":
                for name in interpreter.list_databases():
                    print(name)
                print()
                continue
            elif lower == "tables":
                if interpreter.session.database is None:
                    print("No database selected.")
                for name in interpreter.list_tables():
                    print(name)
                print()
                continue

            # Multi-line statements continue until a semicolon
            while needs_continuation(line):
                try:
                    continuation = input("...> ")
                except EOFError:
                    break
                stripped = continuation.strip()
                if not stripped:
                    # Empty line cancels continuation
                    break
                line += " " + stripped

            # A line may hold several statements
            run_statements(interpreter, [text for _, text in split_statements(line)])
            print()

    except KeyboardInterrupt:
        print()
    finally:
        # Save history
        try:
            readline.set_history_length(1000)
            readline.write_history_file(history_file)
        except OSError:
            pass

    return 0


def print_help() -> None:
    """Print help information."""
    print("""
tabdb statements (keywords are case-insensitive, end each with ';'):

DATABASES:
  CREATE DATABASE <db>;                      Create and select a database
  USE <db>;                                  Select a database
  DROP DATABASE <db>;                        Delete a database and its tables

TABLES:
  CREATE TABLE <t> [(<col>, ...)];           Create a table ('id' is added first)
  ALTER TABLE <t> ADD|DROP <col>;            Add or remove a column
  DROP TABLE <t>;                            Delete a table

ROWS:
  INSERT INTO <t> VALUES (<value>, ...);     Append a row (id is assigned)
  SELECT *|<col>, ... FROM <t> [WHERE <c>];  Query rows
  UPDATE <t> SET <col> = <value>, ... WHERE <c>;
  DELETE FROM <t> WHERE <c>;
  JOIN <t1> AND <t2> ON <col1> AND <col2>;   Equi-join two tables

CONDITIONS:
  <col> <op> <value>                         op is one of == != > < >= <= LIKE
  (<term>) AND (<term>) ...                  Grouped terms, all AND or all OR

VALUES:
  'text'  42  -1.5  TRUE  FALSE  NULL

OTHER:
  databases                Show all databases
  tables                   Show tables of the selected database
  help                     Show this help
  exit, quit               Exit the REPL

Statements can span multiple lines. End with a semicolon or press Enter on an empty line.
""")


def run_file(file_path: Path, root_dir: Path, verbose: bool = False) -> int:
    """Execute statements from a file.

    Lines starting with ``--`` are comments. Execution stops at the first
    statement that fails.

    Args:
        file_path: Path to the file containing statements
        root_dir: Database root directory
        verbose: If True, print each statement before executing

    Returns:
        0 on success, 1 on error
    """
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    statements = split_statements(strip_comments(content))
    if not statements:
        print("No statements found in file", file=sys.stderr)
        return 1

    try:
        interpreter = Interpreter(root_dir)
    except OSError as e:
        print(f"Error opening database root: {e}", file=sys.stderr)
        return 1

    return run_statements(interpreter, [text for _, text in statements], verbose)


def run_statements(interpreter: Interpreter, statements: list[str], verbose: bool = False) -> int:
    """Execute statements in order, stopping at the first error."""
    for text in statements:
        if verbose:
            for i, line in enumerate(text.split("\n")):
                prefix = ">>> " if i == 0 else "... "
                print(f"{prefix}{line}")

        response = interpreter.handle(text)
        print_response(response)
        if response.startswith("[ERROR]"):
            return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Interactive REPL for the tabdb query language"
    )
    arg_parser.add_argument(
        "root_dir",
        type=Path,
        nargs="?",
        default=DEFAULT_ROOT,
        help="Directory holding the databases (default: ./databases)",
    )
    arg_parser.add_argument(
        "-c", "--command",
        type=str,
        help="Execute the given statements and exit",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Execute statements from a file and exit",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print each statement before executing",
    )

    args = arg_parser.parse_args(argv)

    # Handle file execution
    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, args.root_dir, args.verbose)

    if args.command:
        # Several statements may be given, e.g. "USE shop; SELECT * FROM items;"
        try:
            interpreter = Interpreter(args.root_dir)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        statements = [text for _, text in split_statements(args.command)]
        return run_statements(interpreter, statements, args.verbose)

    return run_repl(args.root_dir)


if __name__ == "__main__":
    sys.exit(main())
