"""Splitting of multi-statement text into single statements."""

from __future__ import annotations


def split_statements(content: str) -> list[tuple[int, str]]:
    """Split content into statements on semicolons outside string literals.

    Each statement keeps its terminating ';'. Returns ``(offset, text)``
    pairs where *offset* is the position of the statement's first
    non-blank character in *content*. Trailing text without a ';' is
    returned as a final statement so callers can report it.
    """
    statements: list[tuple[int, str]] = []
    start = 0
    in_string = False

    for i, ch in enumerate(content):
        if ch == "'":
            in_string = not in_string
        elif ch == ";" and not in_string:
            _append(statements, content, start, i + 1)
            start = i + 1

    _append(statements, content, start, len(content))
    return statements


def _append(statements: list[tuple[int, str]], content: str, start: int, end: int) -> None:
    chunk = content[start:end]
    stripped = chunk.lstrip()
    if not stripped.strip():
        return
    offset = start + len(chunk) - len(stripped)
    statements.append((offset, stripped.rstrip()))


def strip_comments(content: str) -> str:
    """Blank out lines starting with '--', keeping offsets intact."""
    lines = []
    for line in content.split("\n"):
        if line.strip().startswith("--"):
            lines.append(" " * len(line))
        else:
            lines.append(line)
    return "\n".join(lines)
