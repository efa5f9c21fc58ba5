"""tabdb language server built on pygls."""

from __future__ import annotations

import re

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from tabdb.errors import TabDBError
from tabdb.parsing.parser import CommandParser
from tabdb.parsing.script import split_statements, strip_comments

# ---------------------------------------------------------------------------
# Static data
# ---------------------------------------------------------------------------

KEYWORDS: dict[str, str] = {
    "use": "Select a database for the following statements",
    "create": "Create a database or a table",
    "database": "Used with 'create', 'drop' and 'use'",
    "table": "Used with 'create table', 'alter table' and 'drop table'",
    "drop": "Delete a database or a table",
    "alter": "Add or remove a table column",
    "add": "Used with 'alter table … add'",
    "insert": "Append a row to a table",
    "into": "Used with 'insert into'",
    "values": "Row values of an insert",
    "select": "Query rows, optionally projecting columns",
    "from": "Source table of a select or delete",
    "where": "Filter clause — restricts rows by a condition",
    "update": "Modify columns on rows matching a condition",
    "set": "Used with 'update … set'",
    "delete": "Remove rows matching a condition",
    "join": "Equi-join two tables on one attribute each",
    "on": "Join attributes of a join",
    "and": "Logical AND of grouped conditions, or join separator",
    "or": "Logical OR of grouped conditions",
    "like": "Substring match operator",
    "null": "Absence-of-value literal",
    "true": "Boolean literal",
    "false": "Boolean literal",
}

# Regex to find table names declared in source
_TABLE_NAME_RE = re.compile(r"\b(?:table|into|from|update)\s+([A-Za-z]\w*)", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Helpers (module-level so they are easy to unit-test)
# ---------------------------------------------------------------------------


def lexpos_to_position(source: str, lexpos: int) -> types.Position:
    """Convert a character offset into an LSP ``Position(line, character)``."""
    line = source.count("\n", 0, lexpos)
    last_nl = source.rfind("\n", 0, lexpos)
    character = lexpos if last_nl == -1 else lexpos - last_nl - 1
    return types.Position(line=line, character=character)


def _find_table_names(source: str) -> list[str]:
    """Return table names referenced in *source*, first occurrence first."""
    names: list[str] = []
    for m in _TABLE_NAME_RE.finditer(source):
        name = m.group(1)
        if name.lower() not in KEYWORDS and name not in names:
            names.append(name)
    return names


def _word_at_position(line_text: str, character: int) -> str:
    """Return the contiguous identifier-like word surrounding *character*."""
    if character < 0 or character >= len(line_text):
        return ""
    ch = line_text[character]
    if not (ch.isalnum() or ch == "_"):
        return ""
    # Scan left
    left = character
    while left > 0 and (line_text[left - 1].isalnum() or line_text[left - 1] == "_"):
        left -= 1
    # Scan right
    right = character
    while right < len(line_text) and (line_text[right].isalnum() or line_text[right] == "_"):
        right += 1
    return line_text[left:right]


def collect_diagnostics(source: str, parser: CommandParser | None = None) -> list[types.Diagnostic]:
    """Parse every statement of *source* and report those that fail."""
    parser = parser or CommandParser()
    diagnostics: list[types.Diagnostic] = []
    for offset, text in split_statements(strip_comments(source)):
        try:
            parser.parse(text)
        except TabDBError as exc:
            pos = offset + (exc.position if exc.position is not None else 0)
            start = lexpos_to_position(source, min(pos, len(source)))
            end = types.Position(line=start.line, character=start.character + 1)
            diagnostics.append(
                types.Diagnostic(
                    range=types.Range(start=start, end=end),
                    severity=types.DiagnosticSeverity.Error,
                    source="tabdb",
                    message=str(exc),
                )
            )
    return diagnostics


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------

server = LanguageServer("tabdb-language-server", "0.1.0")
_parser = CommandParser()


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: types.DidOpenTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: types.DidChangeTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


def _validate_document(uri: str) -> None:
    doc = server.workspace.get_text_document(uri)
    server.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=collect_diagnostics(doc.source, _parser))
    )


@server.feature(
    types.TEXT_DOCUMENT_COMPLETION,
    types.CompletionOptions(trigger_characters=[" "]),
)
def completions(params: types.CompletionParams) -> types.CompletionList:
    doc = server.workspace.get_text_document(params.text_document.uri)

    items: list[types.CompletionItem] = []
    for name, desc in KEYWORDS.items():
        items.append(
            types.CompletionItem(
                label=name.upper(),
                kind=types.CompletionItemKind.Keyword,
                detail=desc,
            )
        )
    for name in _find_table_names(doc.source):
        items.append(
            types.CompletionItem(
                label=name,
                kind=types.CompletionItemKind.Class,
                detail="Table",
            )
        )

    return types.CompletionList(is_incomplete=False, items=items)


def hover_text(word: str) -> str | None:
    """Markdown hover text for a keyword, or None."""
    lower = word.lower()
    if lower not in KEYWORDS:
        return None
    return f"**{lower.upper()}** — {KEYWORDS[lower]}"


@server.feature(types.TEXT_DOCUMENT_HOVER)
def hover(params: types.HoverParams) -> types.Hover | None:
    doc = server.workspace.get_text_document(params.text_document.uri)
    if params.position.line >= len(doc.lines):
        return None
    line_text = doc.lines[params.position.line]
    word = _word_at_position(line_text, params.position.character)
    if not word:
        return None

    content = hover_text(word)
    if content is None:
        return None
    return types.Hover(
        contents=types.MarkupContent(
            kind=types.MarkupKind.Markdown,
            value=content,
        )
    )


def main() -> None:
    server.start_io()


if __name__ == "__main__":
    main()
