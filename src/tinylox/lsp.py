"""Minimal LSP server for tinylox — diagnostics only."""

from __future__ import annotations

import io

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from tinylox import __version__
from tinylox.errors import Diagnostics, EvalError, ParseError
from tinylox.eval import evaluate
from tinylox.parser import Parser
from tinylox.scanner import scan

server = LanguageServer(
    "tinylox-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _line_range(line: int) -> Range:
    """Whole-line range for a 1-based line number."""
    start = max(line - 1, 0)
    return Range(
        start=Position(line=start, character=0),
        end=Position(line=start + 1, character=0),
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the tinylox pipeline and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    # Published, not printed
    sink = Diagnostics(stream=io.StringIO())
    diagnostics: list[Diagnostic] = []

    tokens = scan(doc.source, sink)
    try:
        expr = Parser(tokens, sink).parse()
    except ParseError:
        expr = None

    for reported in sink.reported:
        diagnostics.append(
            Diagnostic(
                range=_line_range(reported.line),
                message=reported.message,
                severity=DiagnosticSeverity.Error,
                source="tinylox",
            )
        )

    if expr is not None:
        try:
            evaluate(expr)
        except EvalError as exc:
            diagnostics.append(
                Diagnostic(
                    range=_line_range(1),
                    message=exc.message,
                    severity=DiagnosticSeverity.Warning,
                    source="tinylox",
                )
            )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
