"""
Lox Language Server entry point.

This server provides basic language features for Lox source files using
`pygls`. It reuses the Lox lexer, parser and resolver to report compile-time
errors as diagnostics and to build a simple symbol index supporting
definition lookup, hover information, and document symbols.


File: server.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from pygls.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_CHANGE,
    DefinitionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidOpenTextDocumentParams,
    DidChangeTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    Location,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SymbolKind,
)

from loxlang import nodes
from loxlang.errors import ErrorReporter
from loxlang.lexer import tokenize
from loxlang.parser import Parser
from loxlang.resolver import Resolver


@dataclass
class LoxSymbol:
    """Represents a top-level symbol in a Lox file."""

    name: str
    kind: SymbolKind
    uri: str
    line: int
    detail: str
    children: List[LoxSymbol] = field(default_factory=list)

    @property
    def range(self) -> Range:
        return Range(Position(self.line, 0), Position(self.line, len(self.name)))


def _parse(text: str, reporter: ErrorReporter) -> list[nodes.Stmt]:
    tokens = tokenize(text, reporter)
    return Parser(tokens, reporter).parse()


def collect_diagnostics(text: str) -> List[Diagnostic]:
    """
    Run the front end over ``text`` and convert every reported error into an
    LSP diagnostic.

    The resolver only runs when the source parsed cleanly, matching what the
    interpreter would report before refusing to execute.
    """
    reporter = ErrorReporter(echo=False)
    statements = _parse(text, reporter)
    if not reporter.had_error:
        Resolver(reporter).resolve(statements)

    lines = text.splitlines()
    diagnostics: List[Diagnostic] = []
    for report in reporter.diagnostics:
        line = max(report.line - 1, 0)
        end = len(lines[line]) if line < len(lines) else 0
        diagnostics.append(
            Diagnostic(
                range=Range(Position(line, 0), Position(line, end)),
                message=f"Error{report.where}: {report.message}",
                severity=DiagnosticSeverity.Error,
                source="lox",
            )
        )
    return diagnostics


def collect_symbols(uri: str, text: str) -> List[LoxSymbol]:
    """Parse ``text`` and extract its top-level symbols."""
    statements = _parse(text, ErrorReporter(echo=False))
    symbols: List[LoxSymbol] = []
    for stmt in statements:
        match stmt:
            case nodes.Class(name=name, superclass=superclass, methods=methods):
                detail = f"class {name.lexeme}"
                if superclass is not None:
                    detail += f" < {superclass.name.lexeme}"
                symbol = LoxSymbol(name.lexeme, SymbolKind.Class, uri, name.line - 1, detail)
                for method in methods:
                    symbol.children.append(
                        LoxSymbol(
                            method.name.lexeme,
                            SymbolKind.Method,
                            uri,
                            method.name.line - 1,
                            _signature(method, prefix=f"{name.lexeme}."),
                        )
                    )
                symbols.append(symbol)
            case nodes.Function(name=name):
                symbols.append(
                    LoxSymbol(name.lexeme, SymbolKind.Function, uri, name.line - 1, _signature(stmt, prefix="fun "))
                )
            case nodes.Var(name=name):
                symbols.append(
                    LoxSymbol(name.lexeme, SymbolKind.Variable, uri, name.line - 1, f"var {name.lexeme}")
                )
    return symbols


def _signature(function: nodes.Function, prefix: str) -> str:
    params = ", ".join(param.lexeme for param in function.params)
    return f"{prefix}{function.name.lexeme}({params})"


class LoxLanguageServer(LanguageServer):
    """Language server for Lox source files."""

    def __init__(self) -> None:
        super().__init__("lox-ls", "v0.1")
        self.symbols_by_uri: Dict[str, List[LoxSymbol]] = {}
        self.global_symbols: Dict[str, List[LoxSymbol]] = {}
        self.indexed_workspace = False

    def _index_workspace(self) -> None:
        """Parse all `.lox` files under the current workspace."""
        root = self.workspace.root_path
        if not root:
            self.indexed_workspace = True
            return
        for path in Path(root).rglob("*.lox"):
            uri = path.as_uri()
            if uri in self.symbols_by_uri:
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                self.show_message_log(f"Failed to index {path}: {e}")
                continue
            self.update_index(uri, text)
        self.indexed_workspace = True

    def update_index(self, uri: str, text: str) -> None:
        """Parse ``text`` and update symbol index for ``uri``."""
        self.symbols_by_uri[uri] = collect_symbols(uri, text)
        self._rebuild_global_index()

    def _rebuild_global_index(self) -> None:
        self.global_symbols.clear()
        for syms in self.symbols_by_uri.values():
            for sym in syms:
                self.global_symbols.setdefault(sym.name, []).append(sym)
                for child in sym.children:
                    self.global_symbols.setdefault(child.name, []).append(child)

    def lookup(self, word: str) -> Optional[LoxSymbol]:
        """Return the first indexed symbol called ``word``."""
        if not self.indexed_workspace:
            self._index_workspace()
        matches = self.global_symbols.get(word)
        if not matches:
            return None
        return matches[0]

    def refresh(self, uri: str, text: str) -> None:
        """Re-index ``uri`` and publish its diagnostics."""
        self.update_index(uri, text)
        self.publish_diagnostics(uri, collect_diagnostics(text))


lang_server = LoxLanguageServer()


@lang_server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LoxLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """Index and check a document when it is opened."""
    ls.refresh(params.text_document.uri, params.text_document.text)


@lang_server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LoxLanguageServer, params: DidChangeTextDocumentParams) -> None:
    """Re-index and re-check a document when it changes."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    ls.refresh(doc.uri, doc.source)


@lang_server.feature(TEXT_DOCUMENT_DEFINITION)
def definition(ls: LoxLanguageServer, params: DefinitionParams):
    """Return the definition location for the symbol under the cursor."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    word = doc.word_at_position(params.position)
    if not word:
        return None
    sym = ls.lookup(word)
    if sym is None:
        return None
    return Location(uri=sym.uri, range=sym.range)


@lang_server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: LoxLanguageServer, params: HoverParams) -> Optional[Hover]:
    """Return hover information for the symbol under the cursor."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    word = doc.word_at_position(params.position)
    if not word:
        return None
    sym = ls.lookup(word)
    if sym is None:
        return None
    contents = MarkupContent(kind=MarkupKind.PlainText, value=sym.detail)
    return Hover(contents=contents)


def _document_symbol(sym: LoxSymbol) -> DocumentSymbol:
    return DocumentSymbol(
        name=sym.name,
        kind=sym.kind,
        range=sym.range,
        selection_range=sym.range,
        detail=sym.detail,
        children=[_document_symbol(child) for child in sym.children] or None,
    )


@lang_server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbols(ls: LoxLanguageServer, params: DocumentSymbolParams):
    """Return top-level symbols for the given document."""
    symbols = ls.symbols_by_uri.get(params.text_document.uri, [])
    return [_document_symbol(sym) for sym in symbols]


def main() -> None:
    """Start the language server."""
    lang_server.start_io()


if __name__ == "__main__":
    main()
