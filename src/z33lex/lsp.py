"""LSP server for Z33 assembly: diagnostics, semantic tokens, completion."""

from __future__ import annotations

import logging

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokensParams,
    SemanticTokenTypes,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import PositionCodec

from z33lex import __version__
from z33lex.buffer import TokenizedBuffer
from z33lex.errors import LexDiagnostic, Severity
from z33lex.theme import completions
from z33lex.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

# Kinds without an entry here are left to the client's default coloring
_SEMANTIC_TYPES: dict[TokenKind, SemanticTokenTypes] = {
    TokenKind.COMMAND: SemanticTokenTypes.Keyword,
    TokenKind.REGISTER: SemanticTokenTypes.Variable,
    TokenKind.LABEL: SemanticTokenTypes.Function,
    TokenKind.MACRO: SemanticTokenTypes.Macro,
    TokenKind.NUMBER: SemanticTokenTypes.Number,
    TokenKind.COMMENT: SemanticTokenTypes.Comment,
    TokenKind.OPERATOR: SemanticTokenTypes.Operator,
}

_LEGEND_TYPES = list(dict.fromkeys(_SEMANTIC_TYPES.values()))
_TYPE_INDEX = {kind: _LEGEND_TYPES.index(t) for kind, t in _SEMANTIC_TYPES.items()}

LEGEND = SemanticTokensLegend(token_types=[t.value for t in _LEGEND_TYPES], token_modifiers=[])

server = LanguageServer("z33lex-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)

# One buffer per open document, keyed by URI
_buffers: dict[str, TokenizedBuffer] = {}


def _buffer_for(ls: LanguageServer, uri: str) -> TokenizedBuffer:
    """Return the buffer for ``uri``, brought up to date with the workspace."""
    source = ls.workspace.get_text_document(uri).source
    buffer = _buffers.get(uri)
    if buffer is None:
        buffer = _buffers[uri] = TokenizedBuffer(source)
    else:
        buffer.update_text(source)
    return buffer


def _to_lsp_diagnostic(diag: LexDiagnostic, codec: PositionCodec | None = None) -> Diagnostic:
    codec = codec or PositionCodec()
    line = diag.line - 1
    start = codec.client_num_units(diag.source_line[: diag.token.start])
    end = start + codec.client_num_units(diag.token.text)
    severity = (
        DiagnosticSeverity.Warning if diag.severity is Severity.WARNING else DiagnosticSeverity.Error
    )
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=start),
            end=Position(line=line, character=end),
        ),
        message=diag.message,
        severity=severity,
        source="z33lex",
    )


def encode_semantic_tokens(
    lines: list[list[Token]], codec: PositionCodec | None = None
) -> list[int]:
    """Encode highlighted tokens as LSP relative (line, start, length, type, mods) tuples.

    Columns and lengths are counted in the client's position encoding
    (UTF-16 unless another one was negotiated).
    """
    codec = codec or PositionCodec()
    data: list[int] = []
    prev_line = 0
    prev_start = 0
    for line_no, line_tokens in enumerate(lines):
        # Tokens cover the line in order, so the client column is a running sum
        column = 0
        for tok in line_tokens:
            start = column
            length = codec.client_num_units(tok.text)
            column += length
            type_index = _TYPE_INDEX.get(tok.kind)
            if type_index is None or length == 0:
                continue
            delta_line = line_no - prev_line
            delta_start = start - prev_start if delta_line == 0 else start
            data.extend([delta_line, delta_start, length, type_index, 0])
            prev_line = line_no
            prev_start = start
    return data


def _validate(ls: LanguageServer, uri: str) -> None:
    """Re-tokenize the document and publish its diagnostics."""
    buffer = _buffer_for(ls, uri)
    codec = ls.workspace.position_codec
    diagnostics = [_to_lsp_diagnostic(d, codec) for d in buffer.diagnostics()]
    logger.debug("%s: %d diagnostic(s)", uri, len(diagnostics))
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageServer, params: DidCloseTextDocumentParams) -> None:
    _buffers.pop(params.text_document.uri, None)
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=params.text_document.uri, diagnostics=[])
    )


@server.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND)
def semantic_tokens_full(ls: LanguageServer, params: SemanticTokensParams) -> SemanticTokens:
    buffer = _buffer_for(ls, params.text_document.uri)
    return SemanticTokens(data=encode_semantic_tokens(buffer.tokens, ls.workspace.position_codec))


@server.feature(TEXT_DOCUMENT_COMPLETION)
def completion(ls: LanguageServer, params: CompletionParams) -> CompletionList:
    items = [
        CompletionItem(
            label=item.label,
            kind=CompletionItemKind.Text,
            detail=item.detail,
            insert_text=item.label,
        )
        for item in completions()
    ]
    return CompletionList(is_incomplete=False, items=items)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    server.start_io()
