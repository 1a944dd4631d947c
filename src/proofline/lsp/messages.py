# src/proofline/lsp/messages.py

"""Inbound editor protocol messages.

Only the fields the server reads are modelled. Unknown fields are ignored.
"""

from typing import Any

from pydantic import BaseModel, Field

JSONRPC_VERSION = "2.0"

# Text document sync kinds
SYNC_FULL = 1

# JSON-RPC error codes
INVALID_PARAMS = -32602
METHOD_NOT_FOUND = -32601


class _Model(BaseModel):
    class Config:
        populate_by_name = True


class IncomingMessage(_Model):
    jsonrpc: str = JSONRPC_VERSION
    id: int | str | None = None
    method: str = ""
    params: Any = None


class ClientInfo(_Model):
    name: str
    version: str | None = None


class InitializeParams(_Model):
    process_id: int | None = Field(default=None, alias="processId")
    client_info: ClientInfo | None = Field(default=None, alias="clientInfo")
    root_uri: str | None = Field(default=None, alias="rootUri")


class TextDocumentIdentifier(_Model):
    uri: str


class VersionedTextDocumentIdentifier(TextDocumentIdentifier):
    version: int | None = None


class TextDocumentItem(_Model):
    uri: str
    language_id: str = Field(default="", alias="languageId")
    version: int = 0
    text: str


class TextDocumentContentChangeEvent(_Model):
    text: str


class DidOpenTextDocumentParams(_Model):
    text_document: TextDocumentItem = Field(alias="textDocument")


class DidChangeTextDocumentParams(_Model):
    text_document: VersionedTextDocumentIdentifier = Field(alias="textDocument")
    content_changes: list[TextDocumentContentChangeEvent] = Field(
        alias="contentChanges"
    )


class DidSaveTextDocumentParams(_Model):
    text_document: TextDocumentIdentifier = Field(alias="textDocument")
    text: str | None = None


class DidCloseTextDocumentParams(_Model):
    text_document: TextDocumentIdentifier = Field(alias="textDocument")


def response(request_id: int | str, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: int | str | None, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def notification(method: str, params: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "method": method, "params": params}
