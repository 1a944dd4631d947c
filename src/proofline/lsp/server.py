# src/proofline/lsp/server.py

"""Language server session: message dispatch and the analysis worker.

Messages are handled one at a time in arrival order. Document updates only
record text and queue the URI; a single worker task analyzes queued URIs one
after another and publishes a diagnostics batch per pass. A URI queued twice
before the worker reaches it is analyzed once, against its latest text.
"""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any, BinaryIO

from pydantic import ValidationError

from proofline._version import __version__
from proofline.pipeline import AnalysisReport, DiagnosticPipeline
from proofline.rpc import ProtocolError, decode_message, encode_message, read_message

from .documents import DocumentStore
from .messages import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    SYNC_FULL,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    IncomingMessage,
    InitializeParams,
    error_response,
    notification,
    response,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "proofline"
PUBLISH_DIAGNOSTICS = "textDocument/publishDiagnostics"


class LanguageServer:
    def __init__(
        self,
        pipeline: DiagnosticPipeline,
        output: BinaryIO,
        documents: DocumentStore | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.documents = documents if documents is not None else DocumentStore()
        self._output = output
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._queued: set[str] = set()
        self._worker: asyncio.Task[None] | None = None
        self.shutdown_requested = False
        self.exited = False

        self._requests: dict[str, Callable[[Any], Awaitable[Any]]] = {
            "initialize": self._on_initialize,
            "shutdown": self._on_shutdown,
        }
        self._notifications: dict[str, Callable[[Any], Awaitable[None]]] = {
            "initialized": self._on_initialized,
            "exit": self._on_exit,
            "textDocument/didOpen": self._on_did_open,
            "textDocument/didChange": self._on_did_change,
            "textDocument/didSave": self._on_did_save,
            "textDocument/didClose": self._on_did_close,
        }

    # -- transport ----------------------------------------------------------

    def send(self, message: dict[str, Any]) -> None:
        self._output.write(encode_message(message))
        self._output.flush()

    async def serve(self, reader: asyncio.StreamReader) -> None:
        """Read and dispatch frames until ``exit`` or end of stream."""
        self.start()
        try:
            while not self.exited:
                try:
                    frame = await read_message(reader)
                except ProtocolError as exc:
                    logger.warning("Dropping malformed frame: %s", exc)
                    continue
                if frame is None:
                    logger.info("Input closed")
                    break

                try:
                    method, content = decode_message(frame)
                except ProtocolError as exc:
                    logger.warning("Dropping malformed message: %s", exc)
                    continue

                await self.handle(method, content)
        finally:
            await self.stop()

    def start(self) -> None:
        if self._worker is None:
            self._worker = asyncio.create_task(self._run_worker())

    async def stop(self) -> None:
        """Cancel the worker, abandoning any analysis in flight."""
        if self._worker is None:
            return
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None

    async def handle(self, method: str, content: bytes) -> None:
        """Dispatch one decoded message."""
        logger.debug("Method: %s", method)
        try:
            message = IncomingMessage.model_validate_json(content)
        except ValidationError as exc:
            logger.warning("Ignoring invalid message for %r: %s", method, exc)
            return

        if message.id is not None:
            await self._handle_request(message.id, message)
            return

        handler = self._notifications.get(message.method)
        if handler is None:
            logger.debug("Ignoring notification %s", message.method)
            return
        try:
            await handler(message.params)
        except ValidationError as exc:
            logger.warning("Ignoring %s with invalid params: %s", message.method, exc)

    async def _handle_request(
        self, request_id: int | str, message: IncomingMessage
    ) -> None:
        handler = self._requests.get(message.method)
        if handler is None:
            logger.info("Unsupported request %s", message.method)
            self.send(
                error_response(request_id, METHOD_NOT_FOUND, f"Unhandled method {message.method}")
            )
            return
        try:
            result = await handler(message.params)
        except ValidationError as exc:
            logger.warning("Rejecting %s with invalid params: %s", message.method, exc)
            self.send(error_response(request_id, INVALID_PARAMS, str(exc)))
            return
        self.send(response(request_id, result))

    # -- analysis -----------------------------------------------------------

    def schedule(self, uri: str) -> None:
        if uri in self._queued:
            return
        self._queued.add(uri)
        self._queue.put_nowait(uri)

    async def wait_idle(self) -> None:
        """Block until every queued analysis has been published."""
        await self._queue.join()

    async def _run_worker(self) -> None:
        while True:
            uri = await self._queue.get()
            try:
                self._queued.discard(uri)
                text = self.documents.get(uri)
                if text is None:
                    continue
                report = await self.pipeline.analyze(uri, text)
                self.publish(report)
            except Exception:
                logger.exception("Analysis of %s failed", uri)
            finally:
                self._queue.task_done()

    def publish(self, report: AnalysisReport) -> None:
        self.send(notification(PUBLISH_DIAGNOSTICS, report.to_params()))

    # -- handlers -----------------------------------------------------------

    async def _on_initialize(self, params: Any) -> dict[str, Any]:
        init = InitializeParams.model_validate(params or {})
        if init.client_info is not None:
            logger.info(
                "Connected to %s %s", init.client_info.name, init.client_info.version or ""
            )
        return {
            "capabilities": {
                "textDocumentSync": {
                    "openClose": True,
                    "change": SYNC_FULL,
                    "save": {"includeText": True},
                },
            },
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def _on_initialized(self, params: Any) -> None:
        logger.info("Client initialized")

    async def _on_shutdown(self, params: Any) -> None:
        self.shutdown_requested = True
        await self.stop()

    async def _on_exit(self, params: Any) -> None:
        self.exited = True

    async def _on_did_open(self, params: Any) -> None:
        opened = DidOpenTextDocumentParams.model_validate(params)
        uri = opened.text_document.uri
        self.documents.put(uri, opened.text_document.text)
        logger.info("Opened %s (%d open)", uri, len(self.documents))
        self.schedule(uri)

    async def _on_did_change(self, params: Any) -> None:
        changed = DidChangeTextDocumentParams.model_validate(params)
        if not changed.content_changes:
            return
        uri = changed.text_document.uri
        if uri not in self.documents:
            logger.warning("Change for unopened %s, treating it as opened", uri)
        # Full sync: the last change carries the whole document.
        self.documents.put(uri, changed.content_changes[-1].text)
        self.schedule(uri)

    async def _on_did_save(self, params: Any) -> None:
        saved = DidSaveTextDocumentParams.model_validate(params)
        uri = saved.text_document.uri
        if saved.text is not None:
            self.documents.put(uri, saved.text)
        elif uri not in self.documents:
            logger.warning("Save for unopened %s without text, nothing to check", uri)
            return
        logger.info("Saved %s", uri)
        self.schedule(uri)

    async def _on_did_close(self, params: Any) -> None:
        closed = DidCloseTextDocumentParams.model_validate(params)
        self.documents.remove(closed.text_document.uri)
        logger.info("Closed %s (%d open)", closed.text_document.uri, len(self.documents))
        self.send(
            notification(
                PUBLISH_DIAGNOSTICS, {"uri": closed.text_document.uri, "diagnostics": []}
            )
        )
