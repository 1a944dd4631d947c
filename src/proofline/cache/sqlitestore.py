"""SQLite check store backed by apsw."""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from time import monotonic
from typing import TypeVar

import apsw

from proofline.observability import names
from proofline.observability.base import MetricsHook, NoOpMetricsHook

from .base import CacheStorageError, CheckStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA = (
    "PRAGMA journal_mode=wal",
    """
    CREATE TABLE IF NOT EXISTS sentences (
        sentence_hash TEXT,
        sentence TEXT,
        correction TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS sentences_hash_idx ON sentences(sentence_hash)",
)


class SQLiteCheckStore(CheckStore):
    """Append-only table of check results.

    ``correction`` holds the serialized result. Repeated inserts of the same
    sentence create duplicate rows; reads take the earliest one. The file and
    schema are created on first use.

    Example:
        >>> store = SQLiteCheckStore(db_path="/tmp/proofline.db")
        >>> await store.insert(content_hash=h, text="Hi.", payload='{"hasError": false}')
        >>> await store.first(content_hash=h)
        '{"hasError": false}'
    """

    def __init__(
        self,
        db_path: str | Path = ":memory:",
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        """
        Args:
            db_path: SQLite file. ":memory:" keeps everything in process.
            metrics_hook: Hook for recording metrics.
        """
        self.metrics_hook = metrics_hook
        self._db_path = str(db_path)
        self._conn: apsw.Connection | None = None

    def _connection(self) -> apsw.Connection:
        if self._conn is None:
            logger.info("Opening check store at %s", self._db_path)
            conn = apsw.Connection(self._db_path)
            for statement in SCHEMA:
                conn.execute(statement)
            self._conn = conn
        return self._conn

    async def _run(self, op: str, query: Callable[[apsw.Connection], T]) -> T:
        """Run ``query`` off the event loop, wrapping driver errors."""
        try:
            return await asyncio.to_thread(lambda: query(self._connection()))
        except (apsw.Error, UnicodeError) as exc:
            raise CacheStorageError(f"{op} failed: {exc}") from exc

    async def close(self) -> None:
        if self._conn:
            await asyncio.to_thread(self._conn.close)
            self._conn = None

    async def insert(self, *, content_hash: str, text: str, payload: str) -> None:
        started = monotonic()
        await self._run(
            "insert",
            lambda conn: conn.execute(
                "INSERT INTO sentences (sentence_hash, sentence, correction) VALUES (?, ?, ?)",
                (content_hash, text, payload),
            ),
        )
        self.metrics_hook.record_latency(
            names.SQLITE_INSERT_DURATION, 1000 * (monotonic() - started)
        )

    async def first(self, *, content_hash: str) -> str | None:
        started = monotonic()
        row = await self._run(
            "select",
            lambda conn: conn.execute(
                "SELECT correction FROM sentences WHERE sentence_hash = ? ORDER BY rowid LIMIT 1",
                (content_hash,),
            ).fetchone(),
        )
        self.metrics_hook.record_latency(
            names.SQLITE_SELECT_DURATION, 1000 * (monotonic() - started)
        )
        return None if row is None else row[0]

    async def count(self) -> int:
        """Number of stored rows, duplicates included."""
        row = await self._run(
            "count", lambda conn: conn.execute("SELECT COUNT(*) FROM sentences").fetchone()
        )
        return int(row[0])
