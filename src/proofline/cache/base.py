from typing import Protocol

from proofline.observability.base import MetricsHook


class CacheStorageError(Exception):
    """Raised by a check store when the underlying storage fails."""


class CheckStore(Protocol):
    """Append-only storage of serialized check results keyed by content hash."""

    metrics_hook: MetricsHook

    async def insert(self, *, content_hash: str, text: str, payload: str) -> None:
        """Append a row. Never updates or deletes existing rows."""
        ...

    async def first(self, *, content_hash: str) -> str | None:
        """Return the payload of the first row with this hash, if any."""
        ...

    async def count(self) -> int: ...

    async def close(self) -> None: ...
