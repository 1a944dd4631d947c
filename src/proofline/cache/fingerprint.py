import hashlib
import logging

from pydantic import ValidationError

from proofline.observability import names
from proofline.observability.base import MetricsHook, NoOpMetricsHook
from proofline.oracle.types import CheckResult

from .base import CacheStorageError, CheckStore

logger = logging.getLogger(__name__)


def fingerprint(text: str) -> str:
    """SHA-256 hex digest of the sentence text."""
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()


class FingerprintCache:
    """Content-addressed cache of check results.

    Keys are the hash of the sentence text only, so a verdict is shared by
    every occurrence of the sentence in any document. Storage failures are
    logged and behave as a miss; they never reach the caller.
    """

    def __init__(
        self,
        store: CheckStore,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self._store = store
        self.metrics_hook = metrics_hook

    async def lookup(self, text: str) -> CheckResult | None:
        content_hash = fingerprint(text)
        try:
            payload = await self._store.first(content_hash=content_hash)
        except CacheStorageError as exc:
            logger.warning("Cache read failed for %s: %s", content_hash[:12], exc)
            self.metrics_hook.increment(names.CACHE_ERRORS_TOTAL, labels={"op": "read"})
            return None

        if payload is None:
            self.metrics_hook.increment(names.CACHE_MISSES_TOTAL)
            return None

        try:
            result = CheckResult.model_validate_json(payload)
        except ValidationError as exc:
            logger.warning("Discarding unreadable cache row %s: %s", content_hash[:12], exc)
            self.metrics_hook.increment(names.CACHE_ERRORS_TOTAL, labels={"op": "decode"})
            return None

        self.metrics_hook.increment(names.CACHE_HITS_TOTAL)
        logger.debug("Cache hit: %s", content_hash[:12])
        return result

    async def store(self, text: str, result: CheckResult) -> None:
        content_hash = fingerprint(text)
        try:
            await self._store.insert(
                content_hash=content_hash, text=text, payload=result.to_json()
            )
        except CacheStorageError as exc:
            logger.warning("Cache write failed for %s: %s", content_hash[:12], exc)
            self.metrics_hook.increment(names.CACHE_ERRORS_TOTAL, labels={"op": "write"})
