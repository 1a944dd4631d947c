"""Turn document text into diagnostics.

Sentences are checked one at a time in source order. Each one is looked up
in the fingerprint cache first; a miss goes through the rate gate to the
oracle and the verdict is cached. A failed check skips only that sentence.
Cancellation while waiting on the gate abandons the whole pass.
"""

import logging
from time import monotonic

from proofline.cache.fingerprint import FingerprintCache
from proofline.observability import names
from proofline.observability.base import MetricsHook, NoOpMetricsHook
from proofline.oracle.base import Oracle
from proofline.ratelimit.gate import RateGate
from proofline.segmenter import segment

from .types import AnalysisReport, Diagnostic, SentenceCheck, SkippedUnit

logger = logging.getLogger(__name__)


class DiagnosticPipeline:
    def __init__(
        self,
        *,
        cache: FingerprintCache,
        gate: RateGate,
        oracle: Oracle,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.cache = cache
        self.gate = gate
        self.oracle = oracle
        self.metrics_hook = metrics_hook

    async def analyze(self, uri: str, text: str) -> AnalysisReport:
        """Check every sentence of ``text`` and collect diagnostics for ``uri``.

        Raises:
            asyncio.CancelledError: If the pass is cancelled. Nothing partial
                is returned.
        """
        start = monotonic()
        units = segment(text, metrics_hook=self.metrics_hook)
        logger.info("Analyzing %s: %d sentences", uri, len(units))

        diagnostics: list[Diagnostic] = []
        skipped: list[SkippedUnit] = []
        cache_hits = 0
        oracle_calls = 0

        # TODO: check independent sentences concurrently once the gate is the only bound
        for unit in units:
            result = await self.cache.lookup(unit.text)
            if result is not None:
                cache_hits += 1
            else:
                await self.gate.admit()
                oracle_calls += 1
                try:
                    result = await self.oracle.check(unit.text)
                except Exception as exc:
                    logger.warning(
                        "Skipping sentence at %d:%d in %s: %s",
                        unit.range.start.line,
                        unit.range.start.character,
                        uri,
                        exc,
                    )
                    skipped.append(SkippedUnit(unit=unit, reason=str(exc)))
                    continue
                await self.cache.store(unit.text, result)

            check = SentenceCheck(range=unit.range, result=result)
            if check.result.has_error:
                diagnostics.append(check.to_diagnostic())

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.ANALYSIS_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.DIAGNOSTICS_TOTAL, len(diagnostics))
        if skipped:
            self.metrics_hook.increment(names.SENTENCES_SKIPPED_TOTAL, len(skipped))

        logger.info(
            "Analyzed %s: diagnostics=%d, skipped=%d, cache_hits=%d, oracle_calls=%d, latency=%.0fms",
            uri,
            len(diagnostics),
            len(skipped),
            cache_hits,
            oracle_calls,
            elapsed_ms,
        )

        return AnalysisReport(
            uri=uri,
            diagnostics=diagnostics,
            skipped=skipped,
            sentences=len(units),
            cache_hits=cache_hits,
            oracle_calls=oracle_calls,
        )
