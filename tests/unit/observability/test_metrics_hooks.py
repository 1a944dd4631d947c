import logging

import pytest

from proofline.observability import LoggingMetricsHook, NoOpMetricsHook, names


class TestLoggingMetricsHook:
    def test_writes_debug_records(self, caplog: pytest.LogCaptureFixture) -> None:
        hook = LoggingMetricsHook()

        with caplog.at_level(logging.DEBUG, logger="proofline.metrics"):
            hook.increment(names.CACHE_HITS_TOTAL)
            hook.record_latency(names.ANALYSIS_DURATION, 12.345, {"uri": "file:///a.md"})
            hook.record_gauge(names.RATE_GATE_TOKENS, 3.5)

        assert caplog.messages == [
            f"{names.CACHE_HITS_TOTAL} +1 {{}}",
            f"{names.ANALYSIS_DURATION} 12.3ms {{'uri': 'file:///a.md'}}",
            f"{names.RATE_GATE_TOKENS} =3.5 {{}}",
        ]

    def test_silent_above_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="proofline.metrics"):
            LoggingMetricsHook().increment(names.CACHE_MISSES_TOTAL, 2)

        assert caplog.records == []

    def test_custom_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        hook = LoggingMetricsHook(logging.getLogger("custom.metrics"))

        with caplog.at_level(logging.DEBUG, logger="custom.metrics"):
            hook.increment(names.ORACLE_CHECKS_TOTAL)

        assert caplog.records[0].name == "custom.metrics"


def test_noop_hook_accepts_everything() -> None:
    hook = NoOpMetricsHook()

    hook.increment(names.SENTENCES_TOTAL, 5, {"a": "b"})
    hook.record_latency(names.SEGMENTATION_DURATION, 1.0)
    hook.record_gauge(names.RATE_GATE_TOKENS, 0.0)
