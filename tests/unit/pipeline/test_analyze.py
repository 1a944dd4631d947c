import asyncio
import re
from unittest.mock import MagicMock

import pytest

from proofline.cache import FingerprintCache, SQLiteCheckStore
from proofline.observability import names
from proofline.oracle import CheckResult, OracleError
from proofline.pipeline import DiagnosticPipeline, Severity
from proofline.ratelimit import RateGate
from proofline.segmenter import Position, Range


class FakeOracle:
    """Flags any sentence containing "go" and records every call."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.calls: list[str] = []
        self.failing = failing or set()

    async def check(self, sentence: str) -> CheckResult:
        self.calls.append(sentence)
        if sentence in self.failing:
            raise OracleError("quota exceeded")
        if re.search(r"\bgo\b", sentence):
            return CheckResult(
                has_error=True,
                correction=sentence.replace("go", "went"),
                explanation="Use the past tense.",
            )
        return CheckResult(has_error=False)


@pytest.fixture
def store() -> SQLiteCheckStore:
    return SQLiteCheckStore(db_path=":memory:")


def make_pipeline(
    store: SQLiteCheckStore, oracle: FakeOracle, gate: RateGate | None = None, **kwargs
) -> DiagnosticPipeline:
    return DiagnosticPipeline(
        cache=FingerprintCache(store),
        gate=gate or RateGate(rate=1000.0, burst=1000),
        oracle=oracle,
        **kwargs,
    )


class TestDiagnosticPipeline:
    @pytest.mark.asyncio
    async def test_flags_sentences_with_errors(self, store: SQLiteCheckStore) -> None:
        pipeline = make_pipeline(store, FakeOracle())

        report = await pipeline.analyze(
            "file:///doc.md", "All is well. Yesterday I go home."
        )

        assert report.uri == "file:///doc.md"
        assert report.sentences == 2
        assert len(report.diagnostics) == 1
        diagnostic = report.diagnostics[0]
        assert diagnostic.range == Range(Position(0, 13), Position(0, 33))
        assert diagnostic.severity is Severity.ERROR
        assert diagnostic.message == "Use the past tense.\n\nYesterday I went home."
        await store.close()

    @pytest.mark.asyncio
    async def test_warm_cache_makes_no_oracle_calls(
        self, store: SQLiteCheckStore
    ) -> None:
        oracle = FakeOracle()
        pipeline = make_pipeline(store, oracle)
        text = "I go there. It is fine.\nWe go too."

        first = await pipeline.analyze("file:///a.md", text)
        calls_after_first = len(oracle.calls)
        second = await pipeline.analyze("file:///a.md", text)

        assert calls_after_first == 3
        assert len(oracle.calls) == calls_after_first
        assert second.oracle_calls == 0
        assert second.cache_hits == 3
        assert second.diagnostics == first.diagnostics
        await store.close()

    @pytest.mark.asyncio
    async def test_cached_verdict_gets_current_range(
        self, store: SQLiteCheckStore
    ) -> None:
        oracle = FakeOracle()
        pipeline = make_pipeline(store, oracle)

        await pipeline.analyze("file:///a.md", "I go there.")
        report = await pipeline.analyze("file:///b.md", "Intro.\n\nI go there.")

        assert oracle.calls == ["I go there.", "Intro."]
        assert report.diagnostics[0].range == Range(Position(2, 0), Position(2, 11))
        await store.close()

    @pytest.mark.asyncio
    async def test_failed_check_is_skipped_and_not_cached(
        self, store: SQLiteCheckStore
    ) -> None:
        oracle = FakeOracle(failing={"I go first"})
        pipeline = make_pipeline(store, oracle)

        report = await pipeline.analyze("file:///a.md", "I go first. We go second.")

        assert [d.range.start for d in report.diagnostics] == [Position(0, 12)]
        assert len(report.skipped) == 1
        assert report.skipped[0].unit.text == "I go first"
        assert report.skipped[0].reason == "quota exceeded"
        assert await store.count() == 1
        await store.close()

    @pytest.mark.asyncio
    async def test_unexpected_oracle_exception_skips_only_that_sentence(
        self, store: SQLiteCheckStore
    ) -> None:
        class BrokenOracle(FakeOracle):
            async def check(self, sentence: str) -> CheckResult:
                if sentence.startswith("Broken"):
                    raise RuntimeError("adapter bug")
                return await super().check(sentence)

        pipeline = make_pipeline(store, BrokenOracle())

        report = await pipeline.analyze("file:///a.md", "Broken here. We go second.")

        assert [s.reason for s in report.skipped] == ["adapter bug"]
        assert len(report.diagnostics) == 1
        await store.close()

    @pytest.mark.asyncio
    async def test_lone_surrogate_sentence_is_still_checked(
        self, store: SQLiteCheckStore
    ) -> None:
        oracle = FakeOracle()
        pipeline = make_pipeline(store, oracle)

        report = await pipeline.analyze("file:///a.md", "Good one. Bad \ud800 we go.")

        assert report.sentences == 2
        assert report.skipped == []
        assert oracle.calls == ["Good one", "Bad \ud800 we go."]
        assert report.diagnostics[0].range == Range(Position(0, 10), Position(0, 22))
        await store.close()

    @pytest.mark.asyncio
    async def test_diagnostics_in_source_order(self, store: SQLiteCheckStore) -> None:
        pipeline = make_pipeline(store, FakeOracle())
        text = "We go. They go.\n\n- I go\n```\nyou go.\n```\nThen we go again."

        report = await pipeline.analyze("file:///a.md", text)

        starts = [d.range.start for d in report.diagnostics]
        assert starts == sorted(starts)
        assert len(starts) == 4
        await store.close()

    @pytest.mark.asyncio
    async def test_cache_hits_bypass_rate_gate(self, store: SQLiteCheckStore) -> None:
        oracle = FakeOracle()
        gate = RateGate(rate=1000.0, burst=1000)
        pipeline = make_pipeline(store, oracle, gate=gate)
        await pipeline.analyze("file:///a.md", "One. Two.")
        tokens_before = gate.tokens

        await pipeline.analyze("file:///a.md", "One. Two.")

        assert gate.tokens >= tokens_before
        await store.close()

    @pytest.mark.asyncio
    async def test_cancellation_discards_the_pass(self, store: SQLiteCheckStore) -> None:
        oracle = FakeOracle()
        gate = RateGate(rate=0.001, burst=1)
        pipeline = make_pipeline(store, oracle, gate=gate)

        task = asyncio.create_task(pipeline.analyze("file:///a.md", "I go. You go."))
        while len(oracle.calls) < 1:
            await asyncio.sleep(0)
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert oracle.calls == ["I go"]
        await store.close()

    @pytest.mark.asyncio
    async def test_empty_document(self, store: SQLiteCheckStore) -> None:
        oracle = FakeOracle()
        pipeline = make_pipeline(store, oracle)

        report = await pipeline.analyze("file:///a.md", "---\ntitle: x\n---\n")

        assert report.diagnostics == []
        assert report.sentences == 0
        assert oracle.calls == []
        await store.close()

    @pytest.mark.asyncio
    async def test_report_params(self, store: SQLiteCheckStore) -> None:
        pipeline = make_pipeline(store, FakeOracle())

        report = await pipeline.analyze("file:///a.md", "I go.")

        assert report.to_params() == {
            "uri": "file:///a.md",
            "diagnostics": [
                {
                    "range": {
                        "start": {"line": 0, "character": 0},
                        "end": {"line": 0, "character": 5},
                    },
                    "severity": 1,
                    "message": "Use the past tense.\n\nI went.",
                    "source": "proofline",
                }
            ],
        }
        await store.close()

    @pytest.mark.asyncio
    async def test_metrics_hook_called(self, store: SQLiteCheckStore) -> None:
        metrics_hook = MagicMock()
        pipeline = make_pipeline(
            store, FakeOracle(failing={"Bad."}), metrics_hook=metrics_hook
        )

        await pipeline.analyze("file:///a.md", "I go. Bad.")

        metrics_hook.increment.assert_any_call(names.DIAGNOSTICS_TOTAL, 1)
        metrics_hook.increment.assert_any_call(names.SENTENCES_SKIPPED_TOTAL, 1)
        latencies = [c.args[0] for c in metrics_hook.record_latency.call_args_list]
        assert names.ANALYSIS_DURATION in latencies
        await store.close()
