from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from proofline.oracle.types import CheckResult
from proofline.segmenter.types import Range, SentenceUnit

DIAGNOSTIC_SOURCE = "proofline"


class Severity(IntEnum):
    """Diagnostic severity, numbered as on the wire."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    severity: Severity
    message: str
    source: str = DIAGNOSTIC_SOURCE

    def to_dict(self) -> dict[str, Any]:
        return {
            "range": self.range.to_dict(),
            "severity": int(self.severity),
            "message": self.message,
            "source": self.source,
        }


@dataclass(frozen=True)
class SentenceCheck:
    """A position-free verdict re-attached to the unit it was computed for."""

    range: Range
    result: CheckResult

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            range=self.range,
            severity=Severity.ERROR,
            message=f"{self.result.explanation}\n\n{self.result.correction}",
        )


@dataclass(frozen=True)
class SkippedUnit:
    """A sentence the pipeline could not check, and why."""

    unit: SentenceUnit
    reason: str


@dataclass(frozen=True)
class AnalysisReport:
    """Outcome of one analysis pass over a document.

    ``diagnostics`` are in source order. ``skipped`` lists units whose check
    failed; they produce no diagnostic and are not cached.
    """

    uri: str
    diagnostics: list[Diagnostic]
    skipped: list[SkippedUnit] = field(default_factory=list)
    sentences: int = 0
    cache_hits: int = 0
    oracle_calls: int = 0

    def to_params(self) -> dict[str, Any]:
        """Parameters of a ``textDocument/publishDiagnostics`` notification."""
        return {
            "uri": self.uri,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
