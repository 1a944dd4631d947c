from .analyze import DiagnosticPipeline
from .types import (
    DIAGNOSTIC_SOURCE,
    AnalysisReport,
    Diagnostic,
    SentenceCheck,
    Severity,
    SkippedUnit,
)

__all__ = [
    "DIAGNOSTIC_SOURCE",
    "AnalysisReport",
    "Diagnostic",
    "DiagnosticPipeline",
    "SentenceCheck",
    "Severity",
    "SkippedUnit",
]
