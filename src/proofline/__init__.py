from ._version import __version__

# Segmenter
from .segmenter import Position, Range, SentenceUnit, segment

# Cache
from .cache import CacheStorageError, CheckStore, FingerprintCache, SQLiteCheckStore

# Rate limiting
from .ratelimit import RateGate, RateGateConfig

# Oracle
from .oracle import CheckResult, GrammarOracle, Oracle, OracleError

# Pipeline
from .pipeline import (
    AnalysisReport,
    Diagnostic,
    DiagnosticPipeline,
    Severity,
    SkippedUnit,
)

# Observability
from .observability import MetricsHook, NoOpMetricsHook

__all__ = [
    "__version__",
    # Segmenter
    "Position",
    "Range",
    "SentenceUnit",
    "segment",
    # Cache
    "CacheStorageError",
    "CheckStore",
    "FingerprintCache",
    "SQLiteCheckStore",
    # Rate limiting
    "RateGate",
    "RateGateConfig",
    # Oracle
    "CheckResult",
    "GrammarOracle",
    "Oracle",
    "OracleError",
    # Pipeline
    "AnalysisReport",
    "Diagnostic",
    "DiagnosticPipeline",
    "Severity",
    "SkippedUnit",
    # Observability
    "MetricsHook",
    "NoOpMetricsHook",
]
