from .base import Oracle, OracleError
from .grammar import GrammarOracle
from .types import CheckResult

__all__ = [
    "CheckResult",
    "GrammarOracle",
    "Oracle",
    "OracleError",
]
