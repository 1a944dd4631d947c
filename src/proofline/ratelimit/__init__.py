from .gate import RateGate, RateGateConfig

__all__ = [
    "RateGate",
    "RateGateConfig",
]
