from .segmenter import SegmenterState, segment, transition
from .types import Position, Range, SentenceUnit

__all__ = [
    "Position",
    "Range",
    "SegmenterState",
    "SentenceUnit",
    "segment",
    "transition",
]
