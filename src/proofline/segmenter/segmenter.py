"""Split markdown/prose text into position-tracked sentences.

The scan is line oriented and punctuation driven. Front matter, fenced code,
reference link definitions and HTML comments never produce sentences. A
sentence that runs over a line break is held in a pending slot until the line
that closes it is seen, a blank line ends the paragraph, or input runs out.
"""

import re
from enum import Enum
from time import monotonic

from proofline.observability import names
from proofline.observability.base import MetricsHook, NoOpMetricsHook

from .types import Position, Range, SentenceUnit

FRONT_MATTER_DELIMITERS = ("+++", "---")
FENCE_MARKERS = ("```", "~~~")
LIST_MARKER = "- "
LINK_DEFINITION = "]: http"
COMMENT_OPENER = "<!-"
TERMINATORS = (".", "?", "!")

# Punctuation at end of line is not a split point; it stays on the fragment.
SENTENCE_BOUNDARY = re.compile(r"[.?!]\s+")


class SegmenterState(str, Enum):
    """Where the scanner is relative to regions that hold no prose."""

    NORMAL = "normal"
    FRONT_MATTER = "front_matter"
    FENCED = "fenced"

    @property
    def skipping(self) -> bool:
        return self is not SegmenterState.NORMAL


def transition(
    state: SegmenterState, line: str, line_number: int
) -> SegmenterState | None:
    """Return the state after ``line`` if it is a region marker, else None.

    Front matter only opens on the first line of the document. A delimiter
    anywhere else behaves like a fence. Any marker closes whichever skip
    region is open.
    """
    if line in FRONT_MATTER_DELIMITERS:
        if state.skipping:
            return SegmenterState.NORMAL
        if line_number == 0:
            return SegmenterState.FRONT_MATTER
        return SegmenterState.FENCED

    if line.startswith(FENCE_MARKERS):
        if state.skipping:
            return SegmenterState.NORMAL
        return SegmenterState.FENCED

    return None


def _utf16_len(text: str) -> int:
    # Lone surrogates from JSON escapes still count as one code unit.
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def _split_line(line: str) -> list[tuple[str, str]]:
    """Split a line into (fragment, consumed separator) pairs."""
    pieces: list[tuple[str, str]] = []
    offset = 0
    for match in SENTENCE_BOUNDARY.finditer(line):
        pieces.append((line[offset : match.start()], match.group()))
        offset = match.end()
    pieces.append((line[offset:], ""))
    return pieces


class _Scanner:
    def __init__(self) -> None:
        self.state = SegmenterState.NORMAL
        self.pending: SentenceUnit | None = None
        self.units: list[SentenceUnit] = []

    def flush(self) -> None:
        if self.pending is not None and self.pending.text:
            self.units.append(self.pending)
        self.pending = None

    def feed(self, line: str, line_number: int) -> None:
        next_state = transition(self.state, line, line_number)
        if next_state is not None:
            self.state = next_state
            return

        if self.state.skipping:
            return
        if LINK_DEFINITION in line or line.startswith(COMMENT_OPENER):
            return

        if not line.strip():
            self.flush()
            return

        pieces = _split_line(line)
        cursor = 0
        for index, (fragment, separator) in enumerate(pieces):
            width = _utf16_len(fragment)
            span = Range(
                start=Position(line_number, cursor),
                end=Position(line_number, cursor + width),
            )
            is_last = index == len(pieces) - 1

            if self.pending is not None:
                text = self.pending.text
                if fragment:
                    text = f"{text} {fragment}"
                self.units.append(
                    SentenceUnit(text=text, range=Range(self.pending.range.start, span.end))
                )
                self.pending = None
            elif not fragment:
                pass
            elif index == 0 and fragment.startswith(LIST_MARKER):
                self.units.append(SentenceUnit(text=fragment, range=span))
            elif is_last and not fragment.endswith(TERMINATORS):
                self.pending = SentenceUnit(text=fragment, range=span)
            else:
                self.units.append(SentenceUnit(text=fragment, range=span))

            cursor += width + _utf16_len(separator)


def segment(
    text: str,
    *,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> list[SentenceUnit]:
    """Split document text into sentence units in source order.

    Never raises. Malformed structure such as an unterminated fence just
    yields fewer sentences.

    Args:
        text: Full document text.
        metrics_hook: Optional metrics hook for observability.

    Returns:
        Sentence units ordered by their start position.
    """
    started = monotonic()
    scanner = _Scanner()

    for line_number, line in enumerate(text.split("\n")):
        if line.endswith("\r"):
            line = line[:-1]
        scanner.feed(line, line_number)

    scanner.flush()

    elapsed_ms = 1000 * (monotonic() - started)
    metrics_hook.record_latency(names.SEGMENTATION_DURATION, elapsed_ms)
    metrics_hook.increment(names.SENTENCES_TOTAL, len(scanner.units))
    return scanner.units
