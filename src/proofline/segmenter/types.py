from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based position in a document.

    ``character`` counts UTF-16 code units within the line, which is what
    editors speaking the language server protocol expect.
    """

    line: int
    character: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class SentenceUnit:
    """A sentence and the exact source span it was read from.

    Interior line breaks in ``text`` are replaced by a single space.
    """

    text: str
    range: Range
