from typing import Protocol

from .types import CheckResult


class OracleError(Exception):
    """The oracle could not produce a verdict for a sentence."""


class Oracle(Protocol):
    """Opaque grammar check. May be slow and may fail."""

    async def check(self, sentence: str) -> CheckResult:
        """Return the verdict for ``sentence``.

        Raises:
            OracleError: On transport failure or an unreadable reply. The
                pipeline skips the sentence on any exception, not only this one.
        """
        ...
