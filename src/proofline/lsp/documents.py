import logging

logger = logging.getLogger(__name__)


class DocumentStore:
    """Current full text of each open document, keyed by URI.

    Updates replace the whole text; no history is kept. Owned by one server
    session.
    """

    def __init__(self) -> None:
        self._texts: dict[str, str] = {}

    def put(self, uri: str, text: str) -> None:
        self._texts[uri] = text
        logger.debug("Stored %s (%d chars)", uri, len(text))

    def get(self, uri: str) -> str | None:
        return self._texts.get(uri)

    def remove(self, uri: str) -> None:
        self._texts.pop(uri, None)

    def __contains__(self, uri: object) -> bool:
        return uri in self._texts

    def __len__(self) -> int:
        return len(self._texts)
