from .documents import DocumentStore
from .server import PUBLISH_DIAGNOSTICS, SERVER_NAME, LanguageServer

__all__ = [
    "DocumentStore",
    "LanguageServer",
    "PUBLISH_DIAGNOSTICS",
    "SERVER_NAME",
]
