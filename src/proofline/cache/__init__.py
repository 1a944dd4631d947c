from .base import CacheStorageError, CheckStore
from .fingerprint import FingerprintCache, fingerprint
from .sqlitestore import SQLiteCheckStore

__all__ = [
    "CacheStorageError",
    "CheckStore",
    "FingerprintCache",
    "SQLiteCheckStore",
    "fingerprint",
]
