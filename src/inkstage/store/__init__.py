"""Content and settings stores."""

from inkstage.store.errors import BadRequestError, DataStoreError, SettingNotFoundError
from inkstage.store.memory import ContentSnapshot, MemoryStore

__all__ = [
    "BadRequestError",
    "ContentSnapshot",
    "DataStoreError",
    "MemoryStore",
    "SettingNotFoundError",
]
