"""Store interfaces consumed by the resolver."""

from typing import Protocol

from inkstage.store.models import BrowsePage, ReadResult


class ContentStore(Protocol):
    """Item store.

    Implementations raise DataStoreError (or a subclass) on failure.
    """

    async def browse(
        self,
        page: int = 1,
        limit: int | None = None,
        tag: str | None = None,
    ) -> BrowsePage: ...

    async def read(self, slug: str | None = None, id: str | None = None) -> ReadResult: ...


class SettingsStore(Protocol):
    """Key/value settings store.

    ``read_setting`` raises SettingNotFoundError for unknown keys.
    """

    async def read_setting(self, key: str) -> str: ...
