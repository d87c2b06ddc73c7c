"""In-memory content and settings store.

Serves both the item store and the settings store interfaces from one
immutable ContentSnapshot. Reloading installs a new snapshot by reference;
queries that already started keep reading the snapshot they captured.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

from inkstage.store.errors import BadRequestError, SettingNotFoundError
from inkstage.store.models import BrowsePage, Item, PageFilters, Pagination, ReadResult, Tag

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 15

_EPOCH = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class ContentSnapshot:
    """Immutable set of items and settings."""

    items: tuple[Item, ...] = ()
    settings: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if not isinstance(self.settings, MappingProxyType):
            object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))


class MemoryStore:
    """Content store backed by a ContentSnapshot."""

    def __init__(self, snapshot: ContentSnapshot | None = None, *, default_limit: int = DEFAULT_LIMIT) -> None:
        self._snapshot = snapshot or ContentSnapshot()
        self._default_limit = default_limit

    @property
    def snapshot(self) -> ContentSnapshot:
        return self._snapshot

    def replace(self, snapshot: ContentSnapshot) -> None:
        """Install a new snapshot."""
        self._snapshot = snapshot
        logger.info(
            f"Content snapshot replaced: {len(snapshot.items)} items, "
            f"{len(snapshot.settings)} settings"
        )

    async def browse(
        self,
        page: int = 1,
        limit: int | None = None,
        tag: str | None = None,
    ) -> BrowsePage:
        """List published posts, newest first.

        Static pages are excluded from listings.

        Args:
            page: 1-based page number
            limit: Items per page (store default when None)
            tag: Optional tag slug filter

        Returns:
            BrowsePage with items and pagination metadata

        Raises:
            BadRequestError: If page or limit is not a positive integer
        """
        if page < 1:
            raise BadRequestError(f"Invalid page: {page}")
        if limit is None:
            limit = self._default_limit
        if limit < 1:
            raise BadRequestError(f"Invalid limit: {limit}")

        snapshot = self._snapshot
        items = [item for item in snapshot.items if item.is_published and not item.page]

        filters = PageFilters()
        if tag is not None:
            items = [item for item in items if any(t.slug == tag for t in item.tags)]
            found = _find_tag(snapshot.items, tag)
            if found is not None:
                filters = PageFilters(tags=(found,))

        items.sort(key=_published_key, reverse=True)

        total = len(items)
        pages = max(math.ceil(total / limit), 1)
        start = (page - 1) * limit
        return BrowsePage(
            items=tuple(items[start : start + limit]),
            pagination=Pagination(page=page, limit=limit, pages=pages, total=total),
            filters=filters,
        )

    async def read(self, slug: str | None = None, id: str | None = None) -> ReadResult:
        """Find published items by slug and/or id.

        Every match is returned, in store order.

        Raises:
            BadRequestError: If neither slug nor id is given
        """
        if slug is None and id is None:
            raise BadRequestError("A slug or id is required")

        snapshot = self._snapshot
        matches = tuple(
            item
            for item in snapshot.items
            if item.is_published
            and (slug is None or item.slug == slug)
            and (id is None or item.id == id)
        )
        return ReadResult(items=matches)

    async def read_setting(self, key: str) -> str:
        """Read a setting value.

        Raises:
            SettingNotFoundError: If the key does not exist
        """
        try:
            return self._snapshot.settings[key]
        except KeyError:
            raise SettingNotFoundError(f"Setting not found: {key}") from None


def _published_key(item: Item) -> datetime:
    value = item.published_at
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _find_tag(items: tuple[Item, ...], slug: str) -> Tag | None:
    for item in items:
        for tag in item.tags:
            if tag.slug == slug:
                return tag
    return None
