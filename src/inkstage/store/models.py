"""Content data model shared by stores, the resolver and the feed assembler."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypedDict


class TagDict(TypedDict):
    """Dictionary representation of a tag."""

    slug: str
    name: str


@dataclass(frozen=True)
class Tag:
    """Content tag."""

    slug: str
    name: str

    def to_dict(self) -> TagDict:
        """Convert to dictionary for JSON serialization."""
        return {"slug": self.slug, "name": self.name}


@dataclass(frozen=True)
class Author:
    """Item author."""

    name: str
    slug: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "slug": self.slug}


@dataclass(frozen=True)
class Item:
    """A published post or static page.

    ``page`` flags items that behave as standalone static pages rather than
    dated entries.
    """

    id: str
    uuid: str
    slug: str
    title: str
    html: str = ""
    page: bool = False
    status: str = "published"
    published_at: datetime | None = None
    tags: tuple[Tag, ...] = ()
    author: Author | None = None

    @property
    def is_published(self) -> bool:
        return self.status == "published"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "uuid": self.uuid,
            "slug": self.slug,
            "title": self.title,
            "html": self.html,
            "page": self.page,
            "status": self.status,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "tags": [tag.to_dict() for tag in self.tags],
            "author": self.author.to_dict() if self.author else None,
        }


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata for one browse result."""

    page: int
    limit: int
    pages: int
    total: int

    @property
    def next(self) -> int | None:
        return self.page + 1 if self.page < self.pages else None

    @property
    def prev(self) -> int | None:
        return self.page - 1 if self.page > 1 else None

    def to_dict(self) -> dict[str, int | None]:
        return {
            "page": self.page,
            "limit": self.limit,
            "pages": self.pages,
            "total": self.total,
            "next": self.next,
            "prev": self.prev,
        }


@dataclass(frozen=True)
class PageFilters:
    """Filters that were applied to a browse result."""

    tags: tuple[Tag, ...] = ()


@dataclass(frozen=True)
class BrowsePage:
    """One page of items with its pagination metadata."""

    items: tuple[Item, ...]
    pagination: Pagination
    filters: PageFilters = field(default_factory=PageFilters)


@dataclass(frozen=True)
class ReadResult:
    """Items matching a single-item lookup, in store order."""

    items: tuple[Item, ...] = ()

    @property
    def first(self) -> Item | None:
        return self.items[0] if self.items else None
