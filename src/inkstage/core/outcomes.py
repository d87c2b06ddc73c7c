"""Resolution outcomes.

Every expected branch of resolution is one of these values. Only backing
store failures are raised as exceptions.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from inkstage.core.permalinks import PermalinkSnapshot
from inkstage.core.types import URLPath
from inkstage.store.models import Item


class NotFoundReason(StrEnum):
    """Why a path resolved to not-found. Logged, never shown to clients."""

    NO_MATCH = "no-match"
    NO_ITEM = "no-item"
    BAD_EDIT_SUFFIX = "bad-edit-suffix"
    DATE_MISMATCH = "date-mismatch"
    NOT_A_PAGE = "not-a-page"
    NO_LOOKUP_FIELDS = "no-lookup-fields"


@dataclass(frozen=True)
class Render:
    """Render ``view`` with ``data``."""

    view: str
    data: dict[str, Any]


@dataclass(frozen=True)
class Redirect:
    """Redirect to the canonical location."""

    location: URLPath


@dataclass(frozen=True)
class NotFound:
    """Continue to the generic not-found handler."""

    reason: NotFoundReason


@dataclass(frozen=True)
class FeedMetadata:
    """Site metadata for a syndication feed."""

    title: str
    description: str
    site_url: str
    feed_url: str
    generator: str
    ttl: int = 60


@dataclass(frozen=True)
class FeedSource:
    """A resolved feed page ready for assembly."""

    metadata: FeedMetadata
    items: tuple[Item, ...]
    snapshot: PermalinkSnapshot
    pagination: dict[str, int | None] = field(default_factory=dict)


Outcome = Render | Redirect | NotFound | FeedSource
