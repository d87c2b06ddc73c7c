"""Fixed route grammars.

Listing, tag-listing and feed paths have fixed shapes. The shapes are
mutually exclusive, so the order they are tried in does not matter. Any
path none of them claims is a candidate single-item path.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from inkstage.core.pagination import PageNumber, PageNumberResolver
from inkstage.core.pattern import PathPattern


class RouteKind(StrEnum):
    LISTING = "listing"
    TAG_LISTING = "tag-listing"
    SINGLE = "single"
    FEED = "feed"


@dataclass(frozen=True)
class ResolvedRoute:
    """Per-request route information."""

    kind: RouteKind
    path: str
    page: PageNumber
    fields: dict[str, str] = field(default_factory=dict)

    @property
    def raw_page(self) -> str | None:
        return self.page.raw

    @property
    def is_canonical_page_token(self) -> bool:
        """Whether the page segment, if any, may be served as written."""
        return PageNumberResolver().is_canonical_token(self.page)


FIXED_ROUTES: tuple[tuple[RouteKind, str], ...] = (
    (RouteKind.LISTING, "/"),
    (RouteKind.LISTING, "/page/:page/"),
    (RouteKind.TAG_LISTING, "/tag/:slug/"),
    (RouteKind.TAG_LISTING, "/tag/:slug/page/:page/"),
    (RouteKind.FEED, "/rss/"),
    (RouteKind.FEED, "/rss/:page/"),
    (RouteKind.FEED, "/tag/:slug/rss/"),
    (RouteKind.FEED, "/tag/:slug/rss/:page/"),
)


class RouteTable:
    """Classifies request paths by resource kind."""

    def __init__(self, pages: PageNumberResolver | None = None) -> None:
        self._pages = pages or PageNumberResolver()
        self._routes = tuple((kind, PathPattern.compile(template)) for kind, template in FIXED_ROUTES)

    def match(self, path: str) -> ResolvedRoute:
        """Classify a path relative to the site subdirectory.

        Args:
            path: Request path (e.g., "/tag/news/page/2/")

        Returns:
            ResolvedRoute; kind is SINGLE when no fixed grammar matches
        """
        for kind, pattern in self._routes:
            fields = pattern.match(path)
            if fields is None:
                continue
            return ResolvedRoute(
                kind=kind,
                path=path,
                page=self._pages.parse(fields.pop("page", None)),
                fields=fields,
            )

        return ResolvedRoute(kind=RouteKind.SINGLE, path=path, page=self._pages.parse(None))
