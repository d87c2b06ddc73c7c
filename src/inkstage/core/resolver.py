"""Resource resolution.

Turns a request path into a render, redirect, not-found or feed outcome.
Malformed and out-of-range requests are never errors: they become
redirects to the canonical URL, or not-found. Only store failures
(DataStoreError) propagate to the caller.
"""

import asyncio
import logging
import re
from typing import Any

from inkstage.core.feed import DEFAULT_TTL
from inkstage.core.filters import PRE_POSTS_RENDER, Filters
from inkstage.core.outcomes import (
    FeedMetadata,
    FeedSource,
    NotFound,
    NotFoundReason,
    Outcome,
    Redirect,
    Render,
)
from inkstage.core.pagination import MAX_TOKEN_LENGTH, OutOfRange, PageNumber, PageNumberResolver
from inkstage.core.permalinks import EDIT_FIELD, NoMatch, PermalinkRegistry, format_date_path
from inkstage.core.routes import ResolvedRoute, RouteKind, RouteTable
from inkstage.core.types import URLPath
from inkstage.core.urls import UrlBuilder
from inkstage.core.views import ThemeCatalog
from inkstage.store.base import ContentStore, SettingsStore
from inkstage.store.models import BrowsePage, Item

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR = "Inkstage"

_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")


class ResourceResolver:
    """Resolves listing, tag-listing, single-item and feed requests."""

    def __init__(
        self,
        content: ContentStore,
        settings: SettingsStore,
        permalinks: PermalinkRegistry,
        urls: UrlBuilder,
        *,
        themes: ThemeCatalog | None = None,
        filters: Filters | None = None,
        generator: str = DEFAULT_GENERATOR,
        feed_ttl: int = DEFAULT_TTL,
    ) -> None:
        """Initialize resolver.

        Args:
            content: Item store
            settings: Settings store
            permalinks: Registry holding the permalink snapshots
            urls: Canonical URL builder for the site
            themes: Theme catalog used for view selection
            filters: Filter hooks applied before rendering
            generator: Generator string for feeds
            feed_ttl: Feed refresh hint in minutes
        """
        self._content = content
        self._settings = settings
        self._permalinks = permalinks
        self._urls = urls
        self._themes = themes or ThemeCatalog()
        self._filters = filters or Filters()
        self._generator = generator
        self._feed_ttl = feed_ttl
        self._pages = PageNumberResolver()
        self._routes = RouteTable(self._pages)

    @property
    def urls(self) -> UrlBuilder:
        return self._urls

    @property
    def permalinks(self) -> PermalinkRegistry:
        return self._permalinks

    async def resolve(self, path: str) -> Outcome:
        """Resolve a request path relative to the site subdirectory.

        Args:
            path: Request path (e.g., "/tag/news/page/2/")

        Returns:
            Outcome for the path

        Raises:
            DataStoreError: If a store call fails
        """
        if not path:
            return self._redirect(self._urls.home())

        route = self._routes.match(path)
        if route.kind == RouteKind.SINGLE:
            return await self.single(path)

        if route.kind == RouteKind.LISTING:
            outcome = await self._listing(route.page)
        elif route.kind == RouteKind.TAG_LISTING:
            outcome = await self._tag_listing(route.fields["slug"], route.page)
        else:
            outcome = await self._feed(route.page, tag=route.fields.get("slug"))

        if isinstance(outcome, Render | FeedSource) and not path.endswith("/"):
            return self._redirect(self._canonical_route_url(route))
        return outcome

    async def listing(self, raw_page: str | None = None) -> Outcome:
        """Resolve the home listing (``/`` and ``/page/N/``)."""
        return await self._listing(self._pages.parse(raw_page))

    async def tag_listing(self, slug: str, raw_page: str | None = None) -> Outcome:
        """Resolve a tag listing (``/tag/<slug>/`` and ``/tag/<slug>/page/N/``)."""
        return await self._tag_listing(slug, self._pages.parse(raw_page))

    async def _listing(self, page: PageNumber) -> Outcome:
        if page.value is None:
            return self._redirect(self._urls.listing())

        result = await self._browse(page.value, limit=await self._posts_per_page())
        clamp = self._pages.clamp_or_reject(page.value, result.pagination.pages)
        if isinstance(clamp, OutOfRange):
            return self._redirect(self._urls.listing(clamp.last_page))
        if not self._pages.is_canonical_token(page):
            return self._redirect(self._urls.listing(page.value))

        items = await self._filters.do_filter(PRE_POSTS_RENDER, list(result.items))
        return Render(view="index", data=_page_data(items, result))

    async def _tag_listing(self, slug: str, page: PageNumber) -> Outcome:
        if page.value is None:
            return self._redirect(self._urls.tag(slug))

        result = await self._browse(page.value, limit=await self._posts_per_page(), tag=slug)
        clamp = self._pages.clamp_or_reject(page.value, result.pagination.pages)
        if isinstance(clamp, OutOfRange):
            return self._redirect(self._urls.tag(slug, clamp.last_page))
        if not self._pages.is_canonical_token(page):
            return self._redirect(self._urls.tag(slug, page.value))

        items = await self._filters.do_filter(PRE_POSTS_RENDER, list(result.items))
        theme = await self._settings.read_setting("activeTheme")

        data = _page_data(items, result)
        data["tag"] = result.filters.tags[0].to_dict() if result.filters.tags else ""
        return Render(view=self._themes.tag_view(theme), data=data)

    async def single(self, path: str) -> Outcome:
        """Resolve a single-item path.

        The configured permalink template is tried before the legacy one.
        Items found through the legacy template must be static pages, and
        date fields in the configured template must match the item's
        publish date exactly.
        """
        snapshot = self._permalinks.snapshot(await self._settings.read_setting("permalinks"))
        match = snapshot.resolve_single(path)
        if isinstance(match, NoMatch):
            return self._not_found(NotFoundReason.NO_MATCH, path)

        lookup = {key: match.fields[key] for key in ("slug", "id") if key in match.fields}
        if not lookup:
            return self._not_found(NotFoundReason.NO_LOOKUP_FIELDS, path)

        result = await self._content.read(**lookup)
        item = result.first
        if item is None:
            return self._not_found(NotFoundReason.NO_ITEM, path)

        if match.used_legacy:
            if not item.page:
                return self._not_found(NotFoundReason.NOT_A_PAGE, path)
        else:
            date_fields = snapshot.configured.date_fields
            if date_fields:
                requested = "/".join(match.fields[name] for name in date_fields)
                if item.published_at is None or format_date_path(item.published_at, date_fields) != requested:
                    return self._not_found(NotFoundReason.DATE_MISMATCH, path)

        if match.edit is not None:
            if match.edit == EDIT_FIELD:
                return self._redirect(self._urls.editor(item.id))
            return self._not_found(NotFoundReason.BAD_EDIT_SUFFIX, path)

        try:
            canonical = self._urls.item(item, snapshot)
        except ValueError as e:
            logger.debug(f"No canonical URL for item {item.id}: {e}")
        else:
            if self._urls.subdir + path != canonical:
                return self._redirect(canonical)

        item = await self._filters.do_filter(PRE_POSTS_RENDER, item)
        theme = await self._settings.read_setting("activeTheme")
        return Render(view=self._themes.item_view(theme, item), data={"post": item.to_dict()})

    async def feed(self, raw_page: str | None = None, tag: str | None = None) -> Outcome:
        """Resolve a feed page (``/rss/``, ``/rss/N/`` and their tag variants)."""
        return await self._feed(self._pages.parse(raw_page), tag=tag)

    async def _feed(self, page: PageNumber, tag: str | None) -> Outcome:
        if page.value is None:
            return self._redirect(self._urls.feed(tag=tag))

        title, description, template = await asyncio.gather(
            self._settings.read_setting("title"),
            self._settings.read_setting("description"),
            self._settings.read_setting("permalinks"),
        )
        snapshot = self._permalinks.snapshot(template)

        result = await self._browse(page.value, tag=tag)
        clamp = self._pages.clamp_or_reject(page.value, result.pagination.pages)
        if isinstance(clamp, OutOfRange):
            return self._redirect(self._urls.feed(clamp.last_page, tag=tag))
        if not self._pages.is_canonical_token(page):
            return self._redirect(self._urls.feed(page.value, tag=tag))

        feed_url = self._urls.absolute(self._urls.feed())
        if tag is not None and result.filters.tags:
            found = result.filters.tags[0]
            title = f"{found.name} - {title}"
            feed_url = self._urls.absolute(self._urls.feed(tag=found.slug))

        items = await self._filters.do_filter(PRE_POSTS_RENDER, list(result.items))
        metadata = FeedMetadata(
            title=title,
            description=description,
            site_url=self._urls.site_url,
            feed_url=feed_url,
            generator=self._generator,
            ttl=self._feed_ttl,
        )
        return FeedSource(
            metadata=metadata,
            items=tuple(items),
            snapshot=snapshot,
            pagination=result.pagination.to_dict(),
        )

    async def _posts_per_page(self) -> int | None:
        """Configured page size, or None to use the store default.

        The leading integer of the value is used, so ``"10 posts"`` means 10.
        Values without one, and non-positive values, are ignored.
        """
        raw = await self._settings.read_setting("postsPerPage")
        match = _LEADING_INT_RE.match(raw)
        if match is None or len(match.group(1)) > MAX_TOKEN_LENGTH:
            return None
        value = int(match.group(1))
        return value if value > 0 else None

    async def _browse(self, page: int, limit: int | None = None, tag: str | None = None) -> BrowsePage:
        if limit is None:
            return await self._content.browse(page=page, tag=tag)
        return await self._content.browse(page=page, limit=limit, tag=tag)

    def _canonical_route_url(self, route: ResolvedRoute) -> URLPath:
        page = route.page.value or 1
        if route.kind == RouteKind.LISTING:
            return self._urls.listing(page)
        if route.kind == RouteKind.TAG_LISTING:
            return self._urls.tag(route.fields["slug"], page)
        return self._urls.feed(page, tag=route.fields.get("slug"))

    def _redirect(self, location: URLPath) -> Redirect:
        logger.debug(f"Redirecting to {location}")
        return Redirect(location=location)

    def _not_found(self, reason: NotFoundReason, path: str) -> NotFound:
        logger.debug(f"Not found ({reason}): {path}")
        return NotFound(reason=reason)


def _page_data(items: list[Item], result: BrowsePage) -> dict[str, Any]:
    return {
        "posts": [item.to_dict() for item in items],
        "pagination": result.pagination.to_dict(),
    }
