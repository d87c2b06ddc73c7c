"""Syndication feed assembly.

Builds one feed entry per item, in input order, with links inside the item
body rewritten to absolute URLs, and serializes the result as RSS 2.0.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import format_datetime
from urllib.parse import urljoin
from xml.etree import ElementTree as ET

from inkstage.core.outcomes import FeedMetadata
from inkstage.core.permalinks import PermalinkSnapshot
from inkstage.core.urls import UrlBuilder, item_fields
from inkstage.store.models import Item

logger = logging.getLogger(__name__)

FEED_CONTENT_TYPE = "text/xml; charset=UTF-8"
DEFAULT_TTL = 60

ATOM_NS = "http://www.w3.org/2005/Atom"
DC_NS = "http://purl.org/dc/elements/1.1/"

ET.register_namespace("atom", ATOM_NS)
ET.register_namespace("dc", DC_NS)

# src="..." / href='...' / src=bare, but not data-src or srcset
LINK_ATTR_RE = re.compile(
    r"""(?<![\w-])(?P<attr>src|href)(?P<eq>\s*=\s*)"""
    r"""(?:(?P<quote>["'])(?P<quoted>.*?)(?P=quote)|(?P<bare>[^\s"'>]+))""",
    re.IGNORECASE | re.DOTALL,
)


def rewrite_links(html: str, base_url: str) -> str:
    """Rewrite every ``src`` and ``href`` value to an absolute URL.

    Quote style and all other markup are preserved. Values that are already
    absolute are left as they are.

    Args:
        html: Item body
        base_url: Absolute site URL to resolve against

    Returns:
        Body with absolute link targets
    """

    def replace(match: re.Match[str]) -> str:
        quote = match.group("quote")
        value = match.group("quoted") if quote is not None else match.group("bare")
        if not value:
            return match.group(0)
        resolved = urljoin(base_url, value)
        if quote is None:
            return f"{match.group('attr')}{match.group('eq')}{resolved}"
        return f"{match.group('attr')}{match.group('eq')}{quote}{resolved}{quote}"

    return LINK_ATTR_RE.sub(replace, html)


@dataclass(frozen=True)
class FeedItem:
    """One feed entry."""

    title: str
    guid: str
    url: str
    published_at: datetime | None
    categories: tuple[str, ...]
    author: str | None
    description: str


@dataclass(frozen=True)
class FeedDocument:
    """Assembled feed ready for serialization."""

    metadata: FeedMetadata
    items: tuple[FeedItem, ...]

    def to_xml(self, *, build_date: datetime | None = None) -> str:
        """Serialize as an RSS 2.0 document.

        Args:
            build_date: lastBuildDate value (defaults to now)

        Returns:
            XML document text
        """
        meta = self.metadata
        rss = ET.Element("rss", {"version": "2.0"})
        channel = ET.SubElement(rss, "channel")
        _text(channel, "title", meta.title)
        _text(channel, "description", meta.description)
        _text(channel, "link", meta.site_url)
        _text(channel, "generator", meta.generator)
        _text(channel, "lastBuildDate", format_datetime(build_date or datetime.now(UTC)))
        ET.SubElement(
            channel,
            f"{{{ATOM_NS}}}link",
            {"href": meta.feed_url, "rel": "self", "type": "application/rss+xml"},
        )
        _text(channel, "ttl", str(meta.ttl))

        for item in self.items:
            node = ET.SubElement(channel, "item")
            _text(node, "title", item.title)
            _text(node, "description", item.description)
            _text(node, "link", item.url)
            ET.SubElement(node, "guid", {"isPermaLink": "false"}).text = item.guid
            for category in item.categories:
                _text(node, "category", category)
            if item.author:
                _text(node, f"{{{DC_NS}}}creator", item.author)
            if item.published_at is not None:
                _text(node, "pubDate", format_datetime(item.published_at))

        body = ET.tostring(rss, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'


class FeedAssembler:
    """Builds FeedDocuments from resolved feed pages."""

    def __init__(self, urls: UrlBuilder) -> None:
        self._urls = urls

    async def assemble(
        self,
        metadata: FeedMetadata,
        items: tuple[Item, ...] | list[Item],
        snapshot: PermalinkSnapshot,
    ) -> FeedDocument:
        """Build the feed document.

        Entries are built concurrently and joined in input order.

        Args:
            metadata: Site metadata for the channel
            items: Items of the resolved page
            snapshot: Permalink snapshot used for item URLs

        Returns:
            FeedDocument with one entry per item
        """
        entries = await asyncio.gather(
            *(self._build_item(item, metadata.site_url, snapshot) for item in items)
        )
        return FeedDocument(metadata=metadata, items=tuple(entries))

    async def _build_item(self, item: Item, base_url: str, snapshot: PermalinkSnapshot) -> FeedItem:
        return FeedItem(
            title=item.title,
            guid=item.uuid,
            url=self._item_url(item, snapshot),
            published_at=item.published_at,
            categories=tuple(tag.name for tag in item.tags),
            author=item.author.name if item.author else None,
            description=rewrite_links(item.html, base_url),
        )

    def _item_url(self, item: Item, snapshot: PermalinkSnapshot) -> str:
        try:
            return self._urls.absolute(self._urls.item(item, snapshot))
        except ValueError as e:
            # Items without a publish date cannot fill date-based templates
            logger.warning(f"Falling back to slug URL for item {item.id}: {e}")
            path = snapshot.legacy.pattern.generate(item_fields(item))
            return self._urls.absolute(self._urls.subdir + path)


def _text(parent: ET.Element, tag: str, text: str) -> ET.Element:
    element = ET.SubElement(parent, tag)
    element.text = text
    return element
