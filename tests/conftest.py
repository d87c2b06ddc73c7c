"""Shared test fixtures."""

import itertools
import json
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from inkstage.config import Config, ContentConfig, FeedConfig, ServerConfig, SiteConfig
from inkstage.core.filters import Filters
from inkstage.core.permalinks import PermalinkRegistry, PermalinkTemplate
from inkstage.core.resolver import ResourceResolver
from inkstage.core.urls import UrlBuilder
from inkstage.core.views import ThemeCatalog
from inkstage.store.loader import DEFAULT_SETTINGS
from inkstage.store.memory import ContentSnapshot, MemoryStore
from inkstage.store.models import Item

PUBLISHED = datetime(2015, 3, 2, 10, 30, tzinfo=UTC)

ItemFactory = Callable[..., Item]
ResolverFactory = Callable[..., ResourceResolver]


@pytest.fixture
def make_item() -> ItemFactory:
    """Create items with unique ids and a fixed default publish date."""
    counter = itertools.count(1)

    def factory(slug: str, **kwargs: Any) -> Item:
        n = next(counter)
        kwargs.setdefault("id", str(n))
        kwargs.setdefault("uuid", f"uuid-{n}")
        kwargs.setdefault("title", slug.replace("-", " ").title())
        kwargs.setdefault("published_at", PUBLISHED)
        return Item(slug=slug, **kwargs)

    return factory


@pytest.fixture
def make_store() -> Callable[..., MemoryStore]:
    """Create a MemoryStore with default settings plus overrides."""

    def factory(items: Iterable[Item] = (), **settings: str) -> MemoryStore:
        snapshot = ContentSnapshot(items=tuple(items), settings={**DEFAULT_SETTINGS, **settings})
        return MemoryStore(snapshot)

    return factory


@pytest.fixture
def make_resolver(make_store: Callable[..., MemoryStore]) -> ResolverFactory:
    """Create a resolver over an in-memory store.

    Keyword arguments other than the ones below are treated as settings.
    """

    def factory(
        items: Iterable[Item] = (),
        *,
        site_url: str = "https://example.com",
        themes: Mapping[str, Iterable[str]] | None = None,
        filters: Filters | None = None,
        **settings: str,
    ) -> ResourceResolver:
        store = make_store(items, **settings)
        registry = PermalinkRegistry(legacy=PermalinkTemplate.from_template("/:slug/"))
        return ResourceResolver(
            store,
            store,
            registry,
            UrlBuilder(site_url),
            themes=ThemeCatalog(themes),
            filters=filters,
            generator="Inkstage Test",
        )

    return factory


@pytest.fixture
def content_file(tmp_path: Path) -> Path:
    """Write a small JSON content file."""
    path = tmp_path / "content.json"
    path.write_text(
        json.dumps(
            {
                "settings": {"title": "Test Blog", "postsPerPage": "2"},
                "posts": [
                    {
                        "id": "1",
                        "uuid": "uuid-1",
                        "slug": "first-post",
                        "title": "First Post",
                        "html": '<p><a href="/about/">About</a></p>',
                        "published_at": "2015-03-01T09:00:00+00:00",
                        "tags": [{"slug": "news", "name": "News"}],
                        "author": {"name": "Jo Writer", "slug": "jo"},
                    },
                    {
                        "id": "2",
                        "uuid": "uuid-2",
                        "slug": "second-post",
                        "title": "Second Post",
                        "html": '<img src="/img/a.png">',
                        "published_at": "2015-03-02T09:00:00+00:00",
                    },
                    {
                        "id": "3",
                        "uuid": "uuid-3",
                        "slug": "third-post",
                        "title": "Third Post",
                        "published_at": "2015-03-03T09:00:00+00:00",
                        "tags": [{"slug": "news", "name": "News"}],
                    },
                    {
                        "id": "4",
                        "uuid": "uuid-4",
                        "slug": "about",
                        "title": "About",
                        "page": True,
                        "published_at": "2015-01-01T09:00:00+00:00",
                    },
                ],
            }
        )
    )
    return path


@pytest.fixture
def test_config(tmp_path: Path, content_file: Path) -> Config:
    """Create a test configuration pointing at content_file.

    Content watching is disabled.
    """
    themes_dir = tmp_path / "themes"
    (themes_dir / "casper").mkdir(parents=True, exist_ok=True)
    for name in ("index.hbs", "post.hbs", "tag.hbs"):
        (themes_dir / "casper" / name).write_text("{{body}}")

    return Config(
        server=ServerConfig(),
        site=SiteConfig(url="https://example.com"),
        content=ContentConfig(data_file=content_file, themes_dir=themes_dir, watch=False),
        feed=FeedConfig(generator="Inkstage Test"),
    )
