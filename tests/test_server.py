"""Tests for the HTTP surface."""

from dataclasses import replace
from typing import Any

from aiohttp.test_utils import TestClient
from inkstage.app_keys import store_key, watcher_key
from inkstage.config import Config
from inkstage.core.feed import FEED_CONTENT_TYPE
from inkstage.core.filters import PRE_POSTS_RENDER, Filters
from inkstage.server import create_app
from inkstage.store.memory import ContentSnapshot, MemoryStore


async def _client(aiohttp_client, config: Config, **kwargs: Any) -> TestClient:
    return await aiohttp_client(create_app(config, **kwargs))


class TestCreateApp:
    """Tests for create_app()."""

    def test__store_loaded_from_data_file(self, test_config: Config) -> None:
        """The store is loaded from content.data_file."""
        app = create_app(test_config)

        assert len(app[store_key].snapshot.items) == 4

    def test__watch_disabled__no_watcher(self, test_config: Config) -> None:
        """No watcher is registered when watching is off."""
        app = create_app(test_config)

        assert watcher_key not in app

    def test__watch_enabled__watcher_registered(self, test_config: Config) -> None:
        """A watcher is registered when watching is on."""
        config = replace(test_config, content=replace(test_config.content, watch=True))

        app = create_app(config)

        assert watcher_key in app

    def test__preloaded_store__not_watched(self, test_config: Config) -> None:
        """Preloaded stores are used as-is and never watched."""
        config = replace(test_config, content=replace(test_config.content, watch=True))
        store = MemoryStore(ContentSnapshot())

        app = create_app(config, store=store)

        assert app[store_key] is store
        assert watcher_key not in app


class TestFrontend:
    """Tests for the frontend endpoint."""

    async def test__home__renders_index(self, aiohttp_client, test_config: Config) -> None:
        """The home page returns the index view as JSON."""
        client = await _client(aiohttp_client, test_config)

        resp = await client.get("/")

        assert resp.status == 200
        data = await resp.json()
        assert data["view"] == "index"
        assert [post["slug"] for post in data["data"]["posts"]] == ["third-post", "second-post"]

    async def test__explicit_first_page__302(self, aiohttp_client, test_config: Config) -> None:
        """'/page/1/' redirects to the home page."""
        client = await _client(aiohttp_client, test_config)

        resp = await client.get("/page/1/", allow_redirects=False)

        assert resp.status == 302
        assert resp.headers["Location"] == "/"

    async def test__tag_page_one__302(self, aiohttp_client, test_config: Config) -> None:
        """'/tag/<slug>/page/1/' redirects to the tag root."""
        client = await _client(aiohttp_client, test_config)

        resp = await client.get("/tag/news/page/1/", allow_redirects=False)

        assert resp.status == 302
        assert resp.headers["Location"] == "/tag/news/"

    async def test__tag__renders_tag_view(self, aiohttp_client, test_config: Config) -> None:
        """Tag listings use the theme's tag view."""
        client = await _client(aiohttp_client, test_config)

        resp = await client.get("/tag/news/")

        assert resp.status == 200
        data = await resp.json()
        assert data["view"] == "tag"
        assert data["data"]["tag"] == {"slug": "news", "name": "News"}

    async def test__single__renders_post(self, aiohttp_client, test_config: Config) -> None:
        """Single items render with the post view."""
        client = await _client(aiohttp_client, test_config)

        resp = await client.get("/first-post/")

        assert resp.status == 200
        data = await resp.json()
        assert data["view"] == "post"
        assert data["data"]["post"]["title"] == "First Post"

    async def test__edit_suffix__302_to_editor(self, aiohttp_client, test_config: Config) -> None:
        """The edit suffix redirects to the editor."""
        client = await _client(aiohttp_client, test_config)

        resp = await client.get("/first-post/edit/", allow_redirects=False)

        assert resp.status == 302
        assert resp.headers["Location"] == "/ghost/editor/1/"

    async def test__unknown_path__404(self, aiohttp_client, test_config: Config) -> None:
        """Unresolvable paths return the not-found response."""
        client = await _client(aiohttp_client, test_config)

        resp = await client.get("/no-such-post/")

        assert resp.status == 404
        assert await resp.json() == {"error": "Page not found", "path": "/no-such-post/"}

    async def test__feed__rss_xml(self, aiohttp_client, test_config: Config) -> None:
        """Feeds are served as RSS XML with absolute links."""
        client = await _client(aiohttp_client, test_config)

        resp = await client.get("/rss/")

        assert resp.status == 200
        assert resp.headers["Content-Type"] == FEED_CONTENT_TYPE
        body = await resp.text()
        assert "<title>Test Blog</title>" in body
        assert "https://example.com/img/a.png" in body
        assert "<link>https://example.com/first-post/</link>" in body

    async def test__tag_feed__tag_title(self, aiohttp_client, test_config: Config) -> None:
        """Tag feeds carry the tag name in the title."""
        client = await _client(aiohttp_client, test_config)

        resp = await client.get("/tag/news/rss/")

        assert resp.status == 200
        assert "<title>News - Test Blog</title>" in await resp.text()

    async def test__missing_setting__store_status(self, aiohttp_client, test_config: Config) -> None:
        """Store failures return the store's status code."""
        store = MemoryStore(ContentSnapshot(settings={}))
        client = await _client(aiohttp_client, test_config, store=store)

        resp = await client.get("/")

        assert resp.status == 404
        assert await resp.json() == {"error": "Setting not found: postsPerPage"}

    async def test__filters__applied(self, aiohttp_client, test_config: Config) -> None:
        """Filter hooks passed to create_app are applied."""
        filters = Filters()
        filters.register(PRE_POSTS_RENDER, lambda items: [])
        client = await _client(aiohttp_client, test_config, filters=filters)

        resp = await client.get("/")

        assert (await resp.json())["data"]["posts"] == []


class TestSubdirectory:
    """Tests for a site served under a subdirectory."""

    async def test__outside_subdir__404(self, aiohttp_client, test_config: Config) -> None:
        """Paths outside the subdirectory are not found."""
        config = replace(test_config, site=replace(test_config.site, url="https://example.com/blog"))
        client = await _client(aiohttp_client, config)

        resp = await client.get("/first-post/")

        assert resp.status == 404

    async def test__bare_subdir__302_home(self, aiohttp_client, test_config: Config) -> None:
        """The bare subdirectory redirects to its home page."""
        config = replace(test_config, site=replace(test_config.site, url="https://example.com/blog"))
        client = await _client(aiohttp_client, config)

        resp = await client.get("/blog", allow_redirects=False)

        assert resp.status == 302
        assert resp.headers["Location"] == "/blog/"

    async def test__single_without_slash__302_canonical(
        self, aiohttp_client, test_config: Config
    ) -> None:
        """Canonical redirects include the subdirectory."""
        config = replace(test_config, site=replace(test_config.site, url="https://example.com/blog"))
        client = await _client(aiohttp_client, config)

        resp = await client.get("/blog/first-post", allow_redirects=False)

        assert resp.status == 302
        assert resp.headers["Location"] == "/blog/first-post/"
