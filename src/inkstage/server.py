"""aiohttp server for Inkstage.

Application factory and route registration.
"""

from aiohttp import web

from inkstage.api.frontend import create_frontend_routes
from inkstage.app_keys import assembler_key, resolver_key, store_key, watcher_key
from inkstage.config import Config
from inkstage.core.feed import FeedAssembler
from inkstage.core.filters import Filters
from inkstage.core.permalinks import PermalinkRegistry, PermalinkTemplate
from inkstage.core.resolver import ResourceResolver
from inkstage.core.urls import UrlBuilder
from inkstage.core.views import ThemeCatalog
from inkstage.live import ContentWatcher
from inkstage.store.loader import load_snapshot
from inkstage.store.memory import MemoryStore


def build_resolver(
    config: Config,
    store: MemoryStore,
    *,
    filters: Filters | None = None,
) -> ResourceResolver:
    """Wire a ResourceResolver from configuration.

    Args:
        config: Application configuration
        store: Store serving both content and settings
        filters: Filter hooks (empty registry when None)

    Returns:
        Configured resolver

    Raises:
        InvalidTemplate: If the legacy permalink is malformed
    """
    urls = UrlBuilder(config.site.url, editor_path=config.site.editor_path)
    registry = PermalinkRegistry(legacy=PermalinkTemplate.from_template(config.site.legacy_permalink))
    return ResourceResolver(
        store,
        store,
        registry,
        urls,
        themes=ThemeCatalog.from_directory(config.content.themes_dir),
        filters=filters,
        generator=config.feed.generator,
        feed_ttl=config.feed.ttl,
    )


def create_app(
    config: Config,
    *,
    store: MemoryStore | None = None,
    filters: Filters | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        store: Preloaded store; loaded from content.data_file when None
        filters: Filter hooks applied before rendering

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    watch = store is None and config.content.watch
    if store is None:
        store = MemoryStore(load_snapshot(config.content.data_file))

    resolver = build_resolver(config, store, filters=filters)

    app[store_key] = store
    app[resolver_key] = resolver
    app[assembler_key] = FeedAssembler(resolver.urls)

    if watch:
        app[watcher_key] = ContentWatcher(config.content.data_file, store)
        app.on_startup.append(_start_watcher)
        app.on_cleanup.append(_stop_watcher)

    app.router.add_routes(create_frontend_routes())

    return app


async def _start_watcher(app: web.Application) -> None:
    """Start content watching on application startup."""
    await app[watcher_key].start()


async def _stop_watcher(app: web.Application) -> None:
    """Stop content watching on application cleanup."""
    await app[watcher_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
