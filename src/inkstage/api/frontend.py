"""Frontend endpoint.

Resolves every GET path under the site subdirectory and maps the outcome
onto an HTTP response: rendered views are returned as JSON for the
rendering frontend, feeds as RSS XML.
"""

import logging

from aiohttp import web

from inkstage.app_keys import assembler_key, resolver_key
from inkstage.core.feed import FEED_CONTENT_TYPE
from inkstage.core.outcomes import FeedSource, NotFound, Redirect
from inkstage.store.errors import DataStoreError

logger = logging.getLogger(__name__)


def create_frontend_routes() -> list[web.RouteDef]:
    return [
        web.get("/{path:.*}", resolve_path),
    ]


async def resolve_path(request: web.Request) -> web.StreamResponse:
    resolver = request.app[resolver_key]

    path = resolver.urls.strip_subdir(request.path)
    if path is None:
        return _not_found(request.path)

    try:
        outcome = await resolver.resolve(path)
    except DataStoreError as e:
        logger.error(f"Store error for {request.path}: {e.message} (status {e.status})")
        return web.json_response({"error": e.message}, status=e.status)

    if isinstance(outcome, Redirect):
        raise web.HTTPFound(outcome.location)

    if isinstance(outcome, NotFound):
        return _not_found(request.path)

    if isinstance(outcome, FeedSource):
        assembler = request.app[assembler_key]
        document = await assembler.assemble(outcome.metadata, outcome.items, outcome.snapshot)
        return web.Response(
            text=document.to_xml(),
            headers={"Content-Type": FEED_CONTENT_TYPE},
        )

    return web.json_response({"view": outcome.view, "data": outcome.data})


def _not_found(path: str) -> web.Response:
    return web.json_response(
        {"error": "Page not found", "path": path},
        status=404,
    )
