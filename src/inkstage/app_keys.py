"""Application keys for type-safe app configuration access."""

from aiohttp import web

from inkstage.core.feed import FeedAssembler
from inkstage.core.resolver import ResourceResolver
from inkstage.live.watch import ContentWatcher
from inkstage.store.memory import MemoryStore

resolver_key = web.AppKey("resolver", ResourceResolver)
assembler_key = web.AppKey("assembler", FeedAssembler)
store_key = web.AppKey("store", MemoryStore)
watcher_key = web.AppKey("watcher", ContentWatcher)
