"""Named filter hooks.

Filters let extensions transform data on its way to rendering, e.g. the
``prePostsRender`` hook receives the item list (or single item) right
before it is handed to a view or the feed assembler.
"""

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

PRE_POSTS_RENDER = "prePostsRender"
DEFAULT_PRIORITY = 5

FilterCallback = Callable[[Any], Any]


@dataclass(frozen=True)
class _RegisteredFilter:
    priority: int
    order: int
    callback: FilterCallback


class Filters:
    """Registry of filter callbacks keyed by hook name."""

    def __init__(self) -> None:
        self._filters: dict[str, list[_RegisteredFilter]] = {}
        self._counter = 0

    def register(self, name: str, callback: FilterCallback, priority: int = DEFAULT_PRIORITY) -> None:
        """Register a callback for a hook.

        Lower priorities run first; equal priorities run in registration order.
        """
        self._counter += 1
        entries = self._filters.setdefault(name, [])
        entries.append(_RegisteredFilter(priority=priority, order=self._counter, callback=callback))
        entries.sort(key=lambda entry: (entry.priority, entry.order))

    def deregister(self, name: str, callback: FilterCallback) -> None:
        entries = self._filters.get(name, [])
        self._filters[name] = [entry for entry in entries if entry.callback is not callback]

    async def do_filter(self, name: str, value: Any) -> Any:
        """Run every callback registered for a hook.

        Each callback receives the previous result. Callbacks may be sync or
        async; returning None keeps the current value.
        """
        for entry in tuple(self._filters.get(name, ())):
            result = entry.callback(value)
            if inspect.isawaitable(result):
                result = await result
            if result is not None:
                value = result
        return value
