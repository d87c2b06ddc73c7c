"""Content file watching.

Monitors the JSON content file and installs a fresh snapshot in the store
whenever it changes. Settings live in the same file, so a changed
``permalinks`` setting takes effect on the next request.
"""

import asyncio
import logging
from pathlib import Path

from watchfiles import Change, awatch

from inkstage.store.loader import load_snapshot
from inkstage.store.memory import MemoryStore

logger = logging.getLogger(__name__)


class ContentWatcher:
    """Reloads a MemoryStore when its content file changes."""

    def __init__(self, data_file: Path, store: MemoryStore) -> None:
        """Initialize the content watcher.

        Args:
            data_file: JSON content file to watch
            store: Store receiving reloaded snapshots
        """
        self._data_file = data_file
        self._store = store
        self._watch_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

    async def _watch_files(self) -> None:
        """Watch the content file's directory and reload on change."""
        async for changes in awatch(self._data_file.parent):
            if self._affects_data_file(changes):
                self.reload()

    def _affects_data_file(self, changes: set[tuple[Change, str]]) -> bool:
        target = self._data_file.resolve()
        for change_type, path_str in changes:
            if change_type == Change.deleted:
                continue
            if Path(path_str).resolve() == target:
                return True
        return False

    def reload(self) -> bool:
        """Load the content file and install the new snapshot.

        A file that fails to load leaves the current snapshot in place.

        Returns:
            True if a new snapshot was installed
        """
        try:
            snapshot = load_snapshot(self._data_file)
        except (OSError, ValueError) as e:
            logger.error(f"Could not reload {self._data_file}: {e}")
            return False

        self._store.replace(snapshot)
        return True
