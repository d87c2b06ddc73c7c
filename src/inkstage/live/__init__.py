"""Live content reloading."""

from inkstage.live.watch import ContentWatcher

__all__ = ["ContentWatcher"]
