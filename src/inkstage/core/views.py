"""Theme view selection.

A theme is a directory of ``*.hbs`` templates. Specialized views are used
when the active theme provides them, with generic fallbacks otherwise.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path

from inkstage.store.models import Item

TEMPLATE_SUFFIX = ".hbs"


class ThemeCatalog:
    """Known themes and the templates each one provides."""

    def __init__(self, themes: Mapping[str, Iterable[str]] | None = None) -> None:
        """Initialize catalog.

        Args:
            themes: Template names (e.g., "tag.hbs") keyed by theme name
        """
        self._themes = {name: frozenset(templates) for name, templates in (themes or {}).items()}

    @classmethod
    def from_directory(cls, themes_dir: Path) -> "ThemeCatalog":
        """Scan a directory holding one sub-directory per theme.

        Returns an empty catalog if the directory doesn't exist.
        """
        if not themes_dir.is_dir():
            return cls()

        themes: dict[str, list[str]] = {}
        for theme_dir in sorted(p for p in themes_dir.iterdir() if p.is_dir()):
            themes[theme_dir.name] = [
                p.name for p in theme_dir.iterdir() if p.is_file() and p.suffix == TEMPLATE_SUFFIX
            ]
        return cls(themes)

    def templates(self, theme: str) -> frozenset[str]:
        """Templates provided by a theme (empty for unknown themes)."""
        return self._themes.get(theme, frozenset())

    def has_view(self, theme: str, view: str) -> bool:
        return f"{view}{TEMPLATE_SUFFIX}" in self.templates(theme)

    def tag_view(self, theme: str) -> str:
        return "tag" if self.has_view(theme, "tag") else "index"

    def item_view(self, theme: str, item: Item) -> str:
        """Pick the view for a single item.

        Static pages prefer ``page-<slug>`` then ``page``; everything else
        renders with ``post``.
        """
        if item.page:
            if self.has_view(theme, f"page-{item.slug}"):
                return f"page-{item.slug}"
            if self.has_view(theme, "page"):
                return "page"
        return "post"
