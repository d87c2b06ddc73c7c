"""Tests for theme view selection."""

from collections.abc import Callable
from pathlib import Path

from inkstage.core.views import ThemeCatalog
from inkstage.store.models import Item


class TestThemeCatalog:
    """Tests for ThemeCatalog."""

    def test__tag_template__tag_view(self) -> None:
        """Themes with tag.hbs render tag listings with it."""
        catalog = ThemeCatalog({"casper": ["index.hbs", "tag.hbs"]})

        assert catalog.tag_view("casper") == "tag"

    def test__no_tag_template__index_view(self) -> None:
        """Themes without tag.hbs fall back to index."""
        catalog = ThemeCatalog({"casper": ["index.hbs"]})

        assert catalog.tag_view("casper") == "index"

    def test__unknown_theme__generic_views(self, make_item: Callable[..., Item]) -> None:
        """Unknown themes provide no specialized views."""
        catalog = ThemeCatalog()

        assert catalog.templates("missing") == frozenset()
        assert catalog.tag_view("missing") == "index"
        assert catalog.item_view("missing", make_item("about", page=True)) == "post"

    def test__page_with_custom_template__slug_view(self, make_item: Callable[..., Item]) -> None:
        """Static pages prefer page-<slug>."""
        catalog = ThemeCatalog({"casper": ["page.hbs", "page-about.hbs"]})

        assert catalog.item_view("casper", make_item("about", page=True)) == "page-about"

    def test__page_with_generic_template__page_view(self, make_item: Callable[..., Item]) -> None:
        """Static pages fall back to page."""
        catalog = ThemeCatalog({"casper": ["page.hbs"]})

        assert catalog.item_view("casper", make_item("contact", page=True)) == "page"

    def test__post__post_view(self, make_item: Callable[..., Item]) -> None:
        """Posts always render with post, even if page templates exist."""
        catalog = ThemeCatalog({"casper": ["page.hbs", "page-news.hbs"]})

        assert catalog.item_view("casper", make_item("news")) == "post"


class TestFromDirectory:
    """Tests for ThemeCatalog.from_directory()."""

    def test__missing_directory__empty_catalog(self, tmp_path: Path) -> None:
        """A missing themes directory yields an empty catalog."""
        catalog = ThemeCatalog.from_directory(tmp_path / "nope")

        assert catalog.templates("casper") == frozenset()

    def test__theme_directories__templates_collected(self, tmp_path: Path) -> None:
        """Only .hbs files directly inside a theme are collected."""
        theme = tmp_path / "casper"
        (theme / "partials").mkdir(parents=True)
        (theme / "tag.hbs").write_text("")
        (theme / "index.hbs").write_text("")
        (theme / "style.css").write_text("")
        (theme / "partials" / "nav.hbs").write_text("")

        catalog = ThemeCatalog.from_directory(tmp_path)

        assert catalog.templates("casper") == frozenset({"tag.hbs", "index.hbs"})
        assert catalog.has_view("casper", "tag") is True
        assert catalog.has_view("casper", "nav") is False
