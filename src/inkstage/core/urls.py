"""Canonical URL construction.

Every path produced here includes the site subdirectory, which is derived
from the configured site URL (``https://example.com/blog`` -> ``/blog``).
Page 1 never carries a page suffix.
"""

from urllib.parse import urlsplit

from inkstage.core.permalinks import DATE_FORMATS, PermalinkSnapshot
from inkstage.core.types import URLPath
from inkstage.store.models import Item


class UrlBuilder:
    """Builds canonical paths and absolute URLs for a site."""

    def __init__(self, site_url: str, *, editor_path: str = "/ghost/editor/") -> None:
        """Initialize URL builder.

        Args:
            site_url: Absolute site URL, optionally with a subdirectory
            editor_path: Path of the external editing surface, relative to the subdirectory
        """
        parts = urlsplit(site_url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Site URL must be absolute: {site_url}")

        self._origin = f"{parts.scheme}://{parts.netloc}"
        self._subdir = parts.path.rstrip("/")
        self._editor_path = "/" + editor_path.strip("/") + "/"

    @property
    def subdir(self) -> str:
        """Site subdirectory without trailing slash ("" at the root)."""
        return self._subdir

    @property
    def site_url(self) -> str:
        """Absolute URL of the home page."""
        return self.absolute(self.home())

    def home(self) -> URLPath:
        return URLPath(f"{self._subdir}/")

    def listing(self, page: int = 1) -> URLPath:
        if page > 1:
            return URLPath(f"{self._subdir}/page/{page}/")
        return self.home()

    def tag(self, slug: str, page: int = 1) -> URLPath:
        url = f"{self._subdir}/tag/{slug}/"
        if page > 1:
            url += f"page/{page}/"
        return URLPath(url)

    def feed(self, page: int = 1, tag: str | None = None) -> URLPath:
        url = f"{self._subdir}/tag/{tag}/rss/" if tag is not None else f"{self._subdir}/rss/"
        if page > 1:
            url += f"{page}/"
        return URLPath(url)

    def editor(self, item_id: str) -> URLPath:
        return URLPath(f"{self._subdir}{self._editor_path}{item_id}/")

    def item(self, item: Item, snapshot: PermalinkSnapshot) -> URLPath:
        """Canonical path of a single item.

        Static pages always use the legacy template.

        Raises:
            ValueError: If the template needs a field the item cannot supply
                (e.g. a date field on an unpublished item)
        """
        template = snapshot.legacy if item.page else snapshot.configured
        return URLPath(self._subdir + template.pattern.generate(item_fields(item)))

    def absolute(self, path: str) -> str:
        """Join a subdirectory-qualified path onto the site origin."""
        return f"{self._origin}{path}"

    def strip_subdir(self, path: str) -> str | None:
        """Return ``path`` relative to the subdirectory, or None if outside it.

        The bare subdirectory (no trailing slash) maps to "".
        """
        if not self._subdir:
            return path
        if path == self._subdir:
            return ""
        if path.startswith(f"{self._subdir}/"):
            return path[len(self._subdir) :]
        return None


def item_fields(item: Item) -> dict[str, str]:
    """Field values an item can supply to a permalink template."""
    fields = {"slug": item.slug, "id": item.id}
    if item.published_at is not None:
        for name, fmt in DATE_FORMATS.items():
            fields[name] = item.published_at.strftime(fmt)
    if item.author is not None and item.author.slug:
        fields["author"] = item.author.slug
    return fields
