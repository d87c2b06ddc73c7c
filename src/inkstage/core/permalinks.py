"""Item permalink templates.

The configured template comes from the ``permalinks`` setting and may change
at runtime. The legacy template is fixed at startup and only exists so that
previously published static pages keep their ``/<slug>/`` URLs.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from inkstage.core.pattern import PathPattern

logger = logging.getLogger(__name__)

EDIT_FIELD = "edit"
DATE_FORMATS = {"year": "%Y", "month": "%m", "day": "%d"}
DATE_FIELDS = tuple(DATE_FORMATS)
DEFAULT_LEGACY_TEMPLATE = "/:slug/"


@dataclass(frozen=True)
class PermalinkTemplate:
    """A permalink pattern plus its edit-suffix variant."""

    pattern: PathPattern
    edit_pattern: PathPattern

    @classmethod
    def from_template(cls, template: str) -> "PermalinkTemplate":
        """Compile a permalink template.

        Raises:
            InvalidTemplate: If the template is malformed
        """
        pattern = PathPattern.compile(template)
        return cls(pattern=pattern, edit_pattern=pattern.with_optional(EDIT_FIELD))

    @property
    def template(self) -> str:
        return self.pattern.template

    @property
    def date_fields(self) -> tuple[str, ...]:
        """Date captures present in the template, in template order."""
        return tuple(name for name in self.pattern.captures if name in DATE_FIELDS)

    def match(self, path: str) -> dict[str, str] | None:
        return self.edit_pattern.match(path)


@dataclass(frozen=True)
class SingleMatch:
    """Fields extracted from a single-item path."""

    fields: dict[str, str]
    edit: str | None
    used_legacy: bool


@dataclass(frozen=True)
class NoMatch:
    """The path matches neither the configured nor the legacy template."""

    path: str


@dataclass(frozen=True)
class PermalinkSnapshot:
    """Immutable pair of configured and legacy templates."""

    configured: PermalinkTemplate
    legacy: PermalinkTemplate

    def resolve_single(self, path: str) -> SingleMatch | NoMatch:
        """Extract item fields from a path.

        The configured template is tried first, then the legacy one.

        Args:
            path: Request path relative to the site subdirectory

        Returns:
            SingleMatch with the captured fields, or NoMatch
        """
        for template, used_legacy in ((self.configured, False), (self.legacy, True)):
            fields = template.match(path)
            if fields is None:
                continue
            edit = fields.pop(EDIT_FIELD, None)
            return SingleMatch(fields=fields, edit=edit, used_legacy=used_legacy)
        return NoMatch(path=path)


@lru_cache(maxsize=32)
def compile_permalink(template: str) -> PermalinkTemplate:
    """Compile a permalink template, memoized by template string."""
    return PermalinkTemplate.from_template(template)


class PermalinkRegistry:
    """Holds the active permalink snapshot.

    Snapshots are replaced by reference whenever the configured template
    changes, so a resolution that already holds a snapshot keeps using it.
    """

    def __init__(self, legacy: PermalinkTemplate, configured: PermalinkTemplate | None = None) -> None:
        """Initialize registry.

        Args:
            legacy: Fixed legacy template, built once from configuration
            configured: Initial configured template (defaults to the legacy one)
        """
        self._legacy = legacy
        self._current = PermalinkSnapshot(configured=configured or legacy, legacy=legacy)

    @property
    def current(self) -> PermalinkSnapshot:
        """Most recently installed snapshot."""
        return self._current

    @property
    def legacy(self) -> PermalinkTemplate:
        return self._legacy

    def snapshot(self, template: str) -> PermalinkSnapshot:
        """Return the snapshot for the given configured template string.

        Installs a new snapshot when the template differs from the current one.

        Raises:
            InvalidTemplate: If the configured template is malformed
        """
        current = self._current
        if current.configured.template == template:
            return current

        snapshot = PermalinkSnapshot(configured=compile_permalink(template), legacy=self._legacy)
        logger.info(f"Permalink template changed to {template}")
        self._current = snapshot
        return snapshot

    def resolve_single(self, path: str) -> SingleMatch | NoMatch:
        """Resolve a path against the current snapshot."""
        return self._current.resolve_single(path)


def format_date_path(published_at: datetime, fields: tuple[str, ...]) -> str:
    """Format a publish timestamp using only the given date fields.

    ``("year", "month")`` yields ``"2015/03"``.
    """
    return "/".join(published_at.strftime(DATE_FORMATS[name]) for name in fields)
