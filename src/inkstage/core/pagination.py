"""Page number parsing and canonicalization.

Page 1 never carries a page segment in its URL, so ``/page/1/`` and
``/page/abc/`` are both redirected rather than rendered. A page past the
first has exactly one spelling: its decimal value with no sign and no
leading zeros. ``/page/02/`` is valid but redirects to ``/page/2/``.
"""

import re
from dataclasses import dataclass

_PAGE_TOKEN_RE = re.compile(r"^[+-]?[0-9]+$")

# Longer tokens are rejected before int() conversion.
MAX_TOKEN_LENGTH = 32


@dataclass(frozen=True)
class PageNumber:
    """Parsed page token.

    ``value`` is None when the token was present but not a positive integer.
    ``explicit`` records whether the URL carried a page segment at all, and
    ``raw`` holds the token text as it appeared in the URL.
    """

    value: int | None
    explicit: bool
    raw: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class InRange:
    """Requested page exists."""

    page: int


@dataclass(frozen=True)
class OutOfRange:
    """Requested page is past the end; ``last_page`` is where to go instead."""

    last_page: int


FIRST_PAGE = PageNumber(value=1, explicit=False)


class PageNumberResolver:
    """Parses page tokens and decides whether they are canonical."""

    def parse(self, raw: str | None) -> PageNumber:
        """Parse a raw page token from a path segment.

        Args:
            raw: Token text, or None when the URL had no page segment

        Returns:
            PageNumber with ``value`` None for invalid tokens
        """
        if raw is None:
            return FIRST_PAGE
        if len(raw) > MAX_TOKEN_LENGTH or not _PAGE_TOKEN_RE.match(raw):
            return PageNumber(value=None, explicit=True, raw=raw)
        value = int(raw)
        if value < 1:
            return PageNumber(value=None, explicit=True, raw=raw)
        return PageNumber(value=value, explicit=True, raw=raw)

    def is_canonical_token(self, page: PageNumber) -> bool:
        """Whether the page token may be served as-is.

        Invalid tokens, an explicit ``1`` and any spelling other than the
        plain decimal value (``02``, ``+2``) are not canonical.
        """
        if not page.is_valid:
            return False
        if not page.explicit:
            return True
        return page.value != 1 and page.raw == str(page.value)

    def clamp_or_reject(self, requested: int, total_pages: int) -> InRange | OutOfRange:
        """Check a requested page against the number of available pages.

        An empty result set still has one (empty) page.
        """
        last_page = max(total_pages, 1)
        if requested > last_page:
            return OutOfRange(last_page=last_page)
        return InRange(page=requested)
