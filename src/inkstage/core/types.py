"""Core type definitions."""

from typing import NewType

# URL path relative to the site root, including the subdirectory
# (e.g., "/blog/tag/news/"). Distinct from absolute URLs to catch mix-ups.
URLPath = NewType("URLPath", str)
