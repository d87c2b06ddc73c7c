"""JSON content file loading.

Content file structure::

    {
        "settings": {"title": "My Blog", "permalinks": "/:year/:slug/"},
        "posts": [
            {
                "id": "1",
                "uuid": "2f6b...",
                "slug": "welcome",
                "title": "Welcome",
                "html": "<p>Hello</p>",
                "page": false,
                "status": "published",
                "published_at": "2015-03-02T10:00:00+00:00",
                "tags": [{"slug": "news", "name": "News"}],
                "author": {"name": "Jo", "slug": "jo"}
            }
        ]
    }
"""

import json
from datetime import UTC, datetime
from pathlib import Path

from inkstage.store.memory import ContentSnapshot
from inkstage.store.models import Author, Item, Tag

DEFAULT_SETTINGS: dict[str, str] = {
    "title": "Inkstage",
    "description": "Thoughts, stories and ideas.",
    "postsPerPage": "6",
    "permalinks": "/:slug/",
    "activeTheme": "casper",
}


def load_snapshot(path: Path) -> ContentSnapshot:
    """Load a content snapshot from a JSON file.

    Missing settings are filled from DEFAULT_SETTINGS.

    Args:
        path: Path to JSON content file

    Returns:
        ContentSnapshot with items in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the content is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Content file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    return parse_snapshot(data)


def parse_snapshot(data: object) -> ContentSnapshot:
    """Build a ContentSnapshot from decoded JSON data.

    Raises:
        ValueError: If the content is invalid
    """
    if not isinstance(data, dict):
        raise ValueError("Content must be a dictionary")

    settings = dict(DEFAULT_SETTINGS)
    settings.update(_parse_settings(data.get("settings")))

    posts_raw = data.get("posts", [])
    if not isinstance(posts_raw, list):
        raise ValueError("posts must be a list")
    items = tuple(_parse_item(raw, index) for index, raw in enumerate(posts_raw))

    return ContentSnapshot(items=items, settings=settings)


def _parse_settings(data: object) -> dict[str, str]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("settings must be a dictionary")

    settings: dict[str, str] = {}
    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, str | int):
            raise ValueError(f"settings.{key} must be a string or integer")
        settings[key] = str(value)
    return settings


def _parse_item(data: object, index: int) -> Item:
    if not isinstance(data, dict):
        raise ValueError(f"posts[{index}] must be a dictionary")

    for key in ("id", "slug", "title"):
        if key not in data:
            raise ValueError(f"posts[{index}].{key} is required")

    html = data.get("html", "")
    if not isinstance(html, str):
        raise ValueError(f"posts[{index}].html must be a string")

    page = data.get("page", False)
    if not isinstance(page, bool):
        raise ValueError(f"posts[{index}].page must be a boolean")

    status = data.get("status", "published")
    if not isinstance(status, str):
        raise ValueError(f"posts[{index}].status must be a string")

    return Item(
        id=str(data["id"]),
        uuid=str(data.get("uuid", data["id"])),
        slug=str(data["slug"]),
        title=str(data["title"]),
        html=html,
        page=page,
        status=status,
        published_at=_parse_datetime(data.get("published_at"), index),
        tags=tuple(_parse_tag(tag, index) for tag in data.get("tags", [])),
        author=_parse_author(data.get("author"), index),
    )


def _parse_datetime(value: object, index: int) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"posts[{index}].published_at must be an ISO 8601 string")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"posts[{index}].published_at is invalid: {value}") from e
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def _parse_tag(data: object, index: int) -> Tag:
    if not isinstance(data, dict) or not isinstance(data.get("slug"), str):
        raise ValueError(f"posts[{index}].tags items must have a slug")
    return Tag(slug=data["slug"], name=str(data.get("name", data["slug"])))


def _parse_author(data: object, index: int) -> Author | None:
    if data is None:
        return None
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        raise ValueError(f"posts[{index}].author must have a name")
    return Author(name=data["name"], slug=str(data.get("slug", "")))
