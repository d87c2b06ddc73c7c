"""URL grammar compilation.

A template such as ``/:year/:month/:slug/`` compiles into a PathPattern that
matches request paths segment by segment and generates canonical paths from
field values. Matching never involves the HTTP routing layer.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass

_CAPTURE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class InvalidTemplate(ValueError):
    """Raised when a URL template cannot be compiled."""


@dataclass(frozen=True)
class Segment:
    """One ``/``-delimited piece of a template.

    Literal:  ``tag``     (is_capture=False)
    Capture:  ``:slug``   (is_capture=True)
    Optional: ``:edit?``  (is_capture=True, optional=True)
    """

    value: str
    is_capture: bool = False
    optional: bool = False


@dataclass(frozen=True)
class PathPattern:
    """Compiled matcher and generator for one URL grammar.

    Immutable once compiled. Optional captures are only allowed at the end
    of the template, so a path may stop early without ambiguity.
    """

    template: str
    segments: tuple[Segment, ...]
    trailing_slash: bool

    @classmethod
    def compile(cls, template: str) -> "PathPattern":
        """Compile a template string.

        Args:
            template: Template such as ``/tag/:slug/`` or ``/:slug/:edit?``

        Returns:
            Compiled PathPattern

        Raises:
            InvalidTemplate: If the template is malformed or repeats a capture name
        """
        if not template.startswith("/"):
            raise InvalidTemplate(f"Template must start with '/': {template!r}")
        if "//" in template:
            raise InvalidTemplate(f"Template contains an empty segment: {template!r}")

        trailing_slash = template.endswith("/")
        body = template[1:-1] if trailing_slash else template[1:]

        segments: list[Segment] = []
        seen: set[str] = set()
        after_optional = False
        for raw in body.split("/") if body else []:
            segment = _parse_segment(raw, template)
            if segment.is_capture:
                if segment.value in seen:
                    raise InvalidTemplate(
                        f"Duplicate capture ':{segment.value}' in {template!r}"
                    )
                seen.add(segment.value)
            if after_optional and not segment.optional:
                raise InvalidTemplate(
                    f"Required segment '{raw}' follows an optional capture in {template!r}"
                )
            after_optional = after_optional or segment.optional
            segments.append(segment)

        return cls(template=template, segments=tuple(segments), trailing_slash=trailing_slash)

    @property
    def captures(self) -> tuple[str, ...]:
        """Capture names in template order."""
        return tuple(s.value for s in self.segments if s.is_capture)

    def with_optional(self, name: str) -> "PathPattern":
        """Return a new pattern with an extra trailing optional capture.

        The trailing slash style of the original template is kept, so
        ``/:slug/`` becomes ``/:slug/:edit?/``.

        Raises:
            InvalidTemplate: If ``name`` is invalid or already captured
        """
        if not _CAPTURE_NAME_RE.match(name):
            raise InvalidTemplate(f"Invalid capture name: {name!r}")
        if name in self.captures:
            raise InvalidTemplate(f"Duplicate capture ':{name}' in {self.template!r}")

        base = self.template if self.trailing_slash else f"{self.template}/"
        template = f"{base}:{name}?" + ("/" if self.trailing_slash else "")
        return PathPattern(
            template=template,
            segments=(*self.segments, Segment(name, is_capture=True, optional=True)),
            trailing_slash=self.trailing_slash,
        )

    def match(self, path: str) -> dict[str, str] | None:
        """Match a request path against this pattern.

        A trailing slash on the path is optional. Optional captures that are
        absent from the path are absent from the returned map.

        Args:
            path: Request path (e.g., "/2015/03/my-post/")

        Returns:
            Captured fields, or None if the path does not match
        """
        if not path.startswith("/") or "//" in path:
            return None

        body = path[1:]
        if body.endswith("/"):
            body = body[:-1]
        parts = body.split("/") if body else []
        if len(parts) > len(self.segments):
            return None

        fields: dict[str, str] = {}
        for index, segment in enumerate(self.segments):
            if index >= len(parts):
                if segment.optional:
                    break
                return None
            part = parts[index]
            if segment.is_capture:
                fields[segment.value] = part
            elif part != segment.value:
                return None
        return fields

    def generate(self, fields: Mapping[str, str]) -> str:
        """Build the canonical path for the given field values.

        Args:
            fields: Values for the pattern's captures (extra keys are ignored)

        Returns:
            Path in the template's trailing slash style

        Raises:
            ValueError: If a required value is missing, a value is empty or
                contains ``/``, or an optional value follows an omitted one
        """
        parts: list[str] = []
        omitted: str | None = None
        for segment in self.segments:
            if not segment.is_capture:
                parts.append(segment.value)
                continue

            value = fields.get(segment.value)
            if value is None:
                if not segment.optional:
                    raise ValueError(f"Missing value for ':{segment.value}'")
                omitted = segment.value
                continue
            if omitted is not None:
                raise ValueError(
                    f"':{segment.value}' given after omitted optional ':{omitted}'"
                )
            if not value or "/" in value:
                raise ValueError(f"Invalid value for ':{segment.value}': {value!r}")
            parts.append(value)

        path = "/" + "/".join(parts)
        if parts and self.trailing_slash:
            path += "/"
        return path


def _parse_segment(raw: str, template: str) -> Segment:
    if not raw.startswith(":"):
        if ":" in raw:
            raise InvalidTemplate(f"Unexpected ':' in segment '{raw}' of {template!r}")
        return Segment(raw)

    name = raw[1:]
    optional = name.endswith("?")
    if optional:
        name = name[:-1]
    if not _CAPTURE_NAME_RE.match(name):
        raise InvalidTemplate(f"Invalid capture name '{raw}' in {template!r}")
    return Segment(name, is_capture=True, optional=optional)
