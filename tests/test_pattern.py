"""Tests for PathPattern."""

import pytest
from inkstage.core.pattern import InvalidTemplate, PathPattern


class TestCompile:
    """Tests for PathPattern.compile()."""

    def test__literal_and_captures__parsed_in_order(self) -> None:
        """Parse literals and captures in template order."""
        pattern = PathPattern.compile("/tag/:slug/page/:page/")

        assert pattern.captures == ("slug", "page")
        assert pattern.trailing_slash is True

    def test__optional_capture__marked_optional(self) -> None:
        """Parse a trailing optional capture."""
        pattern = PathPattern.compile("/:slug/:edit?")

        assert pattern.segments[-1].optional is True
        assert pattern.trailing_slash is False

    @pytest.mark.parametrize(
        "template",
        [
            "slug/",
            "/:slug/:slug/",
            "/:/",
            "/:1abc/",
            "/foo//bar/",
            "/foo:bar/",
            "/:edit?/:slug/",
        ],
    )
    def test__malformed_template__raises(self, template: str) -> None:
        """Reject malformed templates and repeated capture names."""
        with pytest.raises(InvalidTemplate):
            PathPattern.compile(template)

    def test__invalid_template__is_value_error(self) -> None:
        """InvalidTemplate can be handled as ValueError."""
        with pytest.raises(ValueError):
            PathPattern.compile("/:slug/:slug/")


class TestMatch:
    """Tests for PathPattern.match()."""

    def test__matching_path__returns_fields(self) -> None:
        """Extract captures from a matching path."""
        pattern = PathPattern.compile("/:year/:month/:slug/")

        assert pattern.match("/2015/03/my-post/") == {
            "year": "2015",
            "month": "03",
            "slug": "my-post",
        }

    def test__missing_trailing_slash__still_matches(self) -> None:
        """Trailing slash on the path is optional."""
        pattern = PathPattern.compile("/tag/:slug/")

        assert pattern.match("/tag/news") == {"slug": "news"}

    def test__literal_mismatch__returns_none(self) -> None:
        """Return None when a literal segment differs."""
        pattern = PathPattern.compile("/tag/:slug/")

        assert pattern.match("/category/news/") is None

    def test__missing_required_capture__returns_none(self) -> None:
        """Return None when a required capture is absent."""
        pattern = PathPattern.compile("/:year/:slug/")

        assert pattern.match("/2015/") is None

    def test__extra_segments__returns_none(self) -> None:
        """Return None when the path is longer than the pattern."""
        pattern = PathPattern.compile("/:slug/")

        assert pattern.match("/a/b/c/") is None

    def test__optional_capture_omitted__absent_from_fields(self) -> None:
        """Omitted optional captures are absent from the result."""
        pattern = PathPattern.compile("/:slug/:edit?")

        assert pattern.match("/my-post/") == {"slug": "my-post"}
        assert pattern.match("/my-post/edit/") == {"slug": "my-post", "edit": "edit"}

    def test__empty_segment__returns_none(self) -> None:
        """Paths with empty segments never match."""
        pattern = PathPattern.compile("/:slug/")

        assert pattern.match("//") is None
        assert pattern.match("/a//") is None

    def test__root_pattern__matches_only_root(self) -> None:
        """The root template matches only the root path."""
        pattern = PathPattern.compile("/")

        assert pattern.match("/") == {}
        assert pattern.match("/page/") is None

    def test__relative_path__returns_none(self) -> None:
        """Paths without a leading slash never match."""
        assert PathPattern.compile("/:slug/").match("my-post/") is None


class TestGenerate:
    """Tests for PathPattern.generate()."""

    def test__fields__builds_path_with_trailing_slash(self) -> None:
        """Generate a path in the template's slash style."""
        pattern = PathPattern.compile("/:year/:slug/")

        assert pattern.generate({"year": "2015", "slug": "my-post"}) == "/2015/my-post/"

    def test__root__generates_slash(self) -> None:
        """The root template generates '/'."""
        assert PathPattern.compile("/").generate({}) == "/"

    def test__missing_required__raises(self) -> None:
        """Raise ValueError when a required field is missing."""
        with pytest.raises(ValueError, match="Missing value"):
            PathPattern.compile("/:year/:slug/").generate({"slug": "x"})

    def test__value_with_slash__raises(self) -> None:
        """Raise ValueError for values that would add segments."""
        with pytest.raises(ValueError, match="Invalid value"):
            PathPattern.compile("/:slug/").generate({"slug": "a/b"})

    def test__extra_fields__ignored(self) -> None:
        """Fields without a capture are ignored."""
        pattern = PathPattern.compile("/:slug/")

        assert pattern.generate({"slug": "a", "id": "7"}) == "/a/"

    @pytest.mark.parametrize(
        ("template", "fields"),
        [
            ("/:slug/", {"slug": "hello-world"}),
            ("/:year/:month/:day/:slug/", {"year": "2015", "month": "03", "day": "02", "slug": "x"}),
            ("/tag/:slug/page/:page/", {"slug": "news", "page": "3"}),
            ("/:slug/:edit?", {"slug": "x"}),
            ("/:slug/:edit?", {"slug": "x", "edit": "edit"}),
            ("/archive/:id", {"id": "42"}),
        ],
    )
    def test__generated_path__matches_back_to_fields(self, template: str, fields: dict[str, str]) -> None:
        """match(generate(fields)) returns the same fields."""
        pattern = PathPattern.compile(template)

        assert pattern.match(pattern.generate(fields)) == fields


class TestWithOptional:
    """Tests for PathPattern.with_optional()."""

    def test__trailing_slash_template__keeps_slash_style(self) -> None:
        """Append the optional capture before the trailing slash."""
        pattern = PathPattern.compile("/:slug/").with_optional("edit")

        assert pattern.template == "/:slug/:edit?/"
        assert pattern.generate({"slug": "a"}) == "/a/"
        assert pattern.generate({"slug": "a", "edit": "edit"}) == "/a/edit/"

    def test__no_trailing_slash__appends_segment(self) -> None:
        """Append a new segment to templates without trailing slash."""
        pattern = PathPattern.compile("/:slug").with_optional("edit")

        assert pattern.template == "/:slug/:edit?"
        assert pattern.match("/a/edit") == {"slug": "a", "edit": "edit"}

    def test__existing_name__raises(self) -> None:
        """Reject an optional capture that repeats an existing name."""
        with pytest.raises(InvalidTemplate):
            PathPattern.compile("/:edit/").with_optional("edit")
