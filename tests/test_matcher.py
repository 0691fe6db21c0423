"""Tests for routepath.matcher — token-to-regex compiler."""

import re
from urllib.parse import unquote

import pytest

from routepath.config import PathOptions
from routepath.generator import compile
from routepath.matcher import (
    CompiledMatcher,
    compile_matcher,
    path_to_regexp,
    regexp_to_regexp,
    tokens_to_regexp,
)
from routepath.parser import parse
from routepath.tokens import Parameter


def _groups(template: str, path: str, options: PathOptions | None = None) -> tuple | None:
    match = compile_matcher(template, options).regex.match(path)
    return match.groups() if match else None


class TestRegexSource:
    def test_required_parameter(self) -> None:
        regex = tokens_to_regexp(parse("/profile/:id"))
        assert regex.pattern == r"^\/profile\/([^\/]+?)(?:\/)?\Z"
        assert regex.flags & re.IGNORECASE

    def test_optional_parameter(self) -> None:
        regex = tokens_to_regexp(parse("/profile/:key?"))
        assert regex.pattern == r"^\/profile(?:\/([^\/]+?))?(?:\/)?\Z"

    def test_partial_optional_keeps_prefix_outside(self) -> None:
        regex = tokens_to_regexp(parse("/avatar/:size?.png"))
        assert regex.pattern == r"^\/avatar\/([^\/]+?)?\.png(?:\/)?\Z"

    def test_repeat(self) -> None:
        regex = tokens_to_regexp(parse("/files/:path+"))
        assert regex.pattern == r"^\/files\/((?:[^\/]+?)(?:\/(?:[^\/]+?))*)(?:\/)?\Z"

    def test_empty_tokens(self) -> None:
        assert tokens_to_regexp([]).pattern == r"^(?:\/)?\Z"

    def test_sensitive_drops_ignorecase(self) -> None:
        regex = tokens_to_regexp(parse("/a"), options=PathOptions(sensitive=True))
        assert not regex.flags & re.IGNORECASE

    def test_strict_has_no_trailing_delimiter(self) -> None:
        regex = tokens_to_regexp(parse("/a"), options=PathOptions(strict=True))
        assert regex.pattern == r"^\/a\Z"

    def test_prefix_with_ends_with(self) -> None:
        options = PathOptions(end=False, ends_with=("?",))
        regex = tokens_to_regexp(parse("/profile", options), options=options)
        assert regex.pattern == r"^\/profile(?:\/(?=\?|\Z))?(?=\/|\?|\Z)"

    def test_strict_prefix(self) -> None:
        options = PathOptions(end=False, strict=True)
        regex = tokens_to_regexp(parse("/profile", options), options=options)
        assert regex.pattern == r"^\/profile(?=\/|\Z)"

    def test_custom_delimiter_trailing(self) -> None:
        options = PathOptions(delimiter=".")
        regex = tokens_to_regexp(parse("/a", options), options=options)
        assert regex.pattern == r"^\/a(?:\.)?\Z"

    def test_no_start_anchor(self) -> None:
        regex = tokens_to_regexp(parse("/a"), options=PathOptions(start=False))
        assert not regex.pattern.startswith("^")


class TestMatching:
    def test_required(self) -> None:
        assert _groups("/profile/:id", "/profile/1") == ("1",)
        assert _groups("/profile/:id", "/profile") is None
        assert _groups("/profile/:id", "/profile/1/2") is None

    def test_trailing_slash_tolerated(self) -> None:
        assert _groups("/profile/:id", "/profile/1/") == ("1",)

    def test_strict_rejects_trailing_slash(self) -> None:
        options = PathOptions(strict=True)
        assert _groups("/profile/:id", "/profile/1/", options) is None
        assert _groups("/profile/:id", "/profile/1", options) == ("1",)

    def test_case_insensitive_by_default(self) -> None:
        assert _groups("/profile/:id", "/PROFILE/1") == ("1",)
        assert _groups("/profile/:id", "/PROFILE/1", PathOptions(sensitive=True)) is None

    def test_optional(self) -> None:
        assert _groups("/profile/:id/:key?", "/profile/1") == ("1", None)
        assert _groups("/profile/:id/:key?", "/profile/1/k") == ("1", "k")

    def test_repeat(self) -> None:
        assert _groups("/files/:path+", "/files/a/b/c") == ("a/b/c",)
        assert _groups("/files/:path+", "/files") is None
        assert _groups("/files/:path*", "/files") == (None,)

    def test_custom_pattern(self) -> None:
        assert _groups(r"/user/:id(\d+)", "/user/42") == ("42",)
        assert _groups(r"/user/:id(\d+)", "/user/abc") is None

    def test_unnamed(self) -> None:
        assert _groups(r"/(\d+)/(\w+)", "/1/ab") == ("1", "ab")

    def test_prefix_matching_without_end(self) -> None:
        regex = compile_matcher("/profile", PathOptions(end=False)).regex
        assert regex.match("/profile/settings")
        assert regex.match("/profile")
        assert not regex.match("/profiles")

    def test_end_delimited_prefix(self) -> None:
        regex = compile_matcher("/static/", PathOptions(end=False)).regex
        assert regex.match("/static/app.js")

    def test_ends_with(self) -> None:
        regex = compile_matcher("/profile/:id", PathOptions(ends_with=("?",))).regex
        match = regex.match("/profile/1?tab=2")
        assert match is not None
        assert match.group(1) == "1"
        assert regex.match("/profile/1")

    def test_unanchored_start(self) -> None:
        regex = compile_matcher("/profile/:id", PathOptions(start=False)).regex
        match = regex.search("/app/profile/7")
        assert match is not None
        assert match.group(1) == "7"

    def test_prefix_with_ends_with_matching(self) -> None:
        regex = compile_matcher("/profile", PathOptions(end=False, ends_with=("?",))).regex
        query = regex.match("/profile?tab=2")
        assert query is not None
        assert query.group(0) == "/profile"
        slash_query = regex.match("/profile/?tab=2")
        assert slash_query is not None
        assert slash_query.group(0) == "/profile/"
        assert regex.match("/profile/settings")
        assert not regex.match("/profiles")

    def test_strict_prefix_leaves_delimiter_unconsumed(self) -> None:
        strict = compile_matcher("/profile", PathOptions(end=False, strict=True)).regex
        loose = compile_matcher("/profile", PathOptions(end=False)).regex
        strict_match = strict.match("/profile/")
        loose_match = loose.match("/profile/")
        assert strict_match is not None
        assert loose_match is not None
        assert strict_match.group(0) == "/profile"
        assert loose_match.group(0) == "/profile/"
        assert strict.match("/profile/x")
        assert not strict.match("/profilex")

    def test_custom_delimiter(self) -> None:
        options = PathOptions(delimiter=".")
        assert compile_matcher("/a", options).regex.match("/a.")
        assert not compile_matcher("/a", options).regex.match("/a/")
        assert _groups("x:id", "xab", options) == ("ab",)
        assert _groups("x:id", "xa.b", options) is None

    def test_custom_delimiter_prefix(self) -> None:
        regex = compile_matcher("/a", PathOptions(delimiter=".", end=False)).regex
        match = regex.match("/a.b")
        assert match is not None
        assert match.group(0) == "/a"
        assert not regex.match("/a/b")


class TestKeys:
    def test_keys_in_group_order(self) -> None:
        keys: list[Parameter] = []
        tokens_to_regexp(parse(r"/:a/(\d+)/:b"), keys)
        assert [k.name for k in keys] == ["a", 0, "b"]

    def test_compiled_matcher(self) -> None:
        matcher = compile_matcher("/other/:id/:key")
        assert isinstance(matcher, CompiledMatcher)
        assert [k.name for k in matcher.keys] == ["id", "key"]

    def test_compiled_matcher_frozen(self) -> None:
        matcher = compile_matcher("/a")
        with pytest.raises(AttributeError):
            matcher.keys = ()  # type: ignore[misc]


class TestPathToRegexp:
    def test_regex_passthrough(self) -> None:
        pattern = re.compile(r"^/(\d+)/(?:x)/(\w+)$")
        keys: list[Parameter] = []
        assert path_to_regexp(pattern, keys) is pattern
        assert [k.name for k in keys] == [0, 1]
        assert keys[0].prefix == ""
        assert keys[0].optional is False

    def test_regex_passthrough_without_keys(self) -> None:
        pattern = re.compile(r"^/(\d+)$")
        assert regexp_to_regexp(pattern) is pattern

    def test_string(self) -> None:
        assert path_to_regexp("/a/:b").match("/a/x")

    def test_array_alternation(self) -> None:
        keys: list[Parameter] = []
        regex = path_to_regexp(["/a/:id", "/b/:name"], keys)
        assert [k.name for k in keys] == ["id", "name"]
        match = regex.match("/b/x")
        assert match is not None
        assert match.groups() == (None, "x")


ROUND_TRIP_CASES = [
    ("/profile/:id", {"id": "1"}),
    ("/other/:id/:key", {"id": "myid", "key": "mykey"}),
    ("/profile/:id/:key?", {"id": "7", "key": "k"}),
    (r"/user/:id(\d+)/posts/:slug", {"id": "42", "slug": "hello-world"}),
    ("/avatar/:size?.png", {"size": "lg"}),
    ("/file.:ext", {"ext": "tar"}),
    ("/search/:q", {"q": "a b&c"}),
    (r"/(\d+)/(\w+)", {0: "12", 1: "ab"}),
]


class TestRoundTrip:
    @pytest.mark.parametrize(("template", "params"), ROUND_TRIP_CASES)
    def test_generated_path_matches_and_extracts(
        self, template: str, params: dict[str | int, str]
    ) -> None:
        path = compile(template)(params)
        matcher = compile_matcher(template)
        match = matcher.regex.match(path)
        assert match is not None, (template, path)

        extracted = {
            key.name: unquote(value)
            for key, value in zip(matcher.keys, match.groups(), strict=True)
            if value is not None
        }
        assert extracted == params

    def test_repeated_values(self) -> None:
        template = "/files/:path+"
        path = compile(template)({"path": ["a", "b", "c"]})
        match = compile_matcher(template).regex.match(path)
        assert match is not None
        assert match.group(1).split("/") == ["a", "b", "c"]
