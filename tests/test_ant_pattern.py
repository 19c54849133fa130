"""Tests for antorder.matching.ant_pattern: Ant pattern compilation and matching."""

from __future__ import annotations

import pytest

from antorder.matching.ant_pattern import (
    MatchRule,
    PatternCache,
    ant_pattern_to_regex,
    compile_pattern,
    escape_regex_chars,
    matches,
)

# ---------------------------------------------------------------------------
# Regex translation
# ---------------------------------------------------------------------------


class TestEscapeRegexChars:
    def test_plain_path_unchanged(self) -> None:
        assert escape_regex_chars("/admin/users") == "/admin/users"

    def test_all_metacharacters_escaped(self) -> None:
        assert escape_regex_chars(".(){}+|^$[]\\") == r"\.\(\)\{\}\+\|\^\$\[\]\\"

    def test_wildcards_left_alone(self) -> None:
        assert escape_regex_chars("/a/?/*/**") == "/a/?/*/**"


class TestAntPatternToRegex:
    def test_question_mark(self) -> None:
        assert ant_pattern_to_regex("/a?") == "/a[^/]"

    def test_single_star(self) -> None:
        assert ant_pattern_to_regex("/a/*") == "/a/[^/]*"

    def test_double_star(self) -> None:
        assert ant_pattern_to_regex("/a/**/b") == "/a/.*/b"

    def test_mixed(self) -> None:
        assert ant_pattern_to_regex("/**/*.html") == r"/.*/[^/]*\.html"

    def test_dollar_next_to_double_star(self) -> None:
        assert ant_pattern_to_regex("/a$**") == r"/a\$.*"

    def test_triple_star(self) -> None:
        # "**" is consumed first, the leftover "*" stays within a segment.
        assert ant_pattern_to_regex("/***") == "/.*[^/]*"

    def test_nul_character_stays_literal(self) -> None:
        assert ant_pattern_to_regex("/a\x00**") == "/a\x00.*"


# ---------------------------------------------------------------------------
# Matching semantics
# ---------------------------------------------------------------------------


class TestExactAndDoubleStar:
    def test_identity(self) -> None:
        assert compile_pattern("/admin").matches("/admin")

    @pytest.mark.parametrize("pattern", ["/admin/{id}", "/a*", "/a/**", ""])
    def test_identity_for_globs_and_empty(self, pattern: str) -> None:
        assert compile_pattern(pattern).matches(pattern)

    def test_double_star_prefix_nested(self) -> None:
        assert compile_pattern("/admin/**").matches("/admin/anything/nested")

    def test_double_star_matches_stripped_prefix(self) -> None:
        assert compile_pattern("/admin/**").matches("/admin/")

    def test_double_star_does_not_match_parent_without_slash(self) -> None:
        assert not compile_pattern("/admin/**").matches("/admin")

    def test_double_star_prefix_shortcut_accepts_glob_text(self) -> None:
        # The prefix shortcut runs before the "text is a glob" guard.
        assert compile_pattern("/admin/**").matches("/admin/users/*")

    def test_bare_double_star_matches_everything(self) -> None:
        assert compile_pattern("**").matches("/anything/at/all")

    def test_double_star_prefix_with_path_variable(self) -> None:
        assert compile_pattern("/user/{id}/**").matches("/user/{id}/edit")


class TestSingleStarAndQuestionMark:
    def test_single_star_stays_in_segment(self) -> None:
        assert compile_pattern("/a*").matches("/axyz")
        assert not compile_pattern("/a*").matches("/a/b")

    def test_single_star_matches_empty(self) -> None:
        assert compile_pattern("/a*").matches("/a")

    def test_question_mark_one_char(self) -> None:
        rule = compile_pattern("/file?.txt")
        assert rule.matches("/file1.txt")
        assert not rule.matches("/file.txt")
        assert not rule.matches("/file12.txt")
        assert not rule.matches("/file/.txt")

    def test_inner_double_star_crosses_segments(self) -> None:
        rule = compile_pattern("/api/**/edit")
        assert rule.matches("/api/users/42/edit")
        assert not rule.matches("/api/users/42/view")

    def test_extension_glob(self) -> None:
        rule = compile_pattern("/**/*.css")
        assert rule.matches("/static/css/site.css")
        assert not rule.matches("/static/css/site.js")

    def test_match_is_anchored(self) -> None:
        rule = compile_pattern("/a/*")
        assert not rule.matches("/prefix/a/b")
        assert not rule.matches("/a/b/c")


class TestIncomparable:
    def test_path_variable_pattern(self) -> None:
        assert not compile_pattern("/user/{id:[0-9]+}").matches("/user/123")

    def test_path_variable_has_no_regex(self) -> None:
        assert compile_pattern("/user/{id}").regex is None

    def test_text_is_glob(self) -> None:
        assert not compile_pattern("/admin/*").matches("/admin/*/x")

    def test_text_with_question_mark(self) -> None:
        assert not compile_pattern("/a/*").matches("/a/?")

    def test_text_with_brace(self) -> None:
        assert not compile_pattern("/a/*").matches("/a/{id}")

    def test_empty_pattern_matches_only_empty(self) -> None:
        rule = compile_pattern("")
        assert rule.matches("")
        assert not rule.matches("/anything")

    def test_double_star_against_glob_text_in_other_directory(self) -> None:
        assert not compile_pattern("/admin/**").matches("/other/*")


class TestMetacharactersAreLiteral:
    def test_dot_is_literal(self) -> None:
        assert not compile_pattern("/index.html").matches("/indexXhtml")
        assert compile_pattern("/*.html").matches("/index.html")

    def test_plus_and_parens_are_literal(self) -> None:
        rule = compile_pattern("/c++/(v1)/*")
        assert rule.matches("/c++/(v1)/docs")
        assert not rule.matches("/cc/v1/docs")

    def test_unbalanced_brackets_do_not_raise(self) -> None:
        rule = compile_pattern("/a[/*")
        assert rule.matches("/a[/b")
        assert not rule.matches("/ab/b")

    def test_backslash_is_literal(self) -> None:
        assert compile_pattern("/a\\b*").matches("/a\\bc")

    def test_nul_character_is_literal(self) -> None:
        assert not matches("/a\x00b", "/aZZZb")
        assert matches("/a\x00b/*", "/a\x00b/c")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestMatchRule:
    def test_rules_from_same_pattern_are_equal(self) -> None:
        assert compile_pattern("/a/**") == compile_pattern("/a/**")

    def test_frozen(self) -> None:
        rule = compile_pattern("/a")
        with pytest.raises(AttributeError):
            rule.pattern = "/b"  # type: ignore[misc]

    def test_rule_without_regex_only_does_exact_and_prefix(self) -> None:
        rule = MatchRule("/a/*")
        assert rule.matches("/a/*")
        assert not rule.matches("/a/b")

    def test_matches_shorthand(self) -> None:
        assert matches("/admin/**", "/admin/users")
        assert not matches("/admin/users", "/admin/**")


class TestPatternCache:
    def test_reuses_compiled_rule(self) -> None:
        cache = PatternCache()
        first = cache.get("/a/*")
        assert cache.get("/a/*") is first
        assert len(cache) == 1

    def test_distinct_patterns(self) -> None:
        cache = PatternCache()
        cache.get("/a/*")
        cache.get("/b/*")
        assert len(cache) == 2

    def test_cached_rule_equivalent_to_fresh(self) -> None:
        cache = PatternCache()
        for text in ("/a/b", "/a/b/c", "/a"):
            assert cache.get("/a/*").matches(text) == compile_pattern("/a/*").matches(text)
