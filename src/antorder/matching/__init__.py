"""Matching domain: Ant-style pattern compilation."""

from antorder.matching.ant_pattern import (
    MatchRule,
    PatternCache,
    ant_pattern_to_regex,
    compile_pattern,
    escape_regex_chars,
    matches,
)

__all__ = [
    "MatchRule",
    "PatternCache",
    "ant_pattern_to_regex",
    "compile_pattern",
    "escape_regex_chars",
    "matches",
]
