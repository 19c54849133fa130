"""Ant-style URL pattern compiler: ``?``, ``*`` and ``**`` wildcards."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Characters that turn a literal into something that is itself an Ant pattern.
_MATCHER_SPECIAL_CHAR_RE = re.compile(r"[?*{]")

# Regex metacharacters escaped before any wildcard substitution.
_REGEX_META_RE = re.compile(r"([.(){}+|^$\[\]\\])")


def escape_regex_chars(pattern: str) -> str:
    """Backslash-escape every regex metacharacter in *pattern*."""
    return _REGEX_META_RE.sub(r"\\\1", pattern)


def ant_pattern_to_regex(pattern: str) -> str:
    """Translate an Ant pattern into an equivalent regular expression.

    The order of the substitutions matters: escaping runs first so that
    user text can never be read as wildcard syntax, and ``**`` is split out
    before the single-star rewrite so that rewrite never sees it.

    Path variables (``{name:[a-z]+}``) are not supported; callers reject
    such patterns before getting here.
    """
    # ? matches exactly one character within a path segment
    escaped = escape_regex_chars(pattern).replace("?", "[^/]")
    # ** matches zero or more directories,
    # * matches zero or more characters within a path segment
    return ".*".join(part.replace("*", "[^/]*") for part in escaped.split("**"))


@dataclass(frozen=True)
class MatchRule:
    """A compiled Ant pattern.

    Stateless and reusable; two rules built from the same pattern string
    behave identically.
    """

    pattern: str
    regex: re.Pattern[str] | None = field(default=None, compare=False, repr=False)

    def matches(self, text: str) -> bool:
        """Return True if *text* is matched by this pattern.

        Returns False when the two strings are not comparable: an empty
        pattern, a pattern with a path variable, or a *text* that is itself
        a glob.  False therefore means "no conflict can be concluded".
        """
        if self.pattern == text:
            return True
        if self.pattern.endswith("**") and text.startswith(self.pattern[:-2]):
            return True
        if self.regex is None or _MATCHER_SPECIAL_CHAR_RE.search(text):
            return False
        return self.regex.fullmatch(text) is not None


def compile_pattern(pattern: str) -> MatchRule:
    """Compile *pattern* into a :class:`MatchRule`.  Never raises."""
    if not pattern or "{" in pattern:
        return MatchRule(pattern)

    expression = ant_pattern_to_regex(pattern)
    try:
        regex = re.compile(expression)
    except re.error as exc:
        logger.debug("Cannot compile %r as %r: %s", pattern, expression, exc)
        return MatchRule(pattern)
    return MatchRule(pattern, regex)


def matches(pattern: str, text: str) -> bool:
    """Shorthand for ``compile_pattern(pattern).matches(text)``."""
    return compile_pattern(pattern).matches(text)


class PatternCache:
    """Memoizes compiled patterns for the duration of one analysis pass."""

    def __init__(self) -> None:
        self._rules: dict[str, MatchRule] = {}

    def get(self, pattern: str) -> MatchRule:
        rule = self._rules.get(pattern)
        if rule is None:
            rule = compile_pattern(pattern)
            self._rules[pattern] = rule
        return rule

    def __len__(self) -> int:
        return len(self._rules)
