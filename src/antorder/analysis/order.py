"""Specificity-order analyzer: flag patterns shadowed by earlier, broader ones."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from antorder.analysis.chain import ConflictFinding, collect_prior_patterns
from antorder.analysis.reporting import LESS_RESTRICTIVE_LABEL
from antorder.matching.ant_pattern import PatternCache

if TYPE_CHECKING:
    from antorder.analysis.chain import PatternLiteral, RuleNode
    from antorder.analysis.reporting import IssueSink

logger = logging.getLogger(__name__)


def _first_broader(
    pattern: PatternLiteral,
    prior: list[PatternLiteral],
    cache: PatternCache,
) -> PatternLiteral | None:
    """Scan *prior* most-recent first; return the first pattern matching *pattern*."""
    for candidate in reversed(prior):
        if cache.get(candidate.value).matches(pattern.value):
            return candidate
    return None


def find_conflicts(node: RuleNode, cache: PatternCache | None = None) -> list[ConflictFinding]:
    """Return the ordering conflicts of *node* against its chain.

    At most one finding per pattern of *node*: the nearest broader pattern
    declared before it, within the terminator window.
    """
    declaration = node.pattern_declaration()
    if declaration is None or not declaration.patterns:
        return []

    prior = collect_prior_patterns(node)
    if not prior:
        return []

    if cache is None:
        cache = PatternCache()

    findings: list[ConflictFinding] = []
    for pattern in declaration.patterns:
        broader = _first_broader(pattern, prior, cache)
        if broader is None:
            continue
        logger.debug("Pattern %r is shadowed by %r", pattern.value, broader.value)
        findings.append(ConflictFinding(offending=pattern, broader=broader))
    return findings


def check_node(
    node: RuleNode,
    sink: IssueSink,
    cache: PatternCache | None = None,
) -> list[ConflictFinding]:
    """Report the conflicts of *node* to *sink* and return them."""
    findings = find_conflicts(node, cache)
    for finding in findings:
        sink.report(
            finding.message,
            finding.offending.site,
            [(LESS_RESTRICTIVE_LABEL, finding.broader.site)],
        )
    return findings
