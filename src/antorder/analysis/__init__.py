"""Analysis domain: rule chains, order analyzer, issue reporting."""

from antorder.analysis.chain import (
    ChainNode,
    ConflictFinding,
    PatternDeclaration,
    PatternLiteral,
    RuleNode,
    collect_prior_patterns,
    iter_predecessors,
    patterns_from_arguments,
)
from antorder.analysis.order import check_node, find_conflicts
from antorder.analysis.reporting import (
    Issue,
    IssueCollector,
    IssueSink,
    SecondaryLocation,
)

__all__ = [
    "ChainNode",
    "ConflictFinding",
    "Issue",
    "IssueCollector",
    "IssueSink",
    "PatternDeclaration",
    "PatternLiteral",
    "RuleNode",
    "SecondaryLocation",
    "check_node",
    "collect_prior_patterns",
    "find_conflicts",
    "iter_predecessors",
    "patterns_from_arguments",
]
