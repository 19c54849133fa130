"""Java method-invocation chains exposed as rule-declaration nodes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from antorder.analysis.chain import PatternDeclaration, patterns_from_arguments
from antorder.analysis.order import check_node
from antorder.java.source import argument_expressions, node_text, walk

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

    from antorder.analysis.chain import ConflictFinding
    from antorder.analysis.reporting import IssueSink
    from antorder.config import CheckerConfig
    from antorder.java.source import JavaSource
    from antorder.matching.ant_pattern import PatternCache

logger = logging.getLogger(__name__)


def invocation_name(node: TSNode) -> str | None:
    """Return the method name of a ``method_invocation`` node."""
    name = node.child_by_field_name("name")
    return node_text(name) if name is not None else None


class InvocationNode:
    """A ``method_invocation`` viewed as a link in a rule-declaration chain.

    In ``http.authorizeRequests().antMatchers("/a").permitAll()`` the
    predecessor of ``permitAll()`` is ``antMatchers("/a")``, whose
    predecessor is the ``authorizeRequests()`` terminator.
    """

    def __init__(self, node: TSNode, source: JavaSource, config: CheckerConfig) -> None:
        self.node = node
        self.source = source
        self.config = config
        self.name = invocation_name(node)

    def __repr__(self) -> str:
        return f"InvocationNode({self.name!r} at {self.source.location(self.node)})"

    @property
    def predecessor(self) -> InvocationNode | None:
        target = self.node.child_by_field_name("object")
        if target is None or target.type != "method_invocation":
            return None
        return InvocationNode(target, self.source, self.config)

    def is_terminator(self) -> bool:
        return self.name in self.config.terminator_methods

    def pattern_declaration(self) -> PatternDeclaration | None:
        if self.name not in self.config.matcher_methods:
            return None
        arguments = argument_expressions(self.node.child_by_field_name("arguments"))
        return PatternDeclaration(
            patterns_from_arguments(
                arguments, self.source.resolve_string, self.source.location
            )
        )


def matcher_invocations(source: JavaSource, config: CheckerConfig) -> list[InvocationNode]:
    """Return every monitored matcher invocation in *source*, in source order.

    Chained calls all start at the receiver, so order is by method name.
    """
    found = [
        node
        for node in walk(source.root)
        if node.type == "method_invocation" and invocation_name(node) in config.matcher_methods
    ]
    found.sort(key=_name_position)
    return [InvocationNode(node, source, config) for node in found]


def _name_position(node: TSNode) -> int:
    name = node.child_by_field_name("name")
    return name.start_byte if name is not None else node.start_byte


@dataclass(frozen=True)
class SourceScan:
    """Outcome of scanning one source file."""

    findings: list[ConflictFinding] = field(default_factory=list)
    chains_checked: int = 0


def scan_source(
    source: JavaSource,
    config: CheckerConfig,
    sink: IssueSink,
    cache: PatternCache | None = None,
) -> SourceScan:
    """Check every matcher chain in *source*, reporting conflicts to *sink*."""
    invocations = matcher_invocations(source, config)
    findings: list[ConflictFinding] = []
    for invocation in invocations:
        found = check_node(invocation, sink, cache)
        if found:
            logger.debug("%r: %d conflict(s)", invocation, len(found))
        findings.extend(found)
    return SourceScan(findings=findings, chains_checked=len(invocations))
