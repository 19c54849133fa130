"""Rule-declaration chains: pattern values, node capabilities, backward walk."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

_E = TypeVar("_E")

MESSAGE_TEMPLATE = (
    'Reorder the URL patterns from most to less specific, the pattern "{offending}" '
    'should occur before "{broader}".'
)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternLiteral:
    """A literal URL pattern and the source site it was declared at."""

    value: str
    site: object = field(default=None, compare=False)


@dataclass(frozen=True)
class PatternDeclaration:
    """Literal patterns declared by one node, in left-to-right order."""

    patterns: tuple[PatternLiteral, ...] = ()


@dataclass(frozen=True)
class ConflictFinding:
    """A pattern made unreachable by a broader pattern declared before it."""

    offending: PatternLiteral
    broader: PatternLiteral

    @property
    def message(self) -> str:
        return MESSAGE_TEMPLATE.format(
            offending=self.offending.value, broader=self.broader.value
        )


class RuleNode(Protocol):
    """Read-only view of one node in a rule-declaration chain."""

    @property
    def predecessor(self) -> RuleNode | None:
        """The node this one was declared on top of, if any."""
        ...

    def is_terminator(self) -> bool:
        """True for the node that closes the comparison window."""
        ...

    def pattern_declaration(self) -> PatternDeclaration | None:
        """The node's literal patterns, or None if it is not a monitored declaration."""
        ...


@dataclass(frozen=True)
class ChainNode:
    """In-memory :class:`RuleNode`.

    ``patterns`` of ``None`` marks a node that declares nothing we monitor
    (e.g. ``hasRole(...)`` between two matcher calls).
    """

    patterns: tuple[PatternLiteral, ...] | None = None
    predecessor: ChainNode | None = None
    terminator: bool = False

    def is_terminator(self) -> bool:
        return self.terminator

    def pattern_declaration(self) -> PatternDeclaration | None:
        if self.patterns is None:
            return None
        return PatternDeclaration(self.patterns)

    def then(
        self, *values: str, terminator: bool = False, declares: bool = True
    ) -> ChainNode:
        """Return a new node declared on top of this one."""
        patterns = tuple(PatternLiteral(v) for v in values) if declares else None
        return ChainNode(patterns=patterns, predecessor=self, terminator=terminator)


# ---------------------------------------------------------------------------
# Argument resolution
# ---------------------------------------------------------------------------


def patterns_from_arguments(
    arguments: Iterable[_E],
    resolve: Callable[[_E], str | None],
    site_of: Callable[[_E], object] | None = None,
) -> tuple[PatternLiteral, ...]:
    """Build patterns from argument expressions, keeping declaration order.

    Arguments that *resolve* cannot turn into a string constant are dropped.
    When *site_of* is omitted the expression itself is used as the site.
    """
    patterns: list[PatternLiteral] = []
    for argument in arguments:
        value = resolve(argument)
        if value is None:
            continue
        site = site_of(argument) if site_of is not None else argument
        patterns.append(PatternLiteral(value, site))
    return tuple(patterns)


# ---------------------------------------------------------------------------
# Chain walker
# ---------------------------------------------------------------------------


def iter_predecessors(node: RuleNode) -> Iterator[RuleNode]:
    """Yield the chain predecessors of *node*, nearest first.

    Stops after the terminator (which is yielded) or at the chain start.
    """
    current = node.predecessor
    while current is not None:
        yield current
        if current.is_terminator():
            return
        current = current.predecessor


def collect_prior_patterns(node: RuleNode) -> list[PatternLiteral]:
    """Return every pattern declared before *node* in its chain, oldest first.

    The walk stops at the terminator, whose own patterns are excluded.
    """
    per_node: list[tuple[PatternLiteral, ...]] = []
    for prior in iter_predecessors(node):
        if prior.is_terminator():
            break
        declaration = prior.pattern_declaration()
        if declaration is not None:
            per_node.append(declaration.patterns)

    collected: list[PatternLiteral] = []
    for patterns in reversed(per_node):
        collected.extend(patterns)
    return collected
