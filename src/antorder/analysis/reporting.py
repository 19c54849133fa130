"""Issue reporting: sink protocol and the in-memory collector."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

RULE_KEY = "url-pattern-order"
LESS_RESTRICTIVE_LABEL = "less restrictive"
VALID_SEVERITIES: frozenset[str] = frozenset({"error", "warn"})


@dataclass(frozen=True)
class SecondaryLocation:
    """Extra context attached to an issue."""

    label: str
    location: object


@dataclass(frozen=True)
class Issue:
    """A single reported issue."""

    message: str
    primary: object
    secondary: tuple[SecondaryLocation, ...] = ()
    rule_key: str = RULE_KEY
    severity: str = "warn"  # "error" | "warn"


class IssueSink(Protocol):
    """Anything that accepts reported issues."""

    def report(
        self,
        message: str,
        primary: object,
        secondary: Sequence[tuple[str, object]],
    ) -> None: ...


@dataclass
class IssueCollector:
    """Sink that keeps every reported issue in memory."""

    severity: str = "warn"
    issues: list[Issue] = field(default_factory=list)

    def report(
        self,
        message: str,
        primary: object,
        secondary: Sequence[tuple[str, object]],
    ) -> None:
        self.issues.append(
            Issue(
                message=message,
                primary=primary,
                secondary=tuple(SecondaryLocation(label, loc) for label, loc in secondary),
                severity=self.severity,
            )
        )
