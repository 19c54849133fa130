"""Checker orchestrator: load config, discover Java files, scan, format results."""

from __future__ import annotations

import fnmatch
import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.markup import escape

from antorder.analysis.reporting import IssueCollector
from antorder.config import CONFIG_FILENAME, CheckerConfig, load_config
from antorder.java.invocations import scan_source
from antorder.java.source import JavaSource
from antorder.matching.ant_pattern import PatternCache

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from antorder.analysis.reporting import Issue
    from antorder.java.invocations import SourceScan

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CheckError(Exception):
    """Raised when the checker encounters a configuration error."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class CheckResult:
    """Result of a checker run."""

    issues: list[Issue] = field(default_factory=list)
    files_scanned: int = 0
    chains_checked: int = 0
    elapsed_ms: float = 0.0


# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------


def _is_excluded(relative: str, exclude: tuple[str, ...]) -> bool:
    return any(fnmatch.fnmatch(relative, pattern) for pattern in exclude)


def discover_java_files(project_root: Path, exclude: tuple[str, ...]) -> list[Path]:
    """Return ``*.java`` files under *project_root*, sorted, minus *exclude* globs.

    Globs are matched against the POSIX path relative to *project_root*.
    """
    files: list[Path] = []
    for path in sorted(project_root.rglob("*.java")):
        if not path.is_file():
            continue
        relative = path.relative_to(project_root).as_posix()
        if _is_excluded(relative, exclude):
            logger.debug("Excluded: %s", relative)
            continue
        files.append(path)
    return files


# ---------------------------------------------------------------------------
# Main entry points
# ---------------------------------------------------------------------------


def _scan_file(
    path: Path,
    config: CheckerConfig,
    cache: PatternCache | None,
    display_path: str | None = None,
) -> tuple[list[Issue], SourceScan] | None:
    """Parse and scan one file; None when the file is skipped.

    Issues go to a per-file collector so that a file abandoned midway
    contributes nothing.
    """
    source = JavaSource.from_file(path, display_path)
    if source is None:
        return None
    sink = IssueCollector(severity=config.severity)
    try:
        scan = scan_source(source, config, sink, cache)
    except RecursionError:
        logger.warning("Skipping %s: expression nesting too deep", source.file_path)
        return None
    return sink.issues, scan


def check_file(
    path: Path,
    config: CheckerConfig | None = None,
    *,
    cache: PatternCache | None = None,
) -> list[Issue]:
    """Check a single Java file and return its issues.

    Unreadable or unanalysable files produce no issues.
    """
    scanned = _scan_file(path, config or CheckerConfig(), cache)
    return [] if scanned is None else scanned[0]


def check_project(
    project_root: Path,
    *,
    config_path: Path | None = None,
) -> CheckResult:
    """Run the checker over every Java file of a project.

    Parameters
    ----------
    project_root:
        Directory scanned recursively for ``*.java`` files.
    config_path:
        Optional explicit path to the configuration file.  When *None* the
        default location ``<project_root>/.antorder.yml`` is used; a missing
        file means default settings.

    Returns
    -------
    CheckResult
        Summary with issues, counts, and timing.

    Raises
    ------
    CheckError
        When the configuration file is present but invalid.
    """
    start = time.monotonic()

    if config_path is None:
        config_path = project_root / CONFIG_FILENAME

    try:
        config = load_config(config_path)
    except (OSError, ValueError) as exc:
        msg = f"Invalid configuration: {exc}"
        raise CheckError(msg) from exc

    files = discover_java_files(project_root, config.exclude)

    # One compile cache per run; patterns repeat heavily across chains.
    cache = PatternCache()
    issues: list[Issue] = []
    files_scanned = 0
    chains_checked = 0

    for path in files:
        scanned = _scan_file(
            path, config, cache, path.relative_to(project_root).as_posix()
        )
        if scanned is None:
            continue
        file_issues, scan = scanned
        files_scanned += 1
        chains_checked += scan.chains_checked
        issues.extend(file_issues)

    elapsed = (time.monotonic() - start) * 1000
    logger.info(
        "Checked %d files, %d matcher calls, %d issues in %.1f ms",
        files_scanned,
        chains_checked,
        len(issues),
        elapsed,
    )

    return CheckResult(
        issues=issues,
        files_scanned=files_scanned,
        chains_checked=chains_checked,
        elapsed_ms=elapsed,
    )


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def render_rich(result: CheckResult, console: Console) -> None:
    """Render a CheckResult using Rich console output.

    Example output with issues::

        src/main/java/app/SecurityConfig.java:14:26
          Reorder the URL patterns from most to less specific, ...
          less restrictive: src/main/java/app/SecurityConfig.java:12:26

        1 issue found (3 files scanned, 0.1s)
    """
    elapsed_str = f"{result.elapsed_ms / 1000:.1f}s"

    if not result.issues:
        console.print(
            f"[green]✓[/green] No issues found "
            f"({result.files_scanned} files scanned, {elapsed_str})"
        )
        return

    for issue in result.issues:
        colour = "red" if issue.severity == "error" else "yellow"
        console.print(f"[{colour}]✗[/{colour}] [bold]{escape(str(issue.primary))}[/bold]")
        console.print(f"  {issue.message}", markup=False)
        for secondary in issue.secondary:
            location = escape(f"{secondary.label}: {secondary.location}")
            console.print(f"  [dim]{location}[/dim]")
        console.print()

    count = len(result.issues)
    noun = "issue" if count == 1 else "issues"
    console.print(
        f"{count} {noun} found ({result.files_scanned} files scanned, {elapsed_str})"
    )


def _location_dict(location: object) -> dict[str, object]:
    file_path = getattr(location, "file_path", None)
    if file_path is None:
        return {"site": str(location)}
    return {
        "file_path": file_path,
        "line": getattr(location, "line", None),
        "column": getattr(location, "column", None),
    }


def format_json(result: CheckResult) -> str:
    """Format a CheckResult as structured JSON.

    Returns a JSON string with ``issues`` array and ``summary`` object.
    """
    issues_list: list[dict[str, object]] = []
    for issue in result.issues:
        issues_list.append(
            {
                "rule_key": issue.rule_key,
                "severity": issue.severity,
                "message": issue.message,
                "location": _location_dict(issue.primary),
                "secondary": [
                    {"label": s.label, "location": _location_dict(s.location)}
                    for s in issue.secondary
                ],
            }
        )

    output: dict[str, object] = {
        "issues": issues_list,
        "summary": {
            "issues_count": len(result.issues),
            "files_scanned": result.files_scanned,
            "chains_checked": result.chains_checked,
            "elapsed_ms": result.elapsed_ms,
        },
    }

    return json.dumps(output, indent=2)


def format_porcelain(result: CheckResult) -> str:
    """Format a CheckResult as machine-readable one-line-per-issue output.

    Format: ``file_path:line:column:severity:message``

    Returns empty string when there are no issues.
    """
    if not result.issues:
        return ""

    return "\n".join(
        f"{issue.primary}:{issue.severity}:{issue.message}" for issue in result.issues
    )
