"""antorder CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from antorder import __version__


@click.group()
@click.version_option(version=__version__, prog_name="antorder")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """antorder - URL pattern order checker for Spring Security configuration."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "porcelain"]),
    default=None,
    help="Output format (default: rich if TTY, porcelain if piped).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit 1 if issues found.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: <project>/.antorder.yml).",
)
@click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)
def check(
    *,
    fmt: str | None,
    strict: bool,
    config_path: Path | None,
    project: Path | None,
) -> None:
    """Check URL pattern ordering in the project's Java sources.

    Exit codes: 0 = clean or issues without --strict,
    1 = issues with --strict, 2 = configuration error.
    """
    from antorder.checker import CheckError, check_project, format_json, format_porcelain

    project_root = project or Path.cwd()

    # Resolve output format: explicit flag > TTY detection.
    if fmt is None:
        fmt = "rich" if sys.stdout.isatty() else "porcelain"

    try:
        result = check_project(project_root, config_path=config_path)
    except CheckError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    if fmt == "rich":
        from rich.console import Console

        from antorder.checker import render_rich

        render_rich(result, Console())
    else:
        formatters = {
            "json": format_json,
            "porcelain": format_porcelain,
        }
        output = formatters[fmt](result)
        if output:
            click.echo(output)

    if strict and result.issues:
        sys.exit(1)


@main.command()
@click.argument("pattern")
@click.argument("text")
@click.option("--json", "as_json", is_flag=True, help="JSON output.")
def match(*, pattern: str, text: str, as_json: bool) -> None:
    """Test whether Ant PATTERN matches TEXT.

    Exit code 0 = match, 1 = no match.
    """
    from antorder.matching.ant_pattern import compile_pattern

    rule = compile_pattern(pattern)
    matched = rule.matches(text)
    regex = rule.regex.pattern if rule.regex is not None else None

    if as_json:
        click.echo(
            json.dumps(
                {"pattern": pattern, "text": text, "matches": matched, "regex": regex},
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        click.echo(f"{'match' if matched else 'no match'}: {pattern!r} vs {text!r}")
        if regex is not None:
            click.echo(f"regex: {regex}")
        else:
            click.echo("regex: (not comparable)")

    if not matched:
        sys.exit(1)
