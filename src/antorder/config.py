"""Checker configuration: parse and validate ``.antorder.yml``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import yaml

from antorder.analysis.reporting import VALID_SEVERITIES

if TYPE_CHECKING:
    from pathlib import Path

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CONFIG_FILENAME = ".antorder.yml"
SUPPORTED_SCHEMA_VERSIONS: frozenset[int] = frozenset({1})

DEFAULT_MATCHER_METHODS: tuple[str, ...] = ("antMatchers",)
DEFAULT_TERMINATOR_METHODS: tuple[str, ...] = ("authorizeRequests",)
DEFAULT_EXCLUDE: tuple[str, ...] = (".git/**", "build/**", "target/**", "node_modules/**")

_KNOWN_KEYS: frozenset[str] = frozenset(
    {"version", "matcher_methods", "terminator_methods", "exclude", "severity"}
)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CheckerConfig:
    """Settings for one checker run."""

    matcher_methods: frozenset[str] = frozenset(DEFAULT_MATCHER_METHODS)
    terminator_methods: frozenset[str] = frozenset(DEFAULT_TERMINATOR_METHODS)
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    severity: str = "warn"  # "error" | "warn"


# ---------------------------------------------------------------------------
# YAML parsing
# ---------------------------------------------------------------------------


def _parse_name_list(
    data: dict[str, object], key: str, default: tuple[str, ...]
) -> frozenset[str]:
    """Parse a non-empty list of method names."""
    raw = data.get(key)
    if raw is None:
        return frozenset(default)
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        msg = f"{CONFIG_FILENAME}: '{key}' must be a list of strings"
        raise ValueError(msg)
    names = frozenset(item.strip() for item in raw if item.strip())
    if not names:
        msg = f"{CONFIG_FILENAME}: '{key}' must not be empty"
        raise ValueError(msg)
    return names


def parse_config(data: object) -> CheckerConfig:
    """Validate already-loaded YAML data and build a :class:`CheckerConfig`.

    ``None`` (an empty file) yields the defaults.
    """
    if data is None:
        return CheckerConfig()
    if not isinstance(data, dict):
        msg = f"{CONFIG_FILENAME} must be a YAML mapping"
        raise ValueError(msg)

    unknown = sorted(str(key) for key in data if key not in _KNOWN_KEYS)
    if unknown:
        msg = f"{CONFIG_FILENAME}: unknown keys {unknown}"
        raise ValueError(msg)

    version = data.get("version", 1)
    # bool is an int subclass; `version: true` would otherwise equal 1.
    if isinstance(version, bool) or version not in SUPPORTED_SCHEMA_VERSIONS:
        expected = sorted(SUPPORTED_SCHEMA_VERSIONS)
        msg = f"{CONFIG_FILENAME}: unsupported version {version}, expected one of {expected}"
        raise ValueError(msg)

    matcher_methods = _parse_name_list(data, "matcher_methods", DEFAULT_MATCHER_METHODS)
    terminator_methods = _parse_name_list(
        data, "terminator_methods", DEFAULT_TERMINATOR_METHODS
    )
    overlap = matcher_methods & terminator_methods
    if overlap:
        msg = (
            f"{CONFIG_FILENAME}: methods {sorted(overlap)} cannot be both "
            "matcher and terminator methods"
        )
        raise ValueError(msg)

    exclude_raw = data.get("exclude")
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    if exclude_raw is not None:
        if isinstance(exclude_raw, str):
            exclude = (exclude_raw,)
        elif isinstance(exclude_raw, list) and all(isinstance(item, str) for item in exclude_raw):
            exclude = tuple(exclude_raw)
        else:
            msg = f"{CONFIG_FILENAME}: 'exclude' must be a string or a list of strings"
            raise ValueError(msg)

    severity = str(data.get("severity", "warn"))
    if severity not in VALID_SEVERITIES:
        msg = (
            f"{CONFIG_FILENAME}: invalid severity '{severity}', "
            f"must be one of {sorted(VALID_SEVERITIES)}"
        )
        raise ValueError(msg)

    return CheckerConfig(
        matcher_methods=matcher_methods,
        terminator_methods=terminator_methods,
        exclude=exclude,
        severity=severity,
    )


def load_config(config_path: Path) -> CheckerConfig:
    """Load ``.antorder.yml`` from *config_path*.

    A missing file yields the defaults.  Raises ``ValueError`` on schema
    errors or malformed YAML.
    """
    if not config_path.is_file():
        return CheckerConfig()

    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        msg = f"{CONFIG_FILENAME}: invalid YAML: {exc}"
        raise ValueError(msg) from exc

    return parse_config(data)
