"""Java domain: tree-sitter source model and invocation-chain adapter."""

from antorder.java.invocations import (
    InvocationNode,
    SourceScan,
    matcher_invocations,
    scan_source,
)
from antorder.java.source import JavaSource, SourceLocation, decode_string_literal

__all__ = [
    "InvocationNode",
    "JavaSource",
    "SourceLocation",
    "SourceScan",
    "decode_string_literal",
    "matcher_invocations",
    "scan_source",
]
