"""Java source model: tree-sitter parsing and compile-time string constants."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING

import tree_sitter_java as tsjava
from tree_sitter import Language, Parser

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from tree_sitter import Node as TSNode
    from tree_sitter import Tree

logger = logging.getLogger(__name__)

_COMMENT_TYPES: frozenset[str] = frozenset({"line_comment", "block_comment"})
_CONSTANT_DECLARATION_TYPES: frozenset[str] = frozenset(
    {"field_declaration", "constant_declaration"}
)
_TYPE_DECLARATION_TYPES: frozenset[str] = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "enum_declaration",
        "record_declaration",
        "annotation_type_declaration",
    }
)

_ESCAPE_RE = re.compile(r"\\(u+[0-9a-fA-F]{4}|[0-3]?[0-7]{1,2}|.)", re.DOTALL)
_SIMPLE_ESCAPES: dict[str, str] = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    "s": " ",
    '"': '"',
    "'": "'",
    "\\": "\\",
}


@lru_cache(maxsize=1)
def java_language() -> Language:
    """Return the tree-sitter Java grammar."""
    return Language(tsjava.language())


def node_text(node: TSNode) -> str:
    """Safely decode tree-sitter node text."""
    return node.text.decode("utf-8") if node.text else ""


def _decode_escape(match: re.Match[str]) -> str:
    escape = match.group(1)
    if escape.startswith("u"):
        return chr(int(escape.lstrip("u"), 16))
    if escape[0].isdigit():
        return chr(int(escape, 8))
    return _SIMPLE_ESCAPES.get(escape, escape)


def decode_string_literal(literal: str) -> str | None:
    """Decode the source text of a Java string literal.

    Returns None for text blocks and anything that is not a plain
    double-quoted literal.
    """
    if literal.startswith('"""'):
        return None
    if len(literal) < 2 or not (literal.startswith('"') and literal.endswith('"')):
        return None
    return _ESCAPE_RE.sub(_decode_escape, literal[1:-1])


@dataclass(frozen=True)
class SourceLocation:
    """Position of a syntax node; line and column are 1-based."""

    file_path: str
    line: int
    column: int

    @classmethod
    def of(cls, file_path: str, node: TSNode) -> SourceLocation:
        # tree-sitter uses 0-based rows and columns.
        return cls(file_path, node.start_point.row + 1, node.start_point.column + 1)

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line}:{self.column}"


def walk(node: TSNode) -> Iterator[TSNode]:
    """Yield *node* and all its descendants in source order, without recursion."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def argument_expressions(arguments: TSNode | None) -> list[TSNode]:
    """Return the expressions of an ``argument_list`` node, comments skipped."""
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type not in _COMMENT_TYPES]


def _is_final(declaration: TSNode) -> bool:
    if declaration.type == "constant_declaration":
        return True
    for child in declaration.children:
        if child.type == "modifiers":
            return any(modifier.type == "final" for modifier in child.children)
    return False


@dataclass
class JavaSource:
    """A parsed Java file plus its table of same-file string constants."""

    file_path: str
    tree: Tree
    type_names: frozenset[str] = frozenset()
    _constants: dict[str, TSNode | None] = field(default_factory=dict, repr=False)

    @classmethod
    def parse(cls, content: str, file_path: str = "<memory>") -> JavaSource:
        """Parse Java *content*; tree-sitter tolerates syntax errors."""
        parser = Parser(java_language())
        tree = parser.parse(content.encode("utf-8"))
        source = cls(file_path=file_path, tree=tree)
        source._index_declarations()
        return source

    @classmethod
    def from_file(cls, path: Path, display_path: str | None = None) -> JavaSource | None:
        """Parse the file at *path*, or return None if it cannot be read.

        Locations report *display_path* when given, else ``str(path)``.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.warning("Cannot read file: %s", path)
            return None
        return cls.parse(content, display_path or str(path))

    @property
    def root(self) -> TSNode:
        return self.tree.root_node

    def _index_declarations(self) -> None:
        type_names: set[str] = set()
        for node in walk(self.root):
            if node.type in _TYPE_DECLARATION_TYPES:
                name = node.child_by_field_name("name")
                if name is not None:
                    type_names.add(node_text(name))
                continue
            if node.type not in _CONSTANT_DECLARATION_TYPES or not _is_final(node):
                continue
            for declarator in node.children_by_field_name("declarator"):
                name = declarator.child_by_field_name("name")
                value = declarator.child_by_field_name("value")
                if name is None or value is None:
                    continue
                key = node_text(name)
                # A name declared twice in one file is ambiguous.
                self._constants[key] = None if key in self._constants else value
        self.type_names = frozenset(type_names)

    def location(self, node: TSNode) -> SourceLocation:
        return SourceLocation.of(self.file_path, node)

    def resolve_string(self, expression: TSNode) -> str | None:
        """Resolve *expression* to a compile-time string constant, or None."""
        return self._resolve(expression, frozenset())

    def _resolve(self, expression: TSNode, resolving: frozenset[str]) -> str | None:
        kind = expression.type
        if kind == "string_literal":
            return decode_string_literal(node_text(expression))
        if kind == "parenthesized_expression":
            inner = argument_expressions(expression)
            return self._resolve(inner[0], resolving) if len(inner) == 1 else None
        if kind == "binary_expression":
            return self._resolve_concatenation(expression, resolving)
        if kind == "identifier":
            return self._resolve_constant(node_text(expression), resolving)
        if kind == "field_access":
            target = expression.child_by_field_name("object")
            name = expression.child_by_field_name("field")
            if target is None or name is None:
                return None
            if target.type == "this" or node_text(target) in self.type_names:
                return self._resolve_constant(node_text(name), resolving)
        return None

    def _resolve_concatenation(
        self, expression: TSNode, resolving: frozenset[str]
    ) -> str | None:
        # `a + b + c` parses left-associative; walk the left spine with a stack.
        operands: list[TSNode] = []
        node = expression
        while node.type == "binary_expression":
            operator = node.child_by_field_name("operator")
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if operator is None or operator.type != "+" or left is None or right is None:
                return None
            operands.append(right)
            node = left
        operands.append(node)

        parts: list[str] = []
        for operand in reversed(operands):
            value = self._resolve(operand, resolving)
            if value is None:
                return None
            parts.append(value)
        return "".join(parts)

    def _resolve_constant(self, name: str, resolving: frozenset[str]) -> str | None:
        if name in resolving:
            logger.debug("Cyclic constant definition: %s", name)
            return None
        value = self._constants.get(name)
        if value is None:
            return None
        return self._resolve(value, resolving | {name})
