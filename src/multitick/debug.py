"""--debug tree dump to stderr."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from multitick.nodes import Node, TaggedTemplate, TemplateLiteral

_NODE_TYPES = (Node, TaggedTemplate, TemplateLiteral)


def dump_tree(tree: Any, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable node tree to *file*."""
    _dump(tree, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump(value: Any, depth: int, f: TextIO) -> None:
    if isinstance(value, TaggedTemplate):
        _dump_tagged(value, depth, f)
    elif isinstance(value, TemplateLiteral):
        _dump_literal(value, depth, f)
    elif isinstance(value, Node):
        _dump_node(value, depth, f)
    elif isinstance(value, tuple):
        for item in value:
            _dump(item, depth, f)


def _dump_tagged(node: TaggedTemplate, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}TaggedTemplate\n")
    f.write(f"{_indent(depth + 1)}tag:\n")
    _dump(node.tag, depth + 2, f)
    _dump_literal(node.quasi, depth + 1, f)


def _dump_literal(node: TemplateLiteral, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}TemplateLiteral\n")
    for i, element in enumerate(node.quasis):
        f.write(f"{_indent(depth + 1)}Text({element.raw!r})\n")
        if i < len(node.expressions):
            f.write(f"{_indent(depth + 1)}Placeholder\n")
            _dump(node.expressions[i], depth + 2, f)


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    name = node.get("name")
    label = f"{node.type} {name}" if isinstance(name, str) else node.type
    f.write(f"{_indent(depth)}{label}\n")
    for key, child in node.props:
        if _has_nodes(child):
            f.write(f"{_indent(depth + 1)}{key}:\n")
            _dump(child, depth + 2, f)


def _has_nodes(value: Any) -> bool:
    if isinstance(value, _NODE_TYPES):
        return True
    if isinstance(value, tuple):
        return any(_has_nodes(item) for item in value)
    return False
