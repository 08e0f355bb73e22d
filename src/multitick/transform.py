"""Top-down rewriting of multi-backtick literals in a node tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from multitick.errors import MalformedLiteralError
from multitick.margins import normalize
from multitick.nodes import Node, TaggedTemplate, TemplateLiteral
from multitick.resolve import Matched, resolve


@dataclass(frozen=True, slots=True)
class Replaced:
    """The node was a multi-backtick literal; splice in ``node``."""

    node: TemplateLiteral | TaggedTemplate
    match: Matched


@dataclass(frozen=True, slots=True)
class Unchanged:
    """The node is an ordinary tagged template."""


@dataclass(frozen=True, slots=True)
class Rejected:
    """The node is a multi-backtick literal that cannot be dedented."""

    error: MalformedLiteralError


UNCHANGED = Unchanged()


def replacement(match: Matched) -> TemplateLiteral | TaggedTemplate:
    """Build the node that stands in for a resolved chain."""
    literal = normalize(match.literal)
    if match.tag is None:
        return literal
    return TaggedTemplate(match.tag, literal)


def expand(node: TaggedTemplate) -> Replaced | Unchanged | Rejected:
    """Resolve and dedent a single tagged template without raising."""
    match = resolve(node)
    if not match:
        return UNCHANGED
    try:
        return Replaced(replacement(match), match)
    except MalformedLiteralError as exc:
        return Rejected(exc.with_context(match.literal.span or node.span))


class Transformer:
    """Visitor that rewrites every multi-backtick literal in a tree.

    Nodes are visited on the way down. A replacement is not re-examined;
    its tag and placeholder expressions are.
    """

    name = "multiBacktickTemplate"

    def __init__(self, source: str | None = None) -> None:
        self.source = source
        self.rewritten = 0
        self.replacements: list[TemplateLiteral | TaggedTemplate] = []

    def visit(self, value: Any) -> Any:
        if isinstance(value, TaggedTemplate):
            result = expand(value)
            if isinstance(result, Rejected):
                raise result.error.with_context(None, self.source)
            if isinstance(result, Replaced):
                self.rewritten += 1
                node = self._visit_children(result.node)
                self.replacements.append(node)
                return node
            return self._visit_children(value)
        if isinstance(value, (TemplateLiteral, Node)):
            return self._visit_children(value)
        if isinstance(value, tuple):
            return tuple(self.visit(item) for item in value)
        return value

    def _visit_children(self, node: TaggedTemplate | TemplateLiteral | Node) -> Any:
        if isinstance(node, TaggedTemplate):
            return TaggedTemplate(
                self.visit(node.tag),
                self._visit_children(node.quasi),
                node.span,
                self._visit_props(node.props),
            )
        if isinstance(node, TemplateLiteral):
            expressions = tuple(self.visit(expr) for expr in node.expressions)
            return TemplateLiteral(
                node.quasis, expressions, node.span, self._visit_props(node.props)
            )
        return Node(node.type, self._visit_props(node.props), node.span)

    def _visit_props(self, props: tuple[tuple[str, Any], ...]) -> tuple[tuple[str, Any], ...]:
        return tuple((key, self.visit(value)) for key, value in props)


def transform_tree(tree: Any, source: str | None = None) -> Any:
    """Return *tree* with every multi-backtick literal rewritten.

    *source* is the program text, attached to errors for context display.
    Raises the first MalformedLiteralError met in traversal order.
    """
    return Transformer(source).visit(tree)
