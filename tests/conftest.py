"""Shared test fixtures and helpers."""

from __future__ import annotations

from typing import Any

import pytest

from multitick.nodes import Node, TaggedTemplate, TemplateLiteral, template


def ident(name: str) -> Node:
    """An ESTree-style identifier node."""
    return Node("Identifier", (("name", name),))


def call(callee: Any, *args: Any) -> Node:
    return Node("CallExpression", (("callee", callee), ("arguments", args)))


def empty() -> TemplateLiteral:
    return template("")


def backticks(n: int, body: TemplateLiteral, tag: Any = None) -> Any:
    """Build the tree a parser yields for *body* quoted with *n* backticks.

    Each leading and trailing pair of backticks becomes an empty literal;
    they chain left to right as tag applications.
    """
    pairs = (n - 1) // 2
    if tag is None and pairs == 0:
        return body

    node = tag
    for _ in range(pairs):
        node = empty() if node is None else TaggedTemplate(node, empty())
    node = TaggedTemplate(node, body)
    for _ in range(pairs):
        node = TaggedTemplate(node, empty())
    return node


def unbalanced(opening: int, closing: int, body: TemplateLiteral, tag: Any = None) -> Any:
    """Like backticks(), with different run lengths on each side."""
    node = tag
    for _ in range((opening - 1) // 2):
        node = empty() if node is None else TaggedTemplate(node, empty())
    node = body if node is None else TaggedTemplate(node, body)
    for _ in range((closing - 1) // 2):
        node = TaggedTemplate(node, empty())
    return node


def program(expression: Any) -> Node:
    """Wrap *expression* as ``console.log(expression);`` in a Program."""
    log = Node(
        "MemberExpression",
        (("object", ident("console")), ("property", ident("log")), ("computed", False)),
    )
    statement = Node("ExpressionStatement", (("expression", call(log, expression)),))
    return Node("Program", (("body", (statement,)), ("sourceType", "module")))


@pytest.fixture
def yaml_body() -> TemplateLiteral:
    """The indented YAML sample from the plugin test suite."""
    return template(
        "\n      yaml:\n        is:\n          supported: nicely\n    ",
    )
