"""Recover the literal hidden inside a chain of multi-backtick wrappers.

The host grammar only pairs single backticks, so ``text`` opened and closed
with three backticks and tagged with ``sql`` parses as three tagged templates::

    TaggedTemplate(                      # trailing ``
        TaggedTemplate(                  # `text`
            TaggedTemplate(sql, ``),     # leading ``
            `text`,
        ),
        ``,
    )

Resolution unwinds the trailing empty literals, then checks that the same
number of empty literals were opened before the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from multitick.nodes import TaggedTemplate, TemplateLiteral, is_trivial


@dataclass(frozen=True, slots=True)
class Matched:
    """A balanced chain: the real tag (None if untagged) and literal."""

    tag: Any
    literal: TemplateLiteral
    depth: int

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class NoMatch:
    """The node is an ordinary, or unbalanced, tagged template."""

    def __bool__(self) -> bool:
        return False


NO_MATCH = NoMatch()


@dataclass(frozen=True, slots=True)
class _Balanced:
    tag: Any


def is_trivial_wrapper(node: Any) -> bool:
    """Return True for a tagged template whose literal is empty."""
    return isinstance(node, TaggedTemplate) and is_trivial(node.quasi)


def unwind(node: TaggedTemplate) -> tuple[TaggedTemplate, int]:
    """Strip trailing empty-literal layers, returning the payload node and depth."""
    current = node
    depth = 0
    while is_trivial(current.quasi) and isinstance(current.tag, TaggedTemplate):
        current = current.tag
        depth += 1
    return current, depth


def _balance(opening: Any, steps: int) -> _Balanced | None:
    for _ in range(steps):
        if not is_trivial_wrapper(opening):
            return None
        opening = opening.tag

    if is_trivial_wrapper(opening):
        # Tagged opening run, e.g. sql```...```
        return _Balanced(opening.tag)
    if is_trivial(opening):
        return _Balanced(None)
    return None


def resolve(node: TaggedTemplate) -> Matched | NoMatch:
    """Resolve *node* as a multi-backtick literal.

    Returns NO_MATCH for ordinary tagged templates and for chains whose
    opening and closing runs differ in length.
    """
    payload, depth = unwind(node)
    if depth == 0:
        return NO_MATCH

    balanced = _balance(payload.tag, depth - 1)
    if balanced is None:
        return NO_MATCH

    # Extra opening backticks leave either a bare empty literal (one spare pair)
    # or an empty-literal wrapper (several spare pairs) where the tag would be
    if is_trivial(balanced.tag) or is_trivial_wrapper(balanced.tag):
        return NO_MATCH

    return Matched(balanced.tag, payload.quasi, depth)
