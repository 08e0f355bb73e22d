"""Syntax tree node types handed to multitick by the host toolchain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class TemplateElement:
    """Text segment of a template literal.

    ``cooked`` is None when the host could not process escapes in ``raw``.
    ``props`` holds any other host fields (comments, locations, type
    arguments); rewritten nodes start without them.
    """

    raw: str
    cooked: str | None
    tail: bool = False
    span: Span | None = None
    props: tuple[tuple[str, Any], ...] = ()


@dataclass(frozen=True, slots=True)
class TemplateLiteral:
    """Quoted literal: text segments alternating with placeholder expressions."""

    quasis: tuple[TemplateElement, ...]
    expressions: tuple[Any, ...] = ()
    span: Span | None = None
    props: tuple[tuple[str, Any], ...] = ()

    def __post_init__(self) -> None:
        if len(self.quasis) != len(self.expressions) + 1:
            raise ValueError(
                f"template literal needs one more text segment than placeholders "
                f"(got {len(self.quasis)} segments, {len(self.expressions)} placeholders)"
            )


@dataclass(frozen=True, slots=True)
class TaggedTemplate:
    """A tag expression applied to a following template literal."""

    tag: Any
    quasi: TemplateLiteral
    span: Span | None = None
    props: tuple[tuple[str, Any], ...] = ()


@dataclass(frozen=True, slots=True)
class Node:
    """Any other host node; children live in ``props``."""

    type: str
    props: tuple[tuple[str, Any], ...] = ()
    span: Span | None = None

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self.props:
            if key == name:
                return value
        return default


def template(*parts: str | Any, span: Span | None = None) -> TemplateLiteral:
    """Build a literal from alternating strings and placeholder expressions.

    Text segments use the same string for raw and cooked values.
    """
    quasis: list[TemplateElement] = []
    expressions: list[Any] = []
    expect_text = True
    for part in parts:
        if expect_text:
            if not isinstance(part, str):
                raise TypeError(f"expected text segment, got {type(part).__name__}")
            quasis.append(TemplateElement(part, part))
        else:
            expressions.append(part)
        expect_text = not expect_text
    if expect_text:
        # Trailing placeholder, close with an empty segment
        quasis.append(TemplateElement("", ""))
    last = quasis[-1]
    quasis[-1] = TemplateElement(last.raw, last.cooked, True, last.span)
    return TemplateLiteral(tuple(quasis), tuple(expressions), span)


def is_trivial(node: Any) -> bool:
    """Return True for the empty literal left behind by two adjacent backticks."""
    return (
        isinstance(node, TemplateLiteral)
        and len(node.quasis) == 1
        and not node.expressions
        and node.quasis[0].raw == ""
    )
