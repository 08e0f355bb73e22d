"""Margin stripping for multi-backtick template literals."""

from __future__ import annotations

import re
from enum import Enum, auto

from multitick.errors import MalformedLiteralError, MarginErrorKind
from multitick.nodes import TemplateElement, TemplateLiteral

_OPENING_NEWLINE = re.compile(r"\A[\t ]*\r?\n")
_CLOSING_NEWLINE = re.compile(r"\r?\n[\t ]*\Z")
_INDENT = re.compile(r"[\t ]*")


class SegmentPosition(Enum):
    ONLY = auto()
    FIRST = auto()
    MIDDLE = auto()
    LAST = auto()


class LineRole(Enum):
    LEADING = auto()  # line 0 of a segment; after a placeholder it is a continuation
    FOLLOWING = auto()


# Per segment position: (strip opening newline, strip closing newline)
_TRIMS: dict[SegmentPosition, tuple[bool, bool]] = {
    SegmentPosition.ONLY: (True, True),
    SegmentPosition.FIRST: (True, False),
    SegmentPosition.MIDDLE: (False, False),
    SegmentPosition.LAST: (False, True),
}

# Per line role: must a non-empty line start with the margin?
_MARGIN_REQUIRED: dict[LineRole, bool] = {
    LineRole.LEADING: False,
    LineRole.FOLLOWING: True,
}


def segment_position(index: int, count: int) -> SegmentPosition:
    if count == 1:
        return SegmentPosition.ONLY
    if index == 0:
        return SegmentPosition.FIRST
    if index == count - 1:
        return SegmentPosition.LAST
    return SegmentPosition.MIDDLE


def line_role(index: int) -> LineRole:
    return LineRole.LEADING if index == 0 else LineRole.FOLLOWING


def find_margin(first_raw: str) -> str:
    """Return the margin for a literal whose first segment is *first_raw*.

    The text must open with a newline. The margin is the leading run of spaces
    and tabs on the first non-empty line, or "" when every line is empty.
    """
    lines = first_raw.split("\n")
    if lines[0] != "":
        raise MalformedLiteralError(MarginErrorKind.MISSING_LEADING_NEWLINE)
    for line in lines:
        if line:
            return _INDENT.match(line).group()
    return ""


def dedent_lines(text: str, margin: str) -> str:
    """Remove *margin* from the start of every line of *text*."""
    dedented: list[str] = []
    for i, line in enumerate(text.split("\n")):
        if line.startswith(margin):
            dedented.append(line[len(margin) :])
        elif line and _MARGIN_REQUIRED[line_role(i)]:
            raise MalformedLiteralError(MarginErrorKind.INCONSISTENT_MARGIN)
        else:
            dedented.append(line)
    return "\n".join(dedented)


def dedent_and_trim(text: str, margin: str, position: SegmentPosition) -> str:
    """Trim the boundary newlines owed by *position*, then dedent."""
    strip_opening, strip_closing = _TRIMS[position]
    if strip_closing:
        text = _CLOSING_NEWLINE.sub("", text, count=1)
    if strip_opening:
        text = _OPENING_NEWLINE.sub("", text, count=1)
    return dedent_lines(text, margin)


def normalize(literal: TemplateLiteral) -> TemplateLiteral:
    """Dedent a literal recovered from a multi-backtick chain.

    Raw and cooked text are processed independently; a missing cooked value
    stays missing. Placeholder expressions are carried over untouched.
    Raises MalformedLiteralError if the literal does not open with a newline
    or if a line falls short of the margin.
    """
    margin = find_margin(literal.quasis[0].raw)
    count = len(literal.quasis)

    quasis: list[TemplateElement] = []
    for i, element in enumerate(literal.quasis):
        position = segment_position(i, count)
        raw = dedent_and_trim(element.raw, margin, position)
        cooked = None
        if element.cooked is not None:
            cooked = dedent_and_trim(element.cooked, margin, position)
        quasis.append(TemplateElement(raw, cooked, element.tail))

    return TemplateLiteral(tuple(quasis), literal.expressions)
