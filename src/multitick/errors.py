"""Error types with formatted source context."""

from __future__ import annotations

from enum import Enum

from multitick.nodes import Span


class MarginErrorKind(Enum):
    MISSING_LEADING_NEWLINE = "Multi-backtick template literals must start with a newline"
    INCONSISTENT_MARGIN = "Multi-backtick template literals should have consistent margins"


class MalformedLiteralError(Exception):
    """Raised when a multi-backtick literal cannot be dedented."""

    def __init__(
        self,
        kind: MarginErrorKind,
        span: Span | None = None,
        source: str | None = None,
    ) -> None:
        self.kind = kind
        self.message = kind.value
        self.span = span
        self.source = source
        super().__init__(self.format())

    def with_context(self, span: Span | None, source: str | None = None) -> MalformedLiteralError:
        """Return a copy located at *span*, keeping any location already known."""
        return MalformedLiteralError(
            self.kind,
            self.span if self.span is not None else span,
            self.source if self.source is not None else source,
        )

    def format(self, filename: str = "input.js") -> str:
        if self.span is None:
            return f"error: {self.message}"

        location = f"{filename}:{self.span.start.line}:{self.span.start.column}"
        if self.source is None:
            return f"error: {self.message}\n  --> {location}"

        return render_snippet(self.message, location, self.span, self.source)


class TreeFormatError(Exception):
    """Raised when host AST data does not describe a usable tree."""

    def __init__(self, message: str, path: str = "$") -> None:
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}")


def source_line(source: str, line: int) -> str:
    """Return 1-based *line* of *source* without its line ending, or ""."""
    lines = source.splitlines()
    if 1 <= line <= len(lines):
        return lines[line - 1]
    return ""


def underline_width(span: Span, text: str) -> int:
    """Caret count: the whole span on one line, otherwise to end of line."""
    if span.end.line == span.start.line:
        return max(1, span.end.column - span.start.column)
    return max(1, len(text) - span.start.column + 1)


def render_snippet(message: str, location: str, span: Span, source: str) -> str:
    """Render an ``error:`` block with the offending line and a caret marker."""
    text = source_line(source, span.start.line)
    line_num = str(span.start.line)
    gutter = " " * (len(line_num) + 1)
    pad = " " * (span.start.column - 1)
    carets = "^" * underline_width(span, text)
    return "\n".join(
        [
            f"error: {message}",
            f"{gutter}--> {location}",
            f"{gutter}|",
            f"{line_num} | {text}",
            f"{gutter}| {pad}{carets}",
        ]
    )
