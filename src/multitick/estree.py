"""Conversion between ESTree/Babel JSON ASTs and multitick nodes."""

from __future__ import annotations

from typing import Any

from multitick.errors import TreeFormatError
from multitick.nodes import (
    Node,
    Position,
    Span,
    TaggedTemplate,
    TemplateElement,
    TemplateLiteral,
)


_TAGGED_FIELDS = ("tag", "quasi")
_LITERAL_FIELDS = ("quasis", "expressions")
_ELEMENT_FIELDS = ("value", "tail")


def from_estree(data: Any, path: str = "$") -> Any:
    """Convert parsed ESTree JSON into nodes.

    Typed objects become nodes and arrays become tuples. Untyped objects
    (``loc``, ``extra``) and scalars are kept as they are.
    """
    if isinstance(data, list):
        return tuple(from_estree(item, f"{path}[{i}]") for i, item in enumerate(data))
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        return data

    kind = data["type"]
    if kind == "TaggedTemplateExpression":
        quasi = from_estree(_field(data, "quasi", path), f"{path}.quasi")
        if not isinstance(quasi, TemplateLiteral):
            raise TreeFormatError("tagged template quasi must be a TemplateLiteral", path)
        tag = from_estree(_field(data, "tag", path), f"{path}.tag")
        return TaggedTemplate(tag, quasi, _span(data), _props(data, path, _TAGGED_FIELDS))
    if kind == "TemplateLiteral":
        return _template_literal(data, path)
    if kind == "TemplateElement":
        return _template_element(data, path)

    return Node(kind, _props(data, path, ()))


def to_estree(value: Any) -> Any:
    """Convert nodes back into ESTree JSON data."""
    if isinstance(value, tuple):
        return [to_estree(item) for item in value]
    if isinstance(value, Node):
        data = {"type": value.type}
        for key, child in value.props:
            data[key] = to_estree(child)
        return data
    if isinstance(value, TaggedTemplate):
        data = {
            "type": "TaggedTemplateExpression",
            "tag": to_estree(value.tag),
            "quasi": to_estree(value.quasi),
        }
    elif isinstance(value, TemplateLiteral):
        data = {
            "type": "TemplateLiteral",
            "quasis": [to_estree(q) for q in value.quasis],
            "expressions": [to_estree(e) for e in value.expressions],
        }
    elif isinstance(value, TemplateElement):
        data = {
            "type": "TemplateElement",
            "value": {"raw": value.raw, "cooked": value.cooked},
            "tail": value.tail,
        }
    else:
        return value

    for key, child in value.props:
        data[key] = to_estree(child)
    if value.span is not None and "loc" not in data:
        data.update(_location(value.span))
    return data


def _props(
    data: dict[str, Any], path: str, fields: tuple[str, ...]
) -> tuple[tuple[str, Any], ...]:
    """Convert every key not modelled by a dedicated field."""
    return tuple(
        (key, from_estree(value, f"{path}.{key}"))
        for key, value in data.items()
        if key != "type" and key not in fields
    )


def _field(data: dict[str, Any], key: str, path: str) -> Any:
    if key not in data:
        raise TreeFormatError(f"{data['type']} is missing '{key}'", path)
    return data[key]


def _template_literal(data: dict[str, Any], path: str) -> TemplateLiteral:
    quasis = from_estree(_field(data, "quasis", path), f"{path}.quasis")
    expressions = from_estree(data.get("expressions", []), f"{path}.expressions")
    if not isinstance(quasis, tuple) or not all(isinstance(q, TemplateElement) for q in quasis):
        raise TreeFormatError("quasis must be a list of TemplateElement", path)
    if not isinstance(expressions, tuple):
        raise TreeFormatError("expressions must be a list", path)
    try:
        return TemplateLiteral(
            quasis, expressions, _span(data), _props(data, path, _LITERAL_FIELDS)
        )
    except ValueError as exc:
        raise TreeFormatError(str(exc), path) from exc


def _template_element(data: dict[str, Any], path: str) -> TemplateElement:
    value = _field(data, "value", path)
    if not isinstance(value, dict) or not isinstance(value.get("raw"), str):
        raise TreeFormatError("TemplateElement value needs a 'raw' string", path)
    cooked = value.get("cooked")
    if cooked is not None and not isinstance(cooked, str):
        raise TreeFormatError("TemplateElement 'cooked' must be a string or null", path)
    return TemplateElement(
        value["raw"],
        cooked,
        bool(data.get("tail", False)),
        _span(data),
        _props(data, path, _ELEMENT_FIELDS),
    )


def _span(data: dict[str, Any]) -> Span | None:
    """Read Babel-style ``loc`` (0-based columns) into a 1-based Span."""
    loc = data.get("loc")
    if not isinstance(loc, dict):
        return None
    start = loc.get("start")
    end = loc.get("end")
    if not isinstance(start, dict) or not isinstance(end, dict):
        return None
    try:
        return Span(
            _position(start, data.get("start")),
            _position(end, data.get("end")),
        )
    except (KeyError, TypeError):
        return None


def _position(point: dict[str, Any], offset: Any) -> Position:
    if not isinstance(offset, int):
        offset = point.get("index", 0)
    return Position(int(point["line"]), int(point["column"]) + 1, int(offset))


def _location(span: Span) -> dict[str, Any]:
    return {
        "start": span.start.offset,
        "end": span.end.offset,
        "loc": {
            "start": {"line": span.start.line, "column": span.start.column - 1},
            "end": {"line": span.end.line, "column": span.end.column - 1},
        },
    }
