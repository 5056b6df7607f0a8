"""Schema nodes describing tool parameters, and argument validation against them.

A schema is a tree of immutable ``Node`` values. Wrapper kinds (OPTIONAL,
DEFAULTED) always carry exactly one child. Trees are built once when the
tool catalog is imported and shared read-only afterwards.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class Kind(Enum):
    """The closed set of schema node kinds."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ANY = "any"
    OPTIONAL = "optional"
    DEFAULTED = "defaulted"
    ARRAY = "array"
    OBJECT = "object"
    RECORD = "record"
    UNION = "union"


PRIMITIVE_KINDS = (Kind.STRING, Kind.NUMBER, Kind.BOOLEAN)
WRAPPER_KINDS = (Kind.OPTIONAL, Kind.DEFAULTED)

# Ids arrive as numbers or as decimal strings such as "1496198395707"
ID_PATTERN = r"\s*\d+\s*"


@dataclass(frozen=True)
class Node:
    """One node of a parameter schema.

    Only the attributes relevant to ``kind`` are set:
        child: wrapped node (OPTIONAL, DEFAULTED), element (ARRAY),
            value node (RECORD)
        fields: ordered (name, node) pairs (OBJECT)
        alternatives: candidate nodes (UNION)
        default: fallback value (DEFAULTED)
    """

    kind: Kind
    child: Node | None = None
    fields: tuple[tuple[str, Node], ...] = ()
    alternatives: tuple[Node, ...] = ()
    default: Any = None
    description: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = None
    choices: tuple[str, ...] = ()
    pattern: str | None = None

    def __post_init__(self) -> None:
        if self.kind in WRAPPER_KINDS or self.kind in (Kind.ARRAY, Kind.RECORD):
            if self.child is None:
                raise ValueError(f"{self.kind.value} node requires a child node")


class SchemaValidationError(ValueError):
    """Caller arguments do not satisfy a tool's schema."""

    def __init__(self, issues: list[tuple[str, str]]):
        self.issues = issues
        super().__init__(
            "Validation error: "
            + "; ".join(f"{path or '(root)'}: {message}" for path, message in issues)
        )


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def string(description: str | None = None, *, min_length: int | None = None,
           choices: tuple[str, ...] | list[str] = (), pattern: str | None = None) -> Node:
    return Node(Kind.STRING, description=description, min_length=min_length,
                choices=tuple(choices), pattern=pattern)


def number(description: str | None = None, *, minimum: float | None = None,
           maximum: float | None = None) -> Node:
    return Node(Kind.NUMBER, description=description, minimum=minimum, maximum=maximum)


def boolean(description: str | None = None) -> Node:
    return Node(Kind.BOOLEAN, description=description)


def any_value(description: str | None = None) -> Node:
    return Node(Kind.ANY, description=description)


def optional(node: Node, description: str | None = None) -> Node:
    return Node(Kind.OPTIONAL, child=node, description=description)


def defaulted(node: Node, default: Any, description: str | None = None) -> Node:
    return Node(Kind.DEFAULTED, child=node, default=default, description=description)


def array(element: Node, description: str | None = None, *,
          min_length: int | None = None) -> Node:
    return Node(Kind.ARRAY, child=element, description=description, min_length=min_length)


def obj(fields: dict[str, Node] | None = None, description: str | None = None) -> Node:
    return Node(Kind.OBJECT, fields=tuple((fields or {}).items()), description=description)


def record(value: Node, description: str | None = None) -> Node:
    return Node(Kind.RECORD, child=value, description=description)


def union(*alternatives: Node, description: str | None = None) -> Node:
    if not alternatives:
        raise ValueError("union node requires at least one alternative")
    return Node(Kind.UNION, alternatives=tuple(alternatives), description=description)


def describe(node: Node, text: str) -> Node:
    """Return a copy of ``node`` carrying ``text`` as its description."""
    return replace(node, description=text)


def id_value(description: str | None = None) -> Node:
    """A note or card id, accepted as a number or a numeric string."""
    return union(number(), string(pattern=ID_PATTERN), description=description)


def id_list(description: str | None = None) -> Node:
    return array(id_value(), description)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

_MISSING = object()


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _join(path: str, key: str | int) -> str:
    return f"{path}.{key}" if path else str(key)


def _check(node: Node, value: Any, path: str, issues: list[tuple[str, str]]) -> Any:
    """Validate ``value`` against ``node``, appending any problems to ``issues``.

    Returns the validated value, ``_MISSING`` for an omitted optional field.
    """
    kind = node.kind

    if kind is Kind.OPTIONAL:
        if value is _MISSING:
            return _MISSING
        return _check(node.child, value, path, issues)

    if kind is Kind.DEFAULTED:
        if value is _MISSING:
            return copy.deepcopy(node.default)
        return _check(node.child, value, path, issues)

    if value is _MISSING:
        issues.append((path, "Required"))
        return _MISSING

    if kind is Kind.ANY:
        return value

    if kind is Kind.STRING:
        if not isinstance(value, str):
            issues.append((path, f"Expected string, received {_type_name(value)}"))
        elif node.choices and value not in node.choices:
            expected = " | ".join(f"'{c}'" for c in node.choices)
            issues.append((path, f"Invalid enum value. Expected {expected}, received '{value}'"))
        elif node.min_length is not None and len(value) < node.min_length:
            issues.append((path, f"String must contain at least {node.min_length} character(s)"))
        elif node.pattern is not None and not re.fullmatch(node.pattern, value):
            issues.append((path, "Invalid"))
        return value

    if kind is Kind.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            issues.append((path, f"Expected number, received {_type_name(value)}"))
        elif node.minimum is not None and value < node.minimum:
            issues.append((path, f"Number must be greater than or equal to {node.minimum:g}"))
        elif node.maximum is not None and value > node.maximum:
            issues.append((path, f"Number must be less than or equal to {node.maximum:g}"))
        return value

    if kind is Kind.BOOLEAN:
        if not isinstance(value, bool):
            issues.append((path, f"Expected boolean, received {_type_name(value)}"))
        return value

    if kind is Kind.ARRAY:
        if not isinstance(value, list):
            issues.append((path, f"Expected array, received {_type_name(value)}"))
            return value
        if node.min_length is not None and len(value) < node.min_length:
            issues.append((path, f"Array must contain at least {node.min_length} element(s)"))
        return [_check(node.child, item, _join(path, i), issues) for i, item in enumerate(value)]

    if kind is Kind.OBJECT:
        if not isinstance(value, dict):
            issues.append((path, f"Expected object, received {_type_name(value)}"))
            return value
        result = {}
        for name, child in node.fields:
            checked = _check(child, value.get(name, _MISSING), _join(path, name), issues)
            if checked is not _MISSING:
                result[name] = checked
        return result

    if kind is Kind.RECORD:
        if not isinstance(value, dict):
            issues.append((path, f"Expected object, received {_type_name(value)}"))
            return value
        return {
            key: _check(node.child, item, _join(path, key), issues)
            for key, item in value.items()
        }

    if kind is Kind.UNION:
        for alternative in node.alternatives:
            attempt: list[tuple[str, str]] = []
            checked = _check(alternative, value, path, attempt)
            if not attempt:
                return checked
        issues.append((path, "Invalid input"))
        return value

    raise AssertionError(f"unhandled schema kind: {kind}")


def validate(node: Node, value: Any) -> Any:
    """Validate caller input against a schema node.

    Returns the validated value with defaults filled in and undeclared
    object keys dropped.

    Raises:
        SchemaValidationError: listing every violating path.
    """
    issues: list[tuple[str, str]] = []
    result = _check(node, value, "", issues)
    if issues:
        raise SchemaValidationError(issues)
    return result
