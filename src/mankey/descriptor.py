"""Translate schema nodes into JSON-Schema-like descriptors for tool discovery.

Three steps, applied per field:
    normalize  - strip OPTIONAL/DEFAULTED wrappers, remember omittability
    map_type   - pick the descriptor type tag for the innermost node
    assemble   - walk an object's fields, recursing into nested objects
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .schema import Kind, Node, PRIMITIVE_KINDS, WRAPPER_KINDS

FALLBACK_TYPE = "string"


@dataclass(frozen=True)
class NormalizedField:
    """A field resolved through its wrapper layers."""

    node: Node
    is_optional: bool


def normalize(node: Node) -> NormalizedField:
    """Resolve ``node`` to its innermost non-wrapper node.

    Both wrapper kinds are stripped in the same loop, so any interleaving
    such as OPTIONAL(DEFAULTED(OPTIONAL(BOOLEAN))) resolves fully. A field
    with a default can be omitted by the caller, so DEFAULTED alone also
    marks it optional.
    """
    is_optional = False
    while node.kind is Kind.OPTIONAL or node.kind is Kind.DEFAULTED:
        is_optional = True
        node = node.child
    return NormalizedField(node, is_optional)


def map_type(node: Node) -> dict[str, Any]:
    """Map a normalized node to its descriptor type (plus ``items`` for arrays)."""
    kind = node.kind

    if kind in PRIMITIVE_KINDS:
        return {"type": kind.value}

    if kind is Kind.ARRAY:
        return {"type": "array", "items": map_type(normalize(node.child).node)}

    if kind is Kind.OBJECT or kind is Kind.RECORD:
        return {"type": "object"}

    if kind is Kind.UNION:
        mapped = [map_type(normalize(alt).node) for alt in node.alternatives]
        if all(m == mapped[0] for m in mapped):
            return mapped[0]
        tags = {m["type"] for m in mapped}
        if len(tags) == 1:
            return {"type": tags.pop()}
        return {"type": FALLBACK_TYPE}

    # ANY, and wrappers that were never normalized
    return {"type": FALLBACK_TYPE}


def field_description(node: Node) -> str | None:
    """First description found walking the wrapper chain outermost-first."""
    while True:
        if node.description:
            return node.description
        if node.kind not in WRAPPER_KINDS:
            return None
        node = node.child


def _expand(node: Node) -> dict[str, Any]:
    if node.kind is Kind.OBJECT:
        return assemble(node)
    descriptor = map_type(node)
    if node.kind is Kind.ARRAY:
        element = normalize(node.child).node
        if element.kind in (Kind.OBJECT, Kind.ARRAY):
            descriptor["items"] = _expand(element)
    return descriptor


def assemble(node: Node) -> dict[str, Any]:
    """Build the descriptor for an object-shaped schema node.

    ``required`` lists the non-optional fields in declaration order and is
    left out entirely when no field is required.

    Raises:
        TypeError: if ``node`` is not an OBJECT node. Every tool's root
            schema is an object, so this is a programming error.
    """
    if node.kind is not Kind.OBJECT:
        raise TypeError(f"cannot assemble a descriptor from a {node.kind.value} node")

    properties: dict[str, Any] = {}
    required: list[str] = []

    for name, field_node in node.fields:
        normalized = normalize(field_node)
        prop = _expand(normalized.node)
        description = field_description(field_node)
        if description:
            prop["description"] = description
        properties[name] = prop
        if not normalized.is_optional:
            required.append(name)

    descriptor: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        descriptor["required"] = required
    return descriptor
