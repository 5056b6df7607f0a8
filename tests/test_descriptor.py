"""Tests for descriptor module - normalization, type mapping and assembly."""

import json

import pytest

from mankey.descriptor import (
    FALLBACK_TYPE,
    assemble,
    field_description,
    map_type,
    normalize,
)
from mankey.schema import (
    Kind,
    any_value,
    array,
    boolean,
    defaulted,
    describe,
    id_list,
    number,
    obj,
    optional,
    record,
    string,
    union,
)


class TestNormalize:
    """Wrapper layers resolve in a single pass regardless of order."""

    def test_plain_node_is_required(self):
        result = normalize(string())
        assert result.node.kind is Kind.STRING
        assert result.is_optional is False

    def test_optional(self):
        result = normalize(optional(number()))
        assert result.node.kind is Kind.NUMBER
        assert result.is_optional is True

    def test_defaulted_alone_is_optional(self):
        result = normalize(defaulted(boolean(), True))
        assert result.node.kind is Kind.BOOLEAN
        assert result.is_optional is True

    @pytest.mark.parametrize("wrap", [
        lambda n: optional(defaulted(n, False)),
        lambda n: defaulted(optional(n), False),
        lambda n: optional(defaulted(optional(n), False)),
        lambda n: defaulted(optional(defaulted(n, True)), False),
        lambda n: optional(optional(optional(n))),
        lambda n: defaulted(defaulted(n, 1), 2),
    ])
    def test_any_wrapper_order_resolves_to_primitive(self, wrap):
        result = normalize(wrap(boolean()))
        assert result.node.kind is Kind.BOOLEAN
        assert result.is_optional is True

    def test_stops_at_array(self):
        inner = array(optional(string()))
        result = normalize(optional(inner))
        assert result.node is inner


class TestMapType:

    def test_primitives(self):
        assert map_type(string()) == {"type": "string"}
        assert map_type(number()) == {"type": "number"}
        assert map_type(boolean()) == {"type": "boolean"}

    def test_array_of_numbers(self):
        assert map_type(array(number())) == {"type": "array", "items": {"type": "number"}}

    def test_array_element_is_normalized(self):
        node = array(optional(defaulted(boolean(), False)))
        assert map_type(node) == {"type": "array", "items": {"type": "boolean"}}

    def test_object_and_record_are_objects(self):
        assert map_type(obj({"a": string()})) == {"type": "object"}
        assert map_type(record(string())) == {"type": "object"}

    def test_union_with_matching_alternatives(self):
        assert map_type(union(string(), string("other"))) == {"type": "string"}

    def test_union_of_arrays_keeps_items(self):
        node = union(array(string()), array(string()))
        assert map_type(node) == {"type": "array", "items": {"type": "string"}}

    def test_union_with_different_alternatives_falls_back(self):
        assert map_type(union(number(), string())) == {"type": FALLBACK_TYPE}
        assert map_type(union(boolean(), number())) == {"type": "string"}

    def test_union_alternatives_are_normalized(self):
        assert map_type(union(optional(number()), number())) == {"type": "number"}

    def test_any_falls_back(self):
        assert map_type(any_value()) == {"type": "string"}


class TestAssemble:

    def test_required_lists_non_optional_fields(self):
        node = obj({"a": string(), "b": optional(number())})
        assert assemble(node) == {
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"type": "number"}},
            "required": ["a"],
        }

    def test_required_omitted_when_all_optional(self):
        node = obj({"a": optional(string()), "b": defaulted(number(), 1)})
        descriptor = assemble(node)
        assert "required" not in descriptor

    def test_empty_object(self):
        assert assemble(obj()) == {"type": "object", "properties": {}}

    def test_defaulted_optional_boolean_stays_boolean(self):
        """A boolean with a default once degraded to a string."""
        node = obj({"flag": defaulted(optional(boolean()), False)})
        descriptor = assemble(node)
        assert descriptor["properties"]["flag"] == {"type": "boolean"}
        assert "required" not in descriptor

    def test_interleaved_wrappers_stay_boolean(self):
        node = obj({
            "flag": optional(defaulted(optional(boolean()), True)),
            "name": string(),
        })
        descriptor = assemble(node)
        assert descriptor["properties"]["flag"]["type"] == "boolean"
        assert descriptor["required"] == ["name"]

    def test_required_preserves_declaration_order(self):
        node = obj({
            "z": string(),
            "a": optional(string()),
            "m": number(),
            "b": boolean(),
        })
        assert assemble(node)["required"] == ["z", "m", "b"]

    def test_nested_object_is_expanded(self):
        node = obj({"note": obj({"id": number(), "fields": record(string())})})
        assert assemble(node)["properties"]["note"] == {
            "type": "object",
            "properties": {"id": {"type": "number"}, "fields": {"type": "object"}},
            "required": ["id", "fields"],
        }

    def test_array_of_objects_is_expanded(self):
        node = obj({
            "answers": array(obj({
                "cardId": union(number(), string()),
                "ease": number(),
                "note": optional(string()),
            })),
        })
        items = assemble(node)["properties"]["answers"]["items"]
        assert items == {
            "type": "object",
            "properties": {
                "cardId": {"type": "string"},
                "ease": {"type": "number"},
                "note": {"type": "string"},
            },
            "required": ["cardId", "ease"],
        }

    def test_array_of_optional_objects_is_expanded(self):
        node = obj({"rows": array(optional(obj({"x": number()})))})
        items = assemble(node)["properties"]["rows"]["items"]
        assert items["properties"] == {"x": {"type": "number"}}

    def test_id_list_maps_to_string_items(self):
        node = obj({"cards": id_list("Card IDs")})
        assert assemble(node)["properties"]["cards"] == {
            "type": "array",
            "items": {"type": "string"},
            "description": "Card IDs",
        }

    def test_description_from_outer_wrapper(self):
        node = obj({"limit": defaulted(optional(number()), 10, "Maximum results")})
        assert assemble(node)["properties"]["limit"]["description"] == "Maximum results"

    def test_description_from_inner_node(self):
        node = obj({"deck": optional(string("Deck name"))})
        assert assemble(node)["properties"]["deck"]["description"] == "Deck name"

    def test_outermost_description_wins(self):
        node = optional(string("inner"), "outer")
        assert field_description(node) == "outer"

    def test_describe_returns_copy(self):
        base = string()
        described = describe(base, "text")
        assert base.description is None
        assert described.description == "text"

    def test_non_object_root_is_rejected(self):
        with pytest.raises(TypeError):
            assemble(array(string()))

    def test_assembly_is_deterministic(self):
        node = obj({
            "b": optional(defaulted(boolean(), False)),
            "a": array(obj({"x": union(number(), string())})),
            "c": record(any_value()),
        })
        first = json.dumps(assemble(node))
        second = json.dumps(assemble(node))
        assert first == second

    def test_assembly_does_not_share_dicts(self):
        node = obj({"a": string()})
        first = assemble(node)
        first["properties"]["a"]["type"] = "mutated"
        assert assemble(node)["properties"]["a"]["type"] == "string"
