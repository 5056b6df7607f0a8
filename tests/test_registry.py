"""Tests for registry module - tool entries, listing and dispatch."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from mankey.registry import (
    REGISTRY,
    UnknownToolError,
    build_registry,
    call_tool,
    format_result,
    get_tool,
    list_tools,
    tools_by_category,
)
from mankey.schema import SchemaValidationError, obj, string


def make_anki(result=None):
    anki = MagicMock()
    anki.request = AsyncMock(return_value=result)
    return anki


class TestBuildRegistry:

    def test_registry_covers_catalog(self):
        assert len(REGISTRY) == 96

    def test_missing_handler(self):
        tools = [{"name": "x", "category": "deck", "description": "d", "schema": obj()}]
        with pytest.raises(RuntimeError, match="no handler"):
            build_registry(tools, {})

    def test_orphan_handler(self):
        async def h(anki, tool_input, **ctx):
            return None

        with pytest.raises(RuntimeError, match="Handlers without a tool: y"):
            build_registry([], {"y": h})

    def test_duplicate_tool(self):
        async def h(anki, tool_input, **ctx):
            return None

        tool = {"name": "x", "category": "deck", "description": "d", "schema": obj()}
        with pytest.raises(RuntimeError, match="defined twice"):
            build_registry([tool, tool], {"x": h})


class TestListTools:

    def test_every_entry_listed(self):
        listed = list_tools()
        assert [t["name"] for t in listed] == list(REGISTRY)

    def test_entry_shape(self):
        entry = next(t for t in list_tools() if t["name"] == "findNotes")
        assert set(entry) == {"name", "description", "inputSchema"}
        assert entry["inputSchema"]["required"] == ["query"]

    def test_listing_is_deterministic(self):
        assert json.dumps(list_tools()) == json.dumps(list_tools())


class TestToolsByCategory:

    def test_all_categories(self):
        grouped = tools_by_category()
        assert sum(len(v) for v in grouped.values()) == len(REGISTRY)
        assert list(grouped)[0] == "deck"

    def test_single_category(self):
        grouped = tools_by_category("media")
        assert list(grouped) == ["media"]
        assert {e.name for e in grouped["media"]} == {
            "storeMediaFile", "retrieveMediaFile", "getMediaFilesNames",
            "deleteMediaFile", "getMediaDirPath",
        }

    def test_unknown_category(self):
        with pytest.raises(ValueError, match="Unknown category: bogus"):
            tools_by_category("bogus")


class TestCallTool:

    def test_unknown_tool(self):
        with pytest.raises(UnknownToolError) as exc_info:
            asyncio.run(call_tool(make_anki(), "noSuchTool", {}))
        assert str(exc_info.value) == "Unknown tool: noSuchTool"
        assert isinstance(exc_info.value, KeyError)

    def test_get_tool(self):
        assert get_tool("version").category == "system"

    def test_validation_failure_does_not_call_anki(self):
        anki = make_anki()
        with pytest.raises(SchemaValidationError) as exc_info:
            asyncio.run(call_tool(anki, "answerCards", {"answers": [{"cardId": 1, "ease": 7}]}))
        assert exc_info.value.issues == [
            ("answers.0.ease", "Number must be less than or equal to 4"),
        ]
        anki.request.assert_not_awaited()

    def test_defaults_reach_handler(self):
        anki = make_anki(None)
        result = asyncio.run(call_tool(anki, "deleteDecks", {"decks": ["Old"]}))
        assert result is True
        anki.request.assert_awaited_once_with("deleteDecks", decks=["Old"], cardsToo=True)

    def test_pagination_defaults(self):
        anki = make_anki(list(range(150)))
        result = asyncio.run(call_tool(anki, "findCards", {"query": "is:due"}))
        assert result["pagination"] == {
            "offset": 0, "limit": 100, "total": 150, "hasMore": True, "nextOffset": 100,
        }

    def test_string_ids_accepted(self):
        anki = make_anki([{"noteId": 5}])
        asyncio.run(call_tool(anki, "notesInfo", {"notes": ["5"]}))
        anki.request.assert_awaited_once_with("notesInfo", notes=[5])

    def test_none_arguments_treated_as_empty(self):
        anki = make_anki(6)
        assert asyncio.run(call_tool(anki, "version", None)) == 6

    def test_create_model_defaults_is_cloze(self):
        anki = make_anki({"id": 1})
        asyncio.run(call_tool(anki, "createModel", {
            "modelName": "Vocab",
            "inOrderFields": ["Word", "Meaning"],
            "cardTemplates": [{"Name": "Card 1", "Front": "{{Word}}", "Back": "{{Meaning}}"}],
        }))
        assert anki.request.await_args.kwargs["isCloze"] is False

    def test_store_media_defaults_delete_existing(self):
        anki = make_anki("a.png")
        asyncio.run(call_tool(anki, "storeMediaFile", {"filename": "a.png", "data": "aGk="}))
        assert anki.request.await_args.kwargs["deleteExisting"] is True

    def test_collection_stats_defaults_whole_collection(self):
        anki = make_anki("<html/>")
        asyncio.run(call_tool(anki, "getCollectionStatsHTML", {}))
        anki.request.assert_awaited_once_with("getCollectionStatsHTML", wholeCollection=True)

    def test_export_defaults_include_sched(self):
        anki = make_anki(True)
        asyncio.run(call_tool(anki, "exportPackage", {"deck": "Default", "path": "/tmp/d.apkg"}))
        assert anki.request.await_args.kwargs["includeSched"] is False

    def test_non_numeric_id_is_a_validation_error(self):
        anki = make_anki()
        with pytest.raises(SchemaValidationError) as exc_info:
            asyncio.run(call_tool(anki, "notesInfo", {"notes": ["abc"]}))
        assert exc_info.value.issues == [("notes.0", "Invalid input")]
        anki.request.assert_not_awaited()

    def test_optional_default_passed_through_when_given(self):
        anki = make_anki({"id": 1})
        asyncio.run(call_tool(anki, "createModel", {
            "modelName": "Cloze+",
            "inOrderFields": ["Text"],
            "isCloze": True,
            "cardTemplates": [{"Name": "Cloze", "Front": "{{cloze:Text}}", "Back": "{{cloze:Text}}"}],
        }))
        assert anki.request.await_args.kwargs["isCloze"] is True

    def test_create_model_requires_template(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            asyncio.run(call_tool(make_anki(), "createModel", {
                "modelName": "",
                "inOrderFields": [],
                "cardTemplates": [],
            }))
        assert [path for path, _ in exc_info.value.issues] == [
            "modelName", "inOrderFields", "cardTemplates",
        ]


class TestFormatResult:

    def test_indented_json(self):
        assert format_result({"a": [1]}) == '{\n  "a": [\n    1\n  ]\n}'

    def test_scalars(self):
        assert format_result(True) == "true"
        assert format_result(None) == "null"
        assert format_result("css") == '"css"'

    def test_unicode_kept(self):
        assert format_result("漢字") == '"漢字"'


class TestCustomSchemaEntry:

    def test_entry_descriptor(self):
        async def h(anki, tool_input, **ctx):
            return tool_input

        registry = build_registry(
            [{"name": "echo", "category": "system", "description": "Echo", "schema": obj({"q": string("Query")})}],
            {"echo": h},
        )
        assert registry["echo"].descriptor() == {
            "name": "echo",
            "description": "Echo",
            "inputSchema": {
                "type": "object",
                "properties": {"q": {"type": "string", "description": "Query"}},
                "required": ["q"],
            },
        }
