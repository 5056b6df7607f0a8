"""Tests for server module - MCP tool listing and call dispatch."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError

from mankey.client import AnkiConnectError
from mankey.config import Config
from mankey.server import SERVER_NAME, build_server, dispatch


def make_anki(result=None, side_effect=None):
    anki = MagicMock()
    anki.request = AsyncMock(return_value=result, side_effect=side_effect)
    return anki


class TestDispatch:

    def test_result_is_indented_json_text(self):
        content = asyncio.run(dispatch(make_anki(["Default"]), Config(), "getTags", {}))
        assert len(content) == 1
        assert content[0].type == "text"
        assert json.loads(content[0].text)["tags"] == ["Default"]
        assert content[0].text.startswith('{\n  "tags"')

    def test_unknown_tool(self):
        with pytest.raises(McpError) as exc_info:
            asyncio.run(dispatch(make_anki(), Config(), "nope", {}))
        assert exc_info.value.error.code == types.METHOD_NOT_FOUND
        assert exc_info.value.error.message == "Unknown tool: nope"

    def test_invalid_params(self):
        with pytest.raises(McpError) as exc_info:
            asyncio.run(dispatch(make_anki(), Config(), "createDeck", {}))
        assert exc_info.value.error.code == types.INVALID_PARAMS
        assert exc_info.value.error.message == "Validation error: deck: Required"

    def test_collaborator_error_message_unchanged(self):
        error = AnkiConnectError("addNote: Deck not found. Create the deck first or check the deck name spelling.")
        with pytest.raises(McpError) as exc_info:
            asyncio.run(dispatch(make_anki(side_effect=error), Config(), "addNote", {
                "deckName": "X", "modelName": "Basic", "fields": {"Front": "a"},
            }))
        assert exc_info.value.error.code == types.INTERNAL_ERROR
        assert exc_info.value.error.message == str(error)
        assert exc_info.value.error.message.count("addNote:") == 1

    def test_handler_precondition_error(self):
        with pytest.raises(McpError) as exc_info:
            asyncio.run(dispatch(make_anki(), Config(), "storeMediaFile", {"filename": "a.png"}))
        assert exc_info.value.error.code == types.INTERNAL_ERROR
        assert "requires one of" in exc_info.value.error.message


class TestBuildServer:

    def test_server_name(self):
        assert build_server(Config(), anki=make_anki()).name == SERVER_NAME

    def test_registers_tool_handlers(self):
        server = build_server(Config(), anki=make_anki())
        assert types.ListToolsRequest in server.request_handlers
        assert types.CallToolRequest in server.request_handlers

    def test_list_tools_request(self):
        server = build_server(Config(), anki=make_anki())
        handler = server.request_handlers[types.ListToolsRequest]
        result = asyncio.run(handler(types.ListToolsRequest(method="tools/list")))

        tools = {t.name: t for t in result.root.tools}
        assert len(tools) == 96
        assert tools["createModel"].inputSchema["properties"]["isCloze"]["type"] == "boolean"
