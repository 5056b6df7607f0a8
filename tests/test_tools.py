"""Tests for tools module - tool definitions and their advertised schemas."""

from mankey.descriptor import assemble
from mankey.schema import Kind
from mankey.tools import ANKI_TOOLS, CATEGORIES


def tool(name):
    return next(t for t in ANKI_TOOLS if t["name"] == name)


def descriptor(name):
    return assemble(tool(name)["schema"])


class TestToolDefinitions:
    """Tests for ANKI_TOOLS definitions."""

    def test_tools_is_list(self):
        assert isinstance(ANKI_TOOLS, list)

    def test_all_tools_have_required_keys(self):
        for t in ANKI_TOOLS:
            for key in ("name", "category", "description", "schema"):
                assert key in t, f"Tool '{t.get('name')}' missing '{key}'"

    def test_all_schemas_are_objects(self):
        for t in ANKI_TOOLS:
            assert t["schema"].kind is Kind.OBJECT, f"Tool '{t['name']}' schema is not an object"

    def test_all_descriptors_assemble(self):
        for t in ANKI_TOOLS:
            d = assemble(t["schema"])
            assert d["type"] == "object"
            assert "properties" in d

    def test_required_fields_exist_in_properties(self):
        for t in ANKI_TOOLS:
            d = assemble(t["schema"])
            for required_field in d.get("required", []):
                assert required_field in d["properties"], (
                    f"Tool '{t['name']}': required field '{required_field}' not in properties"
                )

    def test_required_is_never_empty_list(self):
        for t in ANKI_TOOLS:
            d = assemble(t["schema"])
            assert d.get("required") != [], f"Tool '{t['name']}' has an empty required list"

    def test_tool_names_are_unique(self):
        names = [t["name"] for t in ANKI_TOOLS]
        assert len(names) == len(set(names)), f"Duplicate tool names: {[n for n in names if names.count(n) > 1]}"

    def test_categories_are_known(self):
        for t in ANKI_TOOLS:
            assert t["category"] in CATEGORIES, f"Tool '{t['name']}' has unknown category"

    def test_every_category_has_tools(self):
        used = {t["category"] for t in ANKI_TOOLS}
        assert used == set(CATEGORIES)

    def test_descriptions_are_not_empty(self):
        for t in ANKI_TOOLS:
            assert len(t["description"]) > 10, f"Tool '{t['name']}' has too short description"


class TestExpectedTools:
    """Tests that expected tools exist."""

    EXPECTED_TOOLS = [
        "deckNames", "createDeck", "deleteDecks",
        "addNote", "addNotes", "findNotes", "updateNote", "notesInfo", "getTags",
        "findCards", "getNextCards", "cardsInfo", "suspend", "answerCards",
        "modelNames", "createModel", "modelStyling",
        "storeMediaFile", "retrieveMediaFile",
        "getNumCardsReviewedToday", "getDueCardsDetailed",
        "guiBrowse", "guiCurrentCard",
        "sync", "version", "multi", "removeDeckConfigId",
    ]

    def test_all_expected_tools_present(self):
        names = {t["name"] for t in ANKI_TOOLS}
        for name in self.EXPECTED_TOOLS:
            assert name in names, f"Expected tool '{name}' not found"

    def test_catalog_size(self):
        assert len(ANKI_TOOLS) == 96


class TestPaginatedSchemas:

    def test_offset_and_limit_are_optional_numbers(self):
        for name in ("deckNames", "getTags", "modelNames", "getProfiles", "findNotes", "findCards"):
            d = descriptor(name)
            assert d["properties"]["offset"]["type"] == "number"
            assert d["properties"]["limit"]["type"] == "number"
            assert "offset" not in d.get("required", [])
            assert "limit" not in d.get("required", [])

    def test_find_notes_requires_query_only(self):
        assert descriptor("findNotes")["required"] == ["query"]

    def test_list_tools_have_no_required(self):
        assert "required" not in descriptor("deckNames")


class TestBooleanDefaults:
    """Boolean fields with defaults must be advertised as booleans."""

    def test_create_model_is_cloze(self):
        d = descriptor("createModel")
        assert d["properties"]["isCloze"]["type"] == "boolean"
        assert "isCloze" not in d["required"]

    def test_delete_decks_cards_too(self):
        d = descriptor("deleteDecks")
        assert d["properties"]["cardsToo"] == {"type": "boolean", "description": "Also delete cards"}
        assert d["required"] == ["decks"]

    def test_store_media_delete_existing(self):
        d = descriptor("storeMediaFile")
        assert d["properties"]["deleteExisting"]["type"] == "boolean"
        assert d["required"] == ["filename"]

    def test_export_include_sched(self):
        assert descriptor("exportPackage")["properties"]["includeSched"]["type"] == "boolean"


class TestNestedSchemas:

    def test_create_model(self):
        d = descriptor("createModel")
        assert d["required"] == ["modelName", "inOrderFields", "cardTemplates"]
        templates = d["properties"]["cardTemplates"]
        assert templates["type"] == "array"
        assert templates["items"]["required"] == ["Name", "Front", "Back"]

    def test_answer_cards(self):
        items = descriptor("answerCards")["properties"]["answers"]["items"]
        assert items["properties"]["ease"]["type"] == "number"
        assert items["required"] == ["cardId", "ease"]

    def test_update_note_fields(self):
        note = descriptor("updateNoteFields")["properties"]["note"]
        assert note["type"] == "object"
        assert note["required"] == ["id", "fields"]

    def test_add_notes_union_falls_back_to_string(self):
        notes = descriptor("addNotes")["properties"]["notes"]
        assert notes == {"type": "array", "items": {"type": "string"}}

    def test_add_note_tags_union(self):
        d = descriptor("addNote")
        assert d["properties"]["tags"]["type"] == "string"
        assert d["required"] == ["deckName", "modelName", "fields"]

    def test_gui_browse_reorder(self):
        reorder = descriptor("guiBrowse")["properties"]["reorderCards"]
        assert reorder["type"] == "object"
        assert "required" not in reorder
