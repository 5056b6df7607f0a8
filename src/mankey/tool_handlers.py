"""Tool handler registry for the Anki MCP tools.

Each handler is registered with @handler("toolName") and receives:
    anki: AnkiClient instance
    tool_input: dict of validated, defaulted tool parameters
    **ctx: Additional context (config, etc.)

Handlers return plain JSON-compatible values; formatting is left to the
caller.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, TYPE_CHECKING

from .client import AnkiConnectError, ConnectionError
from .coerce import normalize_fields, normalize_tags, to_id, to_ids
from .pagination import chunk_and_send, paginate

if TYPE_CHECKING:
    from .client import AnkiClient

logger = logging.getLogger(__name__)

HANDLERS: dict[str, Callable] = {}

# AnkiConnect handles at most this many ids per notesInfo/cardsInfo call
# without noticeable stalls in the GUI thread.
INFO_BATCH_SIZE = 100

LIST_LIMIT_CAP = 10000
SEARCH_LIMIT_CAP = 1000
NEXT_CARDS_LIMIT_CAP = 100
PROFILES_LIMIT_CAP = 1000

LEARNING_QUEUES = (1, 3)
REVIEW_QUEUE = 2
NEW_QUEUE = 0


def handler(name: str):
    """Decorator to register a tool handler."""
    def decorator(fn: Callable) -> Callable:
        HANDLERS[name] = fn
        return fn
    return decorator


def _true_if_null(result: Any) -> Any:
    """Several actions answer null on success; report that as True."""
    return True if result is None else result


def _window(items: list, tool_input: dict, cap: int):
    limit = min(tool_input.get("limit", 0), cap)
    return paginate(items, tool_input.get("offset", 0), limit)


def _deck_prefix(deck: str | None) -> str:
    if deck == "current":
        return "deck:current"
    if deck:
        return f'deck:"{deck}"'
    return ""


def _scoped(prefix: str, query: str) -> str:
    return f"{prefix} {query}" if prefix else query


def _forward(action: str, *, id_lists: tuple[str, ...] = (), ids: tuple[str, ...] = (),
             null_true: bool = False) -> Callable:
    """Build a handler that sends its input to the action of the same name.

    ``id_lists`` and ``ids`` name parameters holding id lists or single ids
    that are coerced to int first.
    """
    async def forward(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
        params = dict(tool_input)
        for key in id_lists:
            if key in params:
                params[key] = to_ids(params[key])
        for key in ids:
            if key in params:
                params[key] = to_id(params[key])
        result = await anki.request(action, **params)
        return _true_if_null(result) if null_true else result

    forward.__name__ = f"handle_{action}"
    forward.__qualname__ = forward.__name__
    return forward


def _register_forwards(*actions: str, **options) -> None:
    for action in actions:
        HANDLERS[action] = _forward(action, **options)


# ---------------------------------------------------------------------------
# Deck operations
# ---------------------------------------------------------------------------

@handler("deckNames")
async def handle_deck_names(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    decks = await anki.request("deckNames") or []
    window = _window(decks, tool_input, LIST_LIMIT_CAP)
    return {"decks": window.items, "pagination": window.pagination()}


@handler("deckNamesAndIds")
async def handle_deck_names_and_ids(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    mapping = await anki.request("deckNamesAndIds") or {}
    window = _window(list(mapping.items()), tool_input, LIST_LIMIT_CAP)
    return {"decks": dict(window.items), "pagination": window.pagination()}


@handler("deleteDecks")
async def handle_delete_decks(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    result = await anki.request(
        "deleteDecks",
        decks=tool_input["decks"],
        cardsToo=tool_input.get("cardsToo", True),
    )
    return _true_if_null(result)


_register_forwards("createDeck", "getDeckStats", "getDeckConfig")


# ---------------------------------------------------------------------------
# Note operations
# ---------------------------------------------------------------------------

def _parse_note(note: Any) -> dict:
    if isinstance(note, str):
        try:
            note = json.loads(note)
        except json.JSONDecodeError as e:
            raise ValueError("Invalid note format") from e
        if not isinstance(note, dict):
            raise ValueError("Invalid note format")
    else:
        note = dict(note)
    if note.get("tags"):
        note["tags"] = normalize_tags(note["tags"])
    return note


@handler("addNotes")
async def handle_add_notes(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    logger.debug("addNotes called with %d notes", len(tool_input["notes"]))
    notes = [_parse_note(n) for n in tool_input["notes"]]
    return await anki.request("addNotes", notes=notes)


@handler("addNote")
async def handle_add_note(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    tags = tool_input.get("tags")
    note = {
        "deckName": tool_input["deckName"],
        "modelName": tool_input["modelName"],
        "fields": tool_input["fields"],
        "tags": normalize_tags(tags) if tags else [],
        "options": {"allowDuplicate": bool(tool_input.get("allowDuplicate", False))},
    }
    return await anki.request("addNote", note=note)


@handler("findNotes")
async def handle_find_notes(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    try:
        found = await anki.request("findNotes", query=tool_input["query"])
    except ConnectionError:
        raise
    except AnkiConnectError as e:
        logger.warning("findNotes failed, returning no results: %s", e)
        found = []
    if not isinstance(found, list):
        found = []
    window = _window(found, tool_input, SEARCH_LIMIT_CAP)
    return {"notes": window.items, "pagination": window.pagination()}


@handler("updateNote")
async def handle_update_note(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    note: dict[str, Any] = {"id": to_id(tool_input["id"])}
    fields = normalize_fields(tool_input.get("fields"))
    if fields:
        note["fields"] = fields
    if tool_input.get("tags"):
        note["tags"] = normalize_tags(tool_input["tags"])
    logger.debug("Sending updateNote: %s", note)
    return _true_if_null(await anki.request("updateNote", note=note))


@handler("notesInfo")
async def handle_notes_info(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    note_ids = to_ids(tool_input["notes"])
    if len(note_ids) <= INFO_BATCH_SIZE:
        return await anki.request("notesInfo", notes=note_ids)

    async def send(group: list) -> list:
        return await anki.request("notesInfo", notes=group)

    results = await chunk_and_send(note_ids, INFO_BATCH_SIZE, send)
    return {
        "notes": results,
        "metadata": {
            "total": len(results),
            "batches": -(-len(note_ids) // INFO_BATCH_SIZE),
            "batchSize": INFO_BATCH_SIZE,
        },
    }


@handler("getTags")
async def handle_get_tags(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    tags = await anki.request("getTags") or []
    window = _window(tags, tool_input, LIST_LIMIT_CAP)
    return {"tags": window.items, "pagination": window.pagination()}


@handler("updateNoteFields")
async def handle_update_note_fields(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    note = tool_input["note"]
    result = await anki.request(
        "updateNoteFields",
        note={"id": to_id(note["id"]), "fields": note["fields"]},
    )
    return _true_if_null(result)


@handler("replaceTags")
async def handle_replace_tags(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    result = await anki.request(
        "replaceTags",
        notes=to_ids(tool_input["notes"]),
        tag_to_replace=tool_input["tagToReplace"],
        replace_with_tag=tool_input["replaceWithTag"],
    )
    return _true_if_null(result)


@handler("replaceTagsInAllNotes")
async def handle_replace_tags_in_all_notes(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    result = await anki.request(
        "replaceTagsInAllNotes",
        tag_to_replace=tool_input["tagToReplace"],
        replace_with_tag=tool_input["replaceWithTag"],
    )
    return _true_if_null(result)


_register_forwards("deleteNotes", id_lists=("notes",), null_true=True)
_register_forwards("clearUnusedTags", null_true=True)
_register_forwards("addTags", "removeTags", "notesModTime", id_lists=("notes",))
_register_forwards("getNoteTags", ids=("note",))
_register_forwards("removeEmptyNotes")


# ---------------------------------------------------------------------------
# Card operations
# ---------------------------------------------------------------------------

@handler("findCards")
async def handle_find_cards(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    try:
        found = await anki.request("findCards", query=tool_input["query"])
    except ConnectionError:
        raise
    except AnkiConnectError as e:
        logger.warning("findCards failed, returning no results: %s", e)
        found = []
    if not isinstance(found, list):
        found = []
    window = _window(found, tool_input, SEARCH_LIMIT_CAP)
    return {"cards": window.items, "pagination": window.pagination()}


@handler("getNextCards")
async def handle_get_next_cards(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    """Cards in review order: learning, then due reviews, then new."""
    prefix = _deck_prefix(tool_input.get("deck"))
    learning = await anki.request("findCards", query=_scoped(prefix, "(queue:1 OR queue:3)")) or []
    review = await anki.request("findCards", query=_scoped(prefix, "is:due")) or []
    new = await anki.request("findCards", query=_scoped(prefix, "is:new")) or []

    window = _window(learning + review + new, tool_input, NEXT_CARDS_LIMIT_CAP)
    if not window.items:
        pagination = window.pagination()
        pagination.update(hasMore=False, nextOffset=None)
        return {"cards": [], "message": "No cards due for review", "pagination": pagination}

    info = await anki.request("cardsInfo", cards=window.items) or []
    breakdown = {
        "learning": sum(1 for c in info if c.get("queue") in LEARNING_QUEUES),
        "review": sum(1 for c in info if c.get("queue") == REVIEW_QUEUE),
        "new": sum(1 for c in info if c.get("queue") == NEW_QUEUE),
    }
    return {
        "cards": info,
        "breakdown": breakdown,
        "pagination": window.pagination(),
        "queueOrder": "Learning cards shown first, then reviews, then new cards",
    }


@handler("cardsInfo")
async def handle_cards_info(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    card_ids = to_ids(tool_input["cards"])
    if len(card_ids) <= INFO_BATCH_SIZE:
        return await anki.request("cardsInfo", cards=card_ids)

    async def send(group: list) -> list:
        return await anki.request("cardsInfo", cards=group)

    results = await chunk_and_send(card_ids, INFO_BATCH_SIZE, send)
    return {
        "cards": results,
        "metadata": {
            "total": len(results),
            "batches": -(-len(card_ids) // INFO_BATCH_SIZE),
            "batchSize": INFO_BATCH_SIZE,
        },
    }


@handler("answerCards")
async def handle_answer_cards(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    answers = [
        {"cardId": to_id(a["cardId"]), "ease": a["ease"]}
        for a in tool_input["answers"]
    ]
    return await anki.request("answerCards", answers=answers)


@handler("setSpecificValueOfCard")
async def handle_set_specific_value_of_card(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    return await anki.request(
        "setSpecificValueOfCard",
        card=to_id(tool_input["card"]),
        keys=tool_input["keys"],
        newValues=tool_input["newValues"],
        warning_check=tool_input.get("warningCheck"),
    )


_register_forwards(
    "unsuspend", "forgetCards", "relearnCards", "changeDeck",
    id_lists=("cards",), null_true=True,
)
_register_forwards(
    "suspend", "getEaseFactors", "setEaseFactors", "areSuspended", "areDue",
    "getIntervals", "cardsToNotes", "cardsModTime", "getDecks",
    id_lists=("cards",),
)
_register_forwards("canAddNotes")


# ---------------------------------------------------------------------------
# Note type (model) operations
# ---------------------------------------------------------------------------

@handler("modelNames")
async def handle_model_names(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    models = await anki.request("modelNames") or []
    window = _window(models, tool_input, LIST_LIMIT_CAP)
    return {"models": window.items, "pagination": window.pagination()}


@handler("modelNamesAndIds")
async def handle_model_names_and_ids(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    mapping = await anki.request("modelNamesAndIds") or {}
    window = _window(list(mapping.items()), tool_input, LIST_LIMIT_CAP)
    return {"models": dict(window.items), "pagination": window.pagination()}


@handler("modelStyling")
async def handle_model_styling(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    result = await anki.request("modelStyling", modelName=tool_input["modelName"])
    if isinstance(result, dict):
        return result.get("css")
    return result


_register_forwards(
    "modelFieldNames", "createModel", "modelFieldsOnTemplates", "modelTemplates",
    "updateModelTemplates", "updateModelStyling",
)


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------

@handler("storeMediaFile")
async def handle_store_media_file(anki: AnkiClient, tool_input: dict, **ctx) -> Any:
    if not (tool_input.get("data") or tool_input.get("url") or tool_input.get("path")):
        raise ValueError("storeMediaFile requires one of: data (base64), url, or path")
    return await anki.request("storeMediaFile", **tool_input)


_register_forwards(
    "retrieveMediaFile", "getMediaFilesNames", "deleteMediaFile", "getMediaDirPath",
)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def _front_text(card: dict) -> str:
    fields = card.get("fields") or {}
    for name in ("Front", "Simplified"):
        value = (fields.get(name) or {}).get("value")
        if value:
            return value
    return "N/A"


@handler("getDueCardsDetailed")
async def handle_get_due_cards_detailed(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    prefix = _deck_prefix(tool_input.get("deck"))
    learning_ids = await anki.request("findCards", query=_scoped(prefix, "(queue:1 OR queue:3)")) or []
    review_ids = await anki.request("findCards", query=_scoped(prefix, "is:due")) or []

    all_ids = learning_ids + review_ids
    if not all_ids:
        return {"learning": [], "review": [], "total": 0}

    info = await anki.request("cardsInfo", cards=all_ids) or []
    today = int(time.time() // 86400)
    learning, review = [], []
    for card in info:
        queue = card.get("queue")
        if queue in LEARNING_QUEUES:
            learning.append({
                "cardId": card.get("cardId"),
                "front": _front_text(card),
                "interval": card.get("interval"),
                "due": card.get("due"),
                "queue": "learning" if queue == 1 else "relearning",
                "reps": card.get("reps"),
            })
        elif queue == REVIEW_QUEUE and card.get("due", 0) <= today:
            review.append({
                "cardId": card.get("cardId"),
                "front": _front_text(card),
                "interval": card.get("interval"),
                "due": card.get("due"),
                "queue": "review",
                "ease": card.get("factor"),
            })

    learning.sort(key=lambda c: c["due"] or 0)
    review.sort(key=lambda c: c["due"] or 0)
    return {
        "learning": learning,
        "review": review,
        "total": len(learning) + len(review),
        "note": "Learning cards (including relearning) are shown before review cards in Anki",
    }


_register_forwards(
    "getNumCardsReviewedToday", "getNumCardsReviewedByDay", "getCollectionStatsHTML",
    "cardReviews", "getLatestReviewID",
)
_register_forwards("getReviewsOfCards", id_lists=("cards",))


# ---------------------------------------------------------------------------
# GUI
# ---------------------------------------------------------------------------

_register_forwards(
    "guiBrowse", "guiAddCards", "guiCurrentCard", "guiAnswerCard", "guiDeckOverview",
    "guiExitAnki", "guiSelectedNotes", "guiStartCardTimer", "guiShowQuestion",
    "guiShowAnswer", "guiUndo", "guiDeckBrowser", "guiDeckReview", "guiCheckDatabase",
    "guiImportFile",
)
_register_forwards("guiSelectCard", ids=("card",))
_register_forwards("guiEditNote", ids=("note",))


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------

@handler("getProfiles")
async def handle_get_profiles(anki: AnkiClient, tool_input: dict, **ctx) -> dict:
    profiles = await anki.request("getProfiles") or []
    window = _window(profiles, tool_input, PROFILES_LIMIT_CAP)
    return {"profiles": window.items, "pagination": window.pagination()}


_register_forwards(
    "sync", "loadProfile", "exportPackage", "importPackage", "version",
    "requestPermission", "apiReflect", "reloadCollection", "multi", "getActiveProfile",
    "saveDeckConfig", "setDeckConfigId", "cloneDeckConfigId",
)
_register_forwards("setDueDate", id_lists=("cards",))
_register_forwards("suspended", ids=("card",))
_register_forwards("removeDeckConfigId", null_true=True)
