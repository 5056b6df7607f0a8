"""Tool definitions: name, category, description and parameter schema.

Handlers live in tool_handlers.py; the registry joins the two.
"""

from .schema import (
    any_value,
    array,
    boolean,
    defaulted,
    id_list,
    id_value,
    number,
    obj,
    optional,
    record,
    string,
    union,
)

CATEGORIES = ["deck", "note", "card", "model", "media", "stats", "gui", "system"]


def _page(default_limit: int, max_limit: int, noun: str) -> dict:
    """offset/limit fields shared by every paginated listing."""
    return {
        "offset": defaulted(optional(number()), 0, "Starting position for pagination"),
        "limit": defaulted(
            optional(number()),
            default_limit,
            f"Maximum {noun} to return (default {default_limit}, max {max_limit})",
        ),
    }


def _note_input() -> dict:
    return {
        "deckName": string(),
        "modelName": string(),
        "fields": record(string()),
        "tags": optional(array(string())),
    }


NO_ARGS = obj()


ANKI_TOOLS = [
    # ------------------------------------------------------------------
    # Decks
    # ------------------------------------------------------------------
    {
        "name": "deckNames",
        "category": "deck",
        "description": (
            "Gets the list of deck names, including nested decks written as "
            "'Parent::Child'. Useful for an overview before other deck operations. "
            "Results are paginated"
        ),
        "schema": obj(_page(1000, 10000, "decks")),
    },
    {
        "name": "createDeck",
        "category": "deck",
        "description": (
            "Creates a new empty deck; an existing deck with the same name is left "
            "alone, so this acts as 'ensure exists'. Use '::' for nested decks "
            "(e.g. 'Japanese::JLPT N5'). Returns the deck ID"
        ),
        "schema": obj({"deck": string("Deck name (use :: for nested decks)")}),
    },
    {
        "name": "getDeckStats",
        "category": "deck",
        "description": (
            "Gets statistics for decks: new_count, learn_count, review_count and "
            "total_in_deck. Returns stats keyed by deck ID"
        ),
        "schema": obj({"decks": array(string(), "Deck names to get stats for")}),
    },
    {
        "name": "deckNamesAndIds",
        "category": "deck",
        "description": (
            "Gets the mapping of deck names to their internal IDs. Useful when "
            "working with deck IDs directly. Results are paginated"
        ),
        "schema": obj(_page(1000, 10000, "entries")),
    },
    {
        "name": "getDeckConfig",
        "category": "deck",
        "description": (
            "Gets the configuration group of a deck: new cards per day, review "
            "limits, ease factors, intervals, leech threshold and more. Decks can "
            "share a config group"
        ),
        "schema": obj({"deck": string("Deck name")}),
    },
    {
        "name": "deleteDecks",
        "category": "deck",
        "description": (
            "Permanently deletes decks. CAUTION: with cardsToo=true (the default) "
            "all cards in the decks are deleted and cannot be recovered. Deleting a "
            "parent deck deletes its subdecks. Returns true on success"
        ),
        "schema": obj({
            "decks": array(string(), "Deck names to delete"),
            "cardsToo": defaulted(boolean(), True, "Also delete cards"),
        }),
    },

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------
    {
        "name": "addNotes",
        "category": "note",
        "description": (
            "Creates several notes in one request. Each note may be an object or "
            "its JSON string. Returns an array of note IDs with null for failures; "
            "duplicates fail unless options.allowDuplicate is true. Field names must "
            "match the note type exactly"
        ),
        "schema": obj({
            "notes": array(union(
                obj({
                    **_note_input(),
                    "options": optional(obj({"allowDuplicate": optional(boolean())})),
                }),
                string(),
            )),
        }),
    },
    {
        "name": "addNote",
        "category": "note",
        "description": (
            "Creates a single note, which generates cards from the note type's "
            "templates. Common types: 'Basic' (Front/Back), 'Basic (and reversed "
            "card)', 'Cloze' (Text/Extra, use {{c1::text}}). Field names are "
            "case-sensitive; check them with modelFieldNames first. Returns the new "
            "note ID"
        ),
        "schema": obj({
            "deckName": string("Target deck"),
            "modelName": string("Note type (e.g., 'Basic', 'Cloze')"),
            "fields": record(string(), "Field content"),
            "tags": optional(union(array(string()), string()), "Tags"),
            "allowDuplicate": optional(boolean(), "Allow duplicates"),
        }),
    },
    {
        "name": "findNotes",
        "category": "note",
        "description": (
            "Searches notes with Anki query syntax and returns note IDs. Examples: "
            "'deck:DeckName', 'tag:vocab', 'is:new', 'added:7', '*'. Deck names "
            "containing '::' must be quoted: 'deck:\"Parent::Child\"'. Results are "
            "paginated"
        ),
        "schema": obj({
            "query": string("Search query (e.g., 'deck:current', 'deck:Default', 'tag:vocab')"),
            **_page(100, 1000, "notes"),
        }),
    },
    {
        "name": "updateNote",
        "category": "note",
        "description": (
            "Updates a note's fields and/or tags. Only the given fields change. The "
            "tags list replaces all existing tags. Field names are case-sensitive. "
            "Returns true on success"
        ),
        "schema": obj({
            "id": id_value("Note ID"),
            "fields": optional(record(string()), "Fields to update"),
            "tags": optional(union(array(string()), string()), "New tags"),
        }),
    },
    {
        "name": "deleteNotes",
        "category": "note",
        "description": (
            "Permanently deletes notes and all their cards, including review "
            "history. Cannot be undone; consider suspending instead. Returns true "
            "on success"
        ),
        "schema": obj({"notes": id_list("Note IDs to delete")}),
    },
    {
        "name": "notesInfo",
        "category": "note",
        "description": (
            "Gets note details: noteId, modelName, tags, fields with values and "
            "order, card IDs and modification time. Large requests are sent in "
            "batches of 100"
        ),
        "schema": obj({"notes": id_list("Note IDs (automatically batched if >100)")}),
    },
    {
        "name": "getTags",
        "category": "note",
        "description": (
            "Gets every tag used in the collection. Hierarchical tags use '::'. "
            "Results are paginated"
        ),
        "schema": obj(_page(1000, 10000, "tags")),
    },
    {
        "name": "addTags",
        "category": "note",
        "description": (
            "Adds tags to notes without touching their existing tags. Tags are "
            "passed as one space-separated string"
        ),
        "schema": obj({
            "notes": id_list("Note IDs"),
            "tags": string("Space-separated tags"),
        }),
    },
    {
        "name": "removeTags",
        "category": "note",
        "description": (
            "Removes tags from notes, keeping the others. Tags are one "
            "space-separated string and only exact matches are removed"
        ),
        "schema": obj({
            "notes": id_list("Note IDs"),
            "tags": string("Space-separated tags"),
        }),
    },
    {
        "name": "updateNoteFields",
        "category": "note",
        "description": (
            "Updates only the field values of a note and leaves tags unchanged. "
            "Unspecified fields keep their content. Returns true on success"
        ),
        "schema": obj({
            "note": obj({
                "id": id_value(),
                "fields": record(string()),
            }),
        }),
    },
    {
        "name": "getNoteTags",
        "category": "note",
        "description": "Gets the tags of a note. Cheaper than notesInfo when only tags are needed",
        "schema": obj({"note": id_value("Note ID")}),
    },
    {
        "name": "clearUnusedTags",
        "category": "note",
        "description": (
            "Removes tags that are not assigned to any note from the tag list. "
            "Notes are not affected. Returns true on success"
        ),
        "schema": NO_ARGS,
    },
    {
        "name": "replaceTags",
        "category": "note",
        "description": (
            "Replaces one tag with another on the given notes. Case-sensitive. "
            "Returns true on success"
        ),
        "schema": obj({
            "notes": id_list("Note IDs"),
            "tagToReplace": string("Tag to replace"),
            "replaceWithTag": string("Replacement tag"),
        }),
    },
    {
        "name": "replaceTagsInAllNotes",
        "category": "note",
        "description": (
            "Replaces one tag with another across the whole collection. "
            "Case-sensitive. Returns true on success"
        ),
        "schema": obj({
            "tagToReplace": string("Tag to replace"),
            "replaceWithTag": string("Replacement tag"),
        }),
    },
    {
        "name": "removeEmptyNotes",
        "category": "note",
        "description": "Deletes notes that have no cards left. Returns the number of deleted notes",
        "schema": NO_ARGS,
    },
    {
        "name": "notesModTime",
        "category": "note",
        "description": (
            "Gets the last modification time of notes in seconds since epoch, in "
            "input order"
        ),
        "schema": obj({"notes": id_list("Note IDs")}),
    },

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------
    {
        "name": "findCards",
        "category": "card",
        "description": (
            "Searches cards with Anki query syntax and returns card IDs (not note "
            "IDs). Examples: 'deck:DeckName', 'is:due', 'is:new', 'is:learn', "
            "'is:suspended', 'prop:due<=0'. 'is:due' excludes learning cards; use "
            "getNextCards for review order. Deck names containing '::' must be "
            "quoted. Results are paginated"
        ),
        "schema": obj({
            "query": string("Search query (e.g. 'deck:current', 'deck:Default is:due', 'tag:japanese')"),
            **_page(100, 1000, "cards"),
        }),
    },
    {
        "name": "getNextCards",
        "category": "card",
        "description": (
            "Gets cards in the order they will appear during review: learning cards "
            "first, then reviews due today, then new cards. Use 'current' for the "
            "current deck. Returns card details with a queue breakdown"
        ),
        "schema": obj({
            "deck": optional(string("Deck name (or 'current' for current deck)")),
            "limit": defaulted(number("Maximum cards to return (default 10, max 100)"), 10),
            "offset": optional(defaulted(number("Starting position for pagination"), 0)),
        }),
    },
    {
        "name": "cardsInfo",
        "category": "card",
        "description": (
            "Gets card details: cardId, note, deckName, modelName, question and "
            "answer HTML, due date, interval, ease factor, reviews, lapses and "
            "queue. Large requests are sent in batches of 100"
        ),
        "schema": obj({"cards": id_list("Card IDs (automatically batched if >100)")}),
    },
    {
        "name": "suspend",
        "category": "card",
        "description": (
            "Suspends cards so they no longer appear in reviews. Scheduling data is "
            "kept and can be restored with unsuspend"
        ),
        "schema": obj({"cards": id_list("Card IDs to suspend")}),
    },
    {
        "name": "unsuspend",
        "category": "card",
        "description": (
            "Returns suspended cards to the review queue with their scheduling "
            "intact. Returns true on success"
        ),
        "schema": obj({"cards": id_list("Card IDs to unsuspend")}),
    },
    {
        "name": "getEaseFactors",
        "category": "card",
        "description": (
            "Gets ease factors of cards. Default ease is 2500 (250%); cards below "
            "2000 are often worth rewriting"
        ),
        "schema": obj({"cards": id_list("Card IDs")}),
    },
    {
        "name": "setEaseFactors",
        "category": "card",
        "description": (
            "Sets ease factors of cards. Use with care: it changes how fast "
            "intervals grow"
        ),
        "schema": obj({
            "cards": id_list("Card IDs"),
            "easeFactors": array(number(), "Ease factors (1.3-2.5)"),
        }),
    },
    {
        "name": "canAddNotes",
        "category": "card",
        "description": (
            "Checks whether notes could be added (valid deck and note type, required "
            "fields, no duplicates) without creating them. Returns one boolean per "
            "note"
        ),
        "schema": obj({"notes": array(obj(_note_input()), "Notes to check")}),
    },
    {
        "name": "areSuspended",
        "category": "card",
        "description": "Checks suspension status of cards. Returns one boolean per card, in input order",
        "schema": obj({"cards": id_list("Card IDs to check")}),
    },
    {
        "name": "areDue",
        "category": "card",
        "description": (
            "Checks whether cards are due for review today. Does not look at "
            "suspension. Returns one boolean per card"
        ),
        "schema": obj({"cards": id_list("Card IDs to check")}),
    },
    {
        "name": "getIntervals",
        "category": "card",
        "description": (
            "Gets current intervals of cards in days. Negative values are seconds, "
            "for cards in learning"
        ),
        "schema": obj({
            "cards": id_list("Card IDs"),
            "complete": optional(boolean(), "Return complete history"),
        }),
    },
    {
        "name": "cardsToNotes",
        "category": "card",
        "description": "Converts card IDs to the IDs of their notes",
        "schema": obj({"cards": id_list("Card IDs")}),
    },
    {
        "name": "cardsModTime",
        "category": "card",
        "description": (
            "Gets last modification times of cards. Much faster than cardsInfo when "
            "only times are needed"
        ),
        "schema": obj({"cards": id_list("Card IDs")}),
    },
    {
        "name": "answerCards",
        "category": "card",
        "description": (
            "Answers cards without the GUI, updating their scheduling as a normal "
            "review would. Ease: 1=Again, 2=Hard, 3=Good, 4=Easy. Returns one "
            "boolean per answer"
        ),
        "schema": obj({
            "answers": array(
                obj({
                    "cardId": id_value(),
                    "ease": number("1=Again, 2=Hard, 3=Good, 4=Easy", minimum=1, maximum=4),
                }),
                "Card answers",
            ),
        }),
    },
    {
        "name": "forgetCards",
        "category": "card",
        "description": (
            "Resets cards to new, clearing interval, ease and review count. "
            "CAUTION: review progress is lost. Returns true on success"
        ),
        "schema": obj({"cards": id_list("Card IDs to reset")}),
    },
    {
        "name": "relearnCards",
        "category": "card",
        "description": (
            "Puts cards into the relearning queue, keeping their ease factor. "
            "Returns true on success"
        ),
        "schema": obj({"cards": id_list("Card IDs")}),
    },
    {
        "name": "setSpecificValueOfCard",
        "category": "card",
        "description": (
            "Sets internal card properties such as 'due', 'ivl', 'reps' or "
            "'lapses'. EXTREME CAUTION: wrong values break scheduling"
        ),
        "schema": obj({
            "card": id_value("Card ID"),
            "keys": array(string(), "Field keys to update"),
            "newValues": array(string(), "New values for keys"),
            "warningCheck": optional(boolean(), "Required for dangerous fields"),
        }),
    },
    {
        "name": "getDecks",
        "category": "card",
        "description": "Gets the decks that contain the given cards",
        "schema": obj({"cards": id_list("Card IDs")}),
    },
    {
        "name": "changeDeck",
        "category": "card",
        "description": (
            "Moves cards to another deck, keeping their scheduling. The deck is "
            "created if missing. Returns true on success"
        ),
        "schema": obj({
            "cards": id_list("Card IDs to move"),
            "deck": string("Target deck name"),
        }),
    },

    # ------------------------------------------------------------------
    # Note types (models)
    # ------------------------------------------------------------------
    {
        "name": "modelNames",
        "category": "model",
        "description": (
            "Lists note types (models), e.g. 'Basic', 'Basic (and reversed card)', "
            "'Cloze'. Results are paginated"
        ),
        "schema": obj(_page(1000, 10000, "models")),
    },
    {
        "name": "modelFieldNames",
        "category": "model",
        "description": (
            "Gets the ordered field names of a note type. Names are case-sensitive "
            "and must match exactly when adding or updating notes"
        ),
        "schema": obj({"modelName": string("Note type name")}),
    },
    {
        "name": "modelNamesAndIds",
        "category": "model",
        "description": "Gets the mapping of note type names to their IDs. Results are paginated",
        "schema": obj(_page(1000, 10000, "entries")),
    },
    {
        "name": "createModel",
        "category": "model",
        "description": (
            "Creates a note type with the given fields and card templates. "
            "Templates use {{Field}} and {{#Field}}...{{/Field}}. CSS is shared by "
            "all templates. The name must be unique"
        ),
        "schema": obj({
            "modelName": string("Unique model name (case-sensitive)", min_length=1),
            "inOrderFields": array(
                string(), "Field names in display order (at least one required)", min_length=1
            ),
            "css": optional(string("CSS styling for all cards in this model")),
            "isCloze": defaulted(optional(boolean()), False, "Whether this is a cloze deletion model"),
            "cardTemplates": array(
                obj({
                    "Name": string("Template name (required)", min_length=1),
                    "Front": string("Front template HTML (question side)"),
                    "Back": string("Back template HTML (answer side)"),
                }),
                "Card templates (at least one required)",
                min_length=1,
            ),
        }),
    },
    {
        "name": "modelFieldsOnTemplates",
        "category": "model",
        "description": "Shows which fields each card template of a note type uses",
        "schema": obj({"modelName": string("Model name")}),
    },
    {
        "name": "modelTemplates",
        "category": "model",
        "description": "Gets the card templates (Front/Back) of a note type, keyed by template name",
        "schema": obj({"modelName": string("Model name")}),
    },
    {
        "name": "modelStyling",
        "category": "model",
        "description": "Gets the CSS shared by all cards of a note type",
        "schema": obj({"modelName": string("Model name")}),
    },
    {
        "name": "updateModelTemplates",
        "category": "model",
        "description": (
            "Replaces card templates of a note type. CAUTION: affects every note of "
            "this type; removing templates can delete cards"
        ),
        "schema": obj({
            "model": obj({
                "name": string(),
                "templates": record(obj({"Front": string(), "Back": string()})),
            }),
        }),
    },
    {
        "name": "updateModelStyling",
        "category": "model",
        "description": "Replaces the CSS of a note type. Applies immediately to all its cards",
        "schema": obj({
            "model": obj({
                "name": string(),
                "css": string(),
            }),
        }),
    },

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------
    {
        "name": "storeMediaFile",
        "category": "media",
        "description": (
            "Stores a file in Anki's media folder. Requires one of: data (base64), "
            "path or url. Use the file in cards with <img> or [sound:]. Returns the "
            "stored filename"
        ),
        "schema": obj({
            "filename": string("File name"),
            "data": optional(string("Base64-encoded file content")),
            "url": optional(string("URL to download from")),
            "path": optional(string("Local file path to read from")),
            "deleteExisting": defaulted(optional(boolean()), True, "Replace if file exists"),
        }),
    },
    {
        "name": "retrieveMediaFile",
        "category": "media",
        "description": "Gets a media file as base64. Returns false if the file does not exist",
        "schema": obj({"filename": string("File name")}),
    },
    {
        "name": "getMediaFilesNames",
        "category": "media",
        "description": "Lists media file names, optionally filtered by a pattern with * and ?",
        "schema": obj({"pattern": optional(string("File pattern"))}),
    },
    {
        "name": "deleteMediaFile",
        "category": "media",
        "description": (
            "Deletes a media file. CAUTION: cannot be undone; cards referencing it "
            "will show broken media"
        ),
        "schema": obj({"filename": string("File name")}),
    },
    {
        "name": "getMediaDirPath",
        "category": "media",
        "description": "Gets the absolute path of Anki's media folder",
        "schema": NO_ARGS,
    },

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------
    {
        "name": "getNumCardsReviewedToday",
        "category": "stats",
        "description": "Gets the number of cards reviewed today",
        "schema": NO_ARGS,
    },
    {
        "name": "getDueCardsDetailed",
        "category": "stats",
        "description": (
            "Gets due cards split into learning and review, each sorted by due "
            "date. Use 'current' for the current deck"
        ),
        "schema": obj({"deck": optional(string("Deck name (or 'current' for current deck)"))}),
    },
    {
        "name": "getNumCardsReviewedByDay",
        "category": "stats",
        "description": "Gets review counts per day as [date, count] pairs",
        "schema": NO_ARGS,
    },
    {
        "name": "getCollectionStatsHTML",
        "category": "stats",
        "description": (
            "Gets the collection statistics report (the Stats window) as HTML"
        ),
        "schema": obj({"wholeCollection": defaulted(optional(boolean()), True)}),
    },
    {
        "name": "cardReviews",
        "category": "stats",
        "description": (
            "Gets review log entries of a deck after a review ID: reviewTime, "
            "cardID, ease, interval, lastInterval, factor, reviewDuration"
        ),
        "schema": obj({
            "deck": string("Deck name"),
            "startID": number("Start review ID"),
        }),
    },
    {
        "name": "getLatestReviewID",
        "category": "stats",
        "description": "Gets the ID of the most recent review in a deck",
        "schema": obj({"deck": string("Deck name")}),
    },
    {
        "name": "getReviewsOfCards",
        "category": "stats",
        "description": "Gets review log entries for specific cards",
        "schema": obj({"cards": id_list("Card IDs")}),
    },

    # ------------------------------------------------------------------
    # GUI
    # ------------------------------------------------------------------
    {
        "name": "guiBrowse",
        "category": "gui",
        "description": (
            "Opens the Browse window with a search query. Returns the note IDs "
            "shown. Requires the Anki GUI"
        ),
        "schema": obj({
            "query": string("Search query"),
            "reorderCards": optional(obj({
                "order": optional(string(choices=("ascending", "descending"))),
                "columnId": optional(string()),
            })),
        }),
    },
    {
        "name": "guiAddCards",
        "category": "gui",
        "description": (
            "Opens the Add Cards dialog pre-filled with a note so the user can "
            "review it before adding"
        ),
        "schema": obj({"note": obj(_note_input())}),
    },
    {
        "name": "guiCurrentCard",
        "category": "gui",
        "description": "Gets the card currently shown in the reviewer, or null outside review",
        "schema": NO_ARGS,
    },
    {
        "name": "guiAnswerCard",
        "category": "gui",
        "description": (
            "Answers the card shown in the reviewer: 1=Again, 2=Hard, 3=Good, "
            "4=Easy. Only works during a review session"
        ),
        "schema": obj({"ease": number("1=Again, 2=Hard, 3=Good, 4=Easy", minimum=1, maximum=4)}),
    },
    {
        "name": "guiDeckOverview",
        "category": "gui",
        "description": "Opens the overview screen of a deck",
        "schema": obj({"name": string("Deck name")}),
    },
    {
        "name": "guiExitAnki",
        "category": "gui",
        "description": "Closes Anki after saving. The AnkiConnect connection is lost afterwards",
        "schema": NO_ARGS,
    },
    {
        "name": "guiSelectedNotes",
        "category": "gui",
        "description": "Gets the note IDs selected in the Browse window",
        "schema": NO_ARGS,
    },
    {
        "name": "guiSelectCard",
        "category": "gui",
        "description": "Selects a card in the Browse window, opening it if needed",
        "schema": obj({"card": id_value("Card ID")}),
    },
    {
        "name": "guiEditNote",
        "category": "gui",
        "description": "Opens the edit dialog for a note",
        "schema": obj({"note": id_value("Note ID")}),
    },
    {
        "name": "guiStartCardTimer",
        "category": "gui",
        "description": "Starts the review timer for the current card",
        "schema": NO_ARGS,
    },
    {
        "name": "guiShowQuestion",
        "category": "gui",
        "description": "Shows the question side of the current review card",
        "schema": NO_ARGS,
    },
    {
        "name": "guiShowAnswer",
        "category": "gui",
        "description": "Shows the answer side of the current review card",
        "schema": NO_ARGS,
    },
    {
        "name": "guiUndo",
        "category": "gui",
        "description": "Undoes the last action in Anki. Returns false if there was nothing to undo",
        "schema": NO_ARGS,
    },
    {
        "name": "guiDeckBrowser",
        "category": "gui",
        "description": "Opens the deck browser (Anki's home screen)",
        "schema": NO_ARGS,
    },
    {
        "name": "guiDeckReview",
        "category": "gui",
        "description": "Starts a review session for a deck",
        "schema": obj({"name": string("Deck name")}),
    },
    {
        "name": "guiCheckDatabase",
        "category": "gui",
        "description": "Runs Anki's database check, fixing problems where possible",
        "schema": NO_ARGS,
    },
    {
        "name": "guiImportFile",
        "category": "gui",
        "description": "Opens the import dialog, optionally for a given file (.apkg, .colpkg, .txt, .csv)",
        "schema": obj({"path": optional(string("File path to import"))}),
    },

    # ------------------------------------------------------------------
    # System
    # ------------------------------------------------------------------
    {
        "name": "sync",
        "category": "system",
        "description": (
            "Runs a two-way sync with AnkiWeb. Requires AnkiWeb credentials in Anki"
        ),
        "schema": NO_ARGS,
    },
    {
        "name": "getProfiles",
        "category": "system",
        "description": "Lists Anki user profiles. Results are paginated",
        "schema": obj(_page(100, 1000, "profiles")),
    },
    {
        "name": "loadProfile",
        "category": "system",
        "description": "Switches to another user profile",
        "schema": obj({"name": string("Profile name")}),
    },
    {
        "name": "exportPackage",
        "category": "system",
        "description": (
            "Exports a deck to an .apkg file at an absolute path. Set "
            "includeSched=true to keep review history"
        ),
        "schema": obj({
            "deck": string("Deck name"),
            "path": string("Export path"),
            "includeSched": defaulted(optional(boolean()), False),
        }),
    },
    {
        "name": "importPackage",
        "category": "system",
        "description": "Imports an .apkg file from an absolute path into the collection",
        "schema": obj({"path": string("Import path")}),
    },
    {
        "name": "version",
        "category": "system",
        "description": "Gets the AnkiConnect API version",
        "schema": NO_ARGS,
    },
    {
        "name": "requestPermission",
        "category": "system",
        "description": "Requests permission to use the AnkiConnect API; shows a dialog in Anki",
        "schema": NO_ARGS,
    },
    {
        "name": "apiReflect",
        "category": "system",
        "description": "Lists the AnkiConnect actions available, optionally filtered",
        "schema": obj({
            "scopes": optional(array(string()), "Scopes to query"),
            "actions": optional(array(string()), "Actions to check"),
        }),
    },
    {
        "name": "reloadCollection",
        "category": "system",
        "description": "Reloads the collection from disk",
        "schema": NO_ARGS,
    },
    {
        "name": "multi",
        "category": "system",
        "description": (
            "Runs several AnkiConnect actions in one request. Returns one result per "
            "action, in order"
        ),
        "schema": obj({
            "actions": array(
                obj({
                    "action": string(),
                    "params": optional(any_value()),
                    "version": optional(number()),
                }),
                "Actions to execute",
            ),
        }),
    },
    {
        "name": "getActiveProfile",
        "category": "system",
        "description": "Gets the name of the active profile",
        "schema": NO_ARGS,
    },
    {
        "name": "setDueDate",
        "category": "system",
        "description": (
            "Sets the due date of cards: a number of days ('0' is today), a range "
            "('3-7'), or with '!' to also set the interval"
        ),
        "schema": obj({
            "cards": id_list("Card IDs"),
            "days": string("Days string (e.g., '1', '3-7', '0' for today)"),
        }),
    },
    {
        "name": "suspended",
        "category": "system",
        "description": "Checks whether a single card is suspended",
        "schema": obj({"card": id_value("Card ID")}),
    },
    {
        "name": "saveDeckConfig",
        "category": "system",
        "description": (
            "Saves a deck configuration group. Affects every deck using it. Returns "
            "true on success"
        ),
        "schema": obj({"config": record(any_value(), "Deck configuration object")}),
    },
    {
        "name": "setDeckConfigId",
        "category": "system",
        "description": "Assigns decks to a configuration group",
        "schema": obj({
            "decks": array(string(), "Deck names"),
            "configId": number("Configuration ID"),
        }),
    },
    {
        "name": "cloneDeckConfigId",
        "category": "system",
        "description": "Creates a copy of a configuration group under a new name. Returns the new ID",
        "schema": obj({
            "name": string("New config name"),
            "cloneFrom": optional(number("Config ID to clone from")),
        }),
    },
    {
        "name": "removeDeckConfigId",
        "category": "system",
        "description": (
            "Deletes a configuration group; its decks fall back to the default. "
            "Returns true on success"
        ),
        "schema": obj({"configId": number("Configuration ID to remove")}),
    },
]
