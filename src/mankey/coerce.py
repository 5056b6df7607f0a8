"""Normalize loosely-typed tool arguments before they are sent to Anki.

Agents often send tags as a single string, fields as a JSON string, or ids
as strings. These helpers accept those forms.
"""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def normalize_tags(tags: Any) -> list[str]:
    """Return tags as a list.

    Accepts a list, a JSON array string, or a space-separated string.
    Anything else yields an empty list.
    """
    if isinstance(tags, list):
        return tags

    if isinstance(tags, str):
        if tags.startswith("["):
            try:
                parsed = json.loads(tags)
            except json.JSONDecodeError:
                logger.debug("Tags look like JSON but do not parse, splitting on spaces")
            else:
                if isinstance(parsed, list):
                    logger.debug("Parsed tags from JSON: %s", parsed)
                    return parsed
        return [t for t in tags.split(" ") if t.strip()]

    logger.debug("Unknown tag format %r, using no tags", type(tags).__name__)
    return []


def normalize_fields(fields: Any) -> dict | None:
    """Return note fields as a dict, or None if none were usable."""
    if not fields:
        return None

    if isinstance(fields, dict):
        return fields

    if isinstance(fields, str):
        try:
            parsed = json.loads(fields)
        except json.JSONDecodeError:
            logger.debug("Fields string is not valid JSON")
            return None
        if isinstance(parsed, dict):
            return parsed

    return None


def to_id(value: int | str) -> int:
    """Convert a note/card id given as number or numeric string to int."""
    if isinstance(value, str):
        return int(value.strip())
    return int(value)


def to_ids(values: list[int | str]) -> list[int]:
    return [to_id(v) for v in values]
