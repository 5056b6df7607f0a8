"""AnkiConnect client for talking to Anki desktop."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from .config import ANKI_CONNECT_VERSION, Config

logger = logging.getLogger(__name__)

# AnkiConnect sometimes prefixes its own errors; nested failures repeat it
_MARKER_RE = re.compile(r"^(?:\s*Anki-?Connect:\s*)+", re.IGNORECASE)

_COMPOSED_HINTS = (
    "Note already exists with this content.",
    "Deck not found.",
    "Note type (model) not found.",
    "Field error - ",
)


class AnkiConnectError(Exception):
    """AnkiConnect reported an error for an action."""

    def __init__(self, message: str, action: str | None = None):
        super().__init__(message)
        self.action = action


class ConnectionError(AnkiConnectError):
    """Could not reach AnkiConnect or could not read its reply."""
    pass


def clean_error(raw: str) -> str:
    """Strip leading AnkiConnect markers from an error string."""
    return _MARKER_RE.sub("", raw).strip()


def compose_error_message(action: str, raw: str) -> str:
    """Turn a raw AnkiConnect error into one actionable message.

    The result carries the action prefix exactly once, even if ``raw`` was
    already composed by an earlier call.
    """
    cleaned = clean_error(raw)
    prefix = f"{action}: "
    while cleaned.startswith(prefix):
        cleaned = clean_error(cleaned[len(prefix):])

    if cleaned.startswith(_COMPOSED_HINTS):
        text = cleaned
    elif "duplicate" in cleaned:
        if "allowDuplicate" in cleaned:
            hint = "Set allowDuplicate:true to bypass this check."
        else:
            hint = "Use allowDuplicate parameter or modify the note content."
        text = f"Note already exists with this content. {hint}"
    elif "deck" in cleaned and "not found" in cleaned:
        text = "Deck not found. Create the deck first or check the deck name spelling."
    elif "model" in cleaned and "not found" in cleaned:
        text = "Note type (model) not found. Check the modelName parameter."
    elif "field" in cleaned:
        text = (
            f"Field error - {cleaned}. "
            "Check that field names match the note type exactly (case-sensitive)."
        )
    else:
        text = cleaned
    return prefix + text


class AnkiClient:
    """Async client for the AnkiConnect HTTP API.

    Every call is one POST of ``{action, version, params}``; the reply is
    ``{result, error}``. Calls are never retried.
    """

    def __init__(self, config: Config | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config or Config()
        self._transport = transport

    @property
    def url(self) -> str:
        return self.config.anki_connect_url

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {}
        if self.config.timeout is not None:
            kwargs["timeout"] = self.config.timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def request(self, action: str, **params) -> Any:
        """Run one AnkiConnect action and return its ``result``.

        Parameters whose value is None are left out of the request.

        Raises:
            ConnectionError: Anki could not be reached or replied with garbage.
            AnkiConnectError: AnkiConnect returned an error for the action.
        """
        payload = {
            "action": action,
            "version": ANKI_CONNECT_VERSION,
            "params": {k: v for k, v in params.items() if v is not None},
        }
        logger.debug("-> %s %s", action, json.dumps(payload["params"], default=str)[:500])

        try:
            async with self._client() as client:
                response = await client.post(self.url, json=payload)
        except httpx.TimeoutException as e:
            raise ConnectionError(
                "Anki is not responding (timed out). "
                "Check if Anki is frozen or busy syncing.",
                action,
            ) from e
        except httpx.RequestError as e:
            raise ConnectionError(
                f"Cannot connect to Anki at {self.url}. "
                "Make sure Anki is running with AnkiConnect installed.",
                action,
            ) from e

        if not response.is_success:
            raise ConnectionError(
                f"AnkiConnect returned HTTP {response.status_code} for action '{action}'",
                action,
            )

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise ConnectionError(
                f"Invalid response from AnkiConnect for action '{action}': {response.text[:200]}",
                action,
            ) from e
        if not isinstance(data, dict):
            raise ConnectionError(
                f"Invalid response from AnkiConnect for action '{action}': {response.text[:200]}",
                action,
            )

        error = data.get("error")
        if error:
            logger.debug("<- %s error: %s", action, error)
            raise AnkiConnectError(compose_error_message(action, str(error)), action)

        return data.get("result")

    async def ping(self) -> bool:
        """Check if AnkiConnect is available."""
        try:
            result = await self.request("version")
            return result is not None
        except AnkiConnectError:
            return False
