"""Configuration and logging setup for mankey."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

DEFAULT_ANKI_CONNECT_URL = "http://127.0.0.1:8765"
ANKI_CONNECT_VERSION = 6

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Process-wide settings, fixed at startup."""

    anki_connect_url: str = DEFAULT_ANKI_CONNECT_URL
    debug: bool = False
    # Seconds; None keeps the HTTP transport's default
    timeout: float | None = None


def load_config(url: str | None = None, debug: bool | None = None) -> Config:
    """Build the config from explicit overrides, then the environment.

    Reads a ``.env`` file from the working directory first; variables that
    are already set in the environment win over it.
    """
    load_dotenv()

    if not url:
        url = os.environ.get("ANKI_CONNECT_URL") or DEFAULT_ANKI_CONNECT_URL
    if debug is None:
        debug = os.environ.get("DEBUG", "").strip().lower() in _TRUTHY

    timeout = None
    raw_timeout = os.environ.get("ANKI_CONNECT_TIMEOUT")
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            logging.getLogger(__name__).warning(
                "Ignoring invalid ANKI_CONNECT_TIMEOUT=%r", raw_timeout
            )

    return Config(anki_connect_url=url.rstrip("/"), debug=debug, timeout=timeout)


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr; stdout carries the MCP stream."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=debug,
    )
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
