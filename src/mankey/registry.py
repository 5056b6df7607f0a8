"""Tool registry: joins tool definitions with their handlers and dispatches calls."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TYPE_CHECKING

from .descriptor import assemble
from .schema import Node, validate
from .tool_handlers import HANDLERS
from .tools import ANKI_TOOLS, CATEGORIES

if TYPE_CHECKING:
    from .client import AnkiClient

logger = logging.getLogger(__name__)


class UnknownToolError(KeyError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"


@dataclass(frozen=True)
class ToolEntry:
    name: str
    category: str
    description: str
    schema: Node
    handler: Callable

    def descriptor(self) -> dict[str, Any]:
        """The tool as reported to a tools/list request."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": assemble(self.schema),
        }


def build_registry(
    tools: Iterable[dict] = ANKI_TOOLS,
    handlers: dict[str, Callable] | None = None,
) -> dict[str, ToolEntry]:
    """Pair every tool definition with its handler.

    Raises:
        RuntimeError: a tool has no handler, a handler has no tool, or a
            name is defined twice.
    """
    handlers = HANDLERS if handlers is None else handlers
    registry: dict[str, ToolEntry] = {}
    for tool in tools:
        name = tool["name"]
        if name in registry:
            raise RuntimeError(f"Tool defined twice: {name}")
        if name not in handlers:
            raise RuntimeError(f"Tool has no handler: {name}")
        registry[name] = ToolEntry(
            name=name,
            category=tool["category"],
            description=tool["description"],
            schema=tool["schema"],
            handler=handlers[name],
        )

    orphans = sorted(set(handlers) - set(registry))
    if orphans:
        raise RuntimeError(f"Handlers without a tool: {', '.join(orphans)}")
    return registry


REGISTRY = build_registry()


def get_tool(name: str) -> ToolEntry:
    try:
        return REGISTRY[name]
    except KeyError:
        raise UnknownToolError(name) from None


def tools_by_category(category: str | None = None) -> dict[str, list[ToolEntry]]:
    """Registered tools grouped by category, in catalog order."""
    if category is not None and category not in CATEGORIES:
        raise ValueError(
            f"Unknown category: {category}. Valid categories: {', '.join(CATEGORIES)}"
        )
    grouped: dict[str, list[ToolEntry]] = {}
    for cat in CATEGORIES:
        if category is None or cat == category:
            grouped[cat] = [e for e in REGISTRY.values() if e.category == cat]
    return grouped


def list_tools() -> list[dict[str, Any]]:
    """Descriptors for every registered tool, built fresh on each call."""
    return [entry.descriptor() for entry in REGISTRY.values()]


async def call_tool(anki: AnkiClient, name: str, arguments: dict | None = None, **ctx) -> Any:
    """Validate ``arguments`` against the tool's schema and run its handler.

    Raises:
        UnknownToolError: ``name`` is not registered.
        SchemaValidationError: the arguments do not match the schema.
    """
    entry = get_tool(name)
    validated = validate(entry.schema, arguments if arguments is not None else {})
    logger.debug("Dispatching %s with %s", name, validated)
    return await entry.handler(anki, validated, **ctx)


def format_result(result: Any) -> str:
    """Serialize a handler result for a text content block."""
    return json.dumps(result, indent=2, ensure_ascii=False)
