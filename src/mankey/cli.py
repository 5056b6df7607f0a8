"""CLI commands for mankey."""

import asyncio
import json
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .client import AnkiClient, AnkiConnectError
from .config import Config, configure_logging, load_config
from .registry import UnknownToolError, call_tool, format_result, tools_by_category
from .schema import SchemaValidationError

console = Console()


def fail(message: str) -> NoReturn:
    console.print(f"[red]✗ Error: {escape(message)}[/red]")
    sys.exit(1)


def run_tool(config: Config, name: str, arguments: dict) -> None:
    """Validate and run a tool, printing its result as JSON."""
    anki = AnkiClient(config)
    try:
        result = asyncio.run(call_tool(anki, name, arguments, config=config))
    except UnknownToolError as e:
        console.print(f"[red]✗ Error: {escape(str(e))}[/red]")
        console.print('[dim]Run "mankey tools" to see available tools.[/dim]')
        sys.exit(1)
    except SchemaValidationError as e:
        console.print(f'[red]✗ Validation error for "{escape(name)}":[/red]')
        for path, message in e.issues:
            console.print(f"  {escape(path or '(root)')}: {escape(message)}")
        sys.exit(1)
    except (AnkiConnectError, ValueError) as e:
        fail(str(e))
    click.echo(format_result(result))


def parse_json(value: str, what: str):
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        fail(f"Invalid JSON {what}: {e}")


def split_commas(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def first_sentence(text: str) -> str:
    return text.split(".")[0] or text


def serve(config: Config) -> None:
    from .server import run_stdio_server
    asyncio.run(run_stdio_server(config))


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option("--url", help="AnkiConnect URL (env: ANKI_CONNECT_URL)")
@click.option("--debug", is_flag=True, help="Enable debug logging (env: DEBUG)")
@click.pass_context
def cli(ctx: click.Context, url: str | None, debug: bool) -> None:
    """mankey - MCP server and CLI for Anki.

    Requires Anki desktop running with the AnkiConnect add-on installed.
    Without a command, starts the MCP server on stdio.
    """
    config = load_config(url=url, debug=True if debug else None)
    configure_logging(config.debug)
    ctx.obj = config
    if ctx.invoked_subcommand is None:
        serve(config)


@cli.command()
@click.pass_obj
def mcp(config: Config) -> None:
    """Start the MCP server on stdio."""
    serve(config)


@cli.command()
@click.pass_obj
def status(config: Config) -> None:
    """Check connection to Anki."""
    client = AnkiClient(config)
    if asyncio.run(client.ping()):
        console.print(f"[green]✓ Connected to Anki[/green] [dim]({escape(client.url)})[/dim]")
    else:
        console.print(
            f"[red]✗ Cannot connect to Anki at {escape(client.url)}[/red]\n"
            "[dim]Make sure Anki is running with AnkiConnect installed.[/dim]"
        )
        sys.exit(1)


@cli.command()
@click.option("--category", help="Filter by category (deck, note, card, model, media, stats, gui, system)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tools(category: str | None, as_json: bool) -> None:
    """List all available tools."""
    try:
        grouped = tools_by_category(category)
    except ValueError as e:
        fail(str(e))

    if as_json:
        listing = [
            {"name": e.name, "category": e.category, "description": first_sentence(e.description)}
            for entries in grouped.values()
            for e in entries
        ]
        click.echo(json.dumps({"tools": listing, "total": len(listing)}, indent=2))
        return

    total = 0
    for cat, entries in grouped.items():
        table = Table(title=f"{cat.upper()} ({len(entries)} tools)", title_justify="left")
        table.add_column("Tool", style="cyan", no_wrap=True)
        table.add_column("Description", style="dim")
        for entry in entries:
            table.add_row(entry.name, first_sentence(entry.description))
        console.print(table)
        total += len(entries)
    console.print(f"\n[bold]Total: {total} tools[/bold]")


@cli.command()
@click.argument("tool")
@click.argument("arguments", required=False)
@click.pass_obj
def run(config: Config, tool: str, arguments: str | None) -> None:
    """Run any tool by name with optional JSON arguments."""
    args = parse_json(arguments, "argument") if arguments else {}
    run_tool(config, tool, args)


# ---------------------------------------------------------------------------
# Decks
# ---------------------------------------------------------------------------

@cli.group()
def deck() -> None:
    """Deck operations."""


@deck.command("list")
@click.pass_obj
def deck_list(config: Config) -> None:
    """List all decks."""
    run_tool(config, "deckNames", {"offset": 0, "limit": 10000})


@deck.command("create")
@click.argument("name")
@click.pass_obj
def deck_create(config: Config, name: str) -> None:
    """Create a new deck."""
    run_tool(config, "createDeck", {"deck": name})


@deck.command("stats")
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def deck_stats(config: Config, names: tuple[str, ...]) -> None:
    """Get deck statistics."""
    run_tool(config, "getDeckStats", {"decks": list(names)})


@deck.command("delete")
@click.argument("names", nargs=-1, required=True)
@click.option("--keep-cards", is_flag=True, help="Delete only the decks, not their cards")
@click.pass_obj
def deck_delete(config: Config, names: tuple[str, ...], keep_cards: bool) -> None:
    """Delete decks."""
    run_tool(config, "deleteDecks", {"decks": list(names), "cardsToo": not keep_cards})


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------

@cli.group()
def note() -> None:
    """Note operations."""


@note.command("add")
@click.option("--deck", "deck_name", required=True, help="Target deck name")
@click.option("--model", "model_name", required=True, help="Note type (e.g., Basic, Cloze)")
@click.option("--front", required=True, help="Front field content")
@click.option("--back", required=True, help="Back field content")
@click.option("--tags", help="Comma-separated tags")
@click.option("--allow-duplicate", is_flag=True, help="Allow duplicate notes")
@click.pass_obj
def note_add(
    config: Config,
    deck_name: str,
    model_name: str,
    front: str,
    back: str,
    tags: str | None,
    allow_duplicate: bool,
) -> None:
    """Add a new note."""
    run_tool(config, "addNote", {
        "deckName": deck_name,
        "modelName": model_name,
        "fields": {"Front": front, "Back": back},
        "tags": split_commas(tags),
        "allowDuplicate": allow_duplicate,
    })


@note.command("find")
@click.argument("query")
@click.option("--offset", default=0, help="Starting position")
@click.option("--limit", default=100, help="Maximum results")
@click.pass_obj
def note_find(config: Config, query: str, offset: int, limit: int) -> None:
    """Find notes by query."""
    run_tool(config, "findNotes", {"query": query, "offset": offset, "limit": limit})


@note.command("info")
@click.argument("ids", nargs=-1, required=True, type=int)
@click.pass_obj
def note_info(config: Config, ids: tuple[int, ...]) -> None:
    """Get note information."""
    run_tool(config, "notesInfo", {"notes": list(ids)})


@note.command("update")
@click.argument("note_id", type=int)
@click.option("--fields", help="Fields to update as JSON")
@click.option("--tags", help="Comma-separated tags (replaces existing)")
@click.pass_obj
def note_update(config: Config, note_id: int, fields: str | None, tags: str | None) -> None:
    """Update a note."""
    args: dict = {"id": note_id}
    if fields:
        args["fields"] = parse_json(fields, "fields")
    if tags:
        args["tags"] = split_commas(tags)
    run_tool(config, "updateNote", args)


@note.command("delete")
@click.argument("ids", nargs=-1, required=True, type=int)
@click.pass_obj
def note_delete(config: Config, ids: tuple[int, ...]) -> None:
    """Delete notes."""
    run_tool(config, "deleteNotes", {"notes": list(ids)})


@note.command("tags")
@click.argument("note_id", type=int)
@click.pass_obj
def note_tags(config: Config, note_id: int) -> None:
    """Get tags for a note."""
    run_tool(config, "getNoteTags", {"note": note_id})


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------

@cli.group()
def card() -> None:
    """Card operations."""


@card.command("find")
@click.argument("query")
@click.option("--offset", default=0, help="Starting position")
@click.option("--limit", default=100, help="Maximum results")
@click.pass_obj
def card_find(config: Config, query: str, offset: int, limit: int) -> None:
    """Find cards by query."""
    run_tool(config, "findCards", {"query": query, "offset": offset, "limit": limit})


@card.command("info")
@click.argument("ids", nargs=-1, required=True, type=int)
@click.pass_obj
def card_info(config: Config, ids: tuple[int, ...]) -> None:
    """Get card information."""
    run_tool(config, "cardsInfo", {"cards": list(ids)})


@card.command("suspend")
@click.argument("ids", nargs=-1, required=True, type=int)
@click.pass_obj
def card_suspend(config: Config, ids: tuple[int, ...]) -> None:
    """Suspend cards."""
    run_tool(config, "suspend", {"cards": list(ids)})


@card.command("unsuspend")
@click.argument("ids", nargs=-1, required=True, type=int)
@click.pass_obj
def card_unsuspend(config: Config, ids: tuple[int, ...]) -> None:
    """Unsuspend cards."""
    run_tool(config, "unsuspend", {"cards": list(ids)})


@card.command("answer")
@click.argument("card_id", type=int)
@click.argument("ease", type=int)
@click.pass_obj
def card_answer(config: Config, card_id: int, ease: int) -> None:
    """Answer a card (ease: 1=Again, 2=Hard, 3=Good, 4=Easy)."""
    run_tool(config, "answerCards", {"answers": [{"cardId": card_id, "ease": ease}]})


@card.command("next")
@click.option("--deck", "deck_name", help="Deck name (or 'current')")
@click.option("--limit", default=10, help="Maximum cards")
@click.pass_obj
def card_next(config: Config, deck_name: str | None, limit: int) -> None:
    """Get next cards due for review."""
    args: dict = {"limit": limit, "offset": 0}
    if deck_name:
        args["deck"] = deck_name
    run_tool(config, "getNextCards", args)


# ---------------------------------------------------------------------------
# Note types (models)
# ---------------------------------------------------------------------------

@cli.group()
def model() -> None:
    """Model (note type) operations."""


@model.command("list")
@click.option("--offset", default=0, help="Starting position")
@click.option("--limit", default=1000, help="Maximum models to return")
@click.pass_obj
def model_list(config: Config, offset: int, limit: int) -> None:
    """List all models."""
    run_tool(config, "modelNames", {"offset": offset, "limit": limit})


@model.command("fields")
@click.argument("name")
@click.pass_obj
def model_fields(config: Config, name: str) -> None:
    """Get field names for a model."""
    run_tool(config, "modelFieldNames", {"modelName": name})


@model.command("create")
@click.option("--name", required=True, help="Model name")
@click.option("--fields", required=True, help="Comma-separated field names")
@click.option("--templates", required=True, help="Card templates as JSON")
@click.option("--css", help="CSS styling")
@click.option("--cloze", is_flag=True, help="Create as cloze model")
@click.pass_obj
def model_create(
    config: Config,
    name: str,
    fields: str,
    templates: str,
    css: str | None,
    cloze: bool,
) -> None:
    """Create a new model."""
    args = {
        "modelName": name,
        "inOrderFields": split_commas(fields),
        "cardTemplates": parse_json(templates, "templates"),
        "isCloze": cloze,
    }
    if css:
        args["css"] = css
    run_tool(config, "createModel", args)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

@cli.group()
def stats() -> None:
    """Review statistics."""


@stats.command("today")
@click.pass_obj
def stats_today(config: Config) -> None:
    """Get today's review count."""
    run_tool(config, "getNumCardsReviewedToday", {})


@stats.command("due")
@click.option("--deck", "deck_name", help="Deck name (or 'current')")
@click.pass_obj
def stats_due(config: Config, deck_name: str | None) -> None:
    """Get due cards with details."""
    run_tool(config, "getDueCardsDetailed", {"deck": deck_name} if deck_name else {})


@stats.command("collection")
@click.pass_obj
def stats_collection(config: Config) -> None:
    """Get collection statistics."""
    run_tool(config, "getCollectionStatsHTML", {"wholeCollection": True})


def main() -> None:
    """Entry point for the CLI."""
    cli()
