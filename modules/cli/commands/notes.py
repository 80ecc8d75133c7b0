"""
Notes Commands.

Commands for browsing and editing notes through the backend API
(requires a running server).
"""

import asyncio
import html
import re
from datetime import datetime
from typing import Any

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from modules.backend.core.exceptions import ApplicationError
from modules.backend.core.utils import to_local_time_label
from modules.cli.client import APIClient, get_api_client
from modules.editor.controller import AutosaveController
from modules.editor.store import ApiNoteStore

app = typer.Typer(help="Note commands")
console = Console()

NOTES_PATH = "/api/v1/notes"

_TAG_RE = re.compile(r"<[^>]+>")


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


async def _call(client: APIClient, method: str, path: str, **kwargs: Any) -> Any:
    """Send a request and return the envelope's `data`, exiting on any failure."""
    try:
        response = await client.request(method, path, **kwargs)
    except httpx.HTTPError:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: cli.py server start[/dim]")
        raise typer.Exit(1)

    if response.status_code == 204:
        return None
    body = response.json()
    if response.status_code >= 400:
        error = body.get("error") or {}
        _fail(error.get("message", f"HTTP {response.status_code}"))
    return body.get("data")


def _time_label(value: str | None) -> str:
    if not value:
        return "-"
    return to_local_time_label(datetime.fromisoformat(value))


def _notes_table(notes: list[dict], title: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Pinned")
    table.add_column("Updated")

    for note in notes:
        table.add_row(
            note["id"],
            note["title"],
            "[yellow]*[/yellow]" if note.get("is_pinned") else "",
            _time_label(note.get("updated_at")),
        )
    return table


@app.command("list")
def list_notes(
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum notes to show"),
    offset: int = typer.Option(0, "--offset", "-o", help="Notes to skip"),
) -> None:
    """
    List notes, pinned first.

    Examples:
        cli.py notes list
        cli.py notes list --limit 5 --offset 5
    """
    asyncio.run(_list(limit, offset))


async def _list(limit: int, offset: int) -> None:
    client = get_api_client()
    try:
        notes = await _call(client, "GET", NOTES_PATH, params={"limit": limit, "offset": offset})
    finally:
        await client.close()

    if not notes:
        console.print("[dim]No notes yet. Create one with: cli.py notes new[/dim]")
        return
    console.print(_notes_table(notes, "Notes"))


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to look for in titles and content"),
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum results"),
) -> None:
    """
    Search notes by title and text.

    Examples:
        cli.py notes search groceries
    """
    asyncio.run(_search(query, limit))


async def _search(query: str, limit: int) -> None:
    client = get_api_client()
    try:
        notes = await _call(client, "GET", f"{NOTES_PATH}/search", params={"q": query, "limit": limit})
    finally:
        await client.close()

    if not notes:
        console.print(f"[dim]No notes match '{query}'[/dim]")
        return
    console.print(_notes_table(notes, f"Results for '{query}'"))


@app.command()
def show(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """
    Show a single note.

    Examples:
        cli.py notes show 3f2b...
    """
    asyncio.run(_show(note_id))


async def _show(note_id: str) -> None:
    client = get_api_client()
    try:
        note = await _call(client, "GET", f"{NOTES_PATH}/{note_id}")
    finally:
        await client.close()

    console.print(Panel(
        note["plain_text"] or "[dim](empty)[/dim]",
        title=note["title"],
        subtitle=f"updated {_time_label(note['updated_at'])}",
    ))


@app.command()
def new(
    template: str = typer.Option(None, "--template", "-t", help="Template ID to start from"),
) -> None:
    """
    Create a note, blank or from a template.

    Examples:
        cli.py notes new
        cli.py notes new --template meeting-notes
    """
    asyncio.run(_new(template))


async def _new(template: str | None) -> None:
    client = get_api_client()
    try:
        if template:
            note = await _call(client, "POST", f"{NOTES_PATH}/templates/{template}")
        else:
            note = await _call(client, "POST", NOTES_PATH, json={})
    finally:
        await client.close()

    console.print(f"[green]Created note[/green] {note['id']} [cyan]{note['title']}[/cyan]")


@app.command()
def templates() -> None:
    """
    List the note templates.

    Examples:
        cli.py notes templates
    """
    asyncio.run(_templates())


async def _templates() -> None:
    client = get_api_client()
    try:
        items = await _call(client, "GET", f"{NOTES_PATH}/templates")
    finally:
        await client.close()

    table = Table(title="Templates", show_header=True)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Description", style="dim")
    for item in items or []:
        table.add_row(item["id"], item["name"], item["description"])
    console.print(table)


@app.command()
def pin(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """Pin a note to the top of the list."""
    asyncio.run(_set_pinned(note_id, True))


@app.command()
def unpin(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """Unpin a note."""
    asyncio.run(_set_pinned(note_id, False))


async def _set_pinned(note_id: str, pinned: bool) -> None:
    client = get_api_client()
    action = "pin" if pinned else "unpin"
    try:
        note = await _call(client, "POST", f"{NOTES_PATH}/{note_id}/{action}")
    finally:
        await client.close()

    console.print(f"[green]{action.title()}ned[/green] [cyan]{note['title']}[/cyan]")


@app.command()
def delete(
    note_id: str = typer.Argument(..., help="Note ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a note."""
    if not yes:
        typer.confirm(f"Delete note {note_id}?", abort=True)
    asyncio.run(_delete(note_id))


async def _delete(note_id: str) -> None:
    client = get_api_client()
    try:
        await _call(client, "DELETE", f"{NOTES_PATH}/{note_id}")
    finally:
        await client.close()

    console.print(f"[green]Deleted[/green] {note_id}")


# ----------------------------------------------------------------------
# Line editor
# ----------------------------------------------------------------------


def line_to_html(line: str) -> str:
    """Render one typed line as a paragraph."""
    return f"<p>{html.escape(line)}</p>"


class ConsoleSurface:
    """Editing surface that prints the loaded note to a Rich console."""

    def __init__(self, out: Console) -> None:
        self._console = out

    def show_note(self, title: str, content: str) -> None:
        text = _TAG_RE.sub("", content.replace("</p>", "\n")).strip()
        self._console.print(Panel(html.unescape(text) or "[dim](empty)[/dim]", title=title))

    def clear(self) -> None:
        self._console.clear()


@app.command()
def edit(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """
    Append to a note line by line, with autosave.

    Each line you type is added to the note and saved after a short pause.
    Commands:
        :title TEXT   set an explicit title
        :status       show save status and word count
        :q            save now and quit

    Examples:
        cli.py notes edit 3f2b...
    """
    asyncio.run(_edit(note_id))


async def _edit(note_id: str) -> None:
    store = ApiNoteStore(APIClient(frontend="editor"))
    controller = AutosaveController(store, ConsoleSurface(console))

    try:
        try:
            note = await controller.on_active_note_changed(note_id)
        except ApplicationError as e:
            _fail(e.message)

        # Loaded markup is kept as is; typed lines are appended after it
        content = note.content if note else ""
        plain_text = note.plain_text if note else ""
        console.print("[dim]Type to append. :title TEXT, :status, :q to quit.[/dim]")

        while True:
            try:
                line = await asyncio.to_thread(console.input, "> ")
            except EOFError:
                break

            if line.strip() == ":q":
                break
            if line.startswith(":title "):
                controller.on_title_edited(line[len(":title "):])
                continue
            if line.strip() == ":status":
                status = controller.status
                console.print(
                    f"[dim]{status.label() or 'Not saved yet'}  {status.word_label()}[/dim]"
                )
                continue

            content += line_to_html(line)
            plain_text = f"{plain_text}\n{line}" if plain_text else line
            controller.on_content_changed(content, plain_text)

        await controller.flush()
        status = controller.status
        if status.last_saved_at is not None:
            console.print(f"[green]{status.label()}[/green]")
    finally:
        controller.close()
        await store.close()
