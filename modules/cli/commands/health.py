"""
Health Check Commands.

Commands for checking backend health (requires a running server).
"""

import asyncio

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from modules.cli.client import get_api_client

app = typer.Typer(help="Health check commands")
console = Console()


@app.command()
def ping() -> None:
    """
    Check that the backend process is reachable.

    Examples:
        cli.py health ping
    """
    asyncio.run(_ping())


async def _ping() -> None:
    client = get_api_client()

    try:
        response = await client.get("/health")
    except httpx.HTTPError:
        console.print("[red]✗ Backend is not reachable[/red]")
        raise typer.Exit(1)
    finally:
        await client.close()

    if response.status_code == 200:
        console.print("[green]✓ Backend is reachable[/green]")
    else:
        console.print(f"[yellow]Backend responded with status {response.status_code}[/yellow]")
        raise typer.Exit(1)


@app.command()
def status() -> None:
    """
    Check backend readiness, including the database.

    Examples:
        cli.py health status
    """
    asyncio.run(_status())


async def _status() -> None:
    client = get_api_client()

    try:
        response = await client.get("/health/ready")
    except httpx.HTTPError:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: cli.py server start[/dim]")
        raise typer.Exit(1)
    finally:
        await client.close()

    data = response.json()
    if response.status_code == 503:
        # Raised through HTTPException, so the payload sits under "detail"
        _display_health(data.get("detail", {}))
        raise typer.Exit(1)
    if response.status_code != 200:
        console.print(f"[red]Unexpected response: {response.status_code}[/red]")
        raise typer.Exit(1)

    _display_health(data)


def _display_health(data: dict) -> None:
    state = data.get("status", "unknown")
    color = "green" if state == "healthy" else "red"

    checks = data.get("checks", {})
    if not checks:
        console.print(Panel(f"[{color}]{state.upper()}[/{color}]", title="Backend Status"))
        return

    table = Table(title="Health Status", show_header=True)
    table.add_column("Component", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    for component, check in checks.items():
        check_status = check.get("status", "unknown")
        check_color = "green" if check_status == "healthy" else "red"
        details = []
        if "latency_ms" in check:
            details.append(f"latency: {check['latency_ms']}ms")
        if "error" in check:
            details.append(f"error: {check['error']}")
        table.add_row(
            component,
            f"[{check_color}]{check_status}[/{check_color}]",
            ", ".join(details) or "-",
        )

    console.print(table)
