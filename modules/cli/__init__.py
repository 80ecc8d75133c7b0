"""
CLI Client Module.

Typer command-line client for the notes backend. Commands are a thin
presentation layer over the REST API (httpx), sending X-Frontend-ID
so the backend can route logs by frontend.

Usage:
    python cli.py --help
    python cli.py notes list
    python cli.py notes edit <note-id>
"""
