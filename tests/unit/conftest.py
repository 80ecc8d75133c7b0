"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked or faked.
Unit tests should be fast and isolated, never touching real databases.
"""

import asyncio
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.backend.core.config_schema import AutosaveSchema
from modules.backend.core.exceptions import ExternalServiceError, NotFoundError
from modules.backend.schemas.note import NoteResponse, NoteSave


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


# =============================================================================
# Settings Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_app_config() -> MagicMock:
    """
    Mock YAML application configuration.

    Usage:
        def test_with_config(mock_app_config):
            with patch("modules.backend.core.config.get_app_config", return_value=mock_app_config):
                ...
    """
    config = MagicMock()
    config.autosave = AutosaveSchema(
        debounce_seconds=0.5,
        title_max_length=40,
        untitled_title="Untitled",
    )
    config.application.server.host = "127.0.0.1"
    config.application.server.port = 8000
    config.application.timeouts.external_api = 30
    return config


# =============================================================================
# Note Fixtures
# =============================================================================


def make_note(
    note_id: str = "note-1",
    title: str = "Untitled",
    content: str = "",
    plain_text: str = "",
    updated_at: datetime | None = None,
) -> NoteResponse:
    """Build a NoteResponse as a store would return it."""
    stamp = updated_at or datetime(2024, 5, 1, 12, 0, 0)
    return NoteResponse(
        id=note_id,
        title=title,
        content=content,
        plain_text=plain_text,
        is_pinned=False,
        pinned_at=None,
        created_at=stamp,
        updated_at=stamp,
    )


class FakeNoteStore:
    """
    In-memory NoteStore with controllable latency and failures.

    - `saves` records every upsert call in order
    - `upsert_gates` holds events; each upsert pops one and waits on it
    - `fetch_gates` maps note ids to events a fetch waits on
    - `fail_upserts` makes the next N upserts raise ExternalServiceError
    """

    def __init__(self) -> None:
        self.notes: dict[str, NoteResponse] = {}
        self.saves: list[tuple[str, NoteSave]] = []
        self.upsert_gates: list[asyncio.Event] = []
        self.fetch_gates: dict[str, asyncio.Event] = {}
        self.fail_upserts = 0

    def add(self, note: NoteResponse) -> None:
        self.notes[note.id] = note

    async def upsert(self, note_id: str, payload: NoteSave) -> NoteResponse:
        self.saves.append((note_id, payload))
        if self.upsert_gates:
            await self.upsert_gates.pop(0).wait()
        if self.fail_upserts:
            self.fail_upserts -= 1
            raise ExternalServiceError("Notes API unreachable")

        note = make_note(
            note_id,
            title=payload.title,
            content=payload.content,
            plain_text=payload.plain_text,
            updated_at=payload.updated_at,
        )
        self.notes[note_id] = note
        return note

    async def fetch_by_id(self, note_id: str) -> NoteResponse:
        gate = self.fetch_gates.get(note_id)
        if gate is not None:
            await gate.wait()
        if note_id not in self.notes:
            raise NotFoundError("Note not found")
        return self.notes[note_id]


class RecordingSurface:
    """EditorSurface that records what the controller pushed into it."""

    def __init__(self) -> None:
        self.shown: list[tuple[str, str]] = []
        self.cleared = 0

    def show_note(self, title: str, content: str) -> None:
        self.shown.append((title, content))

    def clear(self) -> None:
        self.cleared += 1


class StepClock:
    """Deterministic clock: each call returns one second later than the last."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def fake_store() -> FakeNoteStore:
    return FakeNoteStore()


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def note_factory():
    """Provide make_note for building NoteResponse objects."""
    return make_note
