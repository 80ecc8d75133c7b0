"""
Integration Tests for the Autosave Controller.

Drives a real AutosaveController against both note stores: the in-process
ServiceNoteStore on the test database, and ApiNoteStore talking to the
FastAPI app over an ASGI transport.
"""

import asyncio

import pytest
from fastapi import FastAPI
from httpx import ASGITransport

from modules.backend.core.exceptions import NoteLoadError, NotFoundError
from modules.backend.schemas.note import NoteSave
from modules.cli.client import APIClient
from modules.editor.controller import AutosaveController
from modules.editor.store import ApiNoteStore, ServiceNoteStore

DEBOUNCE = 0.02


class _Surface:
    def __init__(self):
        self.shown = []
        self.cleared = 0

    def show_note(self, title, content):
        self.shown.append((title, content))

    def clear(self):
        self.cleared += 1


def _controller(store, surface=None):
    return AutosaveController(
        store,
        surface,
        debounce_seconds=DEBOUNCE,
        untitled_title="Untitled",
        title_max_length=100,
    )


@pytest.fixture
def service_store(db_session_factory) -> ServiceNoteStore:
    return ServiceNoteStore(db_session_factory)


@pytest.fixture
async def api_store(app: FastAPI):
    client = APIClient(
        base_url="http://test",
        frontend="editor",
        transport=ASGITransport(app=app),
    )
    store = ApiNoteStore(client)
    yield store
    await store.close()


class TestServiceNoteStore:
    """Tests for the in-process store."""

    @pytest.mark.asyncio
    async def test_upsert_then_fetch(self, service_store):
        await service_store.upsert(
            "n1", NoteSave(title="T", content="<p>a</p>", plain_text="a"),
        )

        note = await service_store.fetch_by_id("n1")

        assert (note.title, note.content, note.plain_text) == ("T", "<p>a</p>", "a")

    @pytest.mark.asyncio
    async def test_fetch_missing_raises(self, service_store):
        with pytest.raises(NotFoundError):
            await service_store.fetch_by_id("missing")

    @pytest.mark.asyncio
    async def test_debounced_edits_land_as_one_save(self, service_store):
        await service_store.upsert("n1", NoteSave(title="Untitled", content="", plain_text=""))
        surface = _Surface()
        controller = _controller(service_store, surface)
        await controller.on_active_note_changed("n1")

        controller.on_content_changed("<p>Groc</p>", "Groc")
        controller.on_content_changed("<p>Groceries</p><p>milk</p>", "Groceries\nmilk")
        await asyncio.sleep(DEBOUNCE * 5)
        await controller.drain()

        stored = await service_store.fetch_by_id("n1")
        assert stored.title == "Groceries"
        assert stored.content == "<p>Groceries</p><p>milk</p>"
        assert controller.status.last_saved_note.id == "n1"
        assert surface.shown == [("Untitled", "")]


class TestApiNoteStore:
    """Tests for the controller talking to the API over HTTP."""

    @pytest.mark.asyncio
    async def test_edit_and_flush_persists_through_api(self, api_store):
        await api_store.upsert(
            "api-note",
            NoteSave(title="Plan", content="<p>old</p>", plain_text="old"),
        )
        controller = _controller(api_store)
        loaded = await controller.on_active_note_changed("api-note")

        controller.on_content_changed("<p>new &amp; better</p>", "new & better")
        await controller.flush()

        stored = await api_store.fetch_by_id("api-note")
        assert loaded.content == "<p>old</p>"
        assert stored.title == "Plan"
        assert stored.content == "<p>new &amp; better</p>"
        assert controller.status.is_saving is False
        assert controller.status.last_saved_at is not None

    @pytest.mark.asyncio
    async def test_explicit_title_is_saved(self, api_store):
        await api_store.upsert("t", NoteSave(title="Untitled", content="", plain_text=""))
        controller = _controller(api_store)
        await controller.on_active_note_changed("t")

        controller.on_content_changed("<p>body</p>", "body")
        controller.on_title_edited("Chosen")
        await controller.flush()

        assert (await api_store.fetch_by_id("t")).title == "Chosen"

    @pytest.mark.asyncio
    async def test_loading_missing_note_raises(self, api_store):
        controller = _controller(api_store)

        with pytest.raises(NoteLoadError) as exc_info:
            await controller.on_active_note_changed("missing")

        assert exc_info.value.note_id == "missing"
        assert isinstance(exc_info.value.__cause__, NotFoundError)

    @pytest.mark.asyncio
    async def test_switching_notes_drops_pending_save(self, api_store):
        for note_id in ("first", "second"):
            await api_store.upsert(note_id, NoteSave(title=note_id, content="", plain_text=""))
        controller = _controller(api_store)
        await controller.on_active_note_changed("first")

        controller.on_content_changed("<p>lost</p>", "lost")
        await controller.on_active_note_changed("second")
        await asyncio.sleep(DEBOUNCE * 5)
        await controller.drain()

        assert (await api_store.fetch_by_id("first")).content == ""
        assert controller.status.last_saved_at is None
