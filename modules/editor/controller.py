"""
Autosave Controller.

Turns the stream of edits coming out of an editing surface into debounced
saves. A burst of changes closer together than the debounce window produces
exactly one save, carrying the last payload of the burst.

Usage:
    controller = AutosaveController(ApiNoteStore(), surface)
    await controller.on_active_note_changed(note_id)

    # from the editor's change callback
    controller.on_content_changed(html, plain_text)
    controller.on_title_edited("Groceries")

    # on unmount
    controller.close()

All methods must be called from the event loop thread. Scheduling is a
single asyncio timer slot, so cancel-then-reschedule needs no lock.

Out-of-order results: saves are numbered as they are issued. A successful
save only updates the status if it is newer than the last one applied and
still belongs to the note on screen; older results are ignored.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from modules.backend.core.exceptions import NoteLoadError
from modules.backend.core.logging import get_logger, log_with_source
from modules.backend.core.utils import utc_now
from modules.backend.schemas.note import NoteResponse, NoteSave
from modules.editor.status import SaveStatus, count_words
from modules.editor.store import NoteStore
from modules.editor.surface import EditorSurface
from modules.editor.title import derive_title, is_placeholder_title

logger = get_logger(__name__)


@dataclass
class PendingSave:
    """A scheduled, not yet committed save. `handle` is its cancellation token."""

    note_id: str | None
    content: str
    plain_text: str
    scheduled_at: datetime
    handle: asyncio.TimerHandle | None = None

    def cancel(self) -> None:
        if self.handle is not None:
            self.handle.cancel()


class AutosaveController:
    """
    Debounced persistence for the note currently open in an editor.

    One controller per editing surface. The store is injected so tests can
    substitute a fake with controllable latency and failures.
    """

    def __init__(
        self,
        store: NoteStore,
        surface: EditorSurface | None = None,
        *,
        debounce_seconds: float | None = None,
        untitled_title: str | None = None,
        title_max_length: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if debounce_seconds is None or untitled_title is None or title_max_length is None:
            from modules.backend.core.config import get_app_config

            settings = get_app_config().autosave
            debounce_seconds = debounce_seconds if debounce_seconds is not None else settings.debounce_seconds
            untitled_title = untitled_title if untitled_title is not None else settings.untitled_title
            title_max_length = title_max_length if title_max_length is not None else settings.title_max_length

        self._store = store
        self._surface = surface
        self._debounce_seconds = debounce_seconds
        self._untitled = untitled_title
        self._title_max_length = title_max_length
        self._clock = clock

        self._note_id: str | None = None
        # Read at commit time, never captured when the timer is armed
        self._title: str = untitled_title
        self._latest: tuple[str, str] = ("", "")
        self._pending: PendingSave | None = None

        self._in_flight: set[asyncio.Task] = set()
        self._issued_seq = 0
        self._applied_seq = 0
        self._status = SaveStatus()

    # ------------------------------------------------------------------
    # Observational state
    # ------------------------------------------------------------------

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def note_id(self) -> str | None:
        return self._note_id

    @property
    def title(self) -> str:
        return self._title

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def debounce_seconds(self) -> float:
        return self._debounce_seconds

    # ------------------------------------------------------------------
    # Editing-surface callbacks
    # ------------------------------------------------------------------

    def on_content_changed(self, html: str, plain_text: str) -> None:
        """
        Record the full current content and (re)arm the save timer.

        Args:
            html: Full markup of the editor, stored verbatim on save
            plain_text: Flattened text of the editor
        """
        self._latest = (html, plain_text)
        self._status = replace(self._status, word_count=count_words(plain_text))
        self._schedule(html, plain_text)

    def on_title_edited(self, title: str) -> None:
        """Update the explicit title and save it with the latest known content."""
        self._title = title
        self._schedule(*self._latest)

    async def on_active_note_changed(self, note_id: str | None) -> NoteResponse | None:
        """
        Switch the editor to another note (or to none).

        Any save still waiting for the previous note is cancelled. The new
        note is fetched and pushed into the surface.

        Returns:
            The loaded note, or None when nothing was loaded (no note
            selected, same note as before, or a newer switch overtook this one)

        Raises:
            NoteLoadError: If the note could not be fetched
        """
        note_id = note_id or None
        if note_id is not None and note_id == self._note_id:
            return None

        self._cancel_pending()
        self._note_id = note_id
        self._title = self._untitled
        self._latest = ("", "")
        self._status = SaveStatus(is_saving=bool(self._in_flight))

        if note_id is None:
            if self._surface is not None:
                self._surface.clear()
            return None

        try:
            note = await self._store.fetch_by_id(note_id)
        except Exception as e:
            log_with_source(
                logger, "editor", "error", "Failed to load note",
                note_id=note_id, error=str(e),
            )
            raise NoteLoadError(f"Note {note_id} could not be loaded", note_id=note_id) from e

        if self._note_id != note_id:
            log_with_source(logger, "editor", "debug", "Discarding stale note load", note_id=note_id)
            return None

        self._title = note.title or self._untitled
        self._latest = (note.content, note.plain_text)
        self._status = replace(self._status, word_count=count_words(note.plain_text))
        if self._surface is not None:
            self._surface.show_note(self._title, note.content)
        return note

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Unmount: drop the waiting save. Saves already sent keep running."""
        self._cancel_pending()

    async def flush(self) -> None:
        """Commit the waiting save now instead of at the end of the window."""
        pending = self._pending
        if pending is not None:
            self._cancel_pending()
            await self._commit(pending)
        await self.drain()

    async def drain(self) -> None:
        """Wait for every save already in flight to finish."""
        while self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule(self, html: str, plain_text: str) -> None:
        self._cancel_pending()

        pending = PendingSave(
            note_id=self._note_id,
            content=html,
            plain_text=plain_text,
            scheduled_at=self._clock(),
        )
        loop = asyncio.get_running_loop()
        pending.handle = loop.call_later(self._debounce_seconds, self._fire, pending)
        self._pending = pending

    def _fire(self, pending: PendingSave) -> None:
        if self._pending is not pending:
            return
        self._pending = None

        task = asyncio.get_running_loop().create_task(self._commit(pending))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def _title_for(self, plain_text: str) -> str:
        if is_placeholder_title(self._title, self._untitled):
            return derive_title(
                plain_text,
                max_length=self._title_max_length,
                untitled=self._untitled,
            )
        return self._title

    async def _commit(self, pending: PendingSave) -> None:
        note_id = self._note_id
        if note_id is None or pending.note_id != note_id:
            return
        if not pending.plain_text.strip():
            return

        self._issued_seq += 1
        seq = self._issued_seq
        self._status = replace(self._status, is_saving=True)

        try:
            payload = NoteSave(
                title=self._title_for(pending.plain_text),
                content=pending.content,
                plain_text=pending.plain_text,
                updated_at=self._clock(),
            )
            stored = await self._store.upsert(note_id, payload)
        except Exception as e:
            # The next edit re-arms the timer; that is the only retry
            log_with_source(
                logger, "editor", "warning", "Autosave failed",
                note_id=note_id, seq=seq, error=str(e), error_type=type(e).__name__,
            )
            return
        finally:
            others_running = any(
                task is not asyncio.current_task() and not task.done()
                for task in self._in_flight
            )
            self._status = replace(self._status, is_saving=others_running)

        if seq <= self._applied_seq or note_id != self._note_id:
            log_with_source(
                logger, "editor", "debug", "Ignoring superseded save result",
                note_id=note_id, seq=seq, applied_seq=self._applied_seq,
            )
            return

        self._applied_seq = seq
        self._status = replace(
            self._status,
            last_saved_at=self._clock(),
            last_saved_note=stored,
        )
        log_with_source(logger, "editor", "info", "Note saved", note_id=note_id, seq=seq)
