"""
Note Service.

Business logic layer for notes: creation (blank or from a template),
autosave upserts, sidebar listing, search, pinning and soft deletion.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.config_schema import NoteTemplateSchema
from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.utils import utc_now
from modules.backend.models.note import Note
from modules.backend.repositories.note import NoteRepository
from modules.backend.schemas.note import NoteCreate, NoteSave
from modules.backend.services.base import BaseService


class NoteService(BaseService):
    """
    Service for note business logic.

    Content is passed through to storage untouched; this layer never
    rewrites the markup a client sends.
    """

    def __init__(
        self,
        session: AsyncSession,
        templates: list[NoteTemplateSchema] | None = None,
    ) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self._templates = templates

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new note.

        Args:
            data: Note creation data

        Returns:
            Created note
        """
        self._log_operation("Creating note", title=data.title)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=data.title,
                content=data.content,
                plain_text=data.plain_text,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    def list_templates(self) -> list[NoteTemplateSchema]:
        """Return the configured template catalog."""
        if self._templates is None:
            self._templates = list(get_app_config().templates.templates)
        return self._templates

    async def create_from_template(self, template_id: str) -> Note:
        """
        Create a new note pre-filled from a template.

        Raises:
            NotFoundError: If the template id is unknown
        """
        template = next(
            (t for t in self.list_templates() if t.id == template_id),
            None,
        )
        if template is None:
            raise NotFoundError(f"Template '{template_id}' not found")

        return await self.create_note(
            NoteCreate(
                title=template.title,
                content=template.content,
                plain_text=template.plain_text,
            )
        )

    async def get_note(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found or deleted
        """
        return await self.repo.get_active(note_id)

    async def save_note(self, note_id: str, data: NoteSave) -> Note:
        """
        Upsert a note by ID, as issued by the editor autosave.

        The row is inserted when the id is new and overwritten otherwise,
        so replaying the same save is harmless.

        Args:
            note_id: Note ID
            data: Title, content and plain text to store

        Returns:
            Stored note

        Raises:
            NotFoundError: If the id belongs to a deleted note
        """
        self._log_operation(
            "Saving note",
            note_id=note_id,
            content_length=len(data.content),
        )

        return await self._execute_db_operation(
            "save_note",
            self.repo.upsert(
                note_id,
                title=data.title,
                content=data.content,
                plain_text=data.plain_text,
                updated_at=data.updated_at or utc_now(),
            ),
        )

    async def list_notes_paginated(
        self,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Note], int]:
        """
        List notes with total count for pagination.

        Args:
            limit: Maximum number of notes
            offset: Number to skip for pagination

        Returns:
            Tuple of (notes list, total count)
        """
        notes = await self.repo.get_all_active(limit=limit, offset=offset)
        total = await self.repo.count_active()
        return notes, total

    async def search_notes(self, query: str, limit: int = 50) -> list[Note]:
        """
        Search notes by title and plain text.

        Args:
            query: Search query
            limit: Maximum results

        Returns:
            List of matching notes
        """
        self._log_debug("Searching notes", query=query)
        return await self.repo.search(query, limit=limit)

    async def pin_note(self, note_id: str) -> Note:
        """
        Pin a note to the top of the list.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Pinning note", note_id=note_id)
        return await self.repo.set_pinned(note_id, True)

    async def unpin_note(self, note_id: str) -> Note:
        """
        Unpin a note.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Unpinning note", note_id=note_id)
        return await self.repo.set_pinned(note_id, False)

    async def delete_note(self, note_id: str) -> None:
        """
        Soft-delete a note.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Deleting note", note_id=note_id)

        await self._execute_db_operation(
            "delete_note",
            self.repo.soft_delete(note_id),
        )
