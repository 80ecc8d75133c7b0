"""
Note Repository.

Data access layer for notes. Deleted notes are soft-deleted: they are
invisible to every query here, and an upsert to a deleted id is refused.
"""

from sqlalchemy import Select, func, or_, select

from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.utils import utc_now
from modules.backend.models.note import Note
from modules.backend.repositories.base import BaseRepository


def _sidebar_order(query: Select) -> Select:
    """Pinned notes first (most recently pinned on top), then newest edits."""
    return query.order_by(
        Note.is_pinned.desc(),
        Note.pinned_at.desc(),
        Note.updated_at.desc(),
    )


def _escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally (escape char: backslash)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds note-specific queries.
    """

    model = Note

    async def get_active(self, id: str) -> Note:
        """
        Get a note that has not been deleted.

        Raises:
            NotFoundError: If the note does not exist or is deleted
        """
        note = await self.get_by_id_or_none(id)
        if note is None or note.is_deleted:
            raise NotFoundError("Note not found")
        return note

    async def upsert(self, id: str, **values) -> Note:
        """
        Insert or overwrite a note. A deleted note stays deleted.

        Raises:
            NotFoundError: If the id belongs to a deleted note
        """
        note = await self.get_by_id_or_none(id)
        if note is None:
            return await self.create(id=str(id), **values)
        if note.is_deleted:
            raise NotFoundError("Note not found")
        return await self._apply(note, values)

    async def get_all_active(
        self,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Note]:
        """
        Get non-deleted notes in sidebar order.

        Args:
            limit: Maximum number of notes to return
            offset: Number of notes to skip

        Returns:
            List of notes, pinned first
        """
        result = await self.session.execute(
            _sidebar_order(
                select(Note).where(Note.is_deleted == False)  # noqa: E712
            )
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def count_active(self) -> int:
        """Get count of non-deleted notes."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Note)
            .where(Note.is_deleted == False)  # noqa: E712
        )
        return result.scalar_one()

    async def search(
        self,
        query: str,
        limit: int = 50,
    ) -> list[Note]:
        """
        Search notes by title or plain text (case-insensitive).

        Args:
            query: Search query string
            limit: Maximum number of results

        Returns:
            List of matching notes in sidebar order
        """
        pattern = f"%{_escape_like(query)}%"
        result = await self.session.execute(
            _sidebar_order(
                select(Note)
                .where(Note.is_deleted == False)  # noqa: E712
                .where(
                    or_(
                        Note.title.ilike(pattern, escape="\\"),
                        Note.plain_text.ilike(pattern, escape="\\"),
                    )
                )
            )
            .limit(limit)
        )
        return list(result.scalars().all())

    async def set_pinned(self, id: str, pinned: bool) -> Note:
        """
        Pin or unpin a note. Pinning stamps pinned_at; unpinning clears it.

        Raises:
            NotFoundError: If note not found or deleted
        """
        note = await self.get_active(id)
        return await self._apply(
            note,
            {"is_pinned": pinned, "pinned_at": utc_now() if pinned else None},
        )

    async def soft_delete(self, id: str) -> Note:
        """
        Mark a note as deleted.

        Raises:
            NotFoundError: If note not found or already deleted
        """
        note = await self.get_active(id)
        return await self._apply(
            note,
            {"is_deleted": True, "deleted_at": utc_now()},
        )
