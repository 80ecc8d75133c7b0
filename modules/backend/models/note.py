"""
Note Model.

A note stores its rich markup (`content`) exactly as the editor produced it,
next to a flattened `plain_text` copy used for search and title derivation.
"""

from datetime import datetime

from sqlalchemy import DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin

UNTITLED = "Untitled"


class Note(UUIDMixin, TimestampMixin, Base):
    """Note database model with pin and soft-delete state."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=UNTITLED,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    plain_text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    is_pinned: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    pinned_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )
    is_deleted: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, pinned={self.is_pinned})>"
