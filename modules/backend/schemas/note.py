"""
Note Schemas.

Pydantic schemas for note API request/response validation. The same
schemas are used by the editor's HTTP store to read responses back.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.models.note import UNTITLED


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        default=UNTITLED,
        description="Note title",
        examples=["My First Note"],
    )
    content: str = Field(
        default="",
        description="Rich markup (HTML) exactly as produced by the editor",
        examples=["<p>This is the content of my note.</p>"],
    )
    plain_text: str = Field(
        default="",
        description="Flattened text of content, used for search",
        examples=["This is the content of my note."],
    )


class NoteSave(BaseModel):
    """Schema for an autosave write (upsert by id)."""

    title: str = Field(
        ...,
        description="Title to store",
    )
    content: str = Field(
        ...,
        description="Rich markup (HTML), stored verbatim",
    )
    plain_text: str = Field(
        ...,
        description="Flattened text of content",
    )
    updated_at: datetime | None = Field(
        default=None,
        description="Edit time as seen by the client; server time if omitted",
    )


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Rich markup (HTML)")
    plain_text: str = Field(description="Flattened text")
    is_pinned: bool = Field(description="Whether the note is pinned")
    pinned_at: datetime | None = Field(default=None, description="Pin timestamp")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)


class NoteListResponse(BaseModel):
    """Schema for listing notes in the sidebar."""

    id: str
    title: str
    is_pinned: bool
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteTemplateResponse(BaseModel):
    """Schema for a template in the template catalog."""

    id: str
    name: str
    description: str
    title: str

    model_config = ConfigDict(from_attributes=True)
