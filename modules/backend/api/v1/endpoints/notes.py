"""
Notes API Endpoints.

    POST   /notes                          create (blank or with fields)
    GET    /notes                          sidebar listing, paginated
    GET    /notes/search?q=                title and plain text search
    GET    /notes/templates                template catalog
    POST   /notes/templates/{template_id}  create from a template
    GET    /notes/{id}                     load into the editor
    PUT    /notes/{id}                     autosave upsert
    DELETE /notes/{id}                     soft delete
    POST   /notes/{id}/pin | /unpin

Every response carries the request id in `metadata.request_id`.
"""

from typing import Any, TypeVar

from fastapi import APIRouter, Depends, Query

from modules.backend.core.dependencies import DbSession, RequestId
from modules.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    get_pagination_params,
)
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.schemas.note import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteSave,
    NoteTemplateResponse,
)
from modules.backend.services.note import NoteService

router = APIRouter()

T = TypeVar("T")


def _ok(data: T, request_id: str) -> ApiResponse[T]:
    return ApiResponse(data=data, metadata=ResponseMetadata(request_id=request_id))


def _note(note: Any, request_id: str) -> ApiResponse[NoteResponse]:
    return _ok(NoteResponse.model_validate(note), request_id)


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Every field is optional; a blank note is titled 'Untitled'.",
)
async def create_note(data: NoteCreate, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    return _note(await NoteService(db).create_note(data), request_id)


@router.get(
    "",
    summary="List notes",
    description="Non-deleted notes, pinned first (most recently pinned on top), then newest edits.",
)
async def list_notes(
    db: DbSession,
    request_id: RequestId,
    pagination: PaginationParams = Depends(get_pagination_params),
) -> dict[str, Any]:
    notes, total = await NoteService(db).list_notes_paginated(
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return create_paginated_response(
        items=notes,
        item_schema=NoteListResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.get(
    "/search",
    response_model=ApiResponse[list[NoteListResponse]],
    summary="Search notes",
    description="Case-insensitive substring match on title or plain text. Markup is not searched.",
)
async def search_notes(
    db: DbSession,
    request_id: RequestId,
    q: str = Query(..., min_length=1, max_length=100, description="Search text"),
    limit: int = Query(default=50, ge=1, le=100, description="Maximum number of results"),
) -> ApiResponse[list[NoteListResponse]]:
    notes = await NoteService(db).search_notes(q, limit=limit)
    return _ok([NoteListResponse.model_validate(n) for n in notes], request_id)


@router.get(
    "/templates",
    response_model=ApiResponse[list[NoteTemplateResponse]],
    summary="List note templates",
)
async def list_templates(db: DbSession, request_id: RequestId) -> ApiResponse[list[NoteTemplateResponse]]:
    templates = NoteService(db).list_templates()
    return _ok([NoteTemplateResponse.model_validate(t) for t in templates], request_id)


@router.post(
    "/templates/{template_id}",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note from a template",
)
async def create_from_template(
    template_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    return _note(await NoteService(db).create_from_template(template_id), request_id)


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(note_id: str, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    return _note(await NoteService(db).get_note(note_id), request_id)


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Save a note",
    description=(
        "Insert the note under this id, or overwrite it. Content is stored exactly "
        "as sent. Sending the same body twice leaves the same row. A deleted "
        "note is not revived: saving to its id returns 404."
    ),
)
async def save_note(
    note_id: str,
    data: NoteSave,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    return _note(await NoteService(db).save_note(note_id, data), request_id)


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note",
    description="Soft delete: the note disappears from listings, search and lookups.",
)
async def delete_note(note_id: str, db: DbSession) -> None:
    await NoteService(db).delete_note(note_id)


@router.post(
    "/{note_id}/pin",
    response_model=ApiResponse[NoteResponse],
    summary="Pin a note",
)
async def pin_note(note_id: str, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    return _note(await NoteService(db).pin_note(note_id), request_id)


@router.post(
    "/{note_id}/unpin",
    response_model=ApiResponse[NoteResponse],
    summary="Unpin a note",
)
async def unpin_note(note_id: str, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    return _note(await NoteService(db).unpin_note(note_id), request_id)
