"""
Note Stores.

The storage side of the autosave controller. A store upserts a note by id
and fetches it back; the controller is handed one at construction time.

    ApiNoteStore      - talks to the notes REST API over HTTP
    ServiceNoteStore  - runs NoteService in-process against a session factory
"""

from typing import Any, Protocol

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from modules.backend.core.exceptions import (
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.note import NoteResponse, NoteSave
from modules.backend.services.note import NoteService
from modules.cli.client import APIClient


class NoteStore(Protocol):
    async def upsert(self, note_id: str, payload: NoteSave) -> NoteResponse:
        """Insert or overwrite the note with this id and return the stored row."""
        ...

    async def fetch_by_id(self, note_id: str) -> NoteResponse:
        """Return the stored note. Raises NotFoundError if it does not exist."""
        ...


class ApiNoteStore:
    """
    Note store backed by the notes REST API.

    HTTP failures are translated into application errors:
    404 -> NotFoundError, 400/422 -> ValidationError, anything else
    (including transport errors) -> ExternalServiceError.
    """

    def __init__(self, client: APIClient | None = None, api_prefix: str = "/api/v1") -> None:
        self._client = client or APIClient(frontend="editor")
        self._notes_path = f"{api_prefix.rstrip('/')}/notes"

    async def upsert(self, note_id: str, payload: NoteSave) -> NoteResponse:
        return await self._request(
            "PUT",
            f"{self._notes_path}/{note_id}",
            json=payload.model_dump(mode="json"),
        )

    async def fetch_by_id(self, note_id: str) -> NoteResponse:
        return await self._request("GET", f"{self._notes_path}/{note_id}")

    async def close(self) -> None:
        await self._client.close()

    async def _request(self, method: str, path: str, **kwargs: Any) -> NoteResponse:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Notes API unreachable: {e}") from e
        return _unwrap_note(response)


def _error_message(response: httpx.Response) -> tuple[str, dict | None]:
    try:
        error = response.json().get("error") or {}
    except ValueError:
        return response.text or f"HTTP {response.status_code}", None
    return error.get("message", f"HTTP {response.status_code}"), error.get("details")


def _unwrap_note(response: httpx.Response) -> NoteResponse:
    """Turn an ApiResponse[NoteResponse] body into the note, or raise."""
    if response.status_code >= 400:
        message, details = _error_message(response)
        if response.status_code == 404:
            raise NotFoundError(message)
        if response.status_code in (400, 422):
            raise ValidationError(message, details=details)
        raise ExternalServiceError(f"Notes API error {response.status_code}: {message}")

    try:
        body = ApiResponse[NoteResponse].model_validate(response.json())
    except ValueError as e:
        raise ExternalServiceError("Notes API returned an unreadable response") from e
    if body.data is None:
        raise ExternalServiceError("Notes API returned no note")
    return body.data


class ServiceNoteStore:
    """
    Note store that calls NoteService directly.

    Each call runs in its own session and transaction, committed on success
    and rolled back on any error.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            from modules.backend.core.database import get_session_factory

            self._session_factory = get_session_factory()
        return self._session_factory

    async def upsert(self, note_id: str, payload: NoteSave) -> NoteResponse:
        async with self._sessions()() as session, session.begin():
            note = await NoteService(session).save_note(note_id, payload)
            return NoteResponse.model_validate(note)

    async def fetch_by_id(self, note_id: str) -> NoteResponse:
        async with self._sessions()() as session, session.begin():
            note = await NoteService(session).get_note(note_id)
            return NoteResponse.model_validate(note)
