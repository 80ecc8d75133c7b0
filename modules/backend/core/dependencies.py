"""
FastAPI Dependencies.

    DbSession  - request-scoped AsyncSession (commit on success)
    RequestId  - the id RequestContextMiddleware assigned to this request
"""

import uuid
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(request: Request) -> str:
    """Same id as the X-Request-ID response header, so envelopes and logs agree."""
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("x-request-id") or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]
