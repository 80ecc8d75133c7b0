"""
Pagination Utilities.

Offset pagination for the notes sidebar. The list order (pinned first, then
most recently updated) is stable between autosaves of other notes, so a page
fetched by offset does not shuffle under a single user.

Default and maximum page sizes come from application.yaml `pagination`.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Query
from pydantic import BaseModel

from modules.backend.core.config import get_app_config
from modules.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata


@dataclass
class PaginationParams:
    limit: int
    offset: int


def get_pagination_params(
    limit: int | None = Query(
        default=None,
        ge=1,
        description="Page size; defaults to and is capped by the configured limits",
    ),
    offset: int = Query(default=0, ge=0, description="Number of notes to skip"),
) -> PaginationParams:
    """FastAPI dependency: `pagination: PaginationParams = Depends(get_pagination_params)`."""
    limits = get_app_config().application.pagination
    if limit is None:
        limit = limits.default_limit
    return PaginationParams(limit=min(limit, limits.max_limit), offset=offset)


def create_paginated_response(
    items: list[Any],
    item_schema: type[BaseModel],
    total: int,
    limit: int = 20,
    offset: int = 0,
    request_id: str | None = None,
) -> dict[str, Any]:
    """
    Build a PaginatedResponse body.

    Items (ORM rows or dicts) are passed through `item_schema`, so fields it
    does not declare, such as a note's content, are left out of the listing.
    """
    data = [item_schema.model_validate(item).model_dump(mode="json") for item in items]

    return PaginatedResponse(
        data=data,
        pagination=PaginationInfo(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(data) < total,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    ).model_dump(mode="json")
