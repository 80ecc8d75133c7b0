"""
Unit Tests for Pagination Utilities.
"""

from datetime import datetime
from unittest.mock import patch

import pytest

from modules.backend.core.config_schema import PaginationSchema
from modules.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    get_pagination_params,
)
from modules.backend.schemas.note import NoteListResponse


def _items(count: int) -> list[dict]:
    return [
        {
            "id": f"note-{i}",
            "title": f"Note {i}",
            "is_pinned": False,
            "updated_at": datetime(2024, 5, 1, 12, i),
            "content": "<p>not listed</p>",
        }
        for i in range(count)
    ]


class TestPaginationParams:
    """Tests for the query dependency."""

    @pytest.fixture(autouse=True)
    def _limits(self, mock_app_config):
        mock_app_config.application.pagination = PaginationSchema(default_limit=20, max_limit=100)
        with patch("modules.backend.core.pagination.get_app_config", return_value=mock_app_config):
            yield

    def test_builds_params(self):
        assert get_pagination_params(limit=5, offset=10) == PaginationParams(limit=5, offset=10)

    def test_missing_limit_uses_default(self):
        assert get_pagination_params(limit=None, offset=0).limit == 20

    def test_limit_is_capped(self):
        assert get_pagination_params(limit=500, offset=0).limit == 100


class TestCreatePaginatedResponse:
    """Tests for create_paginated_response."""

    def test_response_structure(self):
        response = create_paginated_response(
            items=_items(2),
            item_schema=NoteListResponse,
            total=10,
            limit=2,
            offset=0,
        )

        assert response["success"] is True
        assert [item["id"] for item in response["data"]] == ["note-0", "note-1"]
        assert response["pagination"] == {"total": 10, "limit": 2, "offset": 0, "has_more": True}

    def test_has_more_false_on_last_page(self):
        response = create_paginated_response(
            items=_items(2),
            item_schema=NoteListResponse,
            total=4,
            limit=2,
            offset=2,
        )

        assert response["pagination"]["has_more"] is False

    def test_items_filtered_through_schema(self):
        """Fields outside the list schema should not be returned."""
        response = create_paginated_response(
            items=_items(1),
            item_schema=NoteListResponse,
            total=1,
        )

        assert "content" not in response["data"][0]
        assert response["data"][0]["updated_at"] == "2024-05-01T12:00:00"

    def test_includes_request_id(self):
        response = create_paginated_response(
            items=[],
            item_schema=NoteListResponse,
            total=0,
            request_id="req-1",
        )

        assert response["data"] == []
        assert response["metadata"]["request_id"] == "req-1"
