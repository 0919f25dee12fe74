"""Unit tests for the response envelope and request models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from inspector.models.requests import Pagination
from inspector.models.responses import ApiResponse, Item


class TestApiResponse:
    def test_success_defaults_to_no_data(self):
        resp = ApiResponse(status_code=200, success=True, message="OK")
        assert resp.data is None

    def test_has_no_success_shortcut(self):
        assert not hasattr(ApiResponse, "ok")

    def test_failure_has_no_data(self):
        resp = ApiResponse[None].failure(503, "Network error: down")
        assert resp.model_dump() == {
            "status_code": 503,
            "success": False,
            "message": "Network error: down",
            "data": None,
        }

    @pytest.mark.parametrize("status_code", [199, 300, 400, 500])
    def test_success_rejected_outside_2xx(self, status_code):
        with pytest.raises(ValidationError):
            ApiResponse(status_code=status_code, success=True, message="x")

    @pytest.mark.parametrize("status_code", [200, 201, 204, 299])
    def test_failure_rejected_inside_2xx(self, status_code):
        with pytest.raises(ValidationError):
            ApiResponse(status_code=status_code, success=False, message="x")

    def test_is_immutable(self):
        resp = ApiResponse[str](status_code=200, success=True, message="OK", data="data")
        with pytest.raises(ValidationError):
            resp.message = "changed"

    def test_typed_data(self):
        resp = ApiResponse[list[Item]](
            status_code=200, success=True, message="OK", data=[Item(id=1, name="Item 1")]
        )
        assert resp.model_dump()["data"] == [{"id": 1, "name": "Item 1"}]


class TestPagination:
    def test_valid(self):
        p = Pagination(page=2, page_size=5)
        assert (p.page, p.page_size) == (2, 5)

    def test_numeric_strings_are_coerced(self):
        p = Pagination.model_validate({"page": "3", "page_size": "10"})
        assert (p.page, p.page_size) == (3, 10)

    @pytest.mark.parametrize(
        "payload",
        [
            {"page": 1},
            {"page_size": 1},
            {"page": -1, "page_size": 1},
            {"page": 1, "page_size": "abc"},
        ],
    )
    def test_invalid(self, payload):
        with pytest.raises(ValidationError):
            Pagination.model_validate(payload)
