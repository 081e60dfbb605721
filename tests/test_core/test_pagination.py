"""
Tests for pagination parameters and the envelope metadata.
"""

import pytest

from ehrcloud.api.v1.dependencies import MAX_PAGE_SIZE, PaginationParams
from ehrcloud.api.v1.envelope import ApiResponse, PaginationMeta, ok, paginated


class TestPaginationParams:

    @pytest.mark.parametrize("page, limit, expected_page, expected_limit", [
        (1, 10, 1, 10),
        (0, 10, 1, 10),
        (-3, 10, 1, 10),
        (2, 0, 2, 10),
        (2, -5, 2, 10),
        (1, 1000, 1, MAX_PAGE_SIZE),
        (1, 100, 1, 100),
    ])
    def test_normalisation(self, page, limit, expected_page, expected_limit):
        params = PaginationParams(page=page, limit=limit)
        assert params.page == expected_page
        assert params.limit == expected_limit

    def test_offset(self):
        assert PaginationParams(page=3, limit=20).offset == 40

    def test_pages(self):
        params = PaginationParams(page=1, limit=10)
        assert params.pages_for(0) == 0
        assert params.pages_for(10) == 1
        assert params.pages_for(11) == 2


class TestPaginationMeta:

    def test_first_page(self):
        meta = PaginationMeta.build(25, PaginationParams(page=1, limit=10))
        assert (meta.pages, meta.has_next, meta.has_prev) == (3, True, False)

    def test_last_page(self):
        meta = PaginationMeta.build(25, PaginationParams(page=3, limit=10))
        assert (meta.has_next, meta.has_prev) == (False, True)

    def test_page_past_the_end(self):
        meta = PaginationMeta.build(5, PaginationParams(page=4, limit=10))
        assert meta.has_next is False
        assert meta.has_prev is True

    def test_serialised_with_camel_case_flags(self):
        body = paginated([1, 2], 2, PaginationParams(page=1, limit=10)).model_dump(by_alias=True)
        assert body["pagination"] == {
            "page": 1, "limit": 10, "total": 2, "pages": 1, "hasNext": False, "hasPrev": False,
        }


class TestApiResponse:

    def test_unset_members_dropped(self):
        assert ok(message="Done").model_dump() == {"success": True, "message": "Done"}

    def test_data_kept(self):
        assert ok({"id": 1}).model_dump() == {"success": True, "data": {"id": 1}}

    def test_typed(self):
        response = ApiResponse[int](data=3)
        assert response.data == 3
