"""
Unit Tests for Pagination Utilities.

Page-number helpers used by the note list pipeline.
"""

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from modules.backend.core.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    PageParams,
    get_page_params,
    page_bounds,
    paginate,
)


class TestPageParams:
    def test_defaults(self):
        params = PageParams()
        assert params.page == 1
        assert params.limit == DEFAULT_LIMIT
        assert params.offset == 0

    def test_offset_skips_previous_pages(self):
        assert PageParams(page=3, limit=2).offset == 4

    def test_is_immutable(self):
        params = PageParams()
        with pytest.raises(AttributeError):
            params.page = 2


class TestPaginate:
    """Slicing already ordered items."""

    @pytest.fixture
    def items(self):
        return ["n5", "n4", "n3", "n2", "n1"]

    def test_first_page(self, items):
        assert paginate(items, 1, 2) == ["n5", "n4"]

    def test_last_partial_page(self, items):
        assert paginate(items, 3, 2) == ["n1"]

    def test_page_past_the_end_is_empty(self, items):
        assert paginate(items, 4, 2) == []

    def test_limit_larger_than_items(self, items):
        assert paginate(items, 1, 50) == items

    def test_page_bounds(self):
        assert page_bounds(1, 20) == (0, 20)
        assert page_bounds(3, 2) == (4, 6)

    def test_empty_input(self):
        assert paginate([], 1, 20) == []


class TestGetPageParams:
    """Query parameter bounds are enforced by FastAPI."""

    @pytest.fixture
    def client(self):
        app = FastAPI()

        @app.get("/items")
        async def items(paging: PageParams = Depends(get_page_params)):
            return {"page": paging.page, "limit": paging.limit}

        return TestClient(app)

    def test_defaults(self, client):
        assert client.get("/items").json() == {"page": 1, "limit": DEFAULT_LIMIT}

    def test_accepts_max_limit(self, client):
        assert client.get(f"/items?limit={MAX_LIMIT}").status_code == 200

    @pytest.mark.parametrize("query", ["limit=0", f"limit={MAX_LIMIT + 1}", "page=0", "page=-1"])
    def test_rejects_out_of_range(self, client, query):
        assert client.get(f"/items?{query}").status_code == 422
