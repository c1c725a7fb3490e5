"""
Unit Tests for pagination helpers
"""
import pytest
from pydantic import ValidationError

from app.core.config import settings
from app.utils.pagination import PaginationParams, like_pattern, pagination_meta, total_pages


class TestPaginationParams:

    def test_defaults(self):
        params = PaginationParams()

        assert params.page == 1
        assert params.limit == settings.DEFAULT_PAGE_SIZE
        assert params.search is None
        assert params.offset == 0

    def test_offset(self):
        assert PaginationParams(page=3, limit=10).offset == 20

    def test_blank_search_is_none(self):
        assert PaginationParams(search="   ").search is None
        assert PaginationParams(search=" web ").search == "web"

    @pytest.mark.parametrize("kwargs", [
        {"page": 0},
        {"limit": 0},
        {"limit": settings.MAX_PAGE_SIZE + 1},
    ])
    def test_bounds(self, kwargs):
        with pytest.raises(ValidationError):
            PaginationParams(**kwargs)


class TestTotalPages:

    @pytest.mark.parametrize("total,limit,expected", [
        (0, 20, 0),
        (1, 20, 1),
        (20, 20, 1),
        (21, 20, 2),
        (101, 10, 11),
    ])
    def test_total_pages(self, total, limit, expected):
        assert total_pages(total, limit) == expected

    def test_meta(self):
        meta = pagination_meta(PaginationParams(page=2, limit=5), 12)
        assert meta == {"page": 2, "limit": 5, "total": 12, "total_pages": 3}


class TestLikePattern:

    def test_wraps_and_lowercases(self):
        assert like_pattern("Web") == "%web%"

    @pytest.mark.parametrize("search,expected", [
        ("100%", "%100\\%%"),
        ("q1_plan", "%q1\\_plan%"),
        ("a\\b", "%a\\\\b%"),
    ])
    def test_wildcards_escaped(self, search, expected):
        assert like_pattern(search) == expected
