"""
Tests for pagination strategies.
"""
import pytest

from jsonapi_service.config import PaginationConfig
from jsonapi_service.pagination import (
    OffsetPagination,
    PagePagination,
    PaginationBase,
    get_pagination,
)
from jsonapi_service.schemas import Page


class TestOffsetPagination:
    """Test offset/limit normalization."""

    @pytest.mark.parametrize(
        "page, expected",
        [
            ({"offset": "3", "limit": "3"}, Page(offset=3, limit=3)),
            ({"limit": 5}, Page(offset=0, limit=5)),
            ({}, Page(offset=0, limit=None)),
            ({"offset": "abc", "limit": "abc"}, Page(offset=0, limit=None)),
            ({"offset": -4, "limit": 0}, Page(offset=0, limit=None)),
            ({"offset": "2.5", "limit": "3.9"}, Page(offset=2, limit=3)),
        ],
    )
    def test_normalize(self, page, expected):
        assert OffsetPagination().normalize(page) == expected

    def test_custom_keys(self):
        pagination = OffsetPagination(offset_key="skip", limit_key="take")
        assert pagination.normalize({"skip": "2", "take": "1"}) == Page(offset=2, limit=1)


class TestPagePagination:
    """Test page number/size normalization."""

    def test_number_and_size(self):
        assert PagePagination().normalize({"number": "2", "size": "4"}) == Page(offset=4, limit=4)

    def test_number_defaults_to_first_page(self):
        assert PagePagination().normalize({"size": "4"}) == Page(offset=0, limit=4)

    def test_without_size_there_is_no_window(self):
        assert PagePagination().normalize({"number": "3"}) is None


class TestPaginate:
    """Test slicing items by a window."""

    items = list(range(1, 10))

    def test_window(self):
        assert PaginationBase.paginate(self.items, Page(offset=3, limit=3)) == [4, 5, 6]

    def test_open_ended_window(self):
        assert PaginationBase.paginate(self.items, Page(offset=7)) == [8, 9]

    def test_no_window(self):
        assert PaginationBase.paginate(self.items, None) == self.items

    def test_page_and_offset_windows_match(self):
        by_page = PagePagination().normalize({"number": 2, "size": 4})
        by_offset = OffsetPagination().normalize({"offset": 4, "limit": 4})
        assert PaginationBase.paginate(self.items, by_page) == PaginationBase.paginate(
            self.items, by_offset
        )


class TestGetPagination:
    """Test strategy selection from configuration."""

    def test_offset_based_default(self):
        assert isinstance(get_pagination(PaginationConfig()), OffsetPagination)

    def test_page_based_uses_limit_key_for_size(self):
        pagination = get_pagination(PaginationConfig(strategy="page_based", limit_key="per_page"))
        assert isinstance(pagination, PagePagination)
        assert pagination.normalize({"number": 3, "per_page": 10}) == Page(offset=20, limit=10)

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValueError):
            PaginationConfig(strategy="cursor")
