"""Pagination strategies."""

from jsonapi_service.config import PaginationConfig

from .base import PaginationBase
from .offset import OffsetPagination
from .page import PagePagination


def get_pagination(config: PaginationConfig) -> PaginationBase:
    """Return the strategy selected by ``config``."""
    if config.strategy == "page_based":
        return PagePagination(number_key=config.number_key, size_key=config.limit_key)
    return OffsetPagination(offset_key=config.offset_key, limit_key=config.limit_key)


__all__ = ["OffsetPagination", "PagePagination", "PaginationBase", "get_pagination"]
