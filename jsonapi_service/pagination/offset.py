"""Offset/limit pagination strategy."""

from typing import Any, Mapping

from jsonapi_service.schemas.resource import Page
from jsonapi_service.utils.helpers import to_int

from .base import PaginationBase


class OffsetPagination(PaginationBase):
    """Read ``page[offset]``/``page[limit]``.

    Offset defaults to 0; a missing or unreadable limit means no limit.
    """

    def __init__(self, *, offset_key: str = "offset", limit_key: str = "limit") -> None:
        self.offset_key = offset_key
        self.limit_key = limit_key

    def normalize(self, page: Mapping[str, Any]) -> Page | None:
        offset = to_int(page.get(self.offset_key)) or 0
        limit = to_int(page.get(self.limit_key)) or None
        if limit is not None and limit < 1:
            limit = None
        return Page(offset=max(offset, 0), limit=limit)
