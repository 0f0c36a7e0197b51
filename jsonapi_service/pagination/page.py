"""Page number/size pagination strategy."""

from typing import Any, Mapping

from jsonapi_service.schemas.resource import Page
from jsonapi_service.utils.helpers import to_int

from .base import PaginationBase


class PagePagination(PaginationBase):
    """Read ``page[number]``/``page[size]`` and convert to an offset window.

    Without a usable size pagination is disabled altogether.
    """

    def __init__(self, *, number_key: str = "number", size_key: str = "size") -> None:
        self.number_key = number_key
        self.size_key = size_key

    def normalize(self, page: Mapping[str, Any]) -> Page | None:
        size = to_int(page.get(self.size_key)) or None
        if size is None or size < 1:
            return None
        number = to_int(page.get(self.number_key)) or 1
        return Page(offset=(max(number, 1) - 1) * size, limit=size)
