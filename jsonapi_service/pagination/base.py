"""Pagination strategy base class."""

from typing import Any, Mapping, Sequence

from jsonapi_service.schemas.resource import Page


class PaginationBase:
    """Turn raw ``page`` input into a canonical :class:`Page` window."""

    def normalize(self, page: Mapping[str, Any]) -> Page | None:
        """Return the window requested by ``page`` or None for no pagination."""
        raise NotImplementedError

    @staticmethod
    def paginate(items: Sequence[Any], page: Page | None) -> list[Any]:
        """Return the slice of ``items`` selected by ``page``."""
        if page is None:
            return list(items)
        offset = max(page.offset, 0)
        if page.limit is None:
            return list(items[offset:])
        return list(items[offset : offset + page.limit])
