"""Helpers for turning HTTP query strings into service query mappings."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

_BRACKET_KEY = re.compile(r"^(?P<family>[a-zA-Z_]+)\[(?P<name>[^\]]+)\]$")
_FAMILIES = ("fields", "include", "page", "filter", "sort")


def _items(params: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> Iterable[tuple[str, Any]]:
    if hasattr(params, "multi_items"):
        return params.multi_items()
    if isinstance(params, Mapping):
        return params.items()
    return params


def parse_query_params(params: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Collect query parameter families into a nested, unsanitized mapping.

    ``page[limit]=3`` becomes ``{"page": {"limit": "3"}}`` and
    ``fields[user]=a,b`` becomes ``{"fields": {"user": "a,b"}}``. A bare
    ``page=1`` or ``filter=x`` is kept as a plain string; rejecting it is left
    to request sanitization. Unknown parameters are dropped.
    """
    query: dict[str, Any] = {}

    for key, value in _items(params):
        if value is None:
            continue
        match = _BRACKET_KEY.match(key)
        if match and match.group("family") in ("fields", "page", "filter"):
            family = match.group("family")
            bucket = query.get(family)
            if not isinstance(bucket, dict):
                bucket = query[family] = {}
            bucket[match.group("name")] = value
        elif key in _FAMILIES:
            if isinstance(query.get(key), dict):
                # page[...] already seen; a bare key cannot override it
                continue
            query[key] = value

    return query
