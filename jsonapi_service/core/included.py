"""Resolve ``include`` paths into the ``included`` member of a document."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from jsonapi_service.utils.helpers import resource_key

if TYPE_CHECKING:
    from jsonapi_service.adapters.base import BaseAdapter
    from jsonapi_service.schemas.resource import QueryParams

logger = logging.getLogger(__name__)


def _split_paths(include: Iterable[str] | None) -> list[list[str]] | None:
    if include is None:
        return None
    return [[part for part in path.split(".") if part] for path in include if path]


def _shift_paths(paths: list[list[str]] | None) -> list[list[str]] | None:
    """Drop the first segment of every path; paths left empty are dropped."""
    if paths is None:
        return None
    return [path[1:] for path in paths if len(path) > 1]


def _pointers(entry: Any) -> list[Mapping[str, Any]]:
    data = entry.get("data") if isinstance(entry, Mapping) else None
    if isinstance(data, list):
        return [pointer for pointer in data if pointer]
    return [data] if data else []


def collect_wanted(
    resources: Iterable[Mapping[str, Any]],
    paths: list[list[str]] | None,
    found_keys: set[str],
) -> dict[str, list[str]]:
    """Group the pointers to expand at this level by target type.

    Only relationships named by the first segment of a path are followed;
    when ``paths`` is None every relationship is. Pointers already in
    ``found_keys`` are skipped and ids are deduplicated per type, keeping
    discovery order.
    """
    names = None if paths is None else {path[0] for path in paths if path}
    wanted: dict[str, list[str]] = {}

    for resource in resources:
        for name, entry in (resource.get("relationships") or {}).items():
            if names is not None and name not in names:
                continue
            for pointer in _pointers(entry):
                if resource_key(pointer) in found_keys:
                    continue
                ids = wanted.setdefault(pointer["type"], [])
                if pointer["id"] not in ids:
                    ids.append(pointer["id"])

    return wanted


async def build_included(
    adapter: BaseAdapter,
    resources: Iterable[Mapping[str, Any]],
    *,
    include: Iterable[str] | None,
    fields: Mapping[str, list[str]] | None,
    query: QueryParams | None,
    context: Any = None,
) -> list[dict[str, Any]]:
    """Fetch the related resources requested by ``include``.

    The walk proceeds one relationship hop per level. Each level fetches the
    wanted ids of every type concurrently through the adapter, projects them
    onto ``fields`` and makes them the next frontier with every include path
    shortened by one segment. Without an ``include`` request every
    relationship is followed until no unseen pointer remains.

    The result never holds two entries with the same ``(type, id)`` and never
    repeats a primary resource.
    """
    frontier = list(resources)
    found_keys = {resource_key(resource) for resource in frontier}
    included: list[dict[str, Any]] = []
    paths = _split_paths(include)
    level = 0

    while True:
        wanted = collect_wanted(frontier, paths, found_keys)
        if not wanted:
            return included

        level += 1
        logger.debug("Include level %d wants %s", level, wanted)
        batches = await asyncio.gather(
            *(
                adapter.call_get_resource_collection(resource_type, ids, query, context)
                for resource_type, ids in wanted.items()
            )
        )

        frontier = []
        for batch in batches:
            for resource in batch:
                key = resource_key(resource)
                if key in found_keys:
                    continue
                found_keys.add(key)
                frontier.append(
                    await adapter.call_apply_sparse_fields(resource, fields, query, context)
                )

        if not frontier:
            return included
        included.extend(frontier)
        paths = _shift_paths(paths)
