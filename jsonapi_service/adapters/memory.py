"""In-memory reference adapter."""

from __future__ import annotations

import copy
import itertools
import logging
from functools import cmp_to_key
from typing import Any, Iterator

from jsonapi_service.pagination.base import PaginationBase
from jsonapi_service.schemas.resource import QueryParams
from jsonapi_service.utils.helpers import reject_undefined

from .base import BaseAdapter

logger = logging.getLogger(__name__)


def _sort_value(resource: dict[str, Any], field: str) -> Any:
    if field == "id":
        return resource["id"]
    return (resource.get("attributes") or {}).get(field)


def _sort_by_field(
    resources: list[dict[str, Any]], field: str, *, descending: bool
) -> list[dict[str, Any]]:
    """Sort on ``field``; resources without a value keep their order at the end."""
    present = [resource for resource in resources if _sort_value(resource, field) is not None]
    missing = [resource for resource in resources if _sort_value(resource, field) is None]
    present.sort(key=lambda resource: _sort_value(resource, field), reverse=descending)
    return present + missing


class MemoryAdapter(BaseAdapter):
    """Keep every resource in a per-type dict seeded from schema datasets.

    Reads and writes hand out deep copies, so callers never hold references
    into the dataset.
    """

    def initialize(self) -> None:
        self.dataset: dict[str, dict[str, dict[str, Any]]] = {}
        self._id_counters: dict[str, Iterator[int]] = {}
        self.seed()

    def seed(self) -> None:
        """Load each schema's ``dataset`` (a list or a callable returning one)."""
        for resource_type, schema in self.resources.items():
            records = schema.dataset() if callable(schema.dataset) else schema.dataset or []
            self.dataset[resource_type] = {}
            for record in records:
                resource = copy.deepcopy(record)
                resource["id"] = str(resource["id"])
                resource.setdefault("type", resource_type)
                self.dataset[resource_type][resource["id"]] = resource

    @staticmethod
    def copy_resource(resource: dict[str, Any]) -> dict[str, Any]:
        return copy.deepcopy(resource)

    async def get_resource_dataset(
        self, resource_type: str, query: QueryParams | None, context: Any
    ) -> dict[str, dict[str, Any]]:
        return self.dataset.get(resource_type, {})

    async def get_raw_resource(
        self, resource_type: str, resource_id: str, query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        resources = await self.get_resource_dataset(resource_type, query, context)
        resource = resources.get(str(resource_id))
        if resource is None:
            error = self.error_factory.resource_not_found()
            error.add_error(f'Cannot find resource "{resource_type}" with id "{resource_id}"')
            error.report()
        return resource

    async def get_resource(
        self, resource_type: str, resource_id: str, query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        resource = await self.get_raw_resource(resource_type, resource_id, query, context)
        return self.copy_resource(resource)

    async def get_raw_resource_collection(
        self, resource_type: str, ids: list[str], query: QueryParams | None, context: Any
    ) -> list[dict[str, Any]]:
        resources = await self.get_resource_dataset(resource_type, query, context)
        found = [resources[str(item)] for item in ids if str(item) in resources]
        missing = [str(item) for item in ids if str(item) not in resources]
        if missing:
            error = self.error_factory.resource_not_found()
            error.add_error(
                f'Cannot find resources of type "{resource_type}" '
                f'with references "{", ".join(missing)}"'
            )
            error.report()
        return found

    async def get_resource_collection(
        self, resource_type: str, ids: list[str], query: QueryParams | None, context: Any
    ) -> list[dict[str, Any]]:
        resources = await self.get_raw_resource_collection(resource_type, ids, query, context)
        return [self.copy_resource(resource) for resource in resources]

    async def query_raw_resource_collection(
        self, resource_type: str, query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        """Apply filter, then sort, then pagination to the type's resources."""
        query = query or QueryParams()
        schema = self.get_schema(resource_type)
        resources = list((await self.get_resource_dataset(resource_type, query, context)).values())

        for name, value in (query.filter or {}).items():
            predicate = schema.filters.get(name)
            if predicate is not None:
                resources = [resource for resource in resources if predicate(resource, value)]
        total = len(resources)

        if query.sort:
            sort = schema.sorts.get(query.sort)
            if callable(sort):
                resources.sort(key=cmp_to_key(sort))
            elif sort:
                resources = _sort_by_field(
                    resources, sort["field"], descending=sort.get("order") == "descending"
                )

        resources = PaginationBase.paginate(resources, query.page)
        return {"resources": resources, "meta": {"total": total}}

    async def query_resource_collection(
        self, resource_type: str, query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        result = await self.query_raw_resource_collection(resource_type, query, context)
        result["resources"] = [self.copy_resource(resource) for resource in result["resources"]]
        return result

    def new_resource_id(self, resource_type: str) -> str:
        """Return the next id for ``resource_type``.

        The counter starts after the largest numeric id present at first use
        and is never rewound, so ids are not reused after deletes.
        """
        counter = self._id_counters.get(resource_type)
        if counter is None:
            numeric = [
                int(resource_id)
                for resource_id in self.dataset.get(resource_type, {})
                if resource_id.isdigit()
            ]
            counter = self._id_counters[resource_type] = itertools.count(max(numeric, default=0) + 1)
        return str(next(counter))

    async def create_resource(
        self, resource_type: str, payload: dict[str, Any], query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        resources = self.dataset.setdefault(resource_type, {})
        resource = {
            "type": resource_type,
            "id": self.new_resource_id(resource_type),
            "attributes": copy.deepcopy(reject_undefined(payload.get("attributes"))),
            "relationships": copy.deepcopy(reject_undefined(payload.get("relationships"))),
        }
        resources[resource["id"]] = resource
        await self.persist_to_storage("create", resource)
        logger.info("Created %s %s", resource_type, resource["id"])
        return self.copy_resource(resource)

    async def update_resource(
        self,
        resource_type: str,
        resource_id: str,
        payload: dict[str, Any],
        query: QueryParams | None,
        context: Any,
    ) -> dict[str, Any]:
        resource = await self.get_raw_resource(resource_type, resource_id, query, context)
        for domain in ("attributes", "relationships"):
            if payload.get(domain) is not None:
                merged = dict(resource.get(domain) or {})
                merged.update(copy.deepcopy(reject_undefined(payload[domain])))
                resource[domain] = merged
        await self.persist_to_storage("update", resource)
        logger.info("Updated %s %s", resource_type, resource_id)
        return self.copy_resource(resource)

    async def delete_resource(
        self, resource_type: str, resource_id: str, query: QueryParams | None, context: Any
    ) -> None:
        resource = await self.get_raw_resource(resource_type, resource_id, query, context)
        resource_id = resource["id"]
        del self.dataset[resource_type][resource_id]

        for resources in self.dataset.values():
            for other in resources.values():
                self._sever_pointers(other, resource_type, resource_id)

        await self.persist_to_storage("delete", resource)
        logger.info("Deleted %s %s", resource_type, resource_id)

    @staticmethod
    def _sever_pointers(resource: dict[str, Any], resource_type: str, resource_id: str) -> None:
        def matches(pointer: Any) -> bool:
            return (
                isinstance(pointer, dict)
                and pointer.get("type") == resource_type
                and str(pointer.get("id")) == resource_id
            )

        for relation in (resource.get("relationships") or {}).values():
            if not isinstance(relation, dict):
                continue
            data = relation.get("data")
            if isinstance(data, list):
                relation["data"] = [pointer for pointer in data if not matches(pointer)]
            elif matches(data):
                relation["data"] = None

    async def persist_to_storage(self, action: str, resource: dict[str, Any]) -> None:
        """Hook called after every mutation; subclasses may flush to durable storage."""
