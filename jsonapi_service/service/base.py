"""Service entry point: request sanitization and adapter dispatch."""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping

from pydantic import ValidationError as PydanticValidationError

from jsonapi_service.adapters.base import BaseAdapter
from jsonapi_service.config import ServiceConfig
from jsonapi_service.core.errors import BadRequestError, ErrorFactory
from jsonapi_service.pagination import get_pagination
from jsonapi_service.schemas.declaration import ResourceSchema
from jsonapi_service.schemas.resource import (
    REQUEST_MODELS,
    Page,
    QueryParams,
    ServiceRequest,
    ToManyRelationship,
    ToOneRelationship,
)
from jsonapi_service.utils.helpers import split_csv

logger = logging.getLogger(__name__)

_MISSING = object()


class ServiceApi:
    """Single trusted entry point for resource access.

    Every call sanitizes the caller's input into a typed request, resolves
    the adapter owning the resource type and forwards to it. ``adapter`` is an
    adapter class (built from this service's configuration) or an instance.
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        *,
        adapter: BaseAdapter | type[BaseAdapter] | None = None,
        **options: Any,
    ) -> None:
        self.config = config or ServiceConfig(**options)
        if adapter is None:
            raise ValueError("Database adapter not provided")
        if isinstance(adapter, type):
            adapter = adapter(self.config.adapter_config())
        self.adapter = adapter
        self.error_factory = ErrorFactory(self.config.validation_error_field)
        self.pagination = get_pagination(self.config.pagination)

    @property
    def resources(self) -> dict[str, ResourceSchema]:
        return self.config.resources

    def resolve_adapter(self, request: ServiceRequest) -> BaseAdapter:
        """Return the adapter pinned by the type's schema, else the default."""
        schema = self.resources[request.type]
        return schema.adapter or self.adapter

    async def get(self, data: Any) -> dict[str, Any]:
        """Return one resource when ``id`` is given, else a collection."""
        request = await self.sanitize(data, action="get")
        adapter = self.resolve_adapter(request)
        if request.id is not None:
            return await adapter.get_one(request)
        return await adapter.get(request)

    async def create(self, data: Any) -> dict[str, Any]:
        request = await self.sanitize(data, action="create")
        return await self.resolve_adapter(request).create(request)

    async def update(self, data: Any) -> dict[str, Any]:
        request = await self.sanitize(data, action="update")
        return await self.resolve_adapter(request).update(request)

    async def delete(self, data: Any) -> None:
        request = await self.sanitize(data, action="delete")
        await self.resolve_adapter(request).delete(request)

    # -- sanitization ------------------------------------------------------

    def create_input_validator(self) -> BadRequestError:
        return self.error_factory.bad_request()

    async def sanitize(self, data: Any, *, action: str) -> ServiceRequest:
        """Validate and normalize caller input into a typed request.

        Failures are collected into one bad request error. An unknown type
        stops the remaining checks. The caller's ``query`` mapping is
        normalized in place.
        """
        error = self.create_input_validator()

        if not isinstance(data, Mapping):
            error.add_error("Invalid input parameters").report()

        self.sanitize_type(data, error)
        error.report()

        resource_id = self.sanitize_id(data, error, required=action in ("update", "delete"))
        attributes = self.sanitize_attributes(data, error)
        relationships = self.sanitize_relationships(data, error)
        query = self.sanitize_query(data, error)
        error.report()

        request = REQUEST_MODELS[action](
            type=data["type"],
            id=resource_id,
            attributes=attributes,
            relationships=relationships,
            query=query,
            context=data.get("context"),
        )
        logger.debug("Sanitized %s request for '%s'", action, request.type)
        return request

    def sanitize_type(self, data: Mapping[str, Any], error: BadRequestError) -> None:
        resource_type = data.get("type")
        if not resource_type or not isinstance(resource_type, str):
            error.add_error("Resource type not provided")
        elif resource_type not in self.resources:
            error.add_error(f'Unknown resource type "{resource_type}" provided')

    def sanitize_id(
        self, data: Mapping[str, Any], error: BadRequestError, *, required: bool
    ) -> str | None:
        resource_id = data.get("id")
        if resource_id is None and not required:
            return None
        if isinstance(resource_id, bool) or not isinstance(resource_id, (str, int)):
            error.add_error("Resource id not provided")
            return None
        return str(resource_id)

    def sanitize_attributes(
        self, data: Mapping[str, Any], error: BadRequestError
    ) -> dict[str, Any] | None:
        attributes = data.get("attributes")
        if attributes is None:
            return None
        if not isinstance(attributes, Mapping):
            error.add_error("Invalid attributes payload")
            return None
        return dict(attributes)

    def sanitize_relationships(
        self, data: Mapping[str, Any], error: BadRequestError
    ) -> dict[str, dict[str, Any]] | None:
        """Parse every relationship entry into a to-one or to-many variant."""
        relationships = data.get("relationships")
        if relationships is None:
            return None
        if not isinstance(relationships, Mapping):
            error.add_error("Invalid relationships payload")
            return None

        parsed: dict[str, dict[str, Any]] = {}
        for name, entry in relationships.items():
            relationship = self._parse_relationship(entry)
            if relationship is None:
                error.add_relationship_error(name, "Invalid relationships payload")
                continue
            parsed[name] = relationship.model_dump()
        return parsed

    @staticmethod
    def _parse_relationship(entry: Any) -> ToOneRelationship | ToManyRelationship | None:
        if not isinstance(entry, Mapping) or "data" not in entry:
            return None
        value = entry["data"]
        try:
            if value is None or isinstance(value, Mapping):
                return ToOneRelationship(data=value)
            if isinstance(value, list):
                return ToManyRelationship(data=value)
        except PydanticValidationError:
            return None
        return None

    def sanitize_query(self, data: Mapping[str, Any], error: BadRequestError) -> QueryParams:
        query = data.get("query")
        if query is None:
            return QueryParams()
        if not isinstance(query, Mapping):
            error.add_error("Invalid query parameters")
            return QueryParams()

        normalized = {
            "fields": self.sanitize_fields(query.get("fields", _MISSING), error),
            "include": self.sanitize_include(query.get("include", _MISSING), error),
            "page": self.sanitize_page(query.get("page", _MISSING), error),
            "filter": self.sanitize_filter(query.get("filter", _MISSING), error),
            "sort": self.sanitize_sort(query.get("sort", _MISSING), error),
        }

        if isinstance(query, MutableMapping):
            for key, value in normalized.items():
                if key in query:
                    query[key] = value.model_dump() if isinstance(value, Page) else value

        return QueryParams(**normalized)

    def sanitize_fields(self, fields: Any, error: BadRequestError) -> dict[str, list[str]] | None:
        if fields is _MISSING or fields is None:
            return None
        if not isinstance(fields, Mapping):
            error.add_error("Invalid fields payload")
            return None
        normalized: dict[str, list[str]] = {}
        for resource_type, field_list in fields.items():
            if isinstance(field_list, str):
                normalized[resource_type] = split_csv(field_list)
            elif isinstance(field_list, (list, tuple)) and all(
                isinstance(item, str) for item in field_list
            ):
                normalized[resource_type] = list(field_list)
            else:
                error.add_error("Invalid fields payload")
        return normalized

    def sanitize_include(self, include: Any, error: BadRequestError) -> list[str] | None:
        if include is _MISSING or include is None:
            return None
        if isinstance(include, str):
            return split_csv(include)
        if isinstance(include, (list, tuple)) and all(isinstance(item, str) for item in include):
            return list(include)
        error.add_error("Invalid include payload")
        return None

    def sanitize_page(self, page: Any, error: BadRequestError) -> Page | None:
        """Normalize ``page`` with the configured pagination strategy."""
        if page is _MISSING or page is None:
            return None
        if not isinstance(page, Mapping):
            error.add_error("Invalid pagination request")
            return None
        return self.pagination.normalize(page)

    def sanitize_filter(self, value: Any, error: BadRequestError) -> dict[str, Any] | None:
        if value is _MISSING or value is None:
            return None
        if not isinstance(value, Mapping):
            error.add_error("Invalid filter request")
            return None
        return dict(value)

    def sanitize_sort(self, sort: Any, error: BadRequestError) -> str | None:
        if sort is _MISSING or sort is None:
            return None
        if not isinstance(sort, str):
            error.add_error("Invalid sort request")
            return None
        return sort
