"""Storage-agnostic adapter contract."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Iterable, Mapping

from jsonapi_service.config import AdapterConfig
from jsonapi_service.core.document import JSONAPIDocumentBuilder
from jsonapi_service.core.errors import ErrorFactory, ResourceNotFoundError
from jsonapi_service.core.included import build_included
from jsonapi_service.schemas.declaration import (
    DefaultFieldsParams,
    FieldsSchemaContext,
    ResourceSchema,
    ValidateParams,
)
from jsonapi_service.schemas.resource import (
    CreateRequest,
    DeleteRequest,
    QueryParams,
    ServiceRequest,
    UpdateRequest,
)
from jsonapi_service.serializers.base import JSONAPISerializer
from jsonapi_service.utils.helpers import reject_undefined
from jsonapi_service.validation.fields import FieldSchemaValidator, ResourceValidator

logger = logging.getLogger(__name__)

OPERATIONS = (
    "get_resource",
    "get_resource_collection",
    "query_resource_collection",
    "create_resource",
    "update_resource",
    "delete_resource",
    "apply_sparse_fields",
)

OVERRIDE_MARKER = "__resource_overrides__"


def resource_override(operation: str, resource_type: str) -> Callable[[Callable], Callable]:
    """Mark an adapter method as the ``operation`` handler for ``resource_type``.

    The method is called with the same arguments as the generic operation
    (``resource_type`` first, except for ``apply_sparse_fields``)::

        class ArticleAdapter(MemoryAdapter):
            @resource_override("get_resource", "article")
            async def get_article(self, resource_type, resource_id, query, context):
                ...
    """
    if operation not in OPERATIONS:
        raise ValueError(f"Unknown adapter operation '{operation}'.")

    def decorator(func: Callable) -> Callable:
        markers = list(getattr(func, OVERRIDE_MARKER, ()))
        markers.append((operation, resource_type))
        setattr(func, OVERRIDE_MARKER, markers)
        return func

    return decorator


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class BaseAdapter:
    """CRUD surface a storage backend implements, plus the render pipeline.

    Each operation in :data:`OPERATIONS` is dispatched through a registry of
    ``(operation, resource_type) -> handler`` built once at construction
    from methods marked with :func:`resource_override` and from the
    ``overrides`` argument. Types without an override use the generic
    method of the same name.
    """

    serializer_class: type[JSONAPISerializer] = JSONAPISerializer
    document_builder_class: type[JSONAPIDocumentBuilder] = JSONAPIDocumentBuilder

    def __init__(
        self,
        config: AdapterConfig | None = None,
        *,
        overrides: Mapping[tuple[str, str], Callable[..., Any]] | None = None,
        **options: Any,
    ) -> None:
        self.config = config or AdapterConfig(**options)
        self.error_factory = ErrorFactory(self.config.validation_error_field)
        self.serializer = self.serializer_class()
        self.document_builder = self.document_builder_class()
        self._handlers: dict[tuple[str, str], Callable[..., Any]] = {}
        self._register_marked_overrides()
        for (operation, resource_type), handler in (overrides or {}).items():
            self.register_override(operation, resource_type, handler)
        self.initialize()

    def initialize(self) -> None:
        """Hook for subclasses to set up storage after configuration."""

    @property
    def resources(self) -> dict[str, ResourceSchema]:
        return self.config.resources

    def get_schema(self, resource_type: str) -> ResourceSchema:
        schema = self.resources.get(resource_type)
        if schema is None:
            return ResourceSchema()
        return schema

    # -- override registry -------------------------------------------------

    def _register_marked_overrides(self) -> None:
        for name in dir(type(self)):
            markers = getattr(getattr(type(self), name, None), OVERRIDE_MARKER, None)
            for operation, resource_type in markers or ():
                self._handlers[(operation, resource_type)] = getattr(self, name)

    def register_override(
        self, operation: str, resource_type: str, handler: Callable[..., Any]
    ) -> None:
        """Route ``operation`` for ``resource_type`` to ``handler``."""
        if operation not in OPERATIONS:
            raise ValueError(f"Unknown adapter operation '{operation}'.")
        self._handlers[(operation, resource_type)] = handler

    def resolve_handler(self, operation: str, resource_type: str) -> Callable[..., Any]:
        """Return the type-specific handler or the generic method."""
        handler = self._handlers.get((operation, resource_type))
        if handler is not None:
            logger.debug("Dispatching %s for '%s' to override", operation, resource_type)
            return handler
        return getattr(self, operation)

    async def dispatch(self, operation: str, resource_type: str, *args: Any) -> Any:
        handler = self.resolve_handler(operation, resource_type)
        return await _resolve(handler(resource_type, *args))

    async def call_get_resource(
        self, resource_type: str, resource_id: str, query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        return await self.dispatch("get_resource", resource_type, resource_id, query, context)

    async def call_get_resource_collection(
        self, resource_type: str, ids: list[str], query: QueryParams | None, context: Any
    ) -> list[dict[str, Any]]:
        return await self.dispatch("get_resource_collection", resource_type, ids, query, context)

    async def call_query_resource_collection(
        self, resource_type: str, query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        return await self.dispatch("query_resource_collection", resource_type, query, context)

    async def call_create_resource(
        self, resource_type: str, payload: dict[str, Any], query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        return await self.dispatch("create_resource", resource_type, payload, query, context)

    async def call_update_resource(
        self,
        resource_type: str,
        resource_id: str,
        payload: dict[str, Any],
        query: QueryParams | None,
        context: Any,
    ) -> dict[str, Any]:
        return await self.dispatch(
            "update_resource", resource_type, resource_id, payload, query, context
        )

    async def call_delete_resource(
        self, resource_type: str, resource_id: str, query: QueryParams | None, context: Any
    ) -> None:
        await self.dispatch("delete_resource", resource_type, resource_id, query, context)

    async def call_apply_sparse_fields(
        self,
        resource: Mapping[str, Any],
        fields: Mapping[str, list[str]] | None,
        query: QueryParams | None,
        context: Any,
    ) -> dict[str, Any]:
        handler = self.resolve_handler("apply_sparse_fields", resource["type"])
        return await _resolve(handler(resource, fields, query, context))

    # -- storage primitives ------------------------------------------------

    async def get_resource(
        self, resource_type: str, resource_id: str, query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        """Return one resource or raise ResourceNotFoundError."""
        raise NotImplementedError("get_resource method not implemented")

    async def get_resource_collection(
        self, resource_type: str, ids: list[str], query: QueryParams | None, context: Any
    ) -> list[dict[str, Any]]:
        """Return the resources with ``ids``; raise ResourceNotFoundError on any miss."""
        raise NotImplementedError("get_resource_collection method not implemented")

    async def query_resource_collection(
        self, resource_type: str, query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        """Return ``{"resources": [...], "meta": {"total": n}}``.

        Filter, sort and page are applied in that order.
        """
        raise NotImplementedError("query_resource_collection method not implemented")

    async def create_resource(
        self, resource_type: str, payload: dict[str, Any], query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        raise NotImplementedError("create_resource method not implemented")

    async def update_resource(
        self,
        resource_type: str,
        resource_id: str,
        payload: dict[str, Any],
        query: QueryParams | None,
        context: Any,
    ) -> dict[str, Any]:
        raise NotImplementedError("update_resource method not implemented")

    async def delete_resource(
        self, resource_type: str, resource_id: str, query: QueryParams | None, context: Any
    ) -> None:
        """Delete a resource and sever pointers to it held by other resources."""
        raise NotImplementedError("delete_resource method not implemented")

    # -- CRUD pipeline -----------------------------------------------------

    async def get_one(self, request: ServiceRequest) -> dict[str, Any]:
        """Fetch one resource and render it as a compound document."""
        resource = await self.call_get_resource(
            request.type, request.id, request.query, request.context
        )
        return await self.render_resource(resource, request.query, request.context)

    async def get(self, request: ServiceRequest) -> dict[str, Any]:
        """Query a collection and render it as a compound document."""
        result = await self.call_query_resource_collection(
            request.type, request.query, request.context
        )
        return await self.render_resource_collection(
            result["resources"], result.get("meta"), request.query, request.context
        )

    async def create(self, request: CreateRequest) -> dict[str, Any]:
        """Validate a new resource merged over its defaults, persist and render it."""
        resource_type = request.type
        schema = self.get_schema(resource_type)
        fields_schema = await self.resolve_fields_schema(resource_type, "create", request.context)
        validator = self.create_validator(fields_schema, action="create")
        defaults = await self.get_default_fields(schema, validator, request)

        blueprint = {
            "type": resource_type,
            "attributes": {
                **defaults.get("attributes", {}),
                **reject_undefined(request.attributes),
            },
            "relationships": {
                **defaults.get("relationships", {}),
                **reject_undefined(request.relationships),
            },
        }

        await self.run_validation(schema, validator, blueprint, request, "create")
        resource = await self.call_create_resource(
            resource_type, blueprint, request.query, request.context
        )
        return await self.render_resource(resource, request.query, request.context)

    async def update(self, request: UpdateRequest) -> dict[str, Any]:
        """Validate a patch against the stored resource, merge, persist and render it."""
        resource_type = request.type
        existing = await self.call_get_resource(
            resource_type, request.id, request.query, request.context
        )
        schema = self.get_schema(resource_type)
        fields_schema = await self.resolve_fields_schema(resource_type, "update", request.context)
        validator = self.create_validator(fields_schema, action="update")
        await self.run_validation(schema, validator, existing, request, "update")

        payload: dict[str, Any] = {"type": resource_type, "id": request.id}
        if request.attributes is not None:
            payload["attributes"] = reject_undefined(request.attributes)
        if request.relationships is not None:
            payload["relationships"] = reject_undefined(request.relationships)

        resource = await self.call_update_resource(
            resource_type, request.id, payload, request.query, request.context
        )
        return await self.render_resource(resource, request.query, request.context)

    async def delete(self, request: DeleteRequest) -> None:
        await self.call_delete_resource(request.type, request.id, request.query, request.context)

    # -- validation --------------------------------------------------------

    async def resolve_fields_schema(
        self, resource_type: str, action: str, context: Any
    ) -> Mapping[str, Any] | None:
        """Return the field declarations of ``resource_type`` for ``action``."""
        fields_schema = self.get_schema(resource_type).fields_schema
        if callable(fields_schema):
            fields_schema = await _resolve(fields_schema(FieldsSchemaContext(action, context)))
        return fields_schema

    def create_validator(
        self, fields_schema: Mapping[str, Any] | None, *, action: str
    ) -> ResourceValidator:
        return ResourceValidator(
            FieldSchemaValidator(fields_schema), self.error_factory, action=action
        )

    async def get_default_fields(
        self, schema: ResourceSchema, validator: ResourceValidator, request: ServiceRequest
    ) -> dict[str, dict[str, Any]]:
        """Return defaults from the schema hook or from the field declarations."""
        if schema.get_default_fields is not None:
            defaults = await _resolve(
                schema.get_default_fields(
                    DefaultFieldsParams(adapter=self, query=request.query, context=request.context)
                )
            )
            defaults = defaults or {}
            return {
                "attributes": reject_undefined(defaults.get("attributes")),
                "relationships": reject_undefined(defaults.get("relationships")),
            }
        return validator.schema_validator.default_fields()

    async def run_validation(
        self,
        schema: ResourceSchema,
        validator: ResourceValidator,
        resource: dict[str, Any],
        request: ServiceRequest,
        action: str,
    ) -> None:
        """Run the schema hook, or field and reference validation, then report.

        On create the merged blueprint is validated; on update only the
        supplied patch is.
        """
        if schema.validate is not None:
            await _resolve(
                schema.validate(
                    ValidateParams(
                        validator=validator,
                        resource=resource,
                        data=request,
                        action=action,
                        adapter=self,
                        context=request.context,
                    )
                )
            )
            validator.report()
            return

        target: Any = resource if action == "create" else request
        validator.validate_fields(target).report()

        if self.config.validate_relationship_references:
            relationships = (
                resource.get("relationships") if action == "create" else request.relationships
            )
            await self.validate_relationship_references(
                validator, relationships, request.query, request.context
            )
            validator.report()

    async def validate_relationship_references(
        self,
        validator: ResourceValidator,
        relationships: Mapping[str, Any] | None,
        query: QueryParams | None,
        context: Any,
    ) -> ResourceValidator:
        """Add a relationship error for every relationship with a dangling pointer."""
        checks: list[tuple[str, str, list[str]]] = []
        for name, entry in (relationships or {}).items():
            data = entry.get("data") if isinstance(entry, Mapping) else None
            pointers = data if isinstance(data, list) else ([data] if data else [])
            by_type: dict[str, list[str]] = {}
            for pointer in pointers:
                ids = by_type.setdefault(pointer["type"], [])
                if str(pointer["id"]) not in ids:
                    ids.append(str(pointer["id"]))
            checks.extend((name, resource_type, ids) for resource_type, ids in by_type.items())

        async def resolves(resource_type: str, ids: list[str]) -> bool:
            try:
                await self.call_get_resource_collection(resource_type, ids, query, context)
            except ResourceNotFoundError:
                return False
            return True

        results = await asyncio.gather(
            *(resolves(resource_type, ids) for _, resource_type, ids in checks)
        )
        failed: list[str] = []
        for (name, _, _), ok in zip(checks, results):
            if not ok and name not in failed:
                failed.append(name)
                validator.add_relationship_error(name, "Related resource not found")
        return validator

    # -- rendering ---------------------------------------------------------

    def apply_sparse_fields(
        self,
        resource: Mapping[str, Any],
        fields: Mapping[str, list[str]] | None,
        query: QueryParams | None = None,
        context: Any = None,
    ) -> dict[str, Any]:
        return self.serializer.apply_sparse_fields(resource, fields)

    async def present_resources(
        self, resources: Iterable[Mapping[str, Any]], query: QueryParams | None, context: Any
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """Project ``resources`` and resolve their ``included`` resources."""
        query = query or QueryParams()
        views = [
            await self.call_apply_sparse_fields(resource, query.fields, query, context)
            for resource in resources
        ]
        included = await build_included(
            self,
            views,
            include=query.include,
            fields=query.fields,
            query=query,
            context=context,
        )
        return views, included

    async def render_resource(
        self, resource: Mapping[str, Any], query: QueryParams | None, context: Any
    ) -> dict[str, Any]:
        views, included = await self.present_resources([resource], query, context)
        return self.document_builder.build_single(
            self.serializer.to_resource(views[0]),
            included=self.serializer.to_many(included),
        )

    async def render_resource_collection(
        self,
        resources: Iterable[Mapping[str, Any]],
        meta: Mapping[str, Any] | None,
        query: QueryParams | None,
        context: Any,
    ) -> dict[str, Any]:
        views, included = await self.present_resources(resources, query, context)
        return self.document_builder.build_collection(
            self.serializer.to_many(views),
            included=self.serializer.to_many(included),
            meta=meta,
        )
