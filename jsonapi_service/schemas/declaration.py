"""Per-type resource schema declarations supplied by the embedding application."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, Callable, Mapping

if TYPE_CHECKING:
    from jsonapi_service.adapters.base import BaseAdapter
    from jsonapi_service.validation.fields import ResourceValidator


@dataclass
class FieldsSchemaContext:
    """Argument passed to a callable ``fields_schema``."""

    action: str
    context: Any = None


@dataclass
class ValidateParams:
    """Argument passed to a schema ``validate`` hook."""

    validator: ResourceValidator
    resource: dict[str, Any]
    data: Any
    action: str
    adapter: BaseAdapter
    context: Any = None


@dataclass
class DefaultFieldsParams:
    """Argument passed to a schema ``get_default_fields`` hook."""

    adapter: BaseAdapter
    query: Any
    context: Any = None


@dataclass
class ResourceSchema:
    """Declaration of one resource type.

    ``fields_schema`` is either a mapping with ``attributes`` and
    ``relationships`` field declarations or a callable returning one for a
    :class:`FieldsSchemaContext`. ``filters`` maps filter names to
    ``predicate(resource, value)``; ``sorts`` maps sort names to a comparator
    or to ``{"field": ..., "order": "ascending" | "descending"}``.
    """

    fields_schema: Mapping[str, Any] | Callable[[FieldsSchemaContext], Any] | None = None
    filters: dict[str, Callable[[dict[str, Any], Any], bool]] = field(default_factory=dict)
    sorts: dict[str, Any] = field(default_factory=dict)
    validate: Callable[[ValidateParams], Any] | None = None
    get_default_fields: Callable[[DefaultFieldsParams], Any] | None = None
    dataset: list[dict[str, Any]] | Callable[[], list[dict[str, Any]]] | None = None
    adapter: BaseAdapter | None = None
    url_slug: str | None = None
    has_list_route: bool = True
    has_detail_route: bool = True
    has_create_route: bool = True
    has_update_route: bool = True
    has_delete_route: bool = True

    @classmethod
    def from_mapping(cls, value: ResourceSchema | Mapping[str, Any]) -> ResourceSchema:
        """Coerce a plain mapping into a schema, rejecting unknown keys."""
        if isinstance(value, cls):
            return value
        known = {item.name for item in fields(cls)}
        unknown = set(value) - known
        if unknown:
            raise ValueError(f"Unknown resource schema keys: {sorted(unknown)}")
        return cls(**dict(value))


def coerce_resource_schemas(
    resources: Mapping[str, ResourceSchema | Mapping[str, Any]] | None,
) -> dict[str, ResourceSchema]:
    """Return a type -> schema mapping with every value coerced."""
    return {
        resource_type: ResourceSchema.from_mapping(schema)
        for resource_type, schema in (resources or {}).items()
    }
