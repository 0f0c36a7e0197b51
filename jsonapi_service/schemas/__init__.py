"""Pydantic models and schema declarations."""

from .declaration import (
    DefaultFieldsParams,
    FieldsSchemaContext,
    ResourceSchema,
    ValidateParams,
    coerce_resource_schemas,
)
from .resource import (
    CreateRequest,
    DeleteRequest,
    JSONAPIDocument,
    JSONAPIErrorDocument,
    JSONAPIResource,
    JSONAPIResourceIdentifier,
    Page,
    Pointer,
    QueryParams,
    ReadRequest,
    RelationshipEntry,
    ServiceRequest,
    ToManyRelationship,
    ToOneRelationship,
    UpdateRequest,
)

__all__ = [
    "CreateRequest",
    "DefaultFieldsParams",
    "DeleteRequest",
    "FieldsSchemaContext",
    "JSONAPIDocument",
    "JSONAPIErrorDocument",
    "JSONAPIResource",
    "JSONAPIResourceIdentifier",
    "Page",
    "Pointer",
    "QueryParams",
    "ReadRequest",
    "RelationshipEntry",
    "ResourceSchema",
    "ServiceRequest",
    "ToManyRelationship",
    "ToOneRelationship",
    "UpdateRequest",
    "ValidateParams",
    "coerce_resource_schemas",
]
