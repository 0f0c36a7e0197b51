"""JSON:API resource service with pluggable adapters."""

from .adapters import BaseAdapter, MemoryAdapter, resource_override
from .config import AdapterConfig, PaginationConfig, ServiceConfig
from .core.document import JSONAPIDocumentBuilder
from .core.errors import (
    BadRequestError,
    ErrorFactory,
    InternalError,
    JSONAPIError,
    JSONAPIErrorBuilder,
    ResourceNotFoundError,
    ValidationError,
)
from .routers.base import JSONAPIRouter
from .schemas.declaration import ResourceSchema
from .serializers.base import JSONAPISerializer
from .service.base import ServiceApi
from .viewsets.base import JSONAPIViewSet

__all__ = [
    "AdapterConfig",
    "BadRequestError",
    "BaseAdapter",
    "ErrorFactory",
    "InternalError",
    "JSONAPIDocumentBuilder",
    "JSONAPIError",
    "JSONAPIErrorBuilder",
    "JSONAPIRouter",
    "JSONAPISerializer",
    "JSONAPIViewSet",
    "MemoryAdapter",
    "PaginationConfig",
    "ResourceNotFoundError",
    "ResourceSchema",
    "ServiceApi",
    "ServiceConfig",
    "ValidationError",
    "resource_override",
]
