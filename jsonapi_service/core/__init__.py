"""Errors, documents and compound document assembly."""

from .document import JSONAPIDocumentBuilder
from .errors import (
    BadRequestError,
    ErrorFactory,
    InternalError,
    JSONAPIError,
    JSONAPIErrorBuilder,
    ResourceNotFoundError,
    ValidationError,
)
from .included import build_included

__all__ = [
    "BadRequestError",
    "ErrorFactory",
    "InternalError",
    "JSONAPIDocumentBuilder",
    "JSONAPIError",
    "JSONAPIErrorBuilder",
    "ResourceNotFoundError",
    "ValidationError",
    "build_included",
]
