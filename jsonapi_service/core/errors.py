"""JSON:API error objects and collectible service errors."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

BAD_REQUEST = "bad_request"
RESOURCE_NOT_FOUND = "resource_not_found"
VALIDATION_ERROR = "validation_error"
INTERNAL_ERROR = "internal_error"


class JSONAPIErrorBuilder:
    """Build JSON:API error objects and error documents."""

    def __init__(self, message_field: str = "detail") -> None:
        self.message_field = message_field

    def error_object(
        self,
        *,
        status: str | None = None,
        code: str | None = None,
        title: str | None = None,
        detail: str | None = None,
        source: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API error object.

        ``detail`` is stored under the configured message field.
        """
        error: dict[str, Any] = {}
        if status is not None:
            error["status"] = status
        if code is not None:
            error["code"] = code
        if title is not None:
            error["title"] = title
        if source is not None:
            error["source"] = source
        if meta is not None:
            error["meta"] = meta
        if detail is not None:
            error[self.message_field] = detail
        if not error:
            raise ValueError("Error object must include at least one field.")
        return error

    def error_document(self, errors: list[dict[str, Any]]) -> dict[str, Any]:
        """Return a JSON:API document with an errors array."""
        return {"errors": errors}


class JSONAPIError(Exception):
    """Base class for every error the service reports.

    An error doubles as a collector: checks append sub-errors to it and
    :meth:`report` decides whether anything went wrong.
    """

    error_type: str = INTERNAL_ERROR
    default_message: str = "Error encountered"

    def __init__(
        self,
        message: str | None = None,
        *,
        builder: JSONAPIErrorBuilder | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.builder = builder or JSONAPIErrorBuilder()
        self.errors: list[dict[str, Any]] = []

    @property
    def message_field(self) -> str:
        return self.builder.message_field

    def add_error(self, error: str | dict[str, Any]) -> JSONAPIError:
        """Append a sub-error given as a message or a ready error object."""
        if isinstance(error, str):
            error = self.builder.error_object(code=self.error_type, detail=error)
        self.errors.append(error)
        return self

    def add_attribute_error(
        self, attribute: str, message: str, **extra: Any
    ) -> JSONAPIError:
        """Append an error pointing at ``/data/attributes/<attribute>``."""
        return self._add_field_error("attributes", attribute, message, extra)

    def add_relationship_error(
        self, relationship: str, message: str, **extra: Any
    ) -> JSONAPIError:
        """Append an error pointing at ``/data/relationships/<relationship>``."""
        return self._add_field_error("relationships", relationship, message, extra)

    def _add_field_error(
        self, domain: str, field: str, message: str, extra: dict[str, Any]
    ) -> JSONAPIError:
        error = self.builder.error_object(
            code=self.error_type,
            source={"pointer": f"/data/{domain}/{field}"},
            detail=message,
        )
        error.update(extra)
        self.errors.append(error)
        return self

    def report(self) -> None:
        """Raise this error if any sub-error was collected."""
        if self.errors:
            logger.warning(
                "%s reported with %d error(s)", self.error_type, len(self.errors)
            )
            raise self

    def to_document(self) -> dict[str, Any]:
        """Return the JSON:API error document for this error."""
        errors = self.errors or [
            self.builder.error_object(code=self.error_type, detail=self.message)
        ]
        return self.builder.error_document([dict(error) for error in errors])

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, errors={self.errors!r})"


class BadRequestError(JSONAPIError):
    """Malformed input or an unknown resource type."""

    error_type = BAD_REQUEST
    default_message = "Bad request"


class ResourceNotFoundError(JSONAPIError):
    """One or more requested ids do not resolve."""

    error_type = RESOURCE_NOT_FOUND
    default_message = "Resource not found"


class ValidationError(JSONAPIError):
    """Field-level validation failures."""

    error_type = VALIDATION_ERROR
    default_message = "Validation error"


class InternalError(JSONAPIError):
    error_type = INTERNAL_ERROR
    default_message = "Internal error"


class ErrorFactory:
    """Create empty error collectors that share one message field name."""

    def __init__(self, message_field: str = "detail") -> None:
        self.builder = JSONAPIErrorBuilder(message_field)

    @property
    def message_field(self) -> str:
        return self.builder.message_field

    def bad_request(self, message: str | None = None) -> BadRequestError:
        return BadRequestError(message, builder=self.builder)

    def resource_not_found(self, message: str | None = None) -> ResourceNotFoundError:
        return ResourceNotFoundError(message, builder=self.builder)

    def validation_error(self, message: str | None = None) -> ValidationError:
        return ValidationError(message, builder=self.builder)

    def internal_error(self, message: str | None = None) -> InternalError:
        return InternalError(message, builder=self.builder)
