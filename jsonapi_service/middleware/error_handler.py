"""JSON:API error handling middleware."""

import logging
from typing import Any

from starlette.responses import JSONResponse

from jsonapi_service.core.errors import (
    BAD_REQUEST,
    RESOURCE_NOT_FOUND,
    VALIDATION_ERROR,
    ErrorFactory,
    JSONAPIError,
)

logger = logging.getLogger(__name__)

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class ErrorHandlerMiddleware:
    """Convert exceptions into JSON:API error documents.

    Known error kinds map to 400, 404 and ``validation_error_status``; any
    other exception is logged and answered with a 500 document.
    """

    def __init__(
        self,
        app: Any,
        *,
        validation_error_status: int = 409,
        message_field: str = "detail",
    ) -> None:
        self.app = app
        self.message_field = message_field
        self.status_codes = {
            BAD_REQUEST: 400,
            RESOURCE_NOT_FOUND: 404,
            VALIDATION_ERROR: validation_error_status,
        }

    def status_for(self, error: JSONAPIError) -> int:
        return self.status_codes.get(error.error_type, 500)

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        try:
            await self.app(scope, receive, send)
        except JSONAPIError as exc:
            status_code = self.status_for(exc)
            if status_code >= 500:
                logger.error("Unhandled %s: %r", exc.error_type, exc)
            response = JSONResponse(
                exc.to_document(), status_code=status_code, media_type=JSONAPI_MEDIA_TYPE
            )
            await response(scope, receive, send)
        except Exception:
            logger.exception("Unhandled error while serving %s", scope.get("path"))
            error = ErrorFactory(self.message_field).internal_error()
            error.add_error({"status": "500", "title": "Internal Server Error"})
            response = JSONResponse(
                error.to_document(), status_code=500, media_type=JSONAPI_MEDIA_TYPE
            )
            await response(scope, receive, send)
