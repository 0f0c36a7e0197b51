"""Viewset binding one resource type of a service to HTTP requests."""

from typing import Any

from fastapi import Request
from starlette.responses import JSONResponse, Response

from jsonapi_service.core.errors import ErrorFactory
from jsonapi_service.service.base import ServiceApi
from jsonapi_service.utils.query_params import parse_query_params

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class JSONAPIViewSet:
    """Translate HTTP requests for one resource type into service calls.

    The Starlette request is passed to the service as the call ``context``.
    """

    allowed_actions: list[str] = ["list", "retrieve", "create", "update", "destroy"]

    def __init__(self, service: ServiceApi, resource_type: str) -> None:
        self.service = service
        self.resource_type = resource_type
        self.error_factory = ErrorFactory(service.config.validation_error_field)

    def get_query_params(self, request: Request) -> dict[str, Any]:
        """Parse JSON:API query parameter families from the URL."""
        return parse_query_params(request.query_params)

    async def get_payload_data(self, request: Request) -> dict[str, Any]:
        """Return the ``data`` member of the request body."""
        error = self.error_factory.bad_request()
        try:
            payload = await request.json()
        except ValueError:
            error.add_error("Request body is not valid JSON").report()
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            error.add_error("Request body must hold a data object").report()
        return data

    def render(self, document: dict[str, Any], status_code: int = 200) -> JSONResponse:
        return JSONResponse(document, status_code=status_code, media_type=JSONAPI_MEDIA_TYPE)

    async def list(self, request: Request) -> Response:
        """Handle GET collection requests."""
        document = await self.service.get(
            {
                "type": self.resource_type,
                "query": self.get_query_params(request),
                "context": request,
            }
        )
        return self.render(document)

    async def retrieve(self, request: Request, resource_id: str) -> Response:
        """Handle GET single resource requests."""
        document = await self.service.get(
            {
                "type": self.resource_type,
                "id": resource_id,
                "query": self.get_query_params(request),
                "context": request,
            }
        )
        return self.render(document)

    async def create(self, request: Request) -> Response:
        """Handle POST create requests."""
        data = await self.get_payload_data(request)
        document = await self.service.create(
            {
                **data,
                "type": self.resource_type,
                "query": self.get_query_params(request),
                "context": request,
            }
        )
        return self.render(document, status_code=201)

    async def update(self, request: Request, resource_id: str) -> Response:
        """Handle PATCH (or configured) update requests."""
        data = await self.get_payload_data(request)
        document = await self.service.update(
            {
                **data,
                "type": self.resource_type,
                "id": resource_id,
                "query": self.get_query_params(request),
                "context": request,
            }
        )
        return self.render(document)

    async def destroy(self, request: Request, resource_id: str) -> Response:
        """Handle DELETE requests."""
        await self.service.delete(
            {"type": self.resource_type, "id": resource_id, "context": request}
        )
        return Response(status_code=204)
