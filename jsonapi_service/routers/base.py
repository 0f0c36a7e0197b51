"""Router mounting JSON:API routes for a service."""

import logging
from typing import Any, Callable, Sequence

from fastapi import APIRouter

from jsonapi_service.service.base import ServiceApi
from jsonapi_service.viewsets.base import JSONAPIViewSet

logger = logging.getLogger(__name__)


class JSONAPIRouter(APIRouter):
    """APIRouter wrapper for JSON:API viewsets."""

    viewset_class: type[JSONAPIViewSet] = JSONAPIViewSet

    def register_service(
        self,
        service: ServiceApi,
        *,
        update_methods: Sequence[str] = ("PATCH",),
    ) -> None:
        """Register routes for every resource type declared by ``service``.

        Each type is mounted under ``/<url_slug>`` (the type name when no slug
        is declared). Route groups switched off in the type's schema through
        the ``has_*_route`` flags are skipped.

        Examples:
            service = ServiceApi(adapter=MemoryAdapter, resources={...})
            router = JSONAPIRouter()
            router.register_service(service)
            app.include_router(router)
        """
        for resource_type, schema in service.resources.items():
            actions = []
            if schema.has_list_route:
                actions.append("list")
            if schema.has_create_route:
                actions.append("create")
            if schema.has_detail_route:
                actions.append("retrieve")
            if schema.has_update_route:
                actions.append("update")
            if schema.has_delete_route:
                actions.append("destroy")

            viewset = self.viewset_class(service, resource_type)
            viewset.allowed_actions = actions
            prefix = f"/{schema.url_slug or resource_type}"
            self.register_viewset(prefix, viewset, update_methods=update_methods)
            logger.debug("Mounted %s at %s with %s", resource_type, prefix, actions)

    def register_viewset(
        self,
        prefix: str,
        viewset: JSONAPIViewSet,
        *,
        update_methods: Sequence[str] = ("PATCH",),
    ) -> None:
        """Register JSON:API routes for a viewset instance."""
        allowed_actions = viewset.allowed_actions
        name = prefix.strip("/")

        if "list" in allowed_actions:
            self.add_jsonapi_route(prefix, viewset.list, methods=["GET"], name=f"{name}_list")
        if "create" in allowed_actions:
            self.add_jsonapi_route(prefix, viewset.create, methods=["POST"], name=f"{name}_create")

        detail_path = f"{prefix}/{{resource_id}}"

        if "retrieve" in allowed_actions:
            self.add_jsonapi_route(
                detail_path, viewset.retrieve, methods=["GET"], name=f"{name}_retrieve"
            )
        if "update" in allowed_actions:
            self.add_jsonapi_route(
                detail_path, viewset.update, methods=list(update_methods), name=f"{name}_update"
            )
        if "destroy" in allowed_actions:
            self.add_jsonapi_route(
                detail_path, viewset.destroy, methods=["DELETE"], name=f"{name}_destroy"
            )

    def add_jsonapi_route(
        self,
        path: str,
        endpoint: Callable[..., Any],
        *,
        methods: list[str],
        name: str | None = None,
    ) -> None:
        """Add a route with JSON:API defaults."""
        self.add_api_route(path, endpoint, methods=methods, name=name)
