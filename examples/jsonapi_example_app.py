"""Example FastAPI app serving articles, tags and users from memory.

Run with:
    uvicorn examples.jsonapi_example_app:app --reload
"""
from __future__ import annotations

import logging

from fastapi import FastAPI

from jsonapi_service import JSONAPIRouter, MemoryAdapter, ServiceApi
from jsonapi_service.middleware import ErrorHandlerMiddleware

logging.basicConfig(level=logging.INFO)


def article_fields(params):
    return {
        "attributes": {
            "title": {"type": str, "min_length": 2, "required": params.action == "create"},
            "body": {"type": str, "default": ""},
        },
        "relationships": {
            "author": {"has_one": "user", "nullable": True, "default": None},
            "tags": {"has_many": "tag", "default": []},
        },
    }


service = ServiceApi(
    adapter=MemoryAdapter,
    resources={
        "article": {
            "url_slug": "articles",
            "fields_schema": article_fields,
            "filters": {
                "title": lambda resource, value: str(value).lower()
                in resource["attributes"]["title"].lower(),
            },
            "sorts": {"-title": {"field": "title", "order": "descending"}},
            "dataset": [
                {
                    "id": "1",
                    "attributes": {"title": "Hello", "body": "First post"},
                    "relationships": {
                        "author": {"data": {"type": "user", "id": "1"}},
                        "tags": {"data": [{"type": "tag", "id": "1"}]},
                    },
                },
            ],
        },
        "tag": {
            "url_slug": "tags",
            "fields_schema": {"attributes": {"title": {"type": str, "required": True}}},
            "dataset": [{"id": "1", "attributes": {"title": "news"}}],
        },
        "user": {
            "url_slug": "users",
            "has_delete_route": False,
            "fields_schema": {
                "attributes": {
                    "email": {"type": str, "email": True, "required": True},
                    "nickname": {"type": str, "default": ""},
                },
            },
            "dataset": [{"id": "1", "attributes": {"email": "ann@example.com", "nickname": "ann"}}],
        },
    },
)

router = JSONAPIRouter()
router.register_service(service)

app = FastAPI(title="JSON:API service example")
app.add_middleware(ErrorHandlerMiddleware, validation_error_status=422)
app.include_router(router)
