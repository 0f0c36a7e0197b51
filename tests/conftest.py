"""
Shared fixtures for jsonapi-service tests.

Provides three resource types backed by the memory adapter:
- article (9 items) with title filter and "-title" sort
- tag (10 items)
- user (5 items) with a custom validate hook
"""

from __future__ import annotations

from typing import Any

import pytest

from jsonapi_service import MemoryAdapter, ServiceApi


def article_fields_schema(params) -> dict[str, Any]:
    return {
        "attributes": {
            "title": {"type": str, "min_length": 2, "required": params.action == "create"},
            "body": {"type": str, "default": ""},
            "published": {"type": bool, "default": False},
        },
        "relationships": {
            "tags": {"has_many": "tag", "default": []},
            "author": {"has_one": "user", "nullable": True, "default": None},
        },
    }


def user_fields_schema(params) -> dict[str, Any]:
    return {
        "attributes": {
            "nickname": {"type": str, "default": ""},
            "email": {"type": str, "email": True, "required": params.action == "create"},
        },
        "relationships": {
            "boss": {"has_one": "user", "nullable": False, "required": params.action == "create"},
        },
    }


def validate_user(params) -> None:
    params.validator.validate_fields(
        params.data, messages={"email": {"email": "Invalid email format"}}
    ).report()


def article_dataset() -> list[dict[str, Any]]:
    return [
        {
            "type": "article",
            "id": str(index),
            "attributes": {
                "title": f"Article title {index}",
                "body": f"Article body {index}",
                "published": index % 2 == 0,
            },
            "relationships": {
                "author": {"data": {"type": "user", "id": "1"}},
                "tags": {
                    "data": [
                        {"type": "tag", "id": "1"},
                        {"type": "tag", "id": str(index + 1)},
                    ]
                },
            },
        }
        for index in range(1, 10)
    ]


def make_resource_schemas() -> dict[str, dict[str, Any]]:
    """Return fresh resource schema declarations."""
    return {
        "article": {
            "fields_schema": article_fields_schema,
            "filters": {
                "title": lambda resource, value: value.lower()
                in resource["attributes"]["title"].lower(),
            },
            "sorts": {"-title": {"field": "title", "order": "descending"}},
            "dataset": article_dataset,
        },
        "tag": {
            "dataset": [
                {"type": "tag", "id": str(index), "attributes": {"title": f"Tag {index}"}}
                for index in range(1, 11)
            ],
        },
        "user": {
            "fields_schema": user_fields_schema,
            "validate": validate_user,
            "dataset": [
                {
                    "type": "user",
                    "id": str(index),
                    "attributes": {
                        "nickname": f"testUser{index}",
                        "email": f"testUser{index}@gmail.com",
                    },
                    "relationships": {"boss": {"data": {"type": "user", "id": "2"}}},
                }
                for index in range(1, 6)
            ],
        },
    }


@pytest.fixture
def resource_schemas() -> dict[str, dict[str, Any]]:
    return make_resource_schemas()


@pytest.fixture
def service(resource_schemas) -> ServiceApi:
    return ServiceApi(adapter=MemoryAdapter, resources=resource_schemas)


@pytest.fixture
def adapter(service) -> MemoryAdapter:
    return service.adapter
