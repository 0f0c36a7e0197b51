"""Pydantic models for resource pointers, requests and documents."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JSONAPIResourceIdentifier(BaseModel):
    """Resource identifier object (pointer): type + id."""

    model_config = ConfigDict(extra="ignore")

    type: str = Field(min_length=1)
    id: str = Field(min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


Pointer = JSONAPIResourceIdentifier


class ToOneRelationship(BaseModel):
    """Relationship holding a single pointer or null."""

    kind: Literal["to_one"] = Field(default="to_one", exclude=True)
    data: Optional[Pointer] = None


class ToManyRelationship(BaseModel):
    """Relationship holding a list of pointers."""

    kind: Literal["to_many"] = Field(default="to_many", exclude=True)
    data: List[Pointer]


RelationshipEntry = Union[ToOneRelationship, ToManyRelationship]


class JSONAPIResource(BaseModel):
    """Resource object with attributes and relationships."""

    type: str
    id: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    relationships: Optional[Dict[str, Any]] = None


class Page(BaseModel):
    """Canonical pagination window."""

    offset: int = 0
    limit: Optional[int] = None


class QueryParams(BaseModel):
    """Sanitized query options of a request."""

    fields: Optional[Dict[str, List[str]]] = None
    include: Optional[List[str]] = None
    page: Optional[Page] = None
    filter: Optional[Dict[str, Any]] = None
    sort: Optional[str] = None


class ServiceRequest(BaseModel):
    """A sanitized service call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    action: str
    type: str
    id: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    relationships: Optional[Dict[str, Dict[str, Any]]] = None
    query: QueryParams = Field(default_factory=QueryParams)
    context: Any = None


class ReadRequest(ServiceRequest):
    action: Literal["get"] = "get"


class CreateRequest(ServiceRequest):
    action: Literal["create"] = "create"


class UpdateRequest(ServiceRequest):
    action: Literal["update"] = "update"
    id: str


class DeleteRequest(ServiceRequest):
    action: Literal["delete"] = "delete"
    id: str


REQUEST_MODELS: dict[str, type[ServiceRequest]] = {
    "get": ReadRequest,
    "create": CreateRequest,
    "update": UpdateRequest,
    "delete": DeleteRequest,
}


class JSONAPIDocument(BaseModel):
    """Top-level JSON:API document."""

    data: Optional[Any] = None
    included: Optional[List[JSONAPIResource]] = None
    meta: Optional[Dict[str, Any]] = None


class JSONAPIErrorDocument(BaseModel):
    """Top-level JSON:API error document."""

    errors: List[Dict[str, Any]]
