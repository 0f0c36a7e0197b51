"""Configuration models for the service and its adapters."""

from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jsonapi_service.schemas.declaration import ResourceSchema, coerce_resource_schemas


class PaginationConfig(BaseModel):
    """Pagination strategy and the page keys it reads.

    For ``page_based`` pagination ``limit_key`` names the page size key.
    """

    strategy: Literal["offset_based", "page_based"] = "offset_based"
    offset_key: str = "offset"
    limit_key: str = "limit"
    number_key: str = "number"


class AdapterConfig(BaseModel):
    """Settings shared by every storage adapter."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    validation_error_field: str = "detail"
    validate_relationship_references: bool = True
    resources: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("resources", mode="before")
    @classmethod
    def coerce_resources(cls, value: Any) -> Dict[str, ResourceSchema]:
        return coerce_resource_schemas(value)


class ServiceConfig(BaseModel):
    """Settings of the service entry point."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    validation_error_field: str = "detail"
    validate_relationship_references: bool = True
    resources: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("resources", mode="before")
    @classmethod
    def coerce_resources(cls, value: Any) -> Dict[str, ResourceSchema]:
        return coerce_resource_schemas(value)

    def adapter_config(self) -> AdapterConfig:
        """Return the adapter settings derived from this service config."""
        return AdapterConfig(
            validation_error_field=self.validation_error_field,
            validate_relationship_references=self.validate_relationship_references,
            resources=self.resources,
        )
