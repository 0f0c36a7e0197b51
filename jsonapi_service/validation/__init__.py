"""Field schema validation."""

from .fields import FieldSchemaValidator, ResourceValidator

__all__ = ["FieldSchemaValidator", "ResourceValidator"]
