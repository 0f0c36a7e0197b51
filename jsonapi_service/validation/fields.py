"""Declarative field schema validation for resource payloads."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Callable, Mapping

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from jsonapi_service.core.errors import ErrorFactory, ValidationError
from jsonapi_service.utils.helpers import UNDEFINED

ATTRIBUTES = "attributes"
RELATIONSHIPS = "relationships"

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_BOUND_CHECKS: tuple[tuple[str, Callable[[Any, Any], bool]], ...] = (
    ("min_length", lambda value, bound: len(value) < bound),
    ("max_length", lambda value, bound: len(value) > bound),
    ("min", lambda value, bound: value < bound),
    ("max", lambda value, bound: value > bound),
)

DEFAULT_MESSAGES: dict[str, str | Callable[[Any], str]] = {
    "required": "Field is required",
    "read_only": "Field is read only",
    "type": "Invalid field type",
    "has_one": "Relationship not valid",
    "has_many": "Relationship not valid",
    "email": "Field is not valid email",
    "one_of": "Field does not equal any of predefined values",
    "pattern": "Field does not match required pattern",
    "max_length": lambda config: f"Field maximum length is {config}",
    "min_length": lambda config: f"Field minimum length is {config}",
    "min": lambda config: f"Field minimum value is {config}",
    "max": lambda config: f"Field maximum value is {config}",
    "validator": "Field is not valid",
    "undeclared": lambda field: f'Field "{field}" is not declared',
}


@lru_cache(maxsize=None)
def _type_adapter(field_type: Any) -> TypeAdapter:
    return TypeAdapter(field_type)


def _is_valid_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return (isinstance(value, str) and bool(value)) or isinstance(value, int)


def _is_pointer_to(value: Any, target_type: str) -> bool:
    return (
        isinstance(value, Mapping)
        and _is_valid_id(value.get("id"))
        and value.get("type") == target_type
    )


def _relationship_value(entry: Any) -> Any:
    if isinstance(entry, Mapping) and "data" in entry:
        return entry["data"]
    return entry


def _payload_domain(data: Any, domain: str) -> dict[str, Any]:
    if isinstance(data, Mapping):
        values = data.get(domain)
    else:
        values = getattr(data, domain, None)
    return dict(values or {})


class FieldSchemaValidator:
    """Validate attributes and relationships against field declarations.

    ``fields_schema`` has the shape::

        {
            "attributes": {"title": {"type": str, "min_length": 2}},
            "relationships": {"author": {"has_one": "user", "nullable": True}},
        }

    Declaration order is preserved in the reported errors and each field
    reports at most one error (the first failing rule).
    """

    def __init__(self, fields_schema: Mapping[str, Any] | None) -> None:
        fields_schema = fields_schema or {}
        self.declared = bool(fields_schema)
        self.attributes: dict[str, dict[str, Any]] = dict(fields_schema.get(ATTRIBUTES) or {})
        self.relationships: dict[str, dict[str, Any]] = dict(
            fields_schema.get(RELATIONSHIPS) or {}
        )

    def default_fields(self) -> dict[str, dict[str, Any]]:
        """Return declared defaults in payload shape."""
        return {
            ATTRIBUTES: {
                name: declaration["default"]
                for name, declaration in self.attributes.items()
                if "default" in declaration
            },
            RELATIONSHIPS: {
                name: {"data": declaration["default"]}
                for name, declaration in self.relationships.items()
                if "default" in declaration
            },
        }

    def validate(
        self,
        data: Any,
        error: ValidationError,
        *,
        partial: bool = False,
        messages: Mapping[str, Mapping[str, str]] | None = None,
    ) -> ValidationError:
        """Append one error per invalid field of ``data`` to ``error``."""
        if not self.declared:
            return error
        messages = messages or {}

        for domain, declarations, add in (
            (ATTRIBUTES, self.attributes, error.add_attribute_error),
            (RELATIONSHIPS, self.relationships, error.add_relationship_error),
        ):
            values = _payload_domain(data, domain)
            for name, declaration in declarations.items():
                value = values.get(name, UNDEFINED)
                if domain == RELATIONSHIPS and value is not UNDEFINED:
                    value = _relationship_value(value)
                rule = self._failing_rule(value, declaration, partial=partial)
                if rule is not None:
                    add(name, self._message(name, rule, declaration, messages))
            for name in values:
                if name not in declarations:
                    add(name, self._message(name, "undeclared", {}, messages))

        return error

    def _failing_rule(
        self, value: Any, declaration: Mapping[str, Any], *, partial: bool
    ) -> str | None:
        if value is UNDEFINED:
            if declaration.get("required") and not partial:
                return "required"
            return None

        if declaration.get("read_only"):
            return "read_only"

        if value is None:
            nullable = declaration.get("nullable")
            if nullable is None:
                nullable = "default" in declaration and declaration["default"] is None
            if nullable:
                return None
            if "has_one" in declaration:
                return "has_one"
            if "has_many" in declaration:
                return "has_many"
            return "type"

        if "has_one" in declaration:
            if isinstance(value, list) or not _is_pointer_to(value, declaration["has_one"]):
                return "has_one"
            return None

        if "has_many" in declaration:
            target = declaration["has_many"]
            if not isinstance(value, list) or not all(
                _is_pointer_to(item, target) for item in value
            ):
                return "has_many"
            return None

        if "type" in declaration:
            try:
                _type_adapter(declaration["type"]).validate_python(value, strict=True)
            except PydanticValidationError:
                return "type"

        for rule, check in _BOUND_CHECKS:
            if rule not in declaration:
                continue
            try:
                if check(value, declaration[rule]):
                    return rule
            except TypeError:
                # value has no length or is not comparable with the bound
                return rule
        if "pattern" in declaration and not re.search(declaration["pattern"], str(value)):
            return "pattern"
        if declaration.get("email") and not EMAIL_PATTERN.match(str(value)):
            return "email"
        if "one_of" in declaration and value not in declaration["one_of"]:
            return "one_of"
        if "validator" in declaration and not declaration["validator"](value):
            return "validator"
        return None

    def _message(
        self,
        name: str,
        rule: str,
        declaration: Mapping[str, Any],
        messages: Mapping[str, Mapping[str, str]],
    ) -> str:
        custom = messages.get(name, {}).get(rule)
        if custom:
            return custom
        message = DEFAULT_MESSAGES[rule]
        if callable(message):
            return message(name if rule == "undeclared" else declaration.get(rule))
        return message


class ResourceValidator:
    """Validation error collector handed to schema ``validate`` hooks.

    Field validation and ad-hoc checks append to the same error set; nothing
    is raised until :meth:`report`.
    """

    def __init__(
        self,
        schema_validator: FieldSchemaValidator,
        error_factory: ErrorFactory | None = None,
        *,
        action: str = "create",
    ) -> None:
        self.schema_validator = schema_validator
        self.error = (error_factory or ErrorFactory()).validation_error()
        self.action = action

    @property
    def errors(self) -> list[dict[str, Any]]:
        return self.error.errors

    def validate_fields(
        self,
        data: Any,
        *,
        messages: Mapping[str, Mapping[str, str]] | None = None,
        partial: bool | None = None,
    ) -> ResourceValidator:
        """Validate ``data`` against the field schema, collecting errors."""
        if partial is None:
            partial = self.action == "update"
        self.schema_validator.validate(data, self.error, partial=partial, messages=messages)
        return self

    def add_attribute_error(self, attribute: str, message: str, **extra: Any) -> ResourceValidator:
        self.error.add_attribute_error(attribute, message, **extra)
        return self

    def add_relationship_error(
        self, relationship: str, message: str, **extra: Any
    ) -> ResourceValidator:
        self.error.add_relationship_error(relationship, message, **extra)
        return self

    def report(self) -> None:
        """Raise the collected validation error, if any."""
        self.error.report()
