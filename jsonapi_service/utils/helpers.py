"""Small helpers shared by the service, adapters and validators."""

from __future__ import annotations

from typing import Any, Iterable, Mapping


class _Undefined:
    """Marker for a value that was never supplied (as opposed to ``None``)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


def reject_undefined(values: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of ``values`` without keys bound to UNDEFINED."""
    return {key: value for key, value in (values or {}).items() if value is not UNDEFINED}


def pick(source: Mapping[str, Any] | None, keys: Iterable[str]) -> dict[str, Any]:
    """Return the subset of ``source`` named by ``keys``, in ``keys`` order."""
    source = source or {}
    return {key: source[key] for key in keys if key in source and source[key] is not UNDEFINED}


def split_csv(value: str) -> list[str]:
    return [item for item in (part.strip() for part in value.split(",")) if item]


def to_int(value: Any) -> int | None:
    """Coerce page input to an int, returning None when it cannot be read."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return None


def resource_key(item: Mapping[str, Any]) -> str:
    """Return the ``id@type`` identity key of a resource or pointer."""
    return f"{item['id']}@{item['type']}"
