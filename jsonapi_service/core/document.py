"""Compound document construction."""

from typing import Any, Iterable, Mapping

from jsonapi_service.core.errors import JSONAPIError


class JSONAPIDocumentBuilder:
    """Build response documents from rendered resource objects.

    ``included`` and ``meta`` are omitted when empty so that documents stay
    compact.
    """

    def build_single(
        self,
        resource: Mapping[str, Any] | None,
        *,
        included: Iterable[Mapping[str, Any]] | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a document whose primary data is one resource object."""
        document: dict[str, Any] = {
            "data": dict(resource) if resource is not None else None
        }
        return self._finish(document, included, meta)

    def build_collection(
        self,
        resources: Iterable[Mapping[str, Any]],
        *,
        included: Iterable[Mapping[str, Any]] | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a document whose primary data is a list of resources."""
        document: dict[str, Any] = {"data": [dict(item) for item in resources]}
        return self._finish(document, included, meta)

    def build_error(self, error: JSONAPIError) -> dict[str, Any]:
        """Return the error document for a service error."""
        return error.to_document()

    def _finish(
        self,
        document: dict[str, Any],
        included: Iterable[Mapping[str, Any]] | None,
        meta: Mapping[str, Any] | None,
    ) -> dict[str, Any]:
        included_items = [dict(item) for item in included or ()]
        if included_items:
            document["included"] = included_items
        if meta:
            document["meta"] = dict(meta)
        return document
