"""Sparse fieldset projection and compact rendering of resource objects."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from jsonapi_service.utils.helpers import pick


class JSONAPISerializer:
    """Project stored resources onto sparse fieldsets and render them."""

    def apply_sparse_fields(
        self,
        resource: Mapping[str, Any],
        fields: Mapping[str, list[str]] | None = None,
    ) -> dict[str, Any]:
        """Return ``resource`` restricted to ``fields[resource["type"]]``.

        Resources whose type has no fieldset are returned unchanged. The
        projection is idempotent.
        """
        field_list = (fields or {}).get(resource["type"])
        if field_list is None:
            return dict(resource)
        return {
            "type": resource["type"],
            "id": resource["id"],
            "attributes": pick(resource.get("attributes"), field_list),
            "relationships": pick(resource.get("relationships"), field_list),
        }

    def to_resource(self, resource: Mapping[str, Any]) -> dict[str, Any]:
        """Render a resource object, pruning empty attribute/relationship maps."""
        rendered: dict[str, Any] = {
            "type": resource["type"],
            "id": resource["id"],
        }
        attributes = resource.get("attributes")
        relationships = resource.get("relationships")
        if attributes:
            rendered["attributes"] = dict(attributes)
        if relationships:
            rendered["relationships"] = dict(relationships)
        for key, value in resource.items():
            if key not in rendered and key not in ("attributes", "relationships"):
                rendered[key] = value
        return rendered

    def to_many(self, resources: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """Render a collection of resource objects."""
        return [self.to_resource(resource) for resource in resources]
