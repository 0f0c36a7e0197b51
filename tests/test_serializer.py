"""
Tests for sparse fieldset projection and resource rendering.
"""
from jsonapi_service.serializers import JSONAPISerializer

ARTICLE = {
    "type": "article",
    "id": "1",
    "attributes": {"title": "Hello", "body": "Text"},
    "relationships": {"author": {"data": {"type": "user", "id": "1"}}},
}


class TestApplySparseFields:
    """Test field projection."""

    def test_projection(self):
        view = JSONAPISerializer().apply_sparse_fields(ARTICLE, {"article": ["author", "title"]})
        assert view == {
            "type": "article",
            "id": "1",
            "attributes": {"title": "Hello"},
            "relationships": {"author": {"data": {"type": "user", "id": "1"}}},
        }

    def test_projection_is_idempotent(self):
        serializer = JSONAPISerializer()
        fields = {"article": ["title"]}
        once = serializer.apply_sparse_fields(ARTICLE, fields)
        assert serializer.apply_sparse_fields(once, fields) == once

    def test_other_types_unchanged(self):
        view = JSONAPISerializer().apply_sparse_fields(ARTICLE, {"user": ["nickname"]})
        assert view == ARTICLE
        assert view is not ARTICLE

    def test_empty_fieldset_keeps_identity_only(self):
        view = JSONAPISerializer().apply_sparse_fields(ARTICLE, {"article": []})
        assert JSONAPISerializer().to_resource(view) == {"type": "article", "id": "1"}


class TestToResource:
    """Test compact rendering."""

    def test_prunes_empty_maps(self):
        rendered = JSONAPISerializer().to_resource(
            {"type": "tag", "id": "1", "attributes": {}, "relationships": {}, "links": {"self": "/tags/1"}}
        )
        assert rendered == {"type": "tag", "id": "1", "links": {"self": "/tags/1"}}
