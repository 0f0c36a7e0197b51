"""
Tests for query string parsing.
"""
from starlette.datastructures import QueryParams

from jsonapi_service.utils import parse_query_params, resource_key, split_csv, to_int


class TestParseQueryParams:
    """Test mapping URL parameters to query families."""

    def test_bracketed_families(self):
        params = QueryParams("page[limit]=3&page[offset]=6&fields[user]=nickname,boss&filter[title]=x")
        assert parse_query_params(params) == {
            "page": {"limit": "3", "offset": "6"},
            "fields": {"user": "nickname,boss"},
            "filter": {"title": "x"},
        }

    def test_plain_families(self):
        params = QueryParams("include=author.boss,tags&sort=-title")
        assert parse_query_params(params) == {"include": "author.boss,tags", "sort": "-title"}

    def test_bare_page_is_kept_for_rejection(self):
        assert parse_query_params(QueryParams("page=1")) == {"page": "1"}

    def test_bare_key_does_not_replace_bracketed_values(self):
        assert parse_query_params(QueryParams("page[limit]=3&page=1")) == {"page": {"limit": "3"}}

    def test_unknown_parameters_dropped(self):
        assert parse_query_params(QueryParams("foo=1&include=author")) == {"include": "author"}

    def test_plain_mapping(self):
        assert parse_query_params({"page[size]": "4"}) == {"page": {"size": "4"}}


class TestHelpers:
    """Test small value helpers."""

    def test_split_csv(self):
        assert split_csv("title, body,,author") == ["title", "body", "author"]

    def test_to_int(self):
        assert to_int("7") == 7
        assert to_int(2.9) == 2
        assert to_int("2.5") == 2
        assert to_int(" 3.0 ") == 3
        assert to_int("inf") is None
        assert to_int("nan") is None
        assert to_int(float("inf")) is None
        assert to_int("seven") is None
        assert to_int(True) is None
        assert to_int(None) is None

    def test_resource_key(self):
        assert resource_key({"type": "user", "id": "1"}) == "1@user"
