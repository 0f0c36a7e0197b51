"""
Tests for level-by-level include resolution.
"""
from jsonapi_service import MemoryAdapter
from jsonapi_service.core.included import build_included, collect_wanted


def pointer(resource_type, resource_id):
    return {"type": resource_type, "id": resource_id}


class CountingAdapter(MemoryAdapter):
    """Memory adapter recording every collection fetch."""

    def initialize(self):
        super().initialize()
        self.fetches = []

    async def get_resource_collection(self, resource_type, ids, query, context):
        self.fetches.append((resource_type, list(ids)))
        return await super().get_resource_collection(resource_type, ids, query, context)


def keys(resources):
    return [f"{item['id']}@{item['type']}" for item in resources]


class TestCollectWanted:
    """Test worklist construction for one level."""

    resources = [
        {
            "type": "article",
            "id": "1",
            "relationships": {
                "author": {"data": pointer("user", "1")},
                "tags": {"data": [pointer("tag", "1"), pointer("tag", "2")]},
            },
        },
        {
            "type": "article",
            "id": "2",
            "relationships": {
                "author": {"data": pointer("user", "1")},
                "editor": {"data": None},
                "tags": {"data": [pointer("tag", "2"), pointer("tag", "3")]},
            },
        },
    ]

    def test_groups_and_deduplicates_by_type(self):
        assert collect_wanted(self.resources, None, set()) == {
            "user": ["1"],
            "tag": ["1", "2", "3"],
        }

    def test_only_first_segments_are_followed(self):
        assert collect_wanted(self.resources, [["author", "boss"]], set()) == {"user": ["1"]}

    def test_found_keys_are_skipped(self):
        assert collect_wanted(self.resources, [["tags"]], {"2@tag"}) == {"tag": ["1", "3"]}

    def test_no_paths_means_nothing_wanted(self):
        assert collect_wanted(self.resources, [], set()) == {}


class TestBuildIncluded:
    """Test the full include walk."""

    async def test_one_fetch_per_type_and_level(self, resource_schemas):
        adapter = CountingAdapter(resources=resource_schemas)
        articles = await adapter.get_resource_collection("article", ["1", "2"], None, None)
        adapter.fetches.clear()

        included = await build_included(
            adapter, articles, include=["author.boss", "tags"], fields=None, query=None
        )

        assert keys(included) == ["1@user", "1@tag", "2@tag", "3@tag", "2@user"]
        assert adapter.fetches == [
            ("user", ["1"]),
            ("tag", ["1", "2", "3"]),
            ("user", ["2"]),
        ]

    async def test_cycles_terminate_without_include(self, resource_schemas):
        adapter = CountingAdapter(resources=resource_schemas)
        users = await adapter.get_resource_collection("user", ["2"], None, None)

        included = await build_included(adapter, users, include=None, fields=None, query=None)

        assert included == []

    async def test_primary_resources_are_never_included(self, resource_schemas):
        adapter = CountingAdapter(resources=resource_schemas)
        users = await adapter.get_resource_collection("user", ["1", "2"], None, None)

        included = await build_included(
            adapter, users, include=["boss.boss.boss"], fields=None, query=None
        )

        assert included == []

    async def test_fields_project_included_resources(self, resource_schemas):
        adapter = CountingAdapter(resources=resource_schemas)
        articles = await adapter.get_resource_collection("article", ["1"], None, None)

        included = await build_included(
            adapter, articles, include=["author"], fields={"user": ["email"]}, query=None
        )

        assert included == [
            {
                "type": "user",
                "id": "1",
                "attributes": {"email": "testUser1@gmail.com"},
                "relationships": {},
            }
        ]

    async def test_dangling_include_path(self, resource_schemas):
        adapter = CountingAdapter(resources=resource_schemas)
        tags = await adapter.get_resource_collection("tag", ["1"], None, None)

        included = await build_included(adapter, tags, include=["owner"], fields=None, query=None)

        assert included == []
        assert adapter.fetches == [("tag", ["1"])]
