"""
Tests for latest/exact version resolution
"""

import pytest

from topic_graph.accessor import TopicAccessor
from topic_graph.exceptions import StoreError

from .fixtures import (
    FailingStore,
    create_accessor,
    create_topic_record,
    versioned_topic,
)


def three_versions():
    return [
        create_topic_record("x", version=1, is_latest=False),
        create_topic_record("x-v3", base_topic_id="x", version=3),
        create_topic_record("x-v2", base_topic_id="x", version=2, is_latest=False),
    ]


class TestResolveTopic:
    @pytest.mark.asyncio
    async def test_exact_version_when_not_latest_only(self):
        accessor = create_accessor(versioned_topic())

        topic = await accessor.resolve_topic("T", only_latest=False)

        assert topic.id == "T"
        assert topic.is_latest is False

    @pytest.mark.asyncio
    async def test_stale_id_redirects_to_latest(self):
        accessor = create_accessor(versioned_topic())

        topic = await accessor.resolve_topic("T", only_latest=True)

        assert topic.id == "T-v2"
        assert topic.version == 2

    @pytest.mark.asyncio
    async def test_latest_id_returned_as_is(self):
        accessor = create_accessor(versioned_topic())

        assert (await accessor.resolve_topic("T-v2")).id == "T-v2"

    @pytest.mark.asyncio
    async def test_missing_topic(self):
        accessor = create_accessor(versioned_topic())

        assert await accessor.resolve_topic("missing") is None
        assert await accessor.resolve_topic("missing", only_latest=False) is None

    @pytest.mark.asyncio
    async def test_no_latest_version_during_flip(self):
        accessor = create_accessor([create_topic_record("x", is_latest=False)])

        assert await accessor.resolve_topic("x") is None


class TestResolveByBaseId:
    @pytest.mark.asyncio
    async def test_latest(self):
        accessor = create_accessor(three_versions())

        assert (await accessor.resolve_by_base_id("x")).id == "x-v3"

    @pytest.mark.asyncio
    async def test_highest_version_without_latest_filter(self):
        records = three_versions()
        records[1]["is_latest"] = False
        accessor = create_accessor(records)

        assert await accessor.resolve_by_base_id("x") is None
        assert (await accessor.resolve_by_base_id("x", only_latest=False)).id == "x-v3"


class TestCollectionQueries:
    @pytest.mark.asyncio
    async def test_find_children_filters_latest(self):
        records = [
            create_topic_record("p"),
            create_topic_record("c1", parent_topic_id="p"),
            create_topic_record("c1-old", parent_topic_id="p", is_latest=False),
        ]
        accessor = create_accessor(records)

        assert [t.id for t in await accessor.find_children("p")] == ["c1"]
        assert [t.id for t in await accessor.find_children("p", only_latest=False)] == [
            "c1", "c1-old"
        ]
        assert await accessor.has_children("p") is True
        assert await accessor.has_children("c1") is False

    @pytest.mark.asyncio
    async def test_find_roots(self):
        records = [
            create_topic_record("r1"),
            create_topic_record("r2", is_latest=False),
            create_topic_record("child", parent_topic_id="r1"),
        ]
        accessor = create_accessor(records)

        assert [t.id for t in await accessor.find_roots()] == ["r1"]
        assert [t.id for t in await accessor.find_roots(only_latest=False)] == ["r1", "r2"]

    @pytest.mark.asyncio
    async def test_list_versions_sorted(self):
        accessor = create_accessor(three_versions())

        versions = await accessor.list_versions("x")

        assert [t.version for t in versions] == [1, 2, 3]


class TestStoreFailures:
    @pytest.mark.asyncio
    async def test_backend_error_wrapped(self):
        store = FailingStore(fail_ids={"x"})
        accessor = TopicAccessor(store)

        with pytest.raises(StoreError) as exc_info:
            await accessor.resolve_topic("x")

        assert exc_info.value.operation == "resolve_topic"
        assert exc_info.value.topic_id == "x"

    @pytest.mark.asyncio
    async def test_corrupt_record_wrapped(self):
        accessor = create_accessor([{"id": "broken", "version": "not-a-number"}])

        with pytest.raises(StoreError):
            await accessor.get_exact("broken")
