"""
Tests for the undirected neighbor relation
"""

import pytest

from topic_graph.neighbors import NeighborResolver

from .fixtures import create_accessor, create_topic_record, versioned_topic


def resolver_for(records) -> NeighborResolver:
    return NeighborResolver(create_accessor(records))


class TestNeighbors:
    @pytest.mark.asyncio
    async def test_parent_first_then_children_in_store_order(self):
        records = [
            create_topic_record("gp"),
            create_topic_record("p", parent_topic_id="gp"),
            create_topic_record("c2", parent_topic_id="p"),
            create_topic_record("c1", parent_topic_id="p"),
        ]
        resolver = resolver_for(records)
        topic = await resolver.accessor.resolve_topic("p")

        neighbors = await resolver.neighbors(topic)

        assert [t.id for t in neighbors] == ["gp", "c2", "c1"]

    @pytest.mark.asyncio
    async def test_root_has_only_children(self):
        resolver = resolver_for([create_topic_record("r"), create_topic_record("c", parent_topic_id="r")])
        topic = await resolver.accessor.resolve_topic("r")

        assert [t.id for t in await resolver.neighbors(topic)] == ["c"]

    @pytest.mark.asyncio
    async def test_parent_referenced_by_base_id_resolves_to_latest(self):
        resolver = resolver_for(versioned_topic())
        child = await resolver.accessor.resolve_topic("C")

        parent = await resolver.parent_of(child)

        assert parent.id == "T-v2"

    @pytest.mark.asyncio
    async def test_parent_falls_back_to_base_id_when_not_a_version_id(self):
        # base id "B" no longer exists as a version id
        records = [
            create_topic_record("B-v2", base_topic_id="B", version=2),
            create_topic_record("kid", parent_topic_id="B"),
        ]
        resolver = resolver_for(records)
        kid = await resolver.accessor.resolve_topic("kid")

        assert (await resolver.parent_of(kid)).id == "B-v2"
        assert (await resolver.parent_of(kid, only_latest=False)).id == "B-v2"

    @pytest.mark.asyncio
    async def test_missing_parent_is_skipped(self):
        resolver = resolver_for([create_topic_record("orphan", parent_topic_id="gone")])
        orphan = await resolver.accessor.resolve_topic("orphan")

        assert await resolver.neighbors(orphan) == []

    @pytest.mark.asyncio
    async def test_children_pointing_at_version_id_are_merged(self):
        records = [
            create_topic_record("T", is_latest=False),
            create_topic_record("T-v2", base_topic_id="T", version=2),
            create_topic_record("by-base", parent_topic_id="T"),
            create_topic_record("by-version", parent_topic_id="T-v2"),
        ]
        resolver = resolver_for(records)
        topic = await resolver.accessor.resolve_topic("T-v2")

        neighbors = await resolver.neighbors(topic)

        assert [t.id for t in neighbors] == ["by-base", "by-version"]

    @pytest.mark.asyncio
    async def test_children_filtered_by_latest(self):
        records = [
            create_topic_record("p"),
            create_topic_record("c", parent_topic_id="p", is_latest=False),
            create_topic_record("c-v2", base_topic_id="c", version=2, parent_topic_id="p"),
        ]
        resolver = resolver_for(records)
        parent = await resolver.accessor.resolve_topic("p")

        assert [t.id for t in await resolver.neighbors(parent)] == ["c-v2"]
        assert [t.id for t in await resolver.neighbors(parent, only_latest=False)] == ["c", "c-v2"]

    @pytest.mark.asyncio
    async def test_duplicates_removed(self):
        # a parent that is also a child (two-node cycle) appears once
        records = [
            create_topic_record("a", parent_topic_id="b"),
            create_topic_record("b", parent_topic_id="a"),
        ]
        resolver = resolver_for(records)
        a = await resolver.accessor.resolve_topic("a")

        assert [t.id for t in await resolver.neighbors(a)] == ["b"]
