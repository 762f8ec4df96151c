"""
Tests for entity resolution (people_of_history/agents/resolve_entity.py)

Tests the session cache: one fetch per identifier, shared in-flight
resolutions, cached NotFound and cancellation.
"""

import asyncio

import pytest

from people_of_history.agents import EntityResolver
from people_of_history.cancellation import CancellationToken
from people_of_history.errors import Cancelled, NotFound, TransportError
from tests.conftest import settle


@pytest.fixture
def resolver(kb):
    return EntityResolver(kb)


class TestResolve:
    """Test resolving and normalizing people."""

    @pytest.mark.asyncio
    async def test_resolves_person(self, resolver, kb):
        person = await resolver.resolve("Q1048")

        assert person.id == "Q1048"
        assert person.label == "Julius Caesar"
        assert person.description == "Roman general and dictator"
        assert person.birth_year == -100
        assert person.death_year == -44
        assert person.age == 56
        assert person.parent_ids == ["Q1220", "Q229413"]
        assert person.child_ids == ["Q40846"]
        assert person.wikipedia_url == "https://en.wikipedia.org/wiki/Julius_Caesar"
        assert kb.entity_calls == [(["Q1048"], "labels|descriptions|claims|sitelinks")]

    @pytest.mark.asyncio
    async def test_cache_hit_skips_fetch(self, resolver, kb):
        first = await resolver.resolve("Q1048")
        second = await resolver.resolve("Q1048")

        assert first == second
        assert kb.fetched_ids == ["Q1048"]
        assert resolver.peek("Q1048") == first

    @pytest.mark.asyncio
    async def test_image_url_builder(self, kb):
        resolver = EntityResolver(kb, image_url_for=lambda name: f"https://img/{name}")
        person = await resolver.resolve("Q1048")
        assert person.image_url == "https://img/Gaius Iulius Caesar (Vatican Museum).jpg"

    @pytest.mark.asyncio
    async def test_concurrent_resolutions_share_one_fetch(self, resolver, kb):
        kb.gate = asyncio.Event()
        first = asyncio.create_task(resolver.resolve("Q1048"))
        second = asyncio.create_task(resolver.resolve("Q1048"))
        await settle()
        kb.gate.set()

        a, b = await asyncio.gather(first, second)

        assert a == b
        assert kb.fetched_ids == ["Q1048"]

    def test_peek_unknown(self, resolver):
        assert resolver.peek("Q1048") is None


class TestFailures:
    """Test NotFound and TransportError handling."""

    @pytest.mark.asyncio
    async def test_not_found_is_cached(self, resolver, kb):
        with pytest.raises(NotFound):
            await resolver.resolve("Q999")
        with pytest.raises(NotFound):
            await resolver.resolve("Q999")

        assert kb.fetched_ids == ["Q999"]
        assert resolver.peek("Q999") is None

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found_without_fetch(self, resolver, kb):
        with pytest.raises(NotFound):
            await resolver.resolve("Charlemagne")
        assert kb.entity_calls == []

    @pytest.mark.asyncio
    async def test_lookalike_id_is_not_found_without_fetch(self, resolver, kb):
        for entity_id in ["Q1048\n", "Q\u0661"]:
            with pytest.raises(NotFound):
                await resolver.resolve(entity_id)
        assert kb.entity_calls == []

    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self, resolver, kb):
        kb.failing_ids = {"Q1048"}
        with pytest.raises(TransportError):
            await resolver.resolve("Q1048")
        await settle()
        assert "Q1048" not in resolver.cache

        kb.failing_ids = set()
        person = await resolver.resolve("Q1048")

        assert person.label == "Julius Caesar"
        assert kb.fetched_ids == ["Q1048", "Q1048"]


class TestCancellation:
    """Test cancellation of in-flight resolutions."""

    @pytest.mark.asyncio
    async def test_cancelled_resolution_leaves_no_entry(self, resolver, kb):
        kb.gate = asyncio.Event()
        token = CancellationToken()
        task = asyncio.create_task(resolver.resolve("Q1048", token))
        await settle()
        assert "Q1048" in resolver.cache

        token.cancel()
        with pytest.raises(Cancelled):
            await task
        await settle()

        assert "Q1048" not in resolver.cache

        kb.gate.set()
        person = await resolver.resolve("Q1048")
        assert person.label == "Julius Caesar"
        assert kb.fetched_ids == ["Q1048", "Q1048"]

    @pytest.mark.asyncio
    async def test_already_cancelled_token(self, resolver, kb):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(Cancelled):
            await resolver.resolve("Q1048", token)
        assert kb.entity_calls == []

    @pytest.mark.asyncio
    async def test_other_waiter_still_resolves(self, resolver, kb):
        kb.gate = asyncio.Event()
        token = CancellationToken()
        cancelled = asyncio.create_task(resolver.resolve("Q1048", token))
        surviving = asyncio.create_task(resolver.resolve("Q1048"))
        await settle()

        token.cancel()
        with pytest.raises(Cancelled):
            await cancelled
        kb.gate.set()
        person = await surviving

        assert person.label == "Julius Caesar"
        assert kb.fetched_ids == ["Q1048"]
        assert resolver.peek("Q1048") == person

    @pytest.mark.asyncio
    async def test_cancel_after_completion_keeps_entry(self, resolver):
        token = CancellationToken()
        person = await resolver.resolve("Q1048", token)
        token.cancel()
        assert resolver.peek("Q1048") == person
