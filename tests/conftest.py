"""
Shared test fixtures for the People of History test suite.

Entities are built in the shape returned by Wikidata's wbgetentities so the
extraction code sees realistic claims.
"""

import asyncio

import pytest

from people_of_history.errors import TransportError

# =============================================================================
# Raw entity builders
# =============================================================================


def statement(value, datatype="string"):
    """A claim statement holding ``value``."""
    return {
        "mainsnak": {
            "snaktype": "value",
            "datavalue": {"value": value, "type": datatype},
        },
        "type": "statement",
        "rank": "normal",
    }


def item(qid):
    """An item-valued statement pointing at ``qid``."""
    value = {"entity-type": "item", "id": qid}
    if qid[1:].isdigit():
        value["numeric-id"] = int(qid[1:])
    return statement(value, "wikibase-entityid")


def time_statement(time, precision=11):
    """A time-valued statement such as ``+1769-08-15T00:00:00Z``."""
    return statement(
        {
            "time": time,
            "timezone": 0,
            "before": 0,
            "after": 0,
            "precision": precision,
            "calendarmodel": "http://www.wikidata.org/entity/Q1985727",
        },
        "time",
    )


def no_value():
    """A "no value" statement, which has no datavalue."""
    return {"mainsnak": {"snaktype": "novalue"}, "type": "statement", "rank": "normal"}


def make_entity(
    qid,
    label=None,
    description=None,
    birth=None,
    death=None,
    fathers=(),
    mothers=(),
    children=(),
    image=None,
    enwiki=None,
    human=True,
    instance_of=None,
):
    """Build a raw entity. ``birth``/``death`` are ``(time, precision)`` tuples."""
    claims = {}
    classes = list(instance_of or [])
    if human:
        classes.insert(0, "Q5")
    if classes:
        claims["P31"] = [item(c) for c in classes]
    if birth:
        claims["P569"] = [time_statement(*birth)]
    if death:
        claims["P570"] = [time_statement(*death)]
    if fathers:
        claims["P22"] = [item(f) for f in fathers]
    if mothers:
        claims["P25"] = [item(m) for m in mothers]
    if children:
        claims["P40"] = [item(c) for c in children]
    if image:
        claims["P18"] = [statement(image, "string")]

    entity = {
        "type": "item",
        "id": qid,
        "labels": {"en": {"language": "en", "value": label}} if label else {},
        "descriptions": (
            {"en": {"language": "en", "value": description}} if description else {}
        ),
        "claims": claims,
        "sitelinks": {"enwiki": {"site": "enwiki", "title": enwiki}} if enwiki else {},
    }
    return entity


def hit(qid, label=None, description=None):
    """A wbsearchentities hit."""
    return {"id": qid, "label": label, "description": description}


async def settle(rounds=20):
    """Let scheduled tasks run until they block."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# =============================================================================
# Fake knowledge base
# =============================================================================


class FakeKnowledgeBase:
    """In-memory knowledge base that records every call.

    Setting ``gate`` to an ``asyncio.Event`` holds entity fetches open until
    the event is set.
    """

    def __init__(self, entities=None, hits=None):
        self.entities = {e["id"]: e for e in entities or []}
        self.hits = hits or {}
        self.search_calls = []
        self.entity_calls = []
        self.gate = None
        self.failing_ids = set()
        self.search_error = None
        self.closed = False

    def add(self, *entities):
        for entity in entities:
            self.entities[entity["id"]] = entity

    @property
    def fetched_ids(self):
        return [entity_id for ids, _ in self.entity_calls for entity_id in ids]

    async def search(self, query, limit):
        self.search_calls.append((query, limit))
        if self.search_error:
            raise self.search_error
        return list(self.hits.get(query, []))[:limit]

    async def get_entities(self, ids, props):
        self.entity_calls.append((list(ids), props))
        if self.gate is not None:
            await self.gate.wait()
        if self.failing_ids.intersection(ids):
            raise TransportError("HTTP 503")
        return {i: self.entities[i] for i in ids if i in self.entities}

    async def aclose(self):
        self.closed = True


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def family():
    """Julius Caesar's small family plus a deep line of ancestors of Q100.

    Q100 has two parents and three children; its father's line goes four
    generations up.
    """
    return [
        make_entity(
            "Q1048",
            label="Julius Caesar",
            description="Roman general and dictator",
            birth=("-0100-07-12T00:00:00Z", 11),
            death=("-0044-03-15T00:00:00Z", 11),
            fathers=["Q1220"],
            mothers=["Q229413"],
            children=["Q40846"],
            image="Gaius Iulius Caesar (Vatican Museum).jpg",
            enwiki="Julius Caesar",
        ),
        make_entity("Q1220", label="Gaius Julius Caesar", children=["Q1048"]),
        make_entity("Q229413", label="Aurelia Cotta", children=["Q1048"]),
        make_entity("Q40846", label="Julia", fathers=["Q1048"]),
        make_entity(
            "Q100",
            label="Root",
            fathers=["Q101"],
            mothers=["Q102"],
            children=["Q110", "Q111", "Q112"],
        ),
        make_entity("Q101", label="Father", fathers=["Q201"], mothers=["Q202"]),
        make_entity("Q102", label="Mother"),
        make_entity("Q110", label="Child A"),
        make_entity("Q111", label="Child B"),
        make_entity("Q112", label="Child C"),
        make_entity("Q201", label="Grandfather", fathers=["Q301"]),
        make_entity("Q202", label="Grandmother"),
        make_entity("Q301", label="Great-grandfather", fathers=["Q401"], mothers=["Q402"]),
        make_entity("Q401", label="Great-great-grandfather"),
        make_entity("Q402", label="Great-great-grandmother"),
    ]


@pytest.fixture
def kb(family):
    """A fake knowledge base loaded with the family fixture."""
    return FakeKnowledgeBase(entities=family)
