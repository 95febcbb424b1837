"""
Tests for the Torii indexer client.
"""

import json
from unittest.mock import AsyncMock

import pytest

from models import UniversePlayer, User
from torii_client import ToriiClient, ToriiError, build_model_query, query_name


def test_query_name():
    assert query_name("universe-UniversePlayer") == "universeUniversePlayerModels"
    assert query_name("universe-User") == "universeUserModels"


def test_build_model_query_selects_all_fields():
    query = build_model_query(User, limit=5)
    assert query == (
        "query { universeUserModels(first: 5) "
        "{ edges { node { owner username created_at } } } }"
    )


def test_build_model_query_with_filter():
    query = build_model_query("UniversePlayer", where={"id": 42}, limit=1)
    assert 'universeUniversePlayerModels(first: 1, where: { idEQ: "0x2a" })' in query
    assert "hair_color" in query


@pytest.mark.asyncio
async def test_get_player():
    client = ToriiClient("http://torii/graphql")
    client._post_graphql = AsyncMock(return_value={
        "universeUniversePlayerModels": {
            "edges": [{"node": {"id": "0x2a", "user_id": "0x3", "fame": 12, "universe_currency": "0x64"}}],
        },
    })

    player = await client.get_player(42)

    assert player == UniversePlayer(id=42, user_id=3, fame=12, universe_currency=100)
    query = client._post_graphql.await_args.args[0]
    assert 'idEQ: "0x2a"' in query


@pytest.mark.asyncio
async def test_get_user_missing():
    client = ToriiClient("http://torii/graphql")
    client._post_graphql = AsyncMock(return_value={"universeUserModels": {"edges": []}})

    assert await client.get_user("0x123") is None


@pytest.mark.asyncio
async def test_get_models_lists_records():
    client = ToriiClient("http://torii/graphql")
    client._post_graphql = AsyncMock(return_value={
        "universeUserModels": {
            "edges": [
                {"node": {"owner": "0x1", "username": "0x616c696365", "created_at": 10}},
                {"node": {"owner": "0x2", "username": "0x626f62", "created_at": 11}},
            ],
        },
    })

    users = await client.get_models("universe-User")

    assert [u.owner for u in users] == ["0x1", "0x2"]
    assert users[1].username == 0x626F62


class FakeResponse:
    def __init__(self, status, payload):
        self.status = status
        self.payload = payload

    async def text(self):
        return json.dumps(self.payload)

    async def json(self, content_type="application/json"):
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.posts = []

    def post(self, url, json=None):
        self.posts.append((url, json))
        return self.response


def _client_with(status, payload):
    client = ToriiClient("http://torii/graphql")
    client.session = FakeSession(FakeResponse(status, payload))
    return client


@pytest.mark.asyncio
async def test_post_graphql_unwraps_data():
    client = _client_with(200, {"data": {"universeUserModels": {"edges": []}}})

    data = await client._post_graphql("query { x }")

    assert data == {"universeUserModels": {"edges": []}}
    assert client.session.posts == [("http://torii/graphql", {"query": "query { x }"})]


@pytest.mark.asyncio
async def test_post_graphql_missing_data():
    client = _client_with(200, {"data": None})
    assert await client._post_graphql("query { x }") == {}


@pytest.mark.asyncio
async def test_non_200_status_raises():
    client = _client_with(500, {"message": "internal"})

    with pytest.raises(ToriiError, match="500"):
        await client.get_player(1)


@pytest.mark.asyncio
async def test_graphql_errors_raise():
    client = _client_with(200, {"data": None, "errors": [{"message": "Unknown field"}, {"message": "bad filter"}]})

    with pytest.raises(ToriiError, match="Unknown field; bad filter"):
        await client.get_user("0x1")


@pytest.mark.asyncio
async def test_get_player_through_session():
    client = _client_with(200, {
        "data": {"universeUniversePlayerModels": {"edges": [{"node": {"id": "0x7", "stamina": "0x5"}}]}},
    })

    player = await client.get_player(7)

    assert player == UniversePlayer(id=7, stamina=5)
    assert 'idEQ: "0x7"' in client.session.posts[0][1]["query"]


def test_filter_values_are_escaped():
    query = build_model_query(User, where={"owner": 'ab"c'}, limit=1)
    assert 'ownerEQ: "ab\\"c"' in query
