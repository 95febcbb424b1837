"""
Torii indexer client for reading universe models.
"""

import json
import logging
from dataclasses import fields
from typing import Any, Dict, List, Optional, Union

import aiohttp

from models import ModelRef, ModelsMapping, UniversePlayer, User, model_from_dict, resolve_model

logger = logging.getLogger(__name__)


class ToriiError(Exception):
    """Raised when the indexer rejects a query."""


def _tag_for(model: ModelRef) -> str:
    cls = resolve_model(model)
    return ModelsMapping[cls.__name__].value


def query_name(tag: str) -> str:
    """GraphQL field for a model tag, e.g. `universeUniversePlayerModels`."""
    namespace, _, name = tag.partition("-")
    return f"{namespace}{name}Models"


def _literal(value: Union[int, str]) -> str:
    if isinstance(value, int):
        value = hex(value)
    return json.dumps(value)


def build_model_query(model: ModelRef, where: Optional[Dict[str, Union[int, str]]] = None, limit: int = 100) -> str:
    """Build the GraphQL query that lists records of a model."""
    cls = resolve_model(model)
    args = [f"first: {int(limit)}"]
    if where:
        filters = ", ".join(f"{key}EQ: {_literal(value)}" for key, value in where.items())
        args.append(f"where: {{ {filters} }}")

    selection = " ".join(f.name for f in fields(cls))
    return (
        f"query {{ {query_name(_tag_for(cls))}({', '.join(args)}) "
        f"{{ edges {{ node {{ {selection} }} }} }} }}"
    )


class ToriiClient:
    """Client for a Torii GraphQL endpoint."""

    def __init__(self, graphql_url: str):
        self.graphql_url = graphql_url
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()

    async def _ensure_session(self):
        """Ensure aiohttp session exists."""
        if not self.session:
            self.session = aiohttp.ClientSession()

    async def _post_graphql(self, query: str) -> Dict[str, Any]:
        """Send a query and return its `data` member."""
        await self._ensure_session()
        async with self.session.post(self.graphql_url, json={"query": query}) as response:
            text = await response.text()
            if response.status != 200:
                raise ToriiError(f"Torii query failed: {response.status} - {text}")
            result = await response.json(content_type=None)

        if result.get("errors"):
            messages = "; ".join(str(err.get("message", err)) for err in result["errors"])
            raise ToriiError(f"Torii query failed: {messages}")
        return result.get("data") or {}

    async def get_models(self, model: ModelRef, where: Optional[Dict[str, Union[int, str]]] = None, limit: int = 100) -> List[Any]:
        """Fetch records of a model, decoded into schema dataclasses."""
        cls = resolve_model(model)
        query = build_model_query(cls, where=where, limit=limit)
        data = await self._post_graphql(query)

        connection = data.get(query_name(_tag_for(cls))) or {}
        edges = connection.get("edges") or []
        records = [model_from_dict(cls, edge.get("node") or {}) for edge in edges]
        logger.debug(f"Fetched {len(records)} {cls.__name__} records")
        return records

    async def get_player(self, player_id: Union[int, str]) -> Optional[UniversePlayer]:
        players = await self.get_models(UniversePlayer, where={"id": player_id}, limit=1)
        return players[0] if players else None

    async def get_user(self, owner: str) -> Optional[User]:
        users = await self.get_models(User, where={"owner": owner}, limit=1)
        return users[0] if users else None
