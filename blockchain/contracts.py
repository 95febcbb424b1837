"""
Calldata builders and invocation wrappers for the `game` contract.
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple, Union

from models import NAMESPACE


logger = logging.getLogger(__name__)

GAME_CONTRACT = "game"

# Felt-like argument: an int, a hex/decimal string or an address string
Calldata = Union[int, str]


@dataclass(frozen=True)
class DojoCall:
    """Call descriptor handed to the executor."""
    target: str
    entrypoint: str
    arguments: Tuple[Calldata, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contractName": self.target,
            "entrypoint": self.entrypoint,
            "calldata": list(self.arguments),
        }


@dataclass(frozen=True)
class Operation:
    """A `game` entrypoint and its ordered parameters."""
    name: str
    entrypoint: str
    params: Tuple[str, ...]


class Executor(Protocol):
    async def execute(self, account: Any, call: DojoCall, namespace: str) -> Any:
        ...


def _operation(name: str, *params: str) -> Operation:
    entrypoint = re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()
    return Operation(name=name, entrypoint=entrypoint, params=params)


OPERATIONS: Mapping[str, Operation] = MappingProxyType({
    op.name: op for op in (
        _operation("addCurrency", "player_id", "amount"),
        _operation("assignUser", "player_id", "user_id"),
        _operation("createOrGetUser", "user_address", "username"),
        _operation(
            "createPlayer",
            "player_id", "user_id", "body_type", "skin_color",
            "beard_type", "hair_type", "hair_color",
        ),
        _operation("recordLogin", "player_id"),
        _operation("spendCurrency", "player_id", "amount"),
        _operation(
            "updateAttributes",
            "player_id", "fame", "charisma", "stamina",
            "strength", "agility", "intelligence",
        ),
    )
})

_BY_ENTRYPOINT = {op.entrypoint: op for op in OPERATIONS.values()}


def get_operation(op_name: str) -> Operation:
    """Look up an operation by façade name or entrypoint name."""
    op = OPERATIONS.get(op_name) or _BY_ENTRYPOINT.get(op_name)
    if op is None:
        raise KeyError(f"Unknown game operation: {op_name}")
    return op


def build_call(op_name: str, *args: Calldata) -> DojoCall:
    """Pack arguments for a game entrypoint in declared order.

    Values are passed through untouched; encoding happens in the executor.
    """
    op = get_operation(op_name)
    if len(args) != len(op.params):
        raise TypeError(
            f"{op.name}() takes {len(op.params)} arguments "
            f"({', '.join(op.params)}), got {len(args)}"
        )
    return DojoCall(target=GAME_CONTRACT, entrypoint=op.entrypoint, arguments=tuple(args))


def build_add_currency_calldata(player_id: Calldata, amount: Calldata) -> DojoCall:
    return build_call("addCurrency", player_id, amount)


def build_assign_user_calldata(player_id: Calldata, user_id: Calldata) -> DojoCall:
    return build_call("assignUser", player_id, user_id)


def build_create_or_get_user_calldata(user_address: str, username: Calldata) -> DojoCall:
    return build_call("createOrGetUser", user_address, username)


def build_create_player_calldata(
    player_id: Calldata,
    user_id: Calldata,
    body_type: Calldata,
    skin_color: Calldata,
    beard_type: Calldata,
    hair_type: Calldata,
    hair_color: Calldata,
) -> DojoCall:
    return build_call(
        "createPlayer",
        player_id, user_id, body_type, skin_color, beard_type, hair_type, hair_color,
    )


def build_record_login_calldata(player_id: Calldata) -> DojoCall:
    return build_call("recordLogin", player_id)


def build_spend_currency_calldata(player_id: Calldata, amount: Calldata) -> DojoCall:
    return build_call("spendCurrency", player_id, amount)


def build_update_attributes_calldata(
    player_id: Calldata,
    fame: Calldata,
    charisma: Calldata,
    stamina: Calldata,
    strength: Calldata,
    agility: Calldata,
    intelligence: Calldata,
) -> DojoCall:
    return build_call(
        "updateAttributes",
        player_id, fame, charisma, stamina, strength, agility, intelligence,
    )


class GameContract:
    """Async wrappers around the `game` contract entrypoints."""

    def __init__(self, provider: Executor, namespace: str = NAMESPACE):
        self.provider = provider
        self.namespace = namespace

    async def invoke(self, op_name: str, account: Any, *args: Calldata) -> Any:
        """Build the call for `op_name` and hand it to the executor once.

        Executor failures are logged and re-raised as-is. Unknown operations
        and wrong argument counts raise from `build_call` without logging.
        """
        call = build_call(op_name, *args)
        try:
            return await self.provider.execute(account, call, self.namespace)
        except Exception as e:
            logger.error(f"\033[31m❌ {self.namespace}-{call.target}.{call.entrypoint} failed: {e}\033[0m")
            raise

    async def add_currency(self, account: Any, player_id: Calldata, amount: Calldata) -> Any:
        return await self.invoke("addCurrency", account, player_id, amount)

    async def assign_user(self, account: Any, player_id: Calldata, user_id: Calldata) -> Any:
        return await self.invoke("assignUser", account, player_id, user_id)

    async def create_or_get_user(self, account: Any, user_address: str, username: Calldata) -> Any:
        return await self.invoke("createOrGetUser", account, user_address, username)

    async def create_player(
        self,
        account: Any,
        player_id: Calldata,
        user_id: Calldata,
        body_type: Calldata,
        skin_color: Calldata,
        beard_type: Calldata,
        hair_type: Calldata,
        hair_color: Calldata,
    ) -> Any:
        return await self.invoke(
            "createPlayer", account,
            player_id, user_id, body_type, skin_color, beard_type, hair_type, hair_color,
        )

    async def record_login(self, account: Any, player_id: Calldata) -> Any:
        return await self.invoke("recordLogin", account, player_id)

    async def spend_currency(self, account: Any, player_id: Calldata, amount: Calldata) -> Any:
        return await self.invoke("spendCurrency", account, player_id, amount)

    async def update_attributes(
        self,
        account: Any,
        player_id: Calldata,
        fame: Calldata,
        charisma: Calldata,
        stamina: Calldata,
        strength: Calldata,
        agility: Calldata,
        intelligence: Calldata,
    ) -> Any:
        return await self.invoke(
            "updateAttributes", account,
            player_id, fame, charisma, stamina, strength, agility, intelligence,
        )


@dataclass(frozen=True)
class World:
    """Contract wrappers of a deployed world."""
    game: GameContract


def setup_world(provider: Executor, namespace: Optional[str] = None) -> World:
    """Bind the world's contracts to an executor."""
    return World(game=GameContract(provider, namespace or NAMESPACE))
