"""
Tests for the Dojo executor and Starknet helpers.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starknet_py.constants import FIELD_PRIME
from starknet_py.hash.selector import get_selector_from_name

from blockchain import (
    CalldataError,
    DojoProvider,
    ExecutionResult,
    ManifestError,
    build_call,
    decode_username,
    encode_username,
    load_manifest,
    setup_world,
    to_felt,
)


GAME_ADDRESS = "0x0163d45d352d9563b810fc820cd52d1282c5f8c8e0b4d66ecc88853b3da1f34d"

MANIFEST = {
    "world": {"address": "0x1"},
    "contracts": [
        {"address": GAME_ADDRESS, "tag": "universe-game", "systems": ["create_player"]},
        {"address": "0x99", "tag": "other-game"},
    ],
}


def _account(tx_hash=0xABC, receipt="receipt"):
    account = MagicMock()
    account.execute_v3 = AsyncMock(return_value=SimpleNamespace(transaction_hash=tx_hash))
    account.client.wait_for_tx = AsyncMock(return_value=receipt)
    return account


@pytest.mark.parametrize(
    "value, expected",
    [(5, 5), ("0x1f", 31), ("0X1F", 31), ("42", 42), (" 7 ", 7), (FIELD_PRIME - 1, FIELD_PRIME - 1)],
)
def test_to_felt(value, expected):
    assert to_felt(value) == expected


@pytest.mark.parametrize("value", [-1, FIELD_PRIME, "alice", "0xzz", True, 1.5, None])
def test_to_felt_rejects(value):
    with pytest.raises(CalldataError):
        to_felt(value)


def test_username_roundtrip():
    felt = encode_username("alice")
    assert felt == 0x616C696365
    assert decode_username(felt) == "alice"


def test_username_too_long():
    with pytest.raises(CalldataError):
        encode_username("x" * 40)


def test_contract_address_resolution():
    provider = DojoProvider(MANIFEST)
    assert provider.contract_address("universe", "game") == int(GAME_ADDRESS, 16)
    assert provider.contract_address("other", "game") == 0x99
    with pytest.raises(ManifestError):
        provider.contract_address("universe", "market")


def test_to_call():
    provider = DojoProvider(MANIFEST)
    call = provider.to_call(build_call("createOrGetUser", "0x123", "0x616c696365"), "universe")
    assert call.to_addr == int(GAME_ADDRESS, 16)
    assert call.selector == get_selector_from_name("create_or_get_user")
    assert list(call.calldata) == [0x123, 0x616C696365]


@pytest.mark.asyncio
async def test_execute_waits_for_receipt():
    provider = DojoProvider(MANIFEST)
    account = _account()

    result = await provider.execute(account, build_call("recordLogin", 42), "universe")

    assert result == ExecutionResult(transaction_hash=0xABC, receipt="receipt")
    assert result.transaction_hash_hex == "0xabc"
    sent = account.execute_v3.await_args.kwargs["calls"]
    assert len(sent) == 1
    assert list(sent[0].calldata) == [42]
    account.client.wait_for_tx.assert_awaited_once_with(0xABC)


@pytest.mark.asyncio
async def test_execute_without_waiting():
    provider = DojoProvider(MANIFEST, wait_for_acceptance=False)
    account = _account()

    result = await provider.execute(account, build_call("recordLogin", 42), "universe")

    assert result.receipt is None
    account.client.wait_for_tx.assert_not_awaited()


@pytest.mark.asyncio
async def test_invalid_calldata_never_reaches_the_account():
    world = setup_world(DojoProvider(MANIFEST))
    account = _account()

    with pytest.raises(CalldataError):
        await world.game.add_currency(account, 1, -5)

    account.execute_v3.assert_not_awaited()


@pytest.mark.asyncio
async def test_account_error_propagates():
    error = RuntimeError("insufficient balance")
    account = _account()
    account.execute_v3.side_effect = error
    world = setup_world(DojoProvider(MANIFEST))

    with pytest.raises(RuntimeError) as exc_info:
        await world.game.spend_currency(account, 1, 100)

    assert exc_info.value is error


def test_load_manifest(tmp_path):
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps(MANIFEST))
    assert load_manifest(path) == MANIFEST


def test_load_manifest_errors(tmp_path):
    with pytest.raises(ManifestError):
        load_manifest(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"world": {}}))
    with pytest.raises(ManifestError):
        load_manifest(bad)
