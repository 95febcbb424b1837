"""
Dojo contract executor built on starknet.py.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from starknet_py.cairo.felt import decode_shortstring, encode_shortstring
from starknet_py.constants import FIELD_PRIME
from starknet_py.hash.selector import get_selector_from_name
from starknet_py.net.account.account import Account
from starknet_py.net.client_models import Call

from .contracts import DojoCall


logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when a contract cannot be resolved from the manifest."""


class CalldataError(ValueError):
    """Raised when an argument cannot be encoded as a felt."""


@dataclass
class ExecutionResult:
    """Outcome of a submitted invoke transaction."""
    transaction_hash: int
    receipt: Optional[Any] = None

    @property
    def transaction_hash_hex(self) -> str:
        return hex(self.transaction_hash)


def to_felt(value: Any) -> int:
    """Normalise an int, hex string or decimal string to a felt."""
    if isinstance(value, bool):
        raise CalldataError(f"Booleans are not valid calldata: {value!r}")
    if isinstance(value, int):
        felt = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            felt = int(text, 16) if text.lower().startswith("0x") else int(text, 10)
        except ValueError:
            raise CalldataError(f"Not a numeric calldata value: {value!r}") from None
    else:
        raise CalldataError(f"Unsupported calldata type {type(value).__name__}: {value!r}")

    if felt < 0 or felt >= FIELD_PRIME:
        raise CalldataError(f"Value out of felt range: {value!r}")
    return felt


def encode_username(username: str) -> int:
    """Encode a username as a Cairo short string."""
    try:
        return encode_shortstring(username)
    except ValueError as e:
        raise CalldataError(f"Invalid username {username!r}: {e}") from e


def decode_username(felt: int) -> str:
    return decode_shortstring(felt)


class DojoProvider:
    """Executes `DojoCall`s against contracts listed in a Dojo manifest."""

    def __init__(self, manifest: Dict[str, Any], wait_for_acceptance: bool = True):
        self.manifest = manifest
        self.wait_for_acceptance = wait_for_acceptance
        self._addresses: Dict[str, int] = {}
        for contract in manifest.get("contracts", []):
            tag = contract.get("tag")
            address = contract.get("address")
            if tag and address is not None:
                self._addresses[tag] = to_felt(address)

    def contract_address(self, namespace: str, contract_name: str) -> int:
        """Resolve `<namespace>-<contract_name>` to a deployed address."""
        tag = f"{namespace}-{contract_name}"
        try:
            return self._addresses[tag]
        except KeyError:
            raise ManifestError(f"Contract {tag} not found in manifest") from None

    def to_call(self, call: DojoCall, namespace: str) -> Call:
        """Turn a call descriptor into a starknet.py `Call`."""
        calldata: List[int] = [to_felt(arg) for arg in call.arguments]
        return Call(
            to_addr=self.contract_address(namespace, call.target),
            selector=get_selector_from_name(call.entrypoint),
            calldata=calldata,
        )

    async def execute(self, account: Account, call: DojoCall, namespace: str) -> ExecutionResult:
        """Sign and submit `call` with `account`.

        Errors propagate to the caller untouched.
        """
        starknet_call = self.to_call(call, namespace)
        logger.info(
            f"Executing {namespace}-{call.target}.{call.entrypoint} "
            f"with {len(starknet_call.calldata)} felts"
        )
        response = await account.execute_v3(calls=[starknet_call], auto_estimate=True)
        tx_hash = response.transaction_hash
        logger.info(f"\033[92m📤 Sent transaction {hex(tx_hash)}\033[0m")

        receipt = None
        if self.wait_for_acceptance:
            receipt = await account.client.wait_for_tx(tx_hash)
            logger.info(f"\033[92m✅ Transaction {hex(tx_hash)} accepted\033[0m")
        return ExecutionResult(transaction_hash=tx_hash, receipt=receipt)
