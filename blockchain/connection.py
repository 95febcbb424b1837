"""
Starknet connection utilities.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from starknet_py.net.account.account import Account
from starknet_py.net.full_node_client import FullNodeClient
from starknet_py.net.signer.stark_curve_signer import KeyPair

from .provider import ManifestError, to_felt


logger = logging.getLogger(__name__)


def get_client(rpc_url: str) -> FullNodeClient:
    """Create a JSON-RPC client for a Starknet node."""
    client = FullNodeClient(node_url=rpc_url)
    logger.info(f"Using Starknet node at {rpc_url}")
    return client


def get_account(client: FullNodeClient, address: Union[int, str], private_key: Union[int, str], chain_id: int) -> Account:
    """Create a signing account."""
    key_pair = KeyPair.from_private_key(to_felt(private_key))
    account = Account(
        client=client,
        address=to_felt(address),
        key_pair=key_pair,
        chain=chain_id,
    )
    logger.info(f"Loaded account {hex(account.address)}")
    return account


def load_manifest(manifest_path: Union[str, Path]) -> Dict[str, Any]:
    """Read a Dojo deployment manifest."""
    try:
        with open(manifest_path, "r") as f:
            manifest = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestError(f"Failed to read manifest {manifest_path}: {e}") from e

    if not isinstance(manifest, dict) or not isinstance(manifest.get("contracts"), list):
        raise ManifestError(f"Manifest {manifest_path} has no contracts list")

    logger.info(f"Loaded manifest {manifest_path} with {len(manifest['contracts'])} contracts")
    return manifest
