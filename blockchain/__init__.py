"""
Starknet bindings for the universe world.
"""

from .connection import get_client, get_account, load_manifest
from .contracts import (
    OPERATIONS,
    DojoCall,
    GameContract,
    World,
    build_call,
    setup_world,
)
from .provider import (
    CalldataError,
    DojoProvider,
    ExecutionResult,
    ManifestError,
    decode_username,
    encode_username,
    to_felt,
)

__all__ = [
    "get_client",
    "get_account",
    "load_manifest",
    "OPERATIONS",
    "DojoCall",
    "GameContract",
    "World",
    "build_call",
    "setup_world",
    "CalldataError",
    "DojoProvider",
    "ExecutionResult",
    "ManifestError",
    "decode_username",
    "encode_username",
    "to_felt",
]
