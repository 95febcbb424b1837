"""
Configuration settings for the universe client.
"""

import os
from dataclasses import dataclass

from starknet_py.cairo.felt import encode_shortstring


def parse_chain_id(value: str) -> int:
    """Parse a chain id given as hex (`0x534e5f...`) or short string (`SN_SEPOLIA`)."""
    value = value.strip()
    if value.lower().startswith("0x"):
        return int(value, 16)
    return encode_shortstring(value)


@dataclass
class UniverseConfig:
    """Client configuration settings."""

    # Starknet settings
    rpc_url: str
    account_address: str
    private_key: str
    chain_id: int = encode_shortstring("SN_SEPOLIA")

    # World settings
    manifest_path: str = "manifest_sepolia.json"
    namespace: str = "universe"

    # Indexer settings
    torii_url: str = "http://localhost:8080/graphql"

    # Wait for the receipt after sending a transaction
    wait_for_acceptance: bool = True

    @classmethod
    def from_env(cls) -> "UniverseConfig":
        """Create config from environment variables."""
        # Normalize private key to ensure it has 0x prefix
        private_key = os.environ["UNIVERSE_PRIVATE_KEY"]
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key

        wait_flag = os.getenv("UNIVERSE_WAIT_FOR_TX", "1").strip().lower()

        return cls(
            rpc_url=os.environ["UNIVERSE_RPC_URL"],
            account_address=os.environ["UNIVERSE_ACCOUNT_ADDRESS"],
            private_key=private_key,
            chain_id=parse_chain_id(os.getenv("UNIVERSE_CHAIN_ID", "SN_SEPOLIA")),
            manifest_path=os.getenv("UNIVERSE_MANIFEST_PATH", "manifest_sepolia.json"),
            namespace=os.getenv("UNIVERSE_NAMESPACE", "universe"),
            torii_url=os.getenv("UNIVERSE_TORII_URL", "http://localhost:8080/graphql"),
            wait_for_acceptance=wait_flag in ("1", "true", "yes", "on"),
        )


def torii_url_from_env() -> str:
    """Indexer URL, for commands that need no signing account."""
    return os.getenv("UNIVERSE_TORII_URL", "http://localhost:8080/graphql")
