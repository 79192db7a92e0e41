"""
Fork and chain configuration for oracle-probe.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .base import BaseConfig, ConfigError

RPC_NAMESPACES = ("hardhat", "anvil")


@dataclass
class ChainConfig(BaseConfig):
    """Settings for the forked mainnet node the probes run against."""

    # Local fork node (hardhat node / anvil)
    FORK_RPC_URL: str = BaseConfig.get_env("FORK_RPC_URL", "http://127.0.0.1:8545")
    RPC_NAMESPACE: str = BaseConfig.get_env("RPC_NAMESPACE", "hardhat")
    RPC_TIMEOUT: float = BaseConfig.get_env_float("RPC_TIMEOUT", 60.0)

    # Upstream archive node used to (re)create the fork
    MAINNET_RPC_URL: str = BaseConfig.get_env("MAINNET_RPC_URL", "")
    # Pinned for reproducible reserves
    FORK_BLOCK_NUMBER: int = BaseConfig.get_env_int("FORK_BLOCK_NUMBER", 18500000)

    CHAIN_ID: int = 1

    # Retry settings for RPC reads
    MAX_RETRY_ATTEMPTS: int = BaseConfig.get_env_int("MAX_RETRY_ATTEMPTS", 3)
    RETRY_DELAY_SECONDS: float = BaseConfig.get_env_float("RETRY_DELAY_SECONDS", 1.0)

    def _validate_config(self):
        super()._validate_config()

        if self.RPC_NAMESPACE not in RPC_NAMESPACES:
            raise ConfigError(
                f"RPC_NAMESPACE must be one of {RPC_NAMESPACES}, got: {self.RPC_NAMESPACE}"
            )
        if not self.FORK_RPC_URL.startswith(("http://", "https://", "ws://", "wss://")):
            raise ConfigError(f"Invalid FORK_RPC_URL: {self.FORK_RPC_URL}")
        if self.FORK_BLOCK_NUMBER < 0:
            raise ConfigError(f"FORK_BLOCK_NUMBER must be non-negative, got: {self.FORK_BLOCK_NUMBER}")
        if self.MAX_RETRY_ATTEMPTS < 1:
            raise ConfigError(f"MAX_RETRY_ATTEMPTS must be at least 1, got: {self.MAX_RETRY_ATTEMPTS}")

    def get_chain_config(self) -> Dict:
        """Get fork connection settings as a dictionary."""
        return {
            "chain_id": self.CHAIN_ID,
            "rpc_url": self.FORK_RPC_URL,
            "rpc_namespace": self.RPC_NAMESPACE,
            "rpc_timeout": self.RPC_TIMEOUT,
            "fork_url": self.MAINNET_RPC_URL or None,
            "fork_block_number": self.FORK_BLOCK_NUMBER,
        }

    def get_fork_url(self) -> Optional[str]:
        """Upstream URL for fork resets, if one is configured."""
        return self.MAINNET_RPC_URL or None
