"""
Configuration management for oracle-probe.

This module provides centralized configuration management for the probe
scripts. Use get_config() to access all configuration settings.

Example:
    from src.config import get_config

    config = get_config()

    # Fork node settings
    rpc_url = config.chains.FORK_RPC_URL

    # Pool under test
    pair = config.market.SUSHI_WETH_PAIR

    # Everything a probe run needs
    probe = config.get_probe_config()
"""

from .base import BaseConfig, ConfigError
from .chains import ChainConfig
from .manager import ConfigManager, get_config, reload_config
from .market import MarketConfig

__all__ = [
    "BaseConfig",
    "ConfigError",
    "ChainConfig",
    "MarketConfig",
    "ConfigManager",
    "get_config",
    "reload_config",
]
