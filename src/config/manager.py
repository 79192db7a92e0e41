"""
Configuration manager for oracle-probe.

This module provides a centralized way to access all configuration settings
across the application. It combines all configuration classes into a single
easy-to-use interface.
"""

import logging
from typing import Dict, Any
from .base import BaseConfig, ConfigError
from .chains import ChainConfig
from .market import MarketConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Centralized configuration manager that combines all configuration classes.

    This class provides easy access to all configuration settings and ensures
    that configurations are properly initialized and validated.
    """

    def __init__(self, environment: str = None):
        """
        Initialize the configuration manager.

        Args:
            environment: Override the environment (local, dev, staging, production, test)
        """
        self._environment = environment
        self._base_config = None
        self._chain_config = None
        self._market_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        """Initialize all configuration objects."""
        try:
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment
                self._base_config._validate_config()

            self._chain_config = ChainConfig()
            self._market_config = MarketConfig()

            logger.info(f"Configuration initialized for environment: {self.environment}")

        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}")

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        """Get base configuration."""
        return self._base_config

    @property
    def chains(self) -> ChainConfig:
        """Get fork/chain configuration."""
        return self._chain_config

    @property
    def market(self) -> MarketConfig:
        """Get market configuration."""
        return self._market_config

    def get_probe_config(self) -> Dict[str, Any]:
        """
        Get combined chain and market settings for a probe run.

        Returns:
            Combined configuration dictionary
        """
        return {
            **self.chains.get_chain_config(),
            "pair": self.market.SUSHI_WETH_PAIR,
            "base_token": self.market.SUSHI_TOKEN,
            "quote_token": self.market.WETH_TOKEN,
            "lending_pool": self.market.AAVE_LENDING_POOL,
            "swap_share_pct": self.market.SWAP_SHARE_PCT,
            "artifact": self.market.MANIPULATOR_ARTIFACT,
        }

    def validate_configuration(self) -> bool:
        """
        Validate all configuration settings.

        Returns:
            True if all configurations are valid

        Raises:
            ConfigError: If any configuration is invalid
        """
        try:
            self.chains._validate_config()
            self.market._validate_config()

            if self.market.SUSHI_TOKEN == self.market.WETH_TOKEN:
                raise ConfigError("Base and quote tokens must differ")

            if not self.chains.get_fork_url():
                logger.warning("MAINNET_RPC_URL not set, fork resets are unavailable")

            logger.info("Configuration validation successful")
            return True

        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ConfigError(f"Configuration validation failed: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert all configurations to dictionary format."""
        return {
            "environment": self.environment,
            "base": self.base.to_dict() if self.base else {},
            "chains": self.chains.to_dict() if self.chains else {},
            "market": self.market.to_dict() if self.market else {}
        }

    def __repr__(self) -> str:
        """String representation of the configuration manager."""
        return f"ConfigManager(environment={self.environment})"


# Global configuration manager instance
_config_manager = None


def get_config(environment: str = None, force_reload: bool = False) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        environment: Override environment
        force_reload: Force reload of configuration

    Returns:
        ConfigManager instance
    """
    global _config_manager

    if _config_manager is None or force_reload:
        _config_manager = ConfigManager(environment=environment)
        _config_manager.validate_configuration()

    return _config_manager


def reload_config(environment: str = None) -> ConfigManager:
    """
    Reload the global configuration manager.

    Args:
        environment: Override environment

    Returns:
        New ConfigManager instance
    """
    return get_config(environment=environment, force_reload=True)
