"""
Market configuration: the pool under test and the accounts around it.

Defaults target SushiSwap SUSHI/WETH on Ethereum mainnet, with Aave V2 as
the flash loan venue and Morpho-Aave V2 as the lending integration.
"""

from dataclasses import dataclass

from web3 import Web3

from .base import BaseConfig, ConfigError

ONE_ETHER = 10**18

ADDRESS_FIELDS = (
    "SUSHI_TOKEN",
    "WETH_TOKEN",
    "SUSHI_WETH_PAIR",
    "AAVE_LENDING_POOL",
    "MORPHO_AAVE_V2",
    "WETH_WHALE",
)


@dataclass
class MarketConfig(BaseConfig):
    """Pool, protocol and whale addresses plus probe sizing."""

    # Tokens and pool
    SUSHI_TOKEN: str = BaseConfig.get_env("SUSHI_TOKEN", "0x6B3595068778DD592e39A122f4f5a5cF09C90fE2")
    WETH_TOKEN: str = BaseConfig.get_env("WETH_TOKEN", "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2")
    SUSHI_WETH_PAIR: str = BaseConfig.get_env("SUSHI_WETH_PAIR", "0x795065dCc9f64b5614C407a6EFDC400DA6221FB0")

    # Protocols
    AAVE_LENDING_POOL: str = BaseConfig.get_env("AAVE_LENDING_POOL", "0x7d2768dE32b0b80b7a3454c06BdAc94A69DDc7A9")
    MORPHO_AAVE_V2: str = BaseConfig.get_env("MORPHO_AAVE_V2", "0x777777c9898D384F785Ee44Acfe945efDFf5f3E0")

    # Whale for impersonation
    WETH_WHALE: str = BaseConfig.get_env("WETH_WHALE", "0x2F0b23f53734252Bda2277357e97e1517d6B042A")

    # Probe sizing
    SWAP_SHARE_PCT: int = BaseConfig.get_env_int("SWAP_SHARE_PCT", 10)
    FLASH_LOAN_TEST_AMOUNT: int = BaseConfig.get_env_int("FLASH_LOAN_TEST_AMOUNT_ETH", 10) * ONE_ETHER
    WHALE_GAS_BALANCE: int = BaseConfig.get_env_int("WHALE_GAS_BALANCE_ETH", 100) * ONE_ETHER

    # Price impact risk thresholds (bps)
    IMPACT_MEDIUM_BPS: int = BaseConfig.get_env_int("IMPACT_MEDIUM_BPS", 100)
    IMPACT_HIGH_BPS: int = BaseConfig.get_env_int("IMPACT_HIGH_BPS", 1000)

    # Compiled OracleManipulator (hardhat artifact layout)
    MANIPULATOR_ARTIFACT: str = BaseConfig.get_env(
        "MANIPULATOR_ARTIFACT",
        str(BaseConfig.PROJECT_ROOT / "artifacts" / "contracts" / "OracleManipulator.sol" / "OracleManipulator.json"),
    )

    def _validate_config(self):
        super()._validate_config()

        for name in ADDRESS_FIELDS:
            value = getattr(self, name)
            try:
                setattr(self, name, Web3.to_checksum_address(value))
            except (ValueError, TypeError):
                raise ConfigError(f"{name} is not a valid address: {value}")

        if not 0 < self.SWAP_SHARE_PCT < 100:
            raise ConfigError(f"SWAP_SHARE_PCT must be within (0, 100), got: {self.SWAP_SHARE_PCT}")
        if self.FLASH_LOAN_TEST_AMOUNT <= 0:
            raise ConfigError("FLASH_LOAN_TEST_AMOUNT_ETH must be positive")
        if not 0 < self.IMPACT_MEDIUM_BPS < self.IMPACT_HIGH_BPS:
            raise ConfigError(
                f"Impact thresholds must satisfy 0 < medium < high, "
                f"got: {self.IMPACT_MEDIUM_BPS}, {self.IMPACT_HIGH_BPS}"
            )
