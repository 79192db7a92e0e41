"""
Forked mainnet test harness.

Impersonation, balance and snapshot helpers for Hardhat/Anvil forks,
contract artifact deployment and the flash loan funding check.
"""

from .artifacts import ContractArtifact, PriceQuoter, deploy_contract
from .errors import BytecodeError, DeploymentError, ForkError
from .flash_loan import FlashLoanFunding, simulate_flash_loan_funding
from .harness import ERC20_ABI, ForkedChain

__all__ = [
    'ForkedChain',
    'ERC20_ABI',
    'ContractArtifact',
    'PriceQuoter',
    'deploy_contract',
    'FlashLoanFunding',
    'simulate_flash_loan_funding',
    'ForkError',
    'BytecodeError',
    'DeploymentError'
]
