"""
Forked mainnet harness.

Wraps the test-only JSON-RPC methods exposed by Hardhat Network and Anvil
(account impersonation, balance cheats, snapshots, fork reset) behind a
small Web3-based API, plus the ERC-20 helpers the probes need.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from hexbytes import HexBytes
from web3 import Web3

from .errors import ForkError

logger = logging.getLogger(__name__)

SUPPORTED_NAMESPACES = ("hardhat", "anvil")

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "recipient", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class ForkedChain:
    """
    Test helpers for a node forked from mainnet.

    All cheat methods go through web3.provider.make_request so they work
    with any HTTP provider pointed at Hardhat or Anvil.
    """

    def __init__(
        self,
        web3: Web3,
        rpc_namespace: str = "hardhat",
        receipt_timeout: float = 120.0
    ):
        """
        Initialize the harness.

        Args:
            web3: Web3 instance connected to the fork
            rpc_namespace: Cheat method prefix, "hardhat" or "anvil"
            receipt_timeout: Seconds to wait for transaction receipts

        Raises:
            ForkError: If the namespace is not supported
        """
        if rpc_namespace not in SUPPORTED_NAMESPACES:
            raise ForkError(
                f"Unsupported RPC namespace {rpc_namespace}, expected one of {SUPPORTED_NAMESPACES}"
            )

        self.web3 = web3
        self.rpc_namespace = rpc_namespace
        self.receipt_timeout = receipt_timeout
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _rpc(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Send a raw JSON-RPC request and unwrap its result."""
        response = self.web3.provider.make_request(method, params or [])

        if "error" in response:
            error = response["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ForkError(f"{method} failed: {message}")

        return response.get("result")

    def _cheat(self, name: str, params: Optional[List[Any]] = None) -> Any:
        return self._rpc(f"{self.rpc_namespace}_{name}", params)

    def is_fork_of(self, chain_id: int) -> bool:
        """Check the node reports the expected chain id."""
        return self.web3.eth.chain_id == chain_id

    def impersonate_account(self, address: str):
        address = Web3.to_checksum_address(address)
        self._cheat("impersonateAccount", [address])
        self.logger.debug(f"Impersonating {address}")

    def stop_impersonating_account(self, address: str):
        address = Web3.to_checksum_address(address)
        self._cheat("stopImpersonatingAccount", [address])
        self.logger.debug(f"Stopped impersonating {address}")

    def set_balance(self, address: str, balance_wei: int):
        """Set the native ETH balance of an account."""
        if balance_wei < 0:
            raise ForkError(f"Balance must be non-negative, got {balance_wei}")

        address = Web3.to_checksum_address(address)
        self._cheat("setBalance", [address, hex(balance_wei)])
        self.logger.debug(f"Set balance of {address} to {balance_wei} wei")

    @contextmanager
    def impersonated(
        self, address: str, balance_wei: Optional[int] = None
    ) -> Iterator[str]:
        """
        Impersonate an account for the duration of a block.

        Args:
            address: Account to act as
            balance_wei: Optional ETH balance to give the account for gas

        Yields:
            The checksummed address, usable as a transaction sender
        """
        address = Web3.to_checksum_address(address)
        self.impersonate_account(address)
        try:
            if balance_wei is not None:
                self.set_balance(address, balance_wei)
            yield address
        finally:
            self.stop_impersonating_account(address)

    def snapshot(self) -> str:
        """Take an EVM snapshot and return its id."""
        snapshot_id = self._rpc("evm_snapshot")
        self.logger.debug(f"Took snapshot {snapshot_id}")
        return snapshot_id

    def revert(self, snapshot_id: str):
        """Revert the chain to a snapshot."""
        if not self._rpc("evm_revert", [snapshot_id]):
            raise ForkError(f"Failed to revert to snapshot {snapshot_id}")
        self.logger.debug(f"Reverted to snapshot {snapshot_id}")

    def reset(self, fork_url: str, block_number: Optional[int] = None):
        """Re-fork from a remote node, optionally pinned to a block."""
        forking = {"jsonRpcUrl": fork_url}
        if block_number is not None:
            forking["blockNumber"] = block_number

        self._cheat("reset", [{"forking": forking}])
        self.logger.info(f"Fork reset to block {block_number or 'latest'}")

    def mine(self, blocks: int = 1):
        self._cheat("mine", [hex(blocks)])

    def erc20(self, token_address: str):
        """Get an ERC-20 contract bound to this chain."""
        return self.web3.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=ERC20_ABI
        )

    def erc20_balance(self, token_address: str, account: str) -> int:
        token = self.erc20(token_address)
        return int(token.functions.balanceOf(Web3.to_checksum_address(account)).call())

    def transfer_erc20(
        self, token_address: str, sender: str, recipient: str, amount: int
    ):
        """
        Transfer tokens from an unlocked or impersonated account.

        Returns:
            Transaction receipt

        Raises:
            ForkError: If the transfer transaction fails
        """
        token = self.erc20(token_address)
        sender = Web3.to_checksum_address(sender)
        recipient = Web3.to_checksum_address(recipient)

        try:
            tx_hash = token.functions.transfer(recipient, amount).transact({"from": sender})
            receipt = self.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout
            )
        except Exception as e:
            raise ForkError(f"Transfer of {amount} {token_address} from {sender} failed: {e}")

        if receipt["status"] != 1:
            raise ForkError(f"Transfer transaction {HexBytes(tx_hash).hex()} reverted")

        return receipt
