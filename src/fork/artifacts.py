"""
Compiled contract artifacts and deployment.

Loads ABI and bytecode from Hardhat or Foundry artifact JSON and deploys
them onto the fork. The manipulator contract's own logic is external to
this project; only its getPrice(address) view is consumed here.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from web3 import Web3
from web3.exceptions import ContractLogicError

from src.providers.errors import ContractError
from .errors import BytecodeError, DeploymentError

logger = logging.getLogger(__name__)


@dataclass
class ContractArtifact:
    """ABI and creation bytecode of a compiled contract."""

    abi: List[Dict[str, Any]]
    bytecode: str
    contract_name: str = ""
    source_path: Optional[str] = field(default=None, repr=False)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ContractArtifact":
        """
        Load a contract artifact from disk.

        Accepts the Hardhat layout ("bytecode": "0x...") and the Foundry
        layout ("bytecode": {"object": "0x..."}).

        Raises:
            BytecodeError: If the file is missing or has no usable bytecode
        """
        path = Path(path)
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            raise BytecodeError(f"Failed to load contract artifact {path}: {e}")

        bytecode = data.get("bytecode")
        if isinstance(bytecode, dict):
            bytecode = bytecode.get("object")

        if not isinstance(bytecode, str) or bytecode in ("", "0x"):
            raise BytecodeError(f"Artifact {path} has no creation bytecode")
        if "abi" not in data:
            raise BytecodeError(f"Artifact {path} has no ABI")

        if not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode

        return cls(
            abi=data["abi"],
            bytecode=bytecode,
            contract_name=data.get("contractName", path.stem),
            source_path=str(path),
        )


def deploy_contract(
    web3: Web3,
    artifact: ContractArtifact,
    *constructor_args: Any,
    sender: Optional[str] = None,
    timeout: float = 120.0
):
    """
    Deploy a contract artifact and return the bound contract.

    Args:
        web3: Web3 instance connected to the fork
        artifact: Compiled contract to deploy
        *constructor_args: Constructor arguments
        sender: Deployer account (defaults to the node's first account)
        timeout: Seconds to wait for the deployment receipt

    Raises:
        DeploymentError: If the deployment fails or yields no address
    """
    sender = sender or web3.eth.accounts[0]
    factory = web3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

    try:
        tx_hash = factory.constructor(*constructor_args).transact({"from": sender})
        receipt = web3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
    except Exception as e:
        raise DeploymentError(f"Deployment of {artifact.contract_name} failed: {e}")

    address = receipt["contractAddress"]
    if receipt["status"] != 1 or not address:
        raise DeploymentError(f"Deployment of {artifact.contract_name} produced no contract")

    logger.info(f"{artifact.contract_name} deployed to: {address}")
    return web3.eth.contract(address=address, abi=artifact.abi)


class PriceQuoter:
    """Reads pair prices from a deployed contract exposing getPrice(address)."""

    def __init__(self, contract):
        self.contract = contract

    @property
    def address(self) -> str:
        return self.contract.address

    def get_price(
        self, pair_address: str, block_identifier: Union[int, str] = "latest"
    ) -> int:
        """
        Quote the pair price as the contract computes it.

        Raises:
            ContractError: If the contract call reverts
        """
        pair_address = Web3.to_checksum_address(pair_address)
        try:
            return int(
                self.contract.functions.getPrice(pair_address).call(
                    block_identifier=block_identifier
                )
            )
        except ContractLogicError as e:
            raise ContractError(f"getPrice({pair_address}) reverted: {e}")
