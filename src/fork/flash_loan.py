"""
Flash loan availability check.

Stands in for a flash loan on the fork: a whale is impersonated and moves
borrowed-size funds into the attacking contract, proving that much
liquidity can be put in its hands within one transaction.
"""

import logging
from dataclasses import dataclass

from .errors import ForkError
from .harness import ForkedChain

logger = logging.getLogger(__name__)


@dataclass
class FlashLoanFunding:
    """Outcome of funding a contract from a whale."""

    token: str
    whale: str
    recipient: str
    amount: int
    whale_balance: int
    recipient_balance: int


def simulate_flash_loan_funding(
    chain: ForkedChain,
    token: str,
    whale: str,
    recipient: str,
    amount: int,
    gas_balance_wei: int = 100 * 10**18
) -> FlashLoanFunding:
    """
    Move amount of token from an impersonated whale to recipient.

    Args:
        chain: Fork harness
        token: ERC-20 token address
        whale: Account holding enough of the token
        recipient: Contract or account being funded
        amount: Token amount to transfer
        gas_balance_wei: ETH given to the whale to pay for gas

    Returns:
        FlashLoanFunding with balances observed around the transfer

    Raises:
        ForkError: If the whale is short or the recipient balance is off
    """
    with chain.impersonated(whale, gas_balance_wei) as whale_account:
        whale_balance = chain.erc20_balance(token, whale_account)
        logger.info(f"Whale {whale_account} holds {whale_balance} of {token}")

        if whale_balance < amount:
            raise ForkError(
                f"Whale {whale_account} holds {whale_balance}, cannot move {amount}"
            )

        before = chain.erc20_balance(token, recipient)
        chain.transfer_erc20(token, whale_account, recipient, amount)
        after = chain.erc20_balance(token, recipient)

    if after - before != amount:
        raise ForkError(
            f"Recipient {recipient} balance moved by {after - before}, expected {amount}"
        )

    return FlashLoanFunding(
        token=token,
        whale=whale_account,
        recipient=recipient,
        amount=amount,
        whale_balance=whale_balance,
        recipient_balance=after,
    )
