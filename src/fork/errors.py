"""
Exceptions raised by the forked-chain harness.
"""


class ForkError(Exception):
    """Raised when a fork test RPC call or transaction fails."""
    pass


class BytecodeError(ForkError):
    """Raised when a compiled contract artifact cannot be loaded."""
    pass


class DeploymentError(ForkError):
    """Raised when a contract deployment does not produce an address."""
    pass
