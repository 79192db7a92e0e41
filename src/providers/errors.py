"""
Error handling utilities for reserves providers.

This module provides specialized exception classes and error handling
utilities for reading pool state over RPC.
"""

from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base exception for reserves provider operations."""
    pass


class RateLimitError(ProviderError):
    """Raised when rate limit is hit."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class NetworkError(ProviderError):
    """Raised when network-related errors occur."""
    pass


class ContractError(ProviderError):
    """Raised when contract-related errors occur."""
    pass


class ValidationError(ProviderError):
    """Raised when input validation fails."""
    pass


class ErrorHandler:
    """
    Centralized error handling for provider calls.

    Provides classification, logging, and recovery strategies
    for the errors an RPC node returns while reading pool state.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """
        Classify an error into a category for appropriate handling.

        Typed provider errors map directly; anything else is classified
        from its message.

        Args:
            error: Exception to classify

        Returns:
            Error category string
        """
        if isinstance(error, RateLimitError):
            return 'rate_limit'
        if isinstance(error, NetworkError):
            return 'network'
        if isinstance(error, ContractError):
            return 'contract'
        if isinstance(error, ValidationError):
            return 'validation'

        error_str = str(error).lower()

        if any(keyword in error_str for keyword in ['rate limit', 'too many requests', '429']):
            return 'rate_limit'

        if any(keyword in error_str for keyword in ['connection', 'timeout', 'network', 'dns']):
            return 'network'

        if any(keyword in error_str for keyword in ['revert', 'execution reverted', 'out of gas']):
            return 'contract'

        if any(keyword in error_str for keyword in ['invalid', 'bad request', '400']):
            return 'validation'

        return 'unknown'

    def should_retry(self, error: Exception, attempt: int, max_retries: int) -> bool:
        """
        Determine if an error should trigger a retry.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            max_retries: Maximum number of retries allowed

        Returns:
            True if operation should be retried
        """
        if attempt >= max_retries:
            return False

        # Contract and validation errors are deterministic
        return self.classify_error(error) in ['network', 'rate_limit', 'unknown']

    def get_retry_delay(self, error: Exception, attempt: int, base: float = 1.0) -> float:
        """
        Calculate appropriate retry delay based on error type and attempt.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            base: Delay of the first retry in seconds

        Returns:
            Delay in seconds before retry
        """
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return error.retry_after

        error_category = self.classify_error(error)

        # Exponential backoff capped at 60 seconds
        base_delay = min(base * 2 ** attempt, 60)

        if error_category == 'rate_limit':
            return base_delay * 2

        if error_category == 'network':
            return base_delay

        return base_delay * 1.5

    def log_error(self, error: Exception, context: Dict[str, Any]):
        """
        Log error with appropriate level and context.

        Args:
            error: Exception to log
            context: Additional context for logging
        """
        error_category = self.classify_error(error)

        log_data = {
            'error_type': type(error).__name__,
            'error_category': error_category,
            'error_message': str(error),
            **context
        }

        if error_category == 'validation':
            self.logger.warning("Validation error occurred", extra=log_data)
        elif error_category == 'contract':
            self.logger.error("Contract call failed", extra=log_data)
        elif error_category == 'rate_limit':
            self.logger.info("Rate limit encountered", extra=log_data)
        else:
            self.logger.warning("Provider call error", extra=log_data)
