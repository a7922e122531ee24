"""
Custom Exceptions Module

Defines all custom exceptions raised by the Buzzex client.
All exceptions inherit from BuzzexError base class.
"""

from typing import Any, Dict, List, Optional


class BuzzexError(Exception):
    """
    Base exception for all Buzzex client errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional context information
            original_exception: Original exception if wrapping another error
        """
        self.message = message
        self.details = details or {}
        self.original_exception = original_exception

        # Construct full message
        full_message = message
        if details:
            details_str = ", ".join(f"{k}={v}" for k, v in details.items())
            full_message = f"{message} ({details_str})"

        super().__init__(full_message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


# ============================================================================
# Configuration / Programming Errors
# ============================================================================

class ConfigurationError(BuzzexError):
    """Client configuration is invalid or missing"""
    pass


class InvalidMethodError(BuzzexError):
    """Requested API method is neither public nor private"""

    def __init__(self, method: str):
        self.method = method
        super().__init__(
            f"{method} is not a valid API method.",
            details={"method": method}
        )


# ============================================================================
# Transport Errors
# ============================================================================

class TransportError(BuzzexError):
    """Network failure, timeout or HTTP error status"""
    pass


class MalformedResponseError(BuzzexError):
    """Response body could not be decoded as JSON"""
    pass


class AuthenticationError(BuzzexError):
    """Credential grant did not return an access token"""
    pass


# ============================================================================
# Remote (Exchange) Errors
# ============================================================================

class RemoteError(BuzzexError):
    """
    Exchange reported hard errors.

    ``codes`` holds the error entries with the leading ``E`` marker removed,
    in the order the exchange returned them.
    """

    def __init__(
        self,
        codes: List[str],
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.codes = list(codes)
        super().__init__(message or ", ".join(self.codes), details=details)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["codes"] = self.codes
        return data


class UnknownRemoteError(RemoteError):
    """Exchange returned an error list without any hard-marked entry"""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(
            [],
            message="Buzzex API returned an unknown error",
            details={"errors": self.errors}
        )


# ============================================================================
# Utility Functions
# ============================================================================

def wrap_exception(
    original_exception: Exception,
    custom_exception_class: type,
    message: Optional[str] = None,
    **details
) -> BuzzexError:
    """
    Wrap an exception in a custom exception class.

    Args:
        original_exception: The original exception
        custom_exception_class: The custom exception class to wrap with
        message: Optional custom message
        **details: Additional details

    Returns:
        Custom exception instance

    Example:
        try:
            await session.get(url)
        except aiohttp.ClientError as e:
            raise wrap_exception(
                e,
                TransportError,
                "Request failed",
                url=url
            )
    """
    error_message = message or str(original_exception)

    return custom_exception_class(
        message=error_message,
        details=details,
        original_exception=original_exception
    )

