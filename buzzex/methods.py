"""
API method routing.

Every Buzzex endpoint name is either public (no authentication) or private
(bearer token plus nonce). Anything else is a programming error.
"""

from enum import Enum

from buzzex.core.exceptions import InvalidMethodError

PUBLIC_METHODS = ("info", "ticker", "depth", "trades")
PRIVATE_METHODS = ("getinfo", "trade", "active-orders", "order-info", "cancel-order")

# Private methods sent as POST; everything else private is GET.
POST_METHODS = frozenset({"trade"})


class MethodKind(str, Enum):
    """Endpoint access class"""
    PUBLIC = "public"
    PRIVATE = "private"


def classify_method(method: str) -> MethodKind:
    """
    Classify an API method name.

    Raises:
        InvalidMethodError: method is not a known endpoint
    """
    if method in PUBLIC_METHODS:
        return MethodKind.PUBLIC
    if method in PRIVATE_METHODS:
        return MethodKind.PRIVATE
    raise InvalidMethodError(method)


def http_method_for(method: str) -> str:
    return "POST" if method in POST_METHODS else "GET"
