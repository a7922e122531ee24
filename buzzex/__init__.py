"""
Buzzex REST API client.

Public market data and authenticated trading endpoints over aiohttp.
"""

from buzzex.client import BuzzexClient, PrivateRequest
from buzzex.core.config import ClientConfig, Settings, get_settings, reload_settings
from buzzex.core.exceptions import (
    AuthenticationError,
    BuzzexError,
    ConfigurationError,
    InvalidMethodError,
    MalformedResponseError,
    RemoteError,
    TransportError,
    UnknownRemoteError,
)
from buzzex.core.logger import get_logger, setup_logging
from buzzex.methods import PRIVATE_METHODS, PUBLIC_METHODS, MethodKind, classify_method
from buzzex.models import Token

__version__ = "0.1.0"

__all__ = [
    # Client
    'BuzzexClient',
    'PrivateRequest',

    # Configuration
    'ClientConfig',
    'Settings',
    'get_settings',
    'reload_settings',

    # Logging
    'setup_logging',
    'get_logger',

    # Routing
    'PUBLIC_METHODS',
    'PRIVATE_METHODS',
    'MethodKind',
    'classify_method',

    # Models
    'Token',

    # Errors
    'BuzzexError',
    'ConfigurationError',
    'InvalidMethodError',
    'TransportError',
    'MalformedResponseError',
    'AuthenticationError',
    'RemoteError',
    'UnknownRemoteError',
]
