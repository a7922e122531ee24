"""
Auth module - request signing and bearer token acquisition.
"""

from buzzex.auth.signer import sign, NonceGenerator, current_microseconds
from buzzex.auth.token_provider import TokenProvider, TOKEN_PATH

__all__ = [
    'sign',
    'NonceGenerator',
    'current_microseconds',
    'TokenProvider',
    'TOKEN_PATH',
]
