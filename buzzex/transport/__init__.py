"""
Transport module - HTTP access to the Buzzex REST API.
"""

from buzzex.transport.encoding import encode_params
from buzzex.transport.http import (
    HTTPTransport,
    HARD_ERROR_MARKER,
    decode_json,
    extract_error_codes,
    validate_response,
)

__all__ = [
    'HTTPTransport',
    'HARD_ERROR_MARKER',
    'decode_json',
    'encode_params',
    'extract_error_codes',
    'validate_response',
]
