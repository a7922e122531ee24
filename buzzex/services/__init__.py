"""
Services module - helpers wrapped around every API call.
"""

from buzzex.services.decorators import (
    Callback,
    log_api_call,
    with_callback,
)

__all__ = [
    'Callback',
    'log_api_call',
    'with_callback',
]
