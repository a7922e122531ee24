"""
Data models.

Pydantic models shared by the client components.
"""

from .auth import Token

__all__ = [
    "Token",
]
