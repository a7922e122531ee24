"""
Authentication models

Token returned by the credential-grant endpoint.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Token(BaseModel):
    """Bearer token obtained from POST /api/token"""

    model_config = ConfigDict(extra="allow")

    access_token: str = Field(..., min_length=1, description="Bearer token")
    token_type: Optional[str] = Field(default=None, description="Usually 'Bearer'")
    expires_in: Optional[int] = Field(default=None, description="Lifetime in seconds")

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"
