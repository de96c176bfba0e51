"""Authentication schemas for bearer tokens."""

from typing import Optional

from pydantic import BaseModel, Field


class JWTClaims(BaseModel):
    """Decoded claims of an access token."""

    sub: str = Field(..., description="Username of the token holder")
    exp: int = Field(..., description="Expiration timestamp")
    iat: Optional[int] = Field(None, description="Issued at timestamp")
    iss: Optional[str] = Field(None, description="Token issuer")


class CurrentUser(BaseModel):
    """Current authenticated user information."""

    username: str = Field(..., description="Username taken from the token subject")
