"""Authentication dependencies for FastAPI routes."""

from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from licensedb.core.exceptions import AuthenticationError
from licensedb.core.jwt import jwt_verifier
from licensedb.schemas.auth import CurrentUser
from licensedb.utils.logging import get_logger

LOGGER = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """Get the current authenticated user from the bearer token.

    Args:
        credentials: HTTP Authorization credentials (automatically injected)

    Returns:
        CurrentUser: Authenticated user information

    Raises:
        AuthenticationError: If token is missing, invalid, or expired
    """
    if not credentials:
        LOGGER.warning("No authorization credentials provided")
        raise AuthenticationError(
            "Please check your credentials and try again",
            detail="no credentials were passed",
        )

    try:
        claims = await jwt_verifier.verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid authentication token", original_error=e) from e

    return CurrentUser(username=claims.sub)
