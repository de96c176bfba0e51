"""JWT verification utilities.

Tokens are signed with a shared secret; the ``sub`` claim carries the
username of the caller.
"""

import time
from typing import Optional

import jwt

from licensedb.core.config import settings
from licensedb.schemas.auth import JWTClaims
from licensedb.utils.logging import get_logger

LOGGER = get_logger(__name__)


class JWTVerifier:
    """JWT verifier for access tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", issuer: Optional[str] = None):
        """Initialize JWT verifier.

        Args:
            secret: Shared signing secret
            algorithm: Signing algorithm
            issuer: Expected ``iss`` claim, not checked when None
        """
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer

    async def verify_token(self, token: str) -> JWTClaims:
        """Verify and decode an access token.

        Args:
            token: JWT access token from Authorization header

        Returns:
            Decoded and validated JWT claims

        Raises:
            jwt.InvalidTokenError: If token is invalid or expired
        """
        options = {"verify_exp": True, "require": ["sub", "exp"]}
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options=options,
            )
        except jwt.ExpiredSignatureError as e:
            LOGGER.warning(f"Token expired: {e}")
            raise jwt.InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            LOGGER.warning(f"Invalid token: {e}")
            raise

        claims = JWTClaims(**payload)
        LOGGER.debug(f"Successfully verified token for user: {claims.sub}")
        return claims

    def issue_token(self, username: str, expires_in: int = 3600, now: Optional[int] = None) -> str:
        """Sign a token for ``username``; used by tooling and tests."""
        issued_at = now if now is not None else int(time.time())
        payload = {"sub": username, "iat": issued_at, "exp": issued_at + expires_in}
        if self.issuer:
            payload["iss"] = self.issuer
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)


jwt_verifier = JWTVerifier(
    secret=settings.auth.jwt_secret,
    algorithm=settings.auth.jwt_algorithm,
    issuer=settings.auth.jwt_issuer,
)
