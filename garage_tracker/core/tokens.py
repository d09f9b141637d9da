"""
Session Token Codec

Issues and validates self-contained session tokens (JWT, HMAC-signed).

A token carries the caller's SessionClaim: account id, email and garage
name. Nothing is stored server side, so the only ways to invalidate a
token are its optional expiry or rotating the signing secret.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel

from garage_tracker.core.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


class SessionClaim(BaseModel):
    """Identity carried by a validated bearer token."""
    account_id: int
    email: str
    garage_name: str


class SessionTokenCodec:
    """
    Encodes SessionClaims into signed tokens and back.

    The secret is injected at construction and never read from globals,
    so two codecs with different secrets reject each other's tokens.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: Optional[timedelta] = None,
    ):
        """
        Args:
            secret: Server-held signing secret
            algorithm: HMAC algorithm name understood by PyJWT
            expires_in: Token lifetime; None issues tokens without "exp"
        """
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, claim: SessionClaim, now: Optional[datetime] = None) -> str:
        """
        Produce a signed token for a claim.

        Args:
            claim: Identity to embed
            now: Issue time (defaults to current UTC time)

        Returns:
            Opaque token string
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(claim.account_id),
            "email": claim.email,
            "garageName": claim.garage_name,
            "iat": issued_at,
        }
        if self.expires_in is not None:
            payload["exp"] = issued_at + self.expires_in

        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionClaim:
        """
        Validate a token and return the claim it carries.

        Raises:
            InvalidTokenError: If the token is malformed, its signature does
                not match this codec's secret, it has expired, or a
                required claim is missing
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected session token: {e}")
            raise InvalidTokenError("Invalid token")

        try:
            return SessionClaim(
                account_id=int(payload["sub"]),
                email=payload["email"],
                garage_name=payload["garageName"],
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError("Invalid token")
