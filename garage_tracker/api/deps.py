"""
FastAPI Dependencies

Wires application-scoped components (kept on app.state by create_app)
into request handlers, and implements the access-control gate.

The gate (get_current_claim) is the only source of the caller's account
id for record operations.
"""

from datetime import date
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from garage_tracker.core.exceptions import InvalidTokenError, UnauthenticatedError
from garage_tracker.core.passwords import PasswordHasher
from garage_tracker.core.tokens import SessionClaim, SessionTokenCodec
from garage_tracker.db.session import get_session
from garage_tracker.services.auth_service import AuthService
from garage_tracker.services.record_service import RecordService

bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_codec(request: Request) -> SessionTokenCodec:
    return request.app.state.token_codec


def get_today() -> date:
    """Current date used for status classification; overridden in tests."""
    return date.today()


async def get_current_claim(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> SessionClaim:
    """
    Require a valid "Authorization: Bearer <token>" header.

    On success the claim is returned and also attached to
    request.state.claim.

    Raises:
        UnauthenticatedError: If the header is missing, uses another scheme,
            or the token fails verification
    """
    if credentials is None:
        raise UnauthenticatedError("Unauthorized")

    try:
        claim = codec.verify(credentials.credentials)
    except InvalidTokenError as e:
        raise UnauthenticatedError(e.reason)

    request.state.claim = claim
    return claim


def get_auth_service(
    session: AsyncSession = Depends(get_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> AuthService:
    return AuthService(session, hasher, codec)


def get_record_service(session: AsyncSession = Depends(get_session)) -> RecordService:
    return RecordService(session)
