"""
Authentication Service

Signup and login for garage accounts.

Design Decisions:
- bcrypt runs in the threadpool so hashing never blocks the event loop
- Login failures are indistinguishable: an unknown email still pays for
  a bcrypt verify (against a dummy digest) and raises the same error as
  a wrong password
- A token is issued right after signup so the client is logged in
"""

import logging
from typing import NamedTuple, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from garage_tracker.core.exceptions import InvalidCredentialsError
from garage_tracker.core.passwords import PasswordHasher
from garage_tracker.core.tokens import SessionClaim, SessionTokenCodec
from garage_tracker.db.models import Account
from garage_tracker.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class AuthResult(NamedTuple):
    token: str
    account: Account


class AuthService:
    """Account signup and login."""

    def __init__(self, session: AsyncSession, hasher: PasswordHasher, codec: SessionTokenCodec):
        self.session = session
        self.hasher = hasher
        self.codec = codec
        self.credentials = CredentialStore(session)

    async def signup(self, email: str, password: str, garage_name: str) -> AuthResult:
        """
        Create an account and log it in.

        Raises:
            DuplicateEmailError: If the email already has an account
            ValidationFailedError: If the password cannot be hashed
            StoreFailureError: If the database operation fails
        """
        password_hash = await run_in_threadpool(self.hasher.hash, password)
        account = await self.credentials.create_account(email, password_hash, garage_name)

        logger.info(f"Account {account.id} signed up")
        return AuthResult(token=self._issue(account), account=account)

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate an email/password pair.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password
                does not match (same error for both)
            StoreFailureError: If the database operation fails
        """
        account = await self.credentials.find_by_email(email)

        password_ok = await run_in_threadpool(self._check_password, account, password)
        if account is None or not password_ok:
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError()

        logger.info(f"Account {account.id} logged in")
        return AuthResult(token=self._issue(account), account=account)

    def _check_password(self, account: Optional[Account], password: str) -> bool:
        digest = account.password_hash if account is not None else self.hasher.dummy_digest
        return self.hasher.verify(password, digest)

    def _issue(self, account: Account) -> str:
        claim = SessionClaim(
            account_id=account.id,
            email=account.email,
            garage_name=account.garage_name,
        )
        return self.codec.issue(claim)
