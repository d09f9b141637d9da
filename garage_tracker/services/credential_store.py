"""
Credential Store

Persists garage accounts and enforces email uniqueness.

Design Decisions:
- The unique index on accounts.email is the single arbiter of
  duplicates, so two concurrent signups for one email cannot both win
- Emails are compared exactly as stored (case-sensitive)
- Accounts are never updated or deleted through this store
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from garage_tracker.core.exceptions import DuplicateEmailError, StoreFailureError
from garage_tracker.db.models import Account

logger = logging.getLogger(__name__)


class CredentialStore:
    """Account persistence on top of an async session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_account(self, email: str, password_hash: str, garage_name: str) -> Account:
        """
        Insert a new account.

        Args:
            email: Login email, stored as given
            password_hash: Digest produced by PasswordHasher.hash
            garage_name: Display name

        Returns:
            The persisted Account with its generated id

        Raises:
            DuplicateEmailError: If the email already has an account
            StoreFailureError: If the database operation fails otherwise
        """
        account = Account(email=email, password_hash=password_hash, garage_name=garage_name)

        try:
            self.session.add(account)
            await self.session.flush()
            await self.session.commit()
            return account

        except IntegrityError as e:
            await self.session.rollback()
            if await self.find_by_email(email) is not None:
                raise DuplicateEmailError(email)
            raise StoreFailureError(
                "Failed to create account: database constraint violation",
                original_error=e
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to create account: {e}", exc_info=True)
            raise StoreFailureError("Failed to create account", original_error=e)

    async def find_by_email(self, email: str) -> Optional[Account]:
        """
        Look up an account by exact email.

        Returns:
            Account if found, None otherwise

        Raises:
            StoreFailureError: If the query fails
        """
        try:
            statement = select(Account).where(Account.email == email).limit(1)
            result = await self.session.execute(statement)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up account: {e}", exc_info=True)
            raise StoreFailureError("Failed to look up account", original_error=e)
