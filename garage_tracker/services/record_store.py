"""
Record Store

Persists vehicle service records keyed by their owning account.

Every read and write takes the owning account id and folds it into the
WHERE clause, so ownership is enforced by the statement itself rather
than by a separate read-then-check step. Each write is a single
statement committed on its own.
"""

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from garage_tracker.core.exceptions import StoreFailureError
from garage_tracker.db.models import ServiceRecord

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = (
    "owner_name",
    "phone",
    "vehicle_number",
    "make",
    "model",
    "last_service_date",
    "next_service_date",
    "notes",
)

# Largest value an INTEGER primary key can hold (signed 64-bit)
MAX_RECORD_ID = 2**63 - 1


def _mutable_values(values: Mapping[str, Any]) -> dict[str, Any]:
    # Full overwrite: a field missing from values is written as None
    return {field: values.get(field) for field in MUTABLE_FIELDS}


def _is_storable_id(record_id: int) -> bool:
    # Ids outside the column range cannot exist; the driver would overflow on them
    return 1 <= record_id <= MAX_RECORD_ID


class RecordStore:
    """Service record persistence on top of an async session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, account_id: int, values: Mapping[str, Any]) -> ServiceRecord:
        """
        Insert a record owned by account_id.

        Returns:
            The persisted ServiceRecord including its generated id

        Raises:
            StoreFailureError: If the insert fails
        """
        record = ServiceRecord(account_id=account_id, **_mutable_values(values))

        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.commit()
            return record
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to insert service record for account {account_id}: {e}", exc_info=True)
            raise StoreFailureError("Failed to create service record", original_error=e)

    async def list_for_account(self, account_id: int, search: Optional[str] = None) -> list[ServiceRecord]:
        """
        Fetch all records owned by account_id, newest first.

        Args:
            account_id: Owning account
            search: Optional term matched against owner name and vehicle
                number (case-insensitive) and phone

        Raises:
            StoreFailureError: If the query fails
        """
        statement = select(ServiceRecord).where(ServiceRecord.account_id == account_id)

        if search:
            # lower() is Unicode-aware on both sides; see SQLiteAdapter for SQLite
            term = search.lower()
            statement = statement.where(
                or_(
                    func.lower(ServiceRecord.owner_name).contains(term, autoescape=True),
                    func.lower(ServiceRecord.vehicle_number).contains(term, autoescape=True),
                    ServiceRecord.phone.contains(search, autoescape=True),
                )
            )

        statement = statement.order_by(ServiceRecord.id.desc())

        try:
            result = await self.session.execute(statement)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to list service records for account {account_id}: {e}", exc_info=True)
            raise StoreFailureError("Failed to list service records", original_error=e)

    async def update_owned(self, account_id: int, record_id: int, values: Mapping[str, Any]) -> bool:
        """
        Overwrite every mutable field of a record if account_id owns it.

        Returns:
            True if a row was updated, False if no owned record matched

        Raises:
            StoreFailureError: If the update fails
        """
        if not _is_storable_id(record_id):
            return False

        statement = (
            update(ServiceRecord)
            .where(ServiceRecord.id == record_id, ServiceRecord.account_id == account_id)
            .values(**_mutable_values(values))
        )
        return await self._execute_owned_write(statement, "update", account_id, record_id)

    async def delete_owned(self, account_id: int, record_id: int) -> bool:
        """
        Delete a record if account_id owns it.

        Returns:
            True if a row was deleted, False if no owned record matched

        Raises:
            StoreFailureError: If the delete fails
        """
        if not _is_storable_id(record_id):
            return False

        statement = delete(ServiceRecord).where(
            ServiceRecord.id == record_id, ServiceRecord.account_id == account_id
        )
        return await self._execute_owned_write(statement, "delete", account_id, record_id)

    async def _execute_owned_write(self, statement, action: str, account_id: int, record_id: int) -> bool:
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"Failed to {action} service record {record_id} for account {account_id}: {e}",
                exc_info=True
            )
            raise StoreFailureError(f"Failed to {action} service record", original_error=e)
