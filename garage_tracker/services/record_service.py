"""
Record Service

Core business logic for vehicle service records:
- CRUD, always scoped to the calling account
- Derived status (overdue / upcoming / scheduled) computed at read time
- Dashboard summary computed on demand from the store

Design Decisions:
- The account id always comes from a verified session claim; this
  service never looks at client input to decide ownership
- Update/delete of a record that is missing or owned by someone else is
  a no-op reported as False; the two cases are indistinguishable
- "today" is a parameter, never read from a clock here
"""

import logging
from datetime import date
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from garage_tracker.core.validators import sanitize_search_term
from garage_tracker.db.models import ServiceRecord
from garage_tracker.services.record_store import RecordStore
from garage_tracker.services.service_status import (
    ServiceStatus,
    classify_service_date,
    summarize_records,
)

logger = logging.getLogger(__name__)


class RecordService:
    """Tenant-scoped operations over service records."""

    def __init__(self, session: AsyncSession):
        """
        Args:
            session: Async database session for database operations
        """
        self.session = session
        self.store = RecordStore(session)

    async def create(self, account_id: int, fields: Mapping[str, Any]) -> ServiceRecord:
        """
        Create a record owned by account_id.

        Args:
            account_id: Owning account, taken from the session claim
            fields: Validated record fields keyed by column name, with the
                service dates already parsed to date objects

        Returns:
            The persisted record including its generated id

        Raises:
            StoreFailureError: If the database operation fails
        """
        record = await self.store.insert(account_id, fields)
        logger.info(f"Account {account_id} created service record {record.id}")
        return record

    async def list(self, account_id: int, search: Optional[str] = None) -> list[ServiceRecord]:
        """
        All records owned by account_id, most recently created first.

        Re-queried on every call.
        """
        return await self.store.list_for_account(account_id, sanitize_search_term(search))

    async def update(self, account_id: int, record_id: int, fields: Mapping[str, Any]) -> bool:
        """
        Overwrite all mutable fields of an owned record.

        Returns:
            True if the record was updated, False if it does not exist or
            belongs to another account
        """
        updated = await self.store.update_owned(account_id, record_id, fields)
        if updated:
            logger.info(f"Account {account_id} updated service record {record_id}")
        else:
            logger.info(f"Account {account_id} update of service record {record_id} matched nothing")
        return updated

    async def delete(self, account_id: int, record_id: int) -> bool:
        """
        Delete an owned record.

        Returns:
            True if the record was deleted, False if it does not exist or
            belongs to another account
        """
        deleted = await self.store.delete_owned(account_id, record_id)
        if deleted:
            logger.info(f"Account {account_id} deleted service record {record_id}")
        else:
            logger.info(f"Account {account_id} delete of service record {record_id} matched nothing")
        return deleted

    async def summarize(self, account_id: int, today: date) -> dict:
        """Dashboard statistics for account_id as of today."""
        records = await self.store.list_for_account(account_id)
        return summarize_records(records, today)

    @staticmethod
    def status_of(record: ServiceRecord, today: date) -> ServiceStatus:
        return classify_service_date(record.next_service_date, today)
