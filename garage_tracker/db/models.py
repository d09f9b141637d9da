"""
Database Models for the Garage Service Tracker

This module defines the SQLModel database schemas for:
- Account: A registered garage (tenant) and its credentials
- ServiceRecord: One vehicle's service-tracking entry, owned by an Account

Design Decisions:
- Unique index on accounts.email; the index, not a pre-check, decides
  whether a signup is a duplicate
- Index on service_records.account_id since every record query is
  scoped by owner
- sqlite_autoincrement so record ids are never reused after a delete
- Service dates are plain DATE columns (no time component)
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(SQLModel, table=True):
    """
    Registered garage account.

    Fields:
    - id: Auto-incrementing primary key, referenced by service records
    - email: Login identity, unique, compared exactly as stored
    - password_hash: bcrypt digest, never the plaintext
    - garage_name: Display name shown on the dashboard
    - created_at: Signup timestamp
    """
    __tablename__ = "accounts"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(
        sa_column=Column(String(320), nullable=False, unique=True, index=True)
    )
    password_hash: str = Field(sa_column=Column(String(128), nullable=False))
    garage_name: str = Field(sa_column=Column(String(255), nullable=False))
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class ServiceRecord(SQLModel, table=True):
    """
    Vehicle service record.

    Fields:
    - id: Generated primary key, unique within the store
    - account_id: Owning account (required)
    - owner_name, phone, vehicle_number, make, model: Vehicle details
    - last_service_date / next_service_date: Calendar dates
    - notes: Optional free text
    - created_at: Creation timestamp

    Status (overdue/upcoming/scheduled) is deliberately not a column; it
    depends on the current date and is derived on every read.
    """
    __tablename__ = "service_records"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    owner_name: str = Field(sa_column=Column(String(255), nullable=False))
    phone: str = Field(sa_column=Column(String(64), nullable=False))
    vehicle_number: str = Field(sa_column=Column(String(64), nullable=False))
    make: str = Field(sa_column=Column(String(100), nullable=False))
    model: str = Field(sa_column=Column(String(100), nullable=False))
    last_service_date: date = Field(sa_column=Column(Date, nullable=False))
    next_service_date: date = Field(sa_column=Column(Date, nullable=False, index=True))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
