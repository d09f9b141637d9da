"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- Request models: Enumerate required/optional fields and validate them
- Response models: Define output structure
- Record fields are snake_case on the wire; auth payloads use camelCase
  garageName (snake_case is accepted too)
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from garage_tracker.core.validators import parse_service_date
from garage_tracker.db.models import ServiceRecord
from garage_tracker.services.service_status import ServiceStatus


class SignupRequest(BaseModel):
    """Request model for account signup."""
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=3, max_length=320, description="Login email")
    password: str = Field(..., min_length=1, max_length=72)
    garage_name: str = Field(..., alias="garageName", min_length=1, max_length=255)


class LoginRequest(BaseModel):
    """Request model for login."""
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    garage_name: str = Field(..., alias="garageName")


class AuthResponse(BaseModel):
    """Response model for signup and login."""
    token: str
    user: UserResponse


class ServiceRecordFields(BaseModel):
    """
    Mutable fields of a service record, as submitted by the client.

    Used for both create and full-field update.
    """
    owner_name: str = Field(..., max_length=255)
    phone: str = Field(..., max_length=64)
    vehicle_number: str = Field(..., max_length=64)
    make: str = Field(..., max_length=100)
    model: str = Field(..., max_length=100)
    last_service_date: date
    next_service_date: date
    notes: Optional[str] = None

    @field_validator("last_service_date", "next_service_date", mode="before")
    @classmethod
    def check_calendar_date(cls, value):
        return parse_service_date(value)


class ServiceRecordResponse(ServiceRecordFields):
    """A stored service record plus its derived status."""
    id: int
    status: ServiceStatus

    @classmethod
    def from_record(cls, record: ServiceRecord, status: ServiceStatus) -> "ServiceRecordResponse":
        return cls(
            id=record.id,
            owner_name=record.owner_name,
            phone=record.phone,
            vehicle_number=record.vehicle_number,
            make=record.make,
            model=record.model,
            last_service_date=record.last_service_date,
            next_service_date=record.next_service_date,
            notes=record.notes,
            status=status,
        )


class MakeCount(BaseModel):
    name: str
    value: int


class SummaryResponse(BaseModel):
    """Dashboard statistics for the caller's records."""
    total: int
    overdue: int
    upcoming: int
    scheduled: int
    top_makes: list[MakeCount]


class SuccessResponse(BaseModel):
    success: bool = True
