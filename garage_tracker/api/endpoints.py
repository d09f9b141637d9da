"""
FastAPI Endpoints for the Garage Service Tracker

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models)
- Rate limiting
- Authentication (via the get_current_claim dependency)
- Delegating to service layer

Domain errors raised by services are turned into HTTP responses by the
exception handlers registered in main.py.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from garage_tracker.api.deps import (
    get_auth_service,
    get_current_claim,
    get_record_service,
    get_today,
)
from garage_tracker.api.schemas import (
    AuthResponse,
    LoginRequest,
    ServiceRecordFields,
    ServiceRecordResponse,
    SignupRequest,
    SuccessResponse,
    SummaryResponse,
    UserResponse,
)
from garage_tracker.core.exceptions import RecordNotFoundError
from garage_tracker.core.rate_limit import RATE_LIMITS, limiter
from garage_tracker.core.tokens import SessionClaim
from garage_tracker.services.auth_service import AuthResult, AuthService
from garage_tracker.services.record_service import RecordService

router = APIRouter(prefix="/api")


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        token=result.token,
        user=UserResponse(email=result.account.email, garage_name=result.account.garage_name),
    )


# --- Auth ---

@router.post(
    "/auth/signup",
    response_model=AuthResponse,
    tags=["Auth"],
    summary="Create a garage account",
)
@limiter.limit(RATE_LIMITS["signup"])
async def signup(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register a new account and return a session token.

    Raises:
        DuplicateEmailError (400): If the email is already registered
    """
    result = await auth_service.signup(body.email, body.password, body.garage_name)
    return _auth_response(result)


@router.post(
    "/auth/login",
    response_model=AuthResponse,
    tags=["Auth"],
    summary="Log in to a garage account",
)
@limiter.limit(RATE_LIMITS["login"])
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Exchange email and password for a session token.

    Raises:
        InvalidCredentialsError (401): Unknown email or wrong password
    """
    result = await auth_service.login(body.email, body.password)
    return _auth_response(result)


# --- Vehicles ---

@router.get(
    "/vehicles",
    response_model=list[ServiceRecordResponse],
    tags=["Vehicles"],
    summary="List the caller's service records",
)
@limiter.limit(RATE_LIMITS["vehicles"])
async def list_vehicles(
    request: Request,
    search: Optional[str] = Query(default=None, description="Filter by owner, vehicle number or phone"),
    claim: SessionClaim = Depends(get_current_claim),
    today: date = Depends(get_today),
    record_service: RecordService = Depends(get_record_service),
) -> list[ServiceRecordResponse]:
    """Records owned by the caller, newest first, each with its current status."""
    records = await record_service.list(claim.account_id, search=search)
    return [
        ServiceRecordResponse.from_record(record, record_service.status_of(record, today))
        for record in records
    ]


@router.get(
    "/vehicles/summary",
    response_model=SummaryResponse,
    tags=["Vehicles"],
    summary="Dashboard statistics",
)
@limiter.limit(RATE_LIMITS["vehicles"])
async def vehicle_summary(
    request: Request,
    claim: SessionClaim = Depends(get_current_claim),
    today: date = Depends(get_today),
    record_service: RecordService = Depends(get_record_service),
) -> SummaryResponse:
    """Totals per status and the most common makes for the caller's records."""
    stats = await record_service.summarize(claim.account_id, today)
    return SummaryResponse(**stats)


@router.post(
    "/vehicles",
    response_model=ServiceRecordResponse,
    tags=["Vehicles"],
    summary="Create a service record",
)
@limiter.limit(RATE_LIMITS["vehicles"])
async def create_vehicle(
    request: Request,
    body: ServiceRecordFields,
    claim: SessionClaim = Depends(get_current_claim),
    today: date = Depends(get_today),
    record_service: RecordService = Depends(get_record_service),
) -> ServiceRecordResponse:
    record = await record_service.create(claim.account_id, body.model_dump())
    return ServiceRecordResponse.from_record(record, record_service.status_of(record, today))


@router.put(
    "/vehicles/{record_id}",
    response_model=SuccessResponse,
    tags=["Vehicles"],
    summary="Replace a service record",
)
@limiter.limit(RATE_LIMITS["vehicles"])
async def update_vehicle(
    request: Request,
    record_id: int,
    body: ServiceRecordFields,
    claim: SessionClaim = Depends(get_current_claim),
    record_service: RecordService = Depends(get_record_service),
) -> SuccessResponse:
    """
    Overwrite every field of a record owned by the caller.

    Raises:
        RecordNotFoundError (404): No such record, or owned by another account
    """
    if not await record_service.update(claim.account_id, record_id, body.model_dump()):
        raise RecordNotFoundError(record_id)
    return SuccessResponse()


@router.delete(
    "/vehicles/{record_id}",
    response_model=SuccessResponse,
    tags=["Vehicles"],
    summary="Delete a service record",
)
@limiter.limit(RATE_LIMITS["vehicles"])
async def delete_vehicle(
    request: Request,
    record_id: int,
    claim: SessionClaim = Depends(get_current_claim),
    record_service: RecordService = Depends(get_record_service),
) -> SuccessResponse:
    """
    Delete a record owned by the caller.

    Raises:
        RecordNotFoundError (404): No such record, or owned by another account
    """
    if not await record_service.delete(claim.account_id, record_id):
        raise RecordNotFoundError(record_id)
    return SuccessResponse()
