"""
Driver API Endpoints.

Mounted at both /drivers and /driver; older pages of the web client use the
singular path.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from backend.app.db.session import get_db
from backend.app.models.driver import Driver
from backend.app.models.enums import DriverStatus, UserRole
from backend.app.schemas.common import MessageResponse
from backend.app.schemas.driver import (
    DriverCreate, DriverUpdate, DriverSummary, DriverResponse,
    DriverCreateResponse, DriverDetailResponse, DriverUpdateResponse, DriverListResponse
)
from backend.app.core.exceptions import DuplicateEmailError
from backend.app.core.guards import require_role, driver_ownership
from backend.app.core.token_revocation import revoke_account_tokens

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Drivers"])

# Optional text columns that an explicit null clears
NULLABLE_FIELDS = {
    "phone_number", "street_address", "city", "state", "zip_code",
    "license_number", "insurance_id", "bank_id", "vehicle_id",
    "vehicle_color", "vehicle_make", "vehicle_model", "vehicle_license_plate",
}


async def find_driver_by_email(db: AsyncSession, email: str) -> Optional[Driver]:
    result = await db.execute(
        select(Driver).where(func.lower(Driver.email) == email.lower())
    )
    return result.scalar_one_or_none()


async def get_driver_or_404(db: AsyncSession, driver_id: int) -> Driver:
    driver = await db.get(Driver, driver_id)
    if not driver:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Driver not found"
        )
    return driver


@router.post("", response_model=DriverCreateResponse, status_code=status.HTTP_201_CREATED)
async def register_driver(
    driver_data: DriverCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new driver.
    
    Returns 409 if the e-mail is already registered.
    """
    if await find_driver_by_email(db, driver_data.email):
        raise DuplicateEmailError("Email already registered", driver_data.email)
    
    values = driver_data.model_dump(exclude={"status"})
    new_driver = Driver(**values, status=driver_data.status or DriverStatus.ACTIVE)
    db.add(new_driver)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmailError("Email already registered", driver_data.email)
    await db.refresh(new_driver)
    
    logger.info("Driver %s registered", new_driver.id)
    
    return DriverCreateResponse(
        message="Driver registered successfully",
        driver=DriverSummary.model_validate(new_driver)
    )


@router.get("", response_model=DriverListResponse)
async def list_drivers(
    email: Optional[str] = Query(None, description="Case-insensitive e-mail filter"),
    driver_status: Optional[DriverStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db)
):
    """List drivers, newest first."""
    filters = []
    if email:
        filters.append(func.lower(Driver.email) == email.strip().lower())
    if driver_status:
        filters.append(Driver.status == driver_status)
    
    total_result = await db.execute(select(func.count(Driver.id)).where(*filters))
    total = total_result.scalar()
    
    offset = (page - 1) * page_size
    result = await db.execute(
        select(Driver).where(*filters)
        .order_by(Driver.id.desc()).offset(offset).limit(page_size)
    )
    drivers = result.scalars().all()
    
    return DriverListResponse(
        drivers=[DriverResponse.model_validate(driver) for driver in drivers],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{driver_id}", response_model=DriverDetailResponse)
async def get_driver(
    driver_id: int,
    current_user: dict = Depends(require_role([UserRole.DRIVER])),
    db: AsyncSession = Depends(get_db)
):
    """Get a driver's own account details."""
    driver_ownership.enforce(driver_id, current_user)
    driver = await get_driver_or_404(db, driver_id)
    
    if not driver.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )
    
    return DriverDetailResponse(driver=DriverResponse.model_validate(driver))


@router.put("/{driver_id}", response_model=DriverUpdateResponse)
async def update_driver(
    driver_id: int,
    driver_data: DriverUpdate,
    current_user: dict = Depends(require_role([UserRole.DRIVER])),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a driver's own account.
    
    Only provided fields are changed; optional fields may be cleared with null.
    """
    driver_ownership.enforce(driver_id, current_user)
    driver = await get_driver_or_404(db, driver_id)
    
    if not driver.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot update inactive account"
        )
    
    update_data = {
        field: value
        for field, value in driver_data.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }
    
    new_email = update_data.get("email")
    if new_email and new_email.lower() != driver.email.lower():
        if await find_driver_by_email(db, new_email):
            raise DuplicateEmailError("Email already in use", new_email)
    
    for field, value in update_data.items():
        setattr(driver, field, value)
    
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmailError("Email already in use", new_email)
    await db.refresh(driver)
    
    logger.info("Driver %s updated fields %s", driver.id, sorted(update_data))
    
    return DriverUpdateResponse(
        message="Driver updated successfully",
        driver=DriverResponse.model_validate(driver)
    )


@router.delete("/{driver_id}", response_model=MessageResponse)
async def deactivate_driver(
    driver_id: int,
    db: AsyncSession = Depends(get_db)
):
    """
    Deactivate a driver account (soft delete).
    
    A second call on the same account returns 400.
    """
    driver = await get_driver_or_404(db, driver_id)
    
    if not driver.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account is already inactive"
        )
    
    driver.status = DriverStatus.INACTIVE
    await db.commit()
    
    await revoke_account_tokens(driver.email)
    logger.info("Driver %s deactivated", driver.id)
    
    return MessageResponse(message="Account deactivated successfully")
