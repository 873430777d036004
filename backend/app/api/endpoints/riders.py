"""
Rider API Endpoints.

Registration, account page reads/edits and soft deletion of rider accounts.
Reading and editing a rider requires a service token for that rider.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from backend.app.db.session import get_db
from backend.app.models.rider import Rider
from backend.app.models.enums import AccountStatus, UserRole
from backend.app.schemas.common import MessageResponse
from backend.app.schemas.rider import (
    RiderCreate, RiderUpdate, RiderSummary, RiderResponse,
    RiderCreateResponse, RiderDetailResponse, RiderUpdateResponse, RiderListResponse
)
from backend.app.core.exceptions import DuplicateEmailError
from backend.app.core.guards import require_role, rider_ownership
from backend.app.core.token_revocation import revoke_account_tokens

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/riders", tags=["Riders"])


async def find_rider_by_email(db: AsyncSession, email: str) -> Optional[Rider]:
    result = await db.execute(
        select(Rider).where(func.lower(Rider.email) == email.lower())
    )
    return result.scalar_one_or_none()


async def get_rider_or_404(db: AsyncSession, rider_id: int) -> Rider:
    rider = await db.get(Rider, rider_id)
    if not rider:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Rider not found"
        )
    return rider


@router.post("", response_model=RiderCreateResponse, status_code=status.HTTP_201_CREATED)
async def register_rider(
    rider_data: RiderCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new rider.
    
    Returns 409 if the e-mail is already registered.
    """
    if await find_rider_by_email(db, rider_data.email):
        raise DuplicateEmailError("Email already registered", rider_data.email)
    
    new_rider = Rider(
        **rider_data.model_dump(),
        account_status=AccountStatus.ACTIVE
    )
    db.add(new_rider)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same e-mail
        await db.rollback()
        raise DuplicateEmailError("Email already registered", rider_data.email)
    await db.refresh(new_rider)
    
    logger.info("Rider %s registered", new_rider.id)
    
    return RiderCreateResponse(
        message="Rider registered successfully",
        rider=RiderSummary.model_validate(new_rider)
    )


@router.get("", response_model=RiderListResponse)
async def list_riders(
    email: Optional[str] = Query(None, description="Case-insensitive e-mail filter"),
    account_status: Optional[AccountStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db)
):
    """
    List riders, newest first.
    
    The web client filters this list by the signed-in user's e-mail.
    """
    filters = []
    if email:
        filters.append(func.lower(Rider.email) == email.strip().lower())
    if account_status:
        filters.append(Rider.account_status == account_status)
    
    total_result = await db.execute(select(func.count(Rider.id)).where(*filters))
    total = total_result.scalar()
    
    offset = (page - 1) * page_size
    result = await db.execute(
        select(Rider).where(*filters)
        .order_by(Rider.id.desc()).offset(offset).limit(page_size)
    )
    riders = result.scalars().all()
    
    return RiderListResponse(
        riders=[RiderResponse.model_validate(rider) for rider in riders],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{rider_id}", response_model=RiderDetailResponse)
async def get_rider(
    rider_id: int,
    current_user: dict = Depends(require_role([UserRole.RIDER])),
    db: AsyncSession = Depends(get_db)
):
    """
    Get a rider's own account details.
    
    Inactive accounts are reported as 403.
    """
    rider_ownership.enforce(rider_id, current_user)
    rider = await get_rider_or_404(db, rider_id)
    
    if not rider.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )
    
    return RiderDetailResponse(rider=RiderResponse.model_validate(rider))


@router.put("/{rider_id}", response_model=RiderUpdateResponse)
async def update_rider(
    rider_id: int,
    rider_data: RiderUpdate,
    current_user: dict = Depends(require_role([UserRole.RIDER])),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a rider's own account.
    
    Only provided fields are changed. Changing the e-mail to one that
    another rider uses returns 409.
    """
    rider_ownership.enforce(rider_id, current_user)
    rider = await get_rider_or_404(db, rider_id)
    
    if not rider.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot update inactive account"
        )
    
    update_data = rider_data.model_dump(exclude_unset=True, exclude_none=True)
    if "phone_number" in rider_data.model_fields_set:
        # An explicit null clears the phone number
        update_data["phone_number"] = rider_data.phone_number
    
    new_email = update_data.get("email")
    if new_email and new_email.lower() != rider.email.lower():
        if await find_rider_by_email(db, new_email):
            raise DuplicateEmailError("Email already in use", new_email)
    
    for field, value in update_data.items():
        setattr(rider, field, value)
    
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmailError("Email already in use", new_email)
    await db.refresh(rider)
    
    logger.info("Rider %s updated fields %s", rider.id, sorted(update_data))
    
    return RiderUpdateResponse(
        message="Rider updated successfully",
        rider=RiderResponse.model_validate(rider)
    )


@router.delete("/{rider_id}", response_model=MessageResponse)
async def deactivate_rider(
    rider_id: int,
    db: AsyncSession = Depends(get_db)
):
    """
    Deactivate a rider account (soft delete).
    
    A second call on the same account returns 400.
    """
    rider = await get_rider_or_404(db, rider_id)
    
    if not rider.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account is already inactive"
        )
    
    rider.account_status = AccountStatus.INACTIVE
    await db.commit()
    
    await revoke_account_tokens(rider.email)
    logger.info("Rider %s deactivated", rider.id)
    
    return MessageResponse(message="Account deactivated successfully")
