"""
Trip lifecycle transitions.

Every transition is a single conditional UPDATE guarded by the allowed
source statuses, so two concurrent requests cannot both move the same trip.
When two drivers accept the same trip, the first UPDATE wins and the second
matches no row.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import (
    InactiveAccountError,
    InvalidStateError,
    ResourceNotFoundError,
)
from backend.app.models.driver import Driver
from backend.app.models.enums import RideStatus
from backend.app.models.trip import Trip

logger = logging.getLogger(__name__)


async def get_trip(db: AsyncSession, trip_id: int) -> Trip:
    """
    Load a trip by primary key, bypassing any stale copy in the session.
    
    Raises:
        ResourceNotFoundError: no such trip
    """
    trip = await db.get(Trip, trip_id, populate_existing=True)
    if trip is None:
        raise ResourceNotFoundError("Trip", trip_id)
    return trip


async def _update_if_status(
    db: AsyncSession,
    trip_id: int,
    allowed_from: List[RideStatus],
    **values
) -> bool:
    """Apply ``values`` only while the trip is in one of ``allowed_from``; commit on success."""
    result = await db.execute(
        update(Trip)
        .where(Trip.id == trip_id, Trip.ride_status.in_(allowed_from))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        return False
    await db.commit()
    return True


async def _transition(
    db: AsyncSession,
    trip_id: int,
    allowed_from: Iterable[RideStatus],
    to_status: RideStatus,
    action: str,
    **values
) -> Trip:
    allowed_from = list(allowed_from)
    if not await _update_if_status(db, trip_id, allowed_from, ride_status=to_status, **values):
        trip = await get_trip(db, trip_id)
        allowed = " or ".join(status.value for status in allowed_from)
        raise InvalidStateError(
            f"Can only {action} a {allowed} trip, current status: {trip.ride_status.value}",
            current_status=trip.ride_status.value
        )
    
    trip = await get_trip(db, trip_id)
    logger.info("Trip %s moved to %s", trip_id, to_status.value)
    return trip


async def accept_trip(db: AsyncSession, trip_id: int, driver_email: str) -> Trip:
    """
    Assign a driver to a Requested trip and move it to InProgress.
    
    Raises:
        ResourceNotFoundError: unknown trip or driver
        InactiveAccountError: driver account is deactivated
        InvalidStateError: trip is no longer Requested (already taken)
    """
    result = await db.execute(
        select(Driver).where(func.lower(Driver.email) == driver_email.lower())
    )
    driver = result.scalar_one_or_none()
    if driver is None:
        raise ResourceNotFoundError("Driver", driver_email)
    if not driver.is_active:
        raise InactiveAccountError("Driver account is inactive")
    
    return await _transition(
        db,
        trip_id,
        [RideStatus.REQUESTED],
        RideStatus.IN_PROGRESS,
        "accept",
        driver_email=driver.email,
        accepted_at=datetime.now(timezone.utc),
    )


async def complete_trip(db: AsyncSession, trip_id: int) -> Trip:
    """Move an InProgress trip to Completed."""
    return await _transition(
        db,
        trip_id,
        [RideStatus.IN_PROGRESS],
        RideStatus.COMPLETED,
        "complete",
        completed_at=datetime.now(timezone.utc),
    )


async def cancel_trip(db: AsyncSession, trip_id: int) -> Trip:
    """Cancel a trip that has not finished yet."""
    return await _transition(
        db,
        trip_id,
        [RideStatus.REQUESTED, RideStatus.IN_PROGRESS],
        RideStatus.CANCELLED,
        "cancel",
        cancelled_at=datetime.now(timezone.utc),
    )


LOCATION_FIELDS = {"pickup_location", "dropoff_location"}


async def edit_trip(db: AsyncSession, trip_id: int, changes: Dict[str, Any]) -> Trip:
    """
    Apply field edits to a trip.
    
    Locations may only change while the trip is Requested; other fields stay
    editable until the trip is cancelled. The status check and the write are
    one conditional UPDATE.
    
    Raises:
        ResourceNotFoundError: unknown trip
        InvalidStateError: trip is cancelled, or locations changed after acceptance
    """
    if LOCATION_FIELDS & set(changes):
        allowed_from = [RideStatus.REQUESTED]
    else:
        allowed_from = [RideStatus.REQUESTED, RideStatus.IN_PROGRESS, RideStatus.COMPLETED]
    
    if not await _update_if_status(db, trip_id, allowed_from, updated_at=func.now(), **changes):
        trip = await get_trip(db, trip_id)
        if trip.ride_status == RideStatus.CANCELLED:
            raise InvalidStateError(
                "Cannot edit a cancelled trip",
                current_status=trip.ride_status.value
            )
        raise InvalidStateError(
            f"Locations can only change while a trip is Requested, current status: {trip.ride_status.value}",
            current_status=trip.ride_status.value
        )
    
    trip = await get_trip(db, trip_id)
    logger.info("Trip %s updated fields %s", trip_id, sorted(changes))
    return trip
