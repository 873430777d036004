"""
Trip API Endpoints.

Riders request trips, drivers accept and complete them, and either side can
cancel before completion. Mounted at both /trip and /trips.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from backend.app.db.session import get_db
from backend.app.models.trip import Trip
from backend.app.models.enums import RideStatus
from backend.app.schemas.trip import (
    TripCreate, TripUpdate, TripAccept, TripResponse,
    TripDetailResponse, TripMessageResponse, TripListResponse
)
from backend.app.services.trip_lifecycle import (
    get_trip, edit_trip, accept_trip, complete_trip, cancel_trip
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Trips"])


async def query_trips(
    db: AsyncSession,
    ride_status: Optional[RideStatus] = None,
    rider: Optional[str] = None,
    driver: Optional[str] = None,
) -> TripListResponse:
    """Return trips matching the filters, newest first."""
    filters = []
    if ride_status:
        filters.append(Trip.ride_status == ride_status)
    if rider:
        filters.append(func.lower(Trip.rider_email) == rider.strip().lower())
    if driver:
        filters.append(func.lower(Trip.driver_email) == driver.strip().lower())
    
    result = await db.execute(
        select(Trip).where(*filters).order_by(Trip.id.desc())
    )
    trips = result.scalars().all()
    
    return TripListResponse(
        trips=[TripResponse.model_validate(trip) for trip in trips],
        total=len(trips)
    )


@router.post("", response_model=TripMessageResponse, status_code=status.HTTP_201_CREATED)
async def request_trip(
    trip_data: TripCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Request a new trip.
    
    The trip always starts in Requested with no driver.
    """
    new_trip = Trip(
        **trip_data.model_dump(),
        ride_status=RideStatus.REQUESTED,
        driver_email=None
    )
    db.add(new_trip)
    await db.commit()
    await db.refresh(new_trip)
    
    logger.info("Trip %s requested by %s", new_trip.id, new_trip.rider_email)
    
    return TripMessageResponse(
        message="Trip created successfully",
        trip=TripResponse.model_validate(new_trip)
    )


@router.get("", response_model=TripListResponse)
async def list_trips(
    rider: Optional[str] = Query(None, description="Rider e-mail filter"),
    driver: Optional[str] = Query(None, description="Driver e-mail filter"),
    db: AsyncSession = Depends(get_db)
):
    """List all trips, optionally for one rider or driver."""
    return await query_trips(db, rider=rider, driver=driver)


@router.get("/status/{ride_status}", response_model=TripListResponse)
async def list_trips_by_status(
    ride_status: str = Path(..., description="Requested, InProgress, Completed or Cancelled"),
    rider: Optional[str] = Query(None, description="Rider e-mail filter"),
    driver: Optional[str] = Query(None, description="Driver e-mail filter"),
    db: AsyncSession = Depends(get_db)
):
    """
    List trips in one status.
    
    Drivers poll Requested trips; riders build their history from
    InProgress and Completed.
    """
    try:
        parsed_status = RideStatus(ride_status)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid ride status: {ride_status}"
        )
    return await query_trips(db, ride_status=parsed_status, rider=rider, driver=driver)


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip_detail(
    trip_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get a single trip."""
    trip = await get_trip(db, trip_id)
    return TripDetailResponse(trip=TripResponse.model_validate(trip))


@router.put("/{trip_id}", response_model=TripMessageResponse)
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Edit a trip's details.
    
    Locations may only change while the trip is Requested. Cancelled trips
    cannot be edited. The tip stays editable after completion.
    """
    update_data = trip_data.model_dump(exclude_unset=True, exclude_none=True)
    trip = await edit_trip(db, trip_id, update_data)
    
    return TripMessageResponse(
        message="Trip updated successfully",
        trip=TripResponse.model_validate(trip)
    )


@router.put("/{trip_id}/accept", response_model=TripMessageResponse)
async def accept(
    trip_data: TripAccept,
    trip_id: int = Path(..., description="Trip ID"),
    db: AsyncSession = Depends(get_db)
):
    """
    Accept a Requested trip as a driver.
    
    Only one driver can win; later attempts get 400.
    """
    trip = await accept_trip(db, trip_id, trip_data.driver_email)
    return TripMessageResponse(
        message="Trip accepted successfully",
        trip=TripResponse.model_validate(trip)
    )


@router.put("/{trip_id}/complete", response_model=TripMessageResponse)
async def complete(
    trip_id: int = Path(..., description="Trip ID"),
    db: AsyncSession = Depends(get_db)
):
    """Mark an InProgress trip as Completed."""
    trip = await complete_trip(db, trip_id)
    return TripMessageResponse(
        message="Trip completed successfully",
        trip=TripResponse.model_validate(trip)
    )


@router.put("/{trip_id}/cancel", response_model=TripMessageResponse)
async def cancel(
    trip_id: int = Path(..., description="Trip ID"),
    db: AsyncSession = Depends(get_db)
):
    """Cancel a Requested or InProgress trip."""
    trip = await cancel_trip(db, trip_id)
    return TripMessageResponse(
        message="Trip cancelled successfully",
        trip=TripResponse.model_validate(trip)
    )
