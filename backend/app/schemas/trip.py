"""
Trip schemas.

Schemas for trip requests, edits, lifecycle transitions and visibility.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, List, Optional
from pydantic import AfterValidator, ConfigDict, EmailStr, Field
from backend.app.models.enums import RideStatus
from backend.app.schemas.common import APIModel, RequiredStr

CENTS = Decimal("0.01")


def to_cents(value: Decimal) -> Decimal:
    """Round money amounts to whole cents."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


Money = Annotated[Decimal, AfterValidator(to_cents)]


class TripCreate(APIModel):
    """
    Schema for a rider's trip request (POST /api/trip).
    
    The rider is identified by e-mail. Status is always Requested on
    creation, so it is not accepted here.
    """
    pickup_location: RequiredStr = Field(..., alias="PickUpLocation", max_length=255)
    dropoff_location: RequiredStr = Field(..., alias="DropOffLocation", max_length=255)
    estimated_time: int = Field(default=0, alias="EstimatedTime", ge=0)
    fare: Money = Field(default=Decimal("0"), alias="Fare", ge=0)
    tip: Money = Field(default=Decimal("0"), alias="Tip", ge=0)
    rider_email: EmailStr = Field(..., alias="RiderID")


class TripUpdate(APIModel):
    """
    Schema for trip edits (PUT /api/trip/{id}).
    
    Status cannot be changed here; use the accept/complete/cancel routes.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")
    
    pickup_location: Optional[RequiredStr] = Field(default=None, alias="PickUpLocation", max_length=255)
    dropoff_location: Optional[RequiredStr] = Field(default=None, alias="DropOffLocation", max_length=255)
    estimated_time: Optional[int] = Field(default=None, alias="EstimatedTime", ge=0)
    fare: Optional[Money] = Field(default=None, alias="Fare", ge=0)
    tip: Optional[Money] = Field(default=None, alias="Tip", ge=0)


class TripAccept(APIModel):
    """Body of PUT /api/trip/{id}/accept."""
    driver_email: EmailStr = Field(..., alias="DriverID")


class TripResponse(APIModel):
    """Schema for trip response."""
    id: int = Field(..., alias="RideID")
    pickup_location: str = Field(..., alias="PickUpLocation")
    dropoff_location: str = Field(..., alias="DropOffLocation")
    estimated_time: int = Field(..., alias="EstimatedTime")
    fare: float = Field(..., alias="Fare")
    tip: float = Field(..., alias="Tip")
    ride_status: RideStatus = Field(..., alias="RideStatus")
    rider_email: str = Field(..., alias="RiderID")
    driver_email: Optional[str] = Field(default=None, alias="DriverID")
    accepted_at: Optional[datetime] = Field(default=None, alias="AcceptedAt")
    completed_at: Optional[datetime] = Field(default=None, alias="CompletedAt")
    cancelled_at: Optional[datetime] = Field(default=None, alias="CancelledAt")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class TripDetailResponse(APIModel):
    trip: TripResponse


class TripMessageResponse(APIModel):
    message: str
    trip: TripResponse


class TripListResponse(APIModel):
    """Schema for trip list."""
    trips: List[TripResponse]
    total: int
