"""
Rider schemas.
"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import EmailStr, Field
from backend.app.models.enums import AccountStatus, LocationStatus
from backend.app.schemas.common import APIModel, RequiredStr


class RiderCreate(APIModel):
    """
    Schema for rider registration.
    
    Used by POST /api/riders. New riders are always active.
    """
    first_name: RequiredStr = Field(..., alias="FirstName", max_length=100)
    last_name: RequiredStr = Field(..., alias="LastName", max_length=100)
    date_of_birth: date = Field(..., alias="DateOfBirth")
    phone_number: Optional[str] = Field(default=None, alias="PhoneNumber", max_length=15)
    email: EmailStr = Field(..., alias="Email")
    street_address: RequiredStr = Field(..., alias="StreetAddress", max_length=200)
    city: RequiredStr = Field(..., alias="City", max_length=100)
    state: RequiredStr = Field(..., alias="State", max_length=100)
    zip_code: RequiredStr = Field(..., alias="ZipCode", max_length=20)
    location_status: LocationStatus = Field(default=LocationStatus.OFF, alias="LocationStatus")


class RiderUpdate(APIModel):
    """
    Schema for rider profile edits (PUT /api/riders/{id}).
    
    Only supplied fields are changed. Account status is not editable here;
    deactivation goes through DELETE.
    """
    first_name: Optional[RequiredStr] = Field(default=None, alias="FirstName", max_length=100)
    last_name: Optional[RequiredStr] = Field(default=None, alias="LastName", max_length=100)
    date_of_birth: Optional[date] = Field(default=None, alias="DateOfBirth")
    phone_number: Optional[str] = Field(default=None, alias="PhoneNumber", max_length=15)
    email: Optional[EmailStr] = Field(default=None, alias="Email")
    street_address: Optional[RequiredStr] = Field(default=None, alias="StreetAddress", max_length=200)
    city: Optional[RequiredStr] = Field(default=None, alias="City", max_length=100)
    state: Optional[RequiredStr] = Field(default=None, alias="State", max_length=100)
    zip_code: Optional[RequiredStr] = Field(default=None, alias="ZipCode", max_length=20)
    location_status: Optional[LocationStatus] = Field(default=None, alias="LocationStatus")


class RiderSummary(APIModel):
    """Subset returned right after registration."""
    id: int = Field(..., alias="RiderID")
    first_name: str = Field(..., alias="FirstName")
    last_name: str = Field(..., alias="LastName")
    email: str = Field(..., alias="Email")


class RiderResponse(APIModel):
    """Full rider record."""
    id: int = Field(..., alias="RiderID")
    first_name: str = Field(..., alias="FirstName")
    last_name: str = Field(..., alias="LastName")
    date_of_birth: date = Field(..., alias="DateOfBirth")
    phone_number: Optional[str] = Field(default=None, alias="PhoneNumber")
    email: str = Field(..., alias="Email")
    street_address: str = Field(..., alias="StreetAddress")
    city: str = Field(..., alias="City")
    state: str = Field(..., alias="State")
    zip_code: str = Field(..., alias="ZipCode")
    location_status: LocationStatus = Field(..., alias="LocationStatus")
    account_status: AccountStatus = Field(..., alias="AccountStatus")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class RiderCreateResponse(APIModel):
    message: str
    rider: RiderSummary


class RiderDetailResponse(APIModel):
    rider: RiderResponse


class RiderUpdateResponse(APIModel):
    message: str
    rider: RiderResponse


class RiderListResponse(APIModel):
    """Schema for paginated rider list."""
    riders: List[RiderResponse]
    total: int
    page: int
    page_size: int
