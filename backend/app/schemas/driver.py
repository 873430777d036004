"""
Driver schemas.
"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import EmailStr, Field
from backend.app.models.enums import DriverStatus
from backend.app.schemas.common import APIModel, RequiredStr


class DriverFields(APIModel):
    """Optional driver attributes shared by create and update."""
    phone_number: Optional[str] = Field(default=None, alias="PhoneNumber", max_length=15)
    street_address: Optional[str] = Field(default=None, alias="StreetAddress", max_length=200)
    city: Optional[str] = Field(default=None, alias="City", max_length=100)
    state: Optional[str] = Field(default=None, alias="State", max_length=100)
    zip_code: Optional[str] = Field(default=None, alias="ZipCode", max_length=20)
    license_number: Optional[str] = Field(default=None, alias="LicenseNumber", max_length=50)
    insurance_id: Optional[int] = Field(default=None, alias="InsuranceID")
    bank_id: Optional[int] = Field(default=None, alias="BankID")
    vehicle_id: Optional[int] = Field(default=None, alias="VehicleID")
    vehicle_color: Optional[str] = Field(default=None, alias="VehicleColor", max_length=50)
    vehicle_make: Optional[str] = Field(default=None, alias="VehicleMake", max_length=50)
    vehicle_model: Optional[str] = Field(default=None, alias="VehicleModel", max_length=50)
    vehicle_license_plate: Optional[str] = Field(default=None, alias="VehicleLicensePlate", max_length=20)


class DriverCreate(DriverFields):
    """
    Schema for driver registration (POST /api/drivers).
    
    Status defaults to active when omitted or null.
    """
    first_name: RequiredStr = Field(..., alias="FirstName", max_length=100)
    last_name: RequiredStr = Field(..., alias="LastName", max_length=100)
    date_of_birth: date = Field(..., alias="DateOfBirth")
    email: EmailStr = Field(..., alias="Email")
    status: Optional[DriverStatus] = Field(default=None, alias="Status")


class DriverUpdate(DriverFields):
    """Schema for driver profile edits; only supplied fields change."""
    first_name: Optional[RequiredStr] = Field(default=None, alias="FirstName", max_length=100)
    last_name: Optional[RequiredStr] = Field(default=None, alias="LastName", max_length=100)
    date_of_birth: Optional[date] = Field(default=None, alias="DateOfBirth")
    email: Optional[EmailStr] = Field(default=None, alias="Email")


class DriverSummary(APIModel):
    id: int = Field(..., alias="DriverID")
    first_name: str = Field(..., alias="FirstName")
    last_name: str = Field(..., alias="LastName")
    email: str = Field(..., alias="Email")


class DriverResponse(DriverFields):
    """Full driver record."""
    id: int = Field(..., alias="DriverID")
    first_name: str = Field(..., alias="FirstName")
    last_name: str = Field(..., alias="LastName")
    date_of_birth: date = Field(..., alias="DateOfBirth")
    email: str = Field(..., alias="Email")
    status: DriverStatus = Field(..., alias="Status")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class DriverCreateResponse(APIModel):
    message: str
    driver: DriverSummary


class DriverDetailResponse(APIModel):
    driver: DriverResponse


class DriverUpdateResponse(APIModel):
    message: str
    driver: DriverResponse


class DriverListResponse(APIModel):
    """Schema for paginated driver list."""
    drivers: List[DriverResponse]
    total: int
    page: int
    page_size: int
