"""
Estimate schemas for the advisory trip-time and tip helpers.
"""

from typing import Literal
from pydantic import BaseModel, Field
from backend.app.schemas.common import RequiredStr

EstimateSource = Literal["ai", "fallback"]


class TripTimeEstimateRequest(BaseModel):
    pickup: RequiredStr = Field(..., max_length=255)
    dropoff: RequiredStr = Field(..., max_length=255)


class TripTimeEstimateResponse(BaseModel):
    minutes: int = Field(..., gt=0)
    source: EstimateSource


class TipEstimateRequest(BaseModel):
    fare: float = Field(..., ge=0)
    estimated_time: int = Field(default=0, ge=0)


class TipEstimateResponse(BaseModel):
    tip: float = Field(..., ge=0)
    source: EstimateSource
