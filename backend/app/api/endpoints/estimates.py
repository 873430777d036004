"""
Estimate API Endpoints.

Advisory trip-time and tip suggestions for the trip form. These always
answer; when the model is unavailable a local formula is used.
"""

from fastapi import APIRouter, Depends
from backend.app.schemas.estimate import (
    TripTimeEstimateRequest, TripTimeEstimateResponse,
    TipEstimateRequest, TipEstimateResponse
)
from backend.app.services.ai_client import ChatCompletionClient, get_ai_client
from backend.app.services.estimates import estimate_trip_time, estimate_tip

router = APIRouter(prefix="/estimates", tags=["Estimates"])


@router.post("/trip-time", response_model=TripTimeEstimateResponse)
async def trip_time_estimate(
    request: TripTimeEstimateRequest,
    client: ChatCompletionClient = Depends(get_ai_client)
):
    """Suggest travel time in minutes between two addresses."""
    minutes, source = await estimate_trip_time(client, request.pickup, request.dropoff)
    return TripTimeEstimateResponse(minutes=minutes, source=source)


@router.post("/tip", response_model=TipEstimateResponse)
async def tip_estimate(
    request: TipEstimateRequest,
    client: ChatCompletionClient = Depends(get_ai_client)
):
    """Suggest a tip for a fare and trip duration."""
    tip, source = await estimate_tip(client, request.fare, request.estimated_time)
    return TipEstimateResponse(tip=tip, source=source)
