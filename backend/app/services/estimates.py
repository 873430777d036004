"""
Advisory trip-time and tip estimates.

The model is asked for a bare number. Anything else (no configuration,
errors, non-numeric or out-of-range answers) falls back to a local formula.
"""

import logging
import math
import random
from typing import Optional, Tuple

from backend.app.services.ai_client import AIClientError, ChatCompletionClient

logger = logging.getLogger(__name__)

FALLBACK_MIN_MINUTES = 10
FALLBACK_MAX_MINUTES = 19
FALLBACK_TIP_RATE = 0.15

SYSTEM_PROMPT = "Return only a number."


def parse_number(text: str) -> Optional[float]:
    """Parse a bare numeric reply; returns None for anything else."""
    try:
        value = float(text.strip())
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def fallback_trip_minutes() -> int:
    return random.randint(FALLBACK_MIN_MINUTES, FALLBACK_MAX_MINUTES)


def fallback_tip(fare: float) -> float:
    return round(max(fare, 0) * FALLBACK_TIP_RATE, 2)


async def estimate_trip_time(client: ChatCompletionClient, pickup: str, dropoff: str) -> Tuple[int, str]:
    """
    Estimate travel time in whole minutes.
    
    Returns:
        (minutes, source) where source is "ai" or "fallback"
    """
    prompt = (
        "Estimate travel time between:\n"
        f"Pickup: {pickup}\n"
        f"Dropoff: {dropoff}\n\n"
        "Rules:\n"
        "- Return ONLY a number in minutes. No text.\n"
        "- If unsure, guess a reasonable number between 5 and 25."
    )
    try:
        reply = await client.complete(SYSTEM_PROMPT, prompt, max_tokens=10)
    except AIClientError as e:
        logger.info("Trip time estimate falling back: %s", e)
        return fallback_trip_minutes(), "fallback"
    
    minutes = parse_number(reply)
    if minutes is None or minutes <= 0:
        logger.info("Unusable trip time reply %r, falling back", reply)
        return fallback_trip_minutes(), "fallback"
    return max(1, round(minutes)), "ai"


async def estimate_tip(client: ChatCompletionClient, fare: float, estimated_time: int) -> Tuple[float, str]:
    """
    Suggest a tip in dollars, rounded to cents.
    
    Returns:
        (tip, source) where source is "ai" or "fallback"
    """
    prompt = (
        "You are a rideshare assistant.\n\n"
        "Given:\n"
        f"- Fare: ${fare:.2f}\n"
        f"- Estimated time: {estimated_time} minutes\n\n"
        "Return ONLY a suggested tip amount in dollars as a positive number with at most 2 decimals.\n"
        "Do NOT include any words or currency symbols. Example: 3.5 or 4.25"
    )
    try:
        reply = await client.complete(SYSTEM_PROMPT, prompt, max_tokens=20)
    except AIClientError as e:
        logger.info("Tip estimate falling back: %s", e)
        return fallback_tip(fare), "fallback"
    
    tip = parse_number(reply)
    if tip is None or tip < 0:
        logger.info("Unusable tip reply %r, falling back", reply)
        return fallback_tip(fare), "fallback"
    return round(tip, 2), "ai"
