"""
API Router.

Aggregates all endpoints served under /api.
"""

from fastapi import APIRouter
from backend.app.api.endpoints import auth, riders, drivers, trips, estimates

router = APIRouter()

router.include_router(auth.router)
router.include_router(riders.router)

# Drivers: plural is canonical, singular kept for older client pages
router.include_router(drivers.router, prefix="/drivers")
router.include_router(drivers.router, prefix="/driver", include_in_schema=False)

# Trips: singular is what the client uses
router.include_router(trips.router, prefix="/trip")
router.include_router(trips.router, prefix="/trips", include_in_schema=False)

router.include_router(estimates.router)
