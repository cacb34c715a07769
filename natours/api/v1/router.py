"""API v1 router combining all endpoint routers."""

from fastapi import APIRouter

from natours.api.v1 import bookings, reviews, tours, users

router = APIRouter()

# Include all routers
router.include_router(tours.router, prefix="/tours", tags=["Tours"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
