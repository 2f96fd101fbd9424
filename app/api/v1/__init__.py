from fastapi import APIRouter

from app.api.v1.endpoints import bookings, checkouts, directory, permits, rooms

api_router = APIRouter()
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(checkouts.router, prefix="/checkouts", tags=["checkouts"])
api_router.include_router(permits.router, prefix="/permits", tags=["permits"])
api_router.include_router(directory.router, prefix="/directory", tags=["directory"])
