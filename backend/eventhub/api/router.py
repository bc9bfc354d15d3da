from fastapi import APIRouter
from eventhub.api.endpoints import auth, events, clubs, attendance, payments

api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(events.router, tags=["Events"])
api_router.include_router(clubs.router, tags=["Clubs"])
api_router.include_router(attendance.router, tags=["Attendance"])
api_router.include_router(payments.router, tags=["Payments"])
