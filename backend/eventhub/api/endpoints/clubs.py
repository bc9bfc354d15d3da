from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.database import get_db
from eventhub.core.session_store import SessionData
from eventhub.modules.auth.dependencies import get_current_session
from eventhub.schemas.club import ClubListResponse, StudentListResponse
from eventhub.services.club_service import club_service, serialize_club, serialize_student

router = APIRouter()


@router.get("/clubs", response_model=ClubListResponse)
async def list_clubs(
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    clubs = await club_service.list_clubs(db)
    return {"clubs": [serialize_club(club) for club in clubs], "userUSN": current.usn}


@router.get("/my-clubs", response_model=ClubListResponse)
async def list_my_clubs(
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    """Clubs the signed-in student belongs to (and may organize events for)"""
    clubs = await club_service.list_member_clubs(db, current.usn)
    return {"clubs": [serialize_club(club) for club in clubs], "userUSN": current.usn}


@router.get("/students", response_model=StudentListResponse)
async def list_students(
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    students = await club_service.list_students(db)
    return {"students": [serialize_student(s) for s in students], "currentUser": current.usn}
