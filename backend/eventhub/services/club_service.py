"""Club directory and student listing"""

from typing import List, Dict, Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from eventhub.models.club import Club, Membership
from eventhub.models.student import Student


def serialize_club(club: Club) -> Dict[str, Any]:
    return {
        "cid": club.id,
        "cname": club.name,
        "clubdesc": club.description,
        "maxmembers": club.max_members,
    }


def serialize_student(student: Student) -> Dict[str, Any]:
    # No credential or reset-token columns
    return {
        "usn": student.usn,
        "sname": student.name,
        "sem": student.semester,
        "mobno": student.mobile,
        "emailid": student.email,
    }


class ClubService:

    async def list_clubs(self, db: AsyncSession) -> List[Club]:
        result = await db.execute(select(Club).order_by(Club.id))
        return list(result.scalars().all())

    async def list_member_clubs(self, db: AsyncSession, usn: str) -> List[Club]:
        result = await db.execute(
            select(Club)
            .join(Membership, Membership.club_id == Club.id)
            .where(Membership.student_usn == usn)
            .order_by(Club.id)
        )
        return list(result.scalars().all())

    async def list_students(self, db: AsyncSession) -> List[Student]:
        result = await db.execute(select(Student).order_by(Student.usn))
        return list(result.scalars().all())


club_service = ClubService()
