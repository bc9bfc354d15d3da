"""
Database Seed Data Module

Clubs (static reference data), a few demo students and their club
memberships. Safe to run repeatedly: existing rows are left alone.

Run with: python -m eventhub.db.seed_data
          python -m eventhub.db.seed_data clear
"""
import asyncio
import sys

from sqlalchemy import select, delete

from eventhub.core.database import AsyncSessionLocal, init_db
from eventhub.core.security import get_password_hash
from eventhub.models import (
    Club,
    Membership,
    Student,
    Event,
    Participant,
    Volunteer,
    EventPayment,
    UserSession,
)


# ==================== Sample Data Constants ====================

SAMPLE_CLUBS = [
    {"name": "Coding Club", "description": "Competitive programming, hackathons and open source", "max_members": 120},
    {"name": "Robotics Club", "description": "Build, program and race robots", "max_members": 60},
    {"name": "Music Club", "description": "Bands, open mics and the annual fest concert", "max_members": 80},
    {"name": "Literary Club", "description": "Debates, quizzes and creative writing", "max_members": 70},
    {"name": "Photography Club", "description": "Photo walks, workshops and exhibitions", "max_members": 50},
    {"name": "Entrepreneurship Cell", "description": "Startup talks, pitch competitions and mentoring", "max_members": None},
]

DEMO_PASSWORD = "eventhub123"

SAMPLE_STUDENTS = [
    {"usn": "1BM22CS001", "name": "Rahul Sharma", "semester": 5, "mobile": "9876543210", "email": "rahul.cs22@bmsce.ac.in"},
    {"usn": "1BM22CS045", "name": "Priya Patel", "semester": 5, "mobile": "9876543211", "email": "priya.cs22@bmsce.ac.in"},
    {"usn": "1BM23EC012", "name": "Amit Kumar", "semester": 3, "mobile": "9876543212", "email": "amit.ec23@bmsce.ac.in"},
    {"usn": "1BM21ME077", "name": "Sneha Reddy", "semester": 7, "mobile": "9876543213", "email": "sneha.me21@bmsce.ac.in"},
]

# (usn, club name)
SAMPLE_MEMBERSHIPS = [
    ("1BM22CS001", "Coding Club"),
    ("1BM22CS001", "Entrepreneurship Cell"),
    ("1BM22CS045", "Music Club"),
    ("1BM23EC012", "Robotics Club"),
    ("1BM21ME077", "Photography Club"),
]


async def seed_clubs(db) -> dict:
    clubs = {}
    for data in SAMPLE_CLUBS:
        result = await db.execute(select(Club).where(Club.name == data["name"]))
        club = result.scalar_one_or_none()
        if club is None:
            club = Club(**data)
            db.add(club)
            await db.flush()
            print(f"  + club {club.name}")
        clubs[club.name] = club
    return clubs


async def seed_students(db) -> None:
    hashed = get_password_hash(DEMO_PASSWORD)
    for data in SAMPLE_STUDENTS:
        if await db.get(Student, data["usn"]) is None:
            db.add(Student(hashed_password=hashed, **data))
            print(f"  + student {data['usn']}")
    await db.flush()


async def seed_memberships(db, clubs: dict) -> None:
    for usn, club_name in SAMPLE_MEMBERSHIPS:
        club = clubs[club_name]
        if await db.get(Membership, (usn, club.id)) is None:
            db.add(Membership(student_usn=usn, club_id=club.id))
            print(f"  + membership {usn} -> {club_name}")


async def seed_all():
    print("Creating tables...")
    await init_db()

    print("Seeding data...")
    async with AsyncSessionLocal() as db:
        clubs = await seed_clubs(db)
        await seed_students(db)
        await seed_memberships(db, clubs)
        await db.commit()
    print(f"Done. Demo students sign in with password '{DEMO_PASSWORD}'.")


async def clear_all():
    """Clear all data (use with caution!)"""
    print("Clearing all data...")
    async with AsyncSessionLocal() as db:
        # Delete in reverse order of dependencies
        for model in (UserSession, EventPayment, Participant, Volunteer, Event, Membership, Club, Student):
            await db.execute(delete(model))
        await db.commit()
        print("All data cleared!")


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "clear":
        asyncio.run(clear_all())
    else:
        asyncio.run(seed_all())
