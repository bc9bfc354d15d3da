"""
Session Store
=============

Server-held mapping from an opaque token (the ``sessionId`` cookie) to the
signed-in student's USN, name and email. Sessions last SESSION_TTL_SECONDS
from creation; there is no sliding renewal.

Two backends:
- DatabaseSessionStore: rows in ``user_sessions`` (default)
- RedisSessionStore:    ``session:<token>`` keys with a TTL

Select with SESSION_BACKEND=database|redis.
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.config import settings
from eventhub.core.database import get_db
from eventhub.core.logging_config import logger
from eventhub.core.redis_client import RedisClient, redis_client
from eventhub.core.security import generate_session_token
from eventhub.models.session import UserSession


@dataclass
class SessionData:
    usn: str
    name: str
    email: str


class SessionStore:
    """Interface implemented by every session backend"""

    async def create(self, student) -> str:
        raise NotImplementedError

    async def resolve(self, token: Optional[str]) -> Optional[SessionData]:
        raise NotImplementedError

    async def destroy(self, token: Optional[str]) -> None:
        raise NotImplementedError


class DatabaseSessionStore(SessionStore):
    """Sessions persisted in the user_sessions table"""

    def __init__(self, db: AsyncSession, ttl_seconds: int = None):
        self.db = db
        self.ttl = timedelta(seconds=ttl_seconds or settings.SESSION_TTL_SECONDS)

    async def create(self, student) -> str:
        token = generate_session_token()
        now = datetime.utcnow()
        self.db.add(UserSession(
            token=token,
            student_usn=student.usn,
            student_name=student.name,
            student_email=student.email,
            created_at=now,
            expires_at=now + self.ttl,
        ))
        await self.db.commit()
        return token

    async def resolve(self, token: Optional[str]) -> Optional[SessionData]:
        if not token:
            return None

        result = await self.db.execute(
            select(UserSession).where(UserSession.token == token)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None

        if row.is_expired():
            await self.db.delete(row)
            await self.db.commit()
            return None

        return SessionData(usn=row.student_usn, name=row.student_name, email=row.student_email)

    async def destroy(self, token: Optional[str]) -> None:
        if not token:
            return
        await self.db.execute(delete(UserSession).where(UserSession.token == token))
        await self.db.commit()


class RedisSessionStore(SessionStore):
    """Sessions stored as JSON under session:<token> with an expiry"""

    KEY_PREFIX = "session:"

    def __init__(self, client: RedisClient, ttl_seconds: int = None):
        self.client = client
        self.ttl = ttl_seconds or settings.SESSION_TTL_SECONDS

    def _key(self, token: str) -> str:
        return f"{self.KEY_PREFIX}{token}"

    async def create(self, student) -> str:
        token = generate_session_token()
        data = SessionData(usn=student.usn, name=student.name, email=student.email)
        await self.client.set_json(self._key(token), asdict(data), self.ttl)
        return token

    async def resolve(self, token: Optional[str]) -> Optional[SessionData]:
        if not token:
            return None
        data = await self.client.get_json(self._key(token))
        if not data:
            return None
        return SessionData(**data)

    async def destroy(self, token: Optional[str]) -> None:
        if not token:
            return
        await self.client.delete(self._key(token))


async def get_session_store(db: AsyncSession = Depends(get_db)) -> SessionStore:
    """FastAPI dependency returning the configured backend"""
    backend = settings.SESSION_BACKEND.lower()
    if backend == "redis":
        return RedisSessionStore(redis_client)
    if backend != "database":
        logger.warning(f"Unknown SESSION_BACKEND '{settings.SESSION_BACKEND}', using database")
    return DatabaseSessionStore(db)
