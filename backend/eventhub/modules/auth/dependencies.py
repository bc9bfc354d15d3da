from fastapi import Depends, Request
from typing import Optional

from eventhub.core.config import settings
from eventhub.core.exceptions import AuthenticationError
from eventhub.core.logging_config import set_user_usn
from eventhub.core.session_store import SessionStore, SessionData, get_session_store


def get_session_token(request: Request) -> Optional[str]:
    """Session token from the session cookie, if any"""
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_optional_session(
    token: Optional[str] = Depends(get_session_token),
    store: SessionStore = Depends(get_session_store),
) -> Optional[SessionData]:
    """Resolve the session without requiring one"""
    session = await store.resolve(token)
    if session is not None:
        set_user_usn(session.usn)
    return session


async def get_current_session(
    session: Optional[SessionData] = Depends(get_optional_session),
) -> SessionData:
    """
    Authentication gate for every protected route.

    Usage:
        @router.get("/events")
        async def list_events(current: SessionData = Depends(get_current_session)):
            ...
    """
    if session is None:
        raise AuthenticationError()
    return session
