from __future__ import annotations

from fastapi import Depends, Header

from backend.deps import Services, get_services
from backend.errors import AuthError
from backend.schemas import AuthSession

SESSION_HEADER = "X-Session-Token"


async def optional_session(
    x_session_token: str | None = Header(default=None, alias=SESSION_HEADER),
    services: Services = Depends(get_services),
) -> AuthSession | None:
    return await services.auth.resolve((x_session_token or "").strip())


async def require_session(session: AuthSession | None = Depends(optional_session)) -> AuthSession:
    if session is None:
        raise AuthError("Missing or expired session")
    return session


def session_token(x_session_token: str | None = Header(default=None, alias=SESSION_HEADER)) -> str | None:
    return (x_session_token or "").strip() or None
