from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.auth import session_token
from backend.deps import Services, get_services
from backend.schemas import LoginRequest, LoginResponse

router = APIRouter()


@router.post("/v1/auth/login", response_model=LoginResponse)
async def login(payload: LoginRequest, services: Services = Depends(get_services)):
    token, session = await services.auth.sign_in(payload.email, payload.password)
    return LoginResponse(token=token, profile_id=session.profile_id, expires_at=session.expires_at)


@router.post("/v1/auth/logout")
async def logout(token: str | None = Depends(session_token), services: Services = Depends(get_services)):
    await services.auth.sign_out(token)
    return {"ok": True}
