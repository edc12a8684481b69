from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from backend.auth import require_session
from backend.deps import Services, get_services
from backend.schemas import AuthSession, Profile

router = APIRouter()


@router.get("/v1/profile/me", response_model=Profile)
async def my_profile(
    session: AuthSession = Depends(require_session),
    services: Services = Depends(get_services),
):
    return await services.profiles.fetch_current_profile(session)


@router.get("/v1/profile/partner", response_model=Optional[Profile])
async def partner_profile(
    session: AuthSession = Depends(require_session),
    services: Services = Depends(get_services),
):
    profile = await services.profiles.fetch_current_profile(session)
    return await services.status.fetch_partner_profile(profile)
