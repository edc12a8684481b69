from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.auth import require_session
from backend.dates import parse_day
from backend.deps import Services, get_services
from backend.schemas import AuthSession, CheckIn, CheckInCreate, CheckInUpdate, DailyCheckIns

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/v1/checkins/{day}", response_model=DailyCheckIns)
async def get_checkins(
    day: str,
    session: AuthSession = Depends(require_session),
    services: Services = Depends(get_services),
):
    try:
        day_iso = parse_day(day)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")
    return await services.checkins.fetch_for_date(session.profile_id, day_iso)


@router.post("/v1/checkins", response_model=CheckIn, status_code=201)
async def create_checkin(
    payload: CheckInCreate,
    session: AuthSession = Depends(require_session),
    services: Services = Depends(get_services),
):
    day_iso = payload.checkin_date.isoformat() if payload.checkin_date else services.status.today()
    checkin = await services.checkins.insert_checkin(session.profile_id, payload, day_iso)
    logger.info("Check-in created user=%s date=%s period=%s", session.profile_id, day_iso, payload.period)
    return checkin


@router.patch("/v1/checkins/{checkin_id}", response_model=CheckIn)
async def update_checkin(
    checkin_id: str,
    payload: CheckInUpdate,
    session: AuthSession = Depends(require_session),
    services: Services = Depends(get_services),
):
    return await services.checkins.update_checkin(session.profile_id, checkin_id, payload)
