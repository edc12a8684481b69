from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.auth import require_session
from backend.dates import parse_day
from backend.deps import Services, get_services
from backend.schemas import AuthSession, TodayStatus, WeekStatus

router = APIRouter()


@router.get("/v1/status/today", response_model=TodayStatus)
async def today_status(
    session: AuthSession = Depends(require_session),
    services: Services = Depends(get_services),
):
    return await services.status.fetch_today_status(session)


@router.get("/v1/status/day/{day}", response_model=TodayStatus)
async def day_status(
    day: str,
    session: AuthSession = Depends(require_session),
    services: Services = Depends(get_services),
):
    try:
        day_iso = parse_day(day)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")
    return await services.status.fetch_day_status(session, day_iso)


@router.get("/v1/status/week", response_model=WeekStatus)
async def week_status(
    days: int = Query(7, ge=1, le=31),
    session: AuthSession = Depends(require_session),
    services: Services = Depends(get_services),
):
    return await services.status.fetch_last_7_days_status(session, days=days)
