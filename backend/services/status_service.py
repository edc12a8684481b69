from __future__ import annotations

import asyncio
import logging

from backend import dates
from backend.errors import NotFoundError
from backend.repositories import CheckInRepository, ProfileRepository
from backend.schemas import (
    AuthSession,
    DayCheckIns,
    PersonDay,
    PersonWeek,
    Profile,
    TodayStatus,
    WeekStatus,
)

logger = logging.getLogger(__name__)

WEEK_DAYS = 7


class StatusService:
    """Pairs the signed-in user's check-ins with their partner's.

    The user and partner reads are independent requests; no snapshot is
    shared between them.
    """

    def __init__(self, profiles: ProfileRepository, checkins: CheckInRepository, tz: str | None = None):
        self._profiles = profiles
        self._checkins = checkins
        self._tz = tz

    def today(self) -> str:
        return dates.today(self._tz)

    async def fetch_partner_profile(self, profile: Profile) -> Profile | None:
        if not profile.partner_id:
            return None
        try:
            return await self._profiles.fetch_profile(profile.partner_id)
        except NotFoundError:
            logger.warning("Profile %s points at missing partner %s", profile.id, profile.partner_id)
            return None

    async def _partner_day(self, profile: Profile, day: str) -> PersonDay:
        if not profile.partner_id:
            return PersonDay()
        partner, check_ins = await asyncio.gather(
            self.fetch_partner_profile(profile),
            self._checkins.fetch_for_date(profile.partner_id, day),
        )
        if partner is None:
            return PersonDay()
        return PersonDay(profile=partner, check_ins=check_ins)

    async def fetch_day_status(self, auth_session: AuthSession | None, day: str) -> TodayStatus:
        profile = await self._profiles.fetch_current_profile(auth_session)
        own, partner = await asyncio.gather(
            self._checkins.fetch_for_date(profile.id, day),
            self._partner_day(profile, day),
        )
        return TodayStatus(
            date=day,
            user=PersonDay(profile=profile, check_ins=own),
            partner=partner,
        )

    async def fetch_today_status(self, auth_session: AuthSession | None) -> TodayStatus:
        return await self.fetch_day_status(auth_session, self.today())

    async def fetch_last_7_days_status(self, auth_session: AuthSession | None, days: int = WEEK_DAYS) -> WeekStatus:
        window = dates.last_n_dates(days, tz=self._tz)
        profile = await self._profiles.fetch_current_profile(auth_session)

        async def _partner_week() -> PersonWeek:
            empty = PersonWeek(week_check_ins=[DayCheckIns(date=day) for day in window])
            if not profile.partner_id:
                return empty
            partner, week = await asyncio.gather(
                self.fetch_partner_profile(profile),
                self._checkins.fetch_for_date_range(profile.partner_id, window),
            )
            if partner is None:
                return empty
            return PersonWeek(profile=partner, week_check_ins=week)

        own_week, partner_week = await asyncio.gather(
            self._checkins.fetch_for_date_range(profile.id, window),
            _partner_week(),
        )
        return WeekStatus(
            dates=window,
            user=PersonWeek(profile=profile, week_check_ins=own_week),
            partner=partner_week,
        )
