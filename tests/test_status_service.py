from datetime import date

import pytest

from backend import dates
from backend.errors import AuthError
from factories import new_checkin, session_for


class TestTodayStatus:
    @pytest.mark.asyncio
    async def test_without_partner_returns_null_placeholder(self, services, alice):
        status = await services.status.fetch_today_status(session_for(alice))

        assert status.user.profile.id == alice.id
        assert status.partner.profile is None
        assert status.partner.check_ins.morning is None
        assert status.partner.check_ins.evening is None

    @pytest.mark.asyncio
    async def test_pairs_user_and_partner_for_today(self, services, couple):
        alice, bob = couple
        today = dates.today()
        await services.checkins.insert_checkin(alice.id, new_checkin("morning", 4), today)
        await services.checkins.insert_checkin(bob.id, new_checkin("evening", 2, "long day"), today)

        status = await services.status.fetch_today_status(session_for(alice))

        assert status.date == today
        assert status.user.check_ins.morning.status_level == 4
        assert status.user.check_ins.evening is None
        assert status.partner.profile.id == bob.id
        assert status.partner.check_ins.morning is None
        assert status.partner.check_ins.evening.note == "long day"

    @pytest.mark.asyncio
    async def test_partner_link_is_not_assumed_symmetric(self, services, alice, bob):
        await services.auth.link_partner(alice.id, bob.id)

        alice_view = await services.status.fetch_today_status(session_for(alice))
        bob_view = await services.status.fetch_today_status(session_for(bob))

        assert alice_view.partner.profile.id == bob.id
        assert bob_view.partner.profile is None

    @pytest.mark.asyncio
    async def test_dangling_partner_id_is_treated_as_no_partner(self, services, alice):
        await services.profiles.set_partner(alice.id, "gone")

        status = await services.status.fetch_today_status(session_for(alice))

        assert status.partner.profile is None
        assert status.partner.check_ins.morning is None

    @pytest.mark.asyncio
    async def test_requires_session(self, services):
        with pytest.raises(AuthError):
            await services.status.fetch_today_status(None)

    @pytest.mark.asyncio
    async def test_day_status_reads_the_requested_day(self, services, alice):
        await services.checkins.insert_checkin(alice.id, new_checkin("evening", 5), "2024-01-02")

        status = await services.status.fetch_day_status(session_for(alice), "2024-01-02")

        assert status.date == "2024-01-02"
        assert status.user.check_ins.evening.status_level == 5


class TestWeekStatus:
    @pytest.mark.asyncio
    async def test_week_window_ends_today_for_both_partners(self, services, couple):
        alice, bob = couple
        window = dates.last_n_dates(7)
        await services.checkins.insert_checkin(alice.id, new_checkin("morning", 3), window[0])
        await services.checkins.insert_checkin(bob.id, new_checkin("evening", 5), window[-1])

        week = await services.status.fetch_last_7_days_status(session_for(alice))

        assert week.dates == window
        assert window[-1] == date.today().isoformat()
        assert [item.date for item in week.user.week_check_ins] == window
        assert [item.date for item in week.partner.week_check_ins] == window
        assert week.user.week_check_ins[0].morning.status_level == 3
        assert week.partner.week_check_ins[-1].evening.status_level == 5

    @pytest.mark.asyncio
    async def test_week_without_partner_has_empty_aligned_days(self, services, alice):
        week = await services.status.fetch_last_7_days_status(session_for(alice))

        assert week.partner.profile is None
        assert len(week.partner.week_check_ins) == 7
        assert all(day.morning is None and day.evening is None for day in week.partner.week_check_ins)

    @pytest.mark.asyncio
    async def test_custom_window_length(self, services, alice):
        week = await services.status.fetch_last_7_days_status(session_for(alice), days=3)

        assert len(week.dates) == 3
        assert len(week.user.week_check_ins) == 3
