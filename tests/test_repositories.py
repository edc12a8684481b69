import pytest
from sqlalchemy import text as sql_text

from backend.db_init import CHECKINS_TABLE
from backend.errors import AuthError, ConflictError, NotFoundError
from backend.schemas import CheckInUpdate
from factories import new_checkin, session_for


DAY = "2024-05-10"


async def _count_rows(services, owner_id):
    async with services.db.sessionmaker() as session:
        result = await session.execute(
            sql_text(f"SELECT COUNT(*) FROM {CHECKINS_TABLE} WHERE user_id = :user_id"),
            {"user_id": owner_id},
        )
        return result.scalar_one()


class TestFetchForDate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("level", [1, 2, 3, 4, 5])
    async def test_insert_then_fetch_returns_submitted_values(self, services, alice, level):
        await services.checkins.insert_checkin(alice.id, new_checkin("evening", level, f"feeling {level}"), DAY)

        day = await services.checkins.fetch_for_date(alice.id, DAY)

        assert day.morning is None
        assert day.evening.status_level == level
        assert day.evening.note == f"feeling {level}"
        assert day.evening.checkin_date == DAY

    @pytest.mark.asyncio
    async def test_day_without_rows_is_all_null(self, services, alice):
        day = await services.checkins.fetch_for_date(alice.id, DAY)

        assert day.morning is None
        assert day.evening is None

    @pytest.mark.asyncio
    async def test_only_reads_the_owner_rows(self, services, alice, bob):
        await services.checkins.insert_checkin(bob.id, new_checkin("morning", 4), DAY)

        day = await services.checkins.fetch_for_date(alice.id, DAY)

        assert day.morning is None


class TestFetchForDateRange:
    @pytest.mark.asyncio
    async def test_output_follows_input_order_not_storage_order(self, services, alice):
        for day, period, level in [
            ("2024-05-09", "evening", 2),
            ("2024-05-07", "morning", 5),
            ("2024-05-09", "morning", 1),
            ("2024-05-08", "evening", 4),
        ]:
            await services.checkins.insert_checkin(alice.id, new_checkin(period, level), day)

        requested = ["2024-05-09", "2024-05-06", "2024-05-07", "2024-05-08"]
        week = await services.checkins.fetch_for_date_range(alice.id, requested)

        assert [item.date for item in week] == requested
        assert week[0].morning.status_level == 1
        assert week[0].evening.status_level == 2
        assert week[1].morning is None and week[1].evening is None
        assert week[2].morning.status_level == 5
        assert week[3].evening.status_level == 4

    @pytest.mark.asyncio
    async def test_empty_input_returns_empty_list(self, services, alice):
        assert await services.checkins.fetch_for_date_range(alice.id, []) == []

    @pytest.mark.asyncio
    async def test_rows_outside_the_range_are_ignored(self, services, alice):
        await services.checkins.insert_checkin(alice.id, new_checkin("morning", 3), "2024-04-01")

        week = await services.checkins.fetch_for_date_range(alice.id, [DAY])

        assert len(week) == 1
        assert week[0].morning is None


class TestWritePath:
    @pytest.mark.asyncio
    async def test_second_insert_for_same_slot_conflicts_and_keeps_original(self, services, alice):
        await services.checkins.insert_checkin(alice.id, new_checkin("morning", 3, "first"), DAY)

        with pytest.raises(ConflictError):
            await services.checkins.insert_checkin(alice.id, new_checkin("morning", 5, "second"), DAY)

        day = await services.checkins.fetch_for_date(alice.id, DAY)
        assert day.morning.status_level == 3
        assert day.morning.note == "first"
        assert await _count_rows(services, alice.id) == 1

    @pytest.mark.asyncio
    async def test_same_period_on_another_day_is_allowed(self, services, alice):
        await services.checkins.insert_checkin(alice.id, new_checkin("morning", 3), DAY)
        await services.checkins.insert_checkin(alice.id, new_checkin("morning", 3), "2024-05-11")

        assert await _count_rows(services, alice.id) == 2

    @pytest.mark.asyncio
    async def test_blank_note_is_stored_as_null(self, services, alice):
        created = await services.checkins.insert_checkin(alice.id, new_checkin("morning", 2, "   "), DAY)

        assert created.note is None

    @pytest.mark.asyncio
    async def test_editing_note_to_empty_string_persists_null(self, services, alice):
        created = await services.checkins.insert_checkin(alice.id, new_checkin("evening", 2, "tired"), DAY)

        updated = await services.checkins.update_checkin(
            alice.id, created.id, CheckInUpdate(status_level=4, note="")
        )

        assert updated.status_level == 4
        assert updated.note is None
        day = await services.checkins.fetch_for_date(alice.id, DAY)
        assert day.evening.note is None
        assert day.evening.id == created.id

    @pytest.mark.asyncio
    async def test_update_of_someone_elses_checkin_is_not_found(self, services, alice, bob):
        created = await services.checkins.insert_checkin(bob.id, new_checkin("evening", 2), DAY)

        with pytest.raises(NotFoundError):
            await services.checkins.update_checkin(alice.id, created.id, CheckInUpdate(status_level=5))

        day = await services.checkins.fetch_for_date(bob.id, DAY)
        assert day.evening.status_level == 2


class TestProfiles:
    @pytest.mark.asyncio
    async def test_missing_profile_raises_not_found(self, services):
        with pytest.raises(NotFoundError):
            await services.profiles.fetch_profile("does-not-exist")

    @pytest.mark.asyncio
    async def test_current_profile_requires_session(self, services):
        with pytest.raises(AuthError):
            await services.profiles.fetch_current_profile(None)

    @pytest.mark.asyncio
    async def test_current_profile_resolves_session_owner(self, services, alice):
        profile = await services.profiles.fetch_current_profile(session_for(alice))

        assert profile.id == alice.id
        assert profile.name == "Alice Doe"
        assert profile.partner_id is None
