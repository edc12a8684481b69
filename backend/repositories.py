from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterable
from uuid import uuid4

from sqlalchemy import text as sql_text, bindparam
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from backend.db_init import ACCOUNTS_TABLE, AUTH_SESSIONS_TABLE, CHECKINS_TABLE, PROFILES_TABLE
from backend.errors import AuthError, ConflictError, NotFoundError, StorageError
from backend.schemas import (
    AuthSession,
    CheckIn,
    CheckInCreate,
    CheckInUpdate,
    DailyCheckIns,
    DayCheckIns,
    Profile,
    clean_note,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

PROFILE_COLUMNS = ["id", "name", "partner_id", "created_at"]
CHECKIN_COLUMNS = [
    "id",
    "user_id",
    "period",
    "status_level",
    "note",
    "checkin_date",
    "created_at",
    "updated_at",
]


def _new_id() -> str:
    return uuid4().hex


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == UNIQUE_VIOLATION
    message = str(orig).lower()
    return "unique" in message or "duplicate key" in message


@contextmanager
def _storage_guard(action: str):
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Storage failure while trying to %s", action)
        raise StorageError(f"Failed to {action}") from exc


def _partition_by_period(rows: Iterable[CheckIn]) -> DailyCheckIns:
    slots = DailyCheckIns()
    for row in rows:
        setattr(slots, row.period, row)
    return slots


class ProfileRepository:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def fetch_profile(self, profile_id: str) -> Profile:
        with _storage_guard("load profile"):
            async with self._session_factory() as session:
                row = (await session.execute(
                    sql_text(f"SELECT {', '.join(PROFILE_COLUMNS)} FROM {PROFILES_TABLE} WHERE id = :id"),
                    {"id": profile_id},
                )).mappings().fetchone()
        if not row:
            raise NotFoundError("Profile not found")
        return Profile(**dict(row))

    async def fetch_current_profile(self, auth_session: AuthSession | None) -> Profile:
        if auth_session is None:
            raise AuthError()
        return await self.fetch_profile(auth_session.profile_id)

    async def create_profile(self, name: str, partner_id: str | None = None) -> Profile:
        payload = {
            "id": _new_id(),
            "name": name.strip(),
            "partner_id": partner_id,
            "created_at": _utcnow_iso(),
        }
        with _storage_guard("create profile"):
            async with self._session_factory() as session:
                await session.execute(
                    sql_text(
                        f"INSERT INTO {PROFILES_TABLE} ({', '.join(PROFILE_COLUMNS)}) "
                        "VALUES (:id, :name, :partner_id, :created_at)"
                    ),
                    payload,
                )
                await session.commit()
        return Profile(**payload)

    async def set_partner(self, profile_id: str, partner_id: str | None) -> Profile:
        with _storage_guard("link partner"):
            async with self._session_factory() as session:
                result = await session.execute(
                    sql_text(f"UPDATE {PROFILES_TABLE} SET partner_id = :partner_id WHERE id = :id"),
                    {"id": profile_id, "partner_id": partner_id},
                )
                await session.commit()
        if result.rowcount == 0:
            raise NotFoundError("Profile not found")
        return await self.fetch_profile(profile_id)


class CheckInRepository:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def fetch_for_date(self, owner_id: str, day: str) -> DailyCheckIns:
        with _storage_guard("load check-ins"):
            async with self._session_factory() as session:
                rows = (await session.execute(
                    sql_text(
                        f"SELECT {', '.join(CHECKIN_COLUMNS)} FROM {CHECKINS_TABLE} "
                        "WHERE user_id = :user_id AND checkin_date = :checkin_date"
                    ),
                    {"user_id": owner_id, "checkin_date": day},
                )).mappings().all()
        return _partition_by_period(CheckIn(**dict(row)) for row in rows)

    async def fetch_for_date_range(self, owner_id: str, dates: list[str]) -> list[DayCheckIns]:
        if not dates:
            return []
        with _storage_guard("load check-ins"):
            async with self._session_factory() as session:
                statement = sql_text(
                    f"SELECT {', '.join(CHECKIN_COLUMNS)} FROM {CHECKINS_TABLE} "
                    "WHERE user_id = :user_id AND checkin_date IN :dates"
                ).bindparams(bindparam("dates", expanding=True))
                rows = (await session.execute(
                    statement,
                    {"user_id": owner_id, "dates": sorted(set(dates))},
                )).mappings().all()

        by_key = {}
        for row in rows:
            checkin = CheckIn(**dict(row))
            by_key[(checkin.checkin_date, checkin.period)] = checkin
        return [
            DayCheckIns(
                date=day,
                morning=by_key.get((day, "morning")),
                evening=by_key.get((day, "evening")),
            )
            for day in dates
        ]

    async def fetch_by_id(self, owner_id: str, checkin_id: str) -> CheckIn:
        with _storage_guard("load check-in"):
            async with self._session_factory() as session:
                row = (await session.execute(
                    sql_text(
                        f"SELECT {', '.join(CHECKIN_COLUMNS)} FROM {CHECKINS_TABLE} "
                        "WHERE id = :id AND user_id = :user_id"
                    ),
                    {"id": checkin_id, "user_id": owner_id},
                )).mappings().fetchone()
        if not row:
            raise NotFoundError("Check-in not found")
        return CheckIn(**dict(row))

    async def insert_checkin(self, owner_id: str, payload: CheckInCreate, checkin_date: str) -> CheckIn:
        now = _utcnow_iso()
        values = {
            "id": _new_id(),
            "user_id": owner_id,
            "period": payload.period,
            "status_level": payload.status_level,
            "note": clean_note(payload.note),
            "checkin_date": checkin_date,
            "created_at": now,
            "updated_at": now,
        }
        with _storage_guard("save check-in"):
            async with self._session_factory() as session:
                try:
                    await session.execute(
                        sql_text(
                            f"INSERT INTO {CHECKINS_TABLE} ({', '.join(CHECKIN_COLUMNS)}) VALUES "
                            "(:id, :user_id, :period, :status_level, :note, :checkin_date, :created_at, :updated_at)"
                        ),
                        values,
                    )
                    await session.commit()
                except IntegrityError as exc:
                    await session.rollback()
                    if not _is_unique_violation(exc):
                        raise
                    logger.info(
                        "Duplicate check-in for user=%s date=%s period=%s",
                        owner_id,
                        checkin_date,
                        payload.period,
                    )
                    raise ConflictError() from exc
        return CheckIn(**values)

    async def update_checkin(self, owner_id: str, checkin_id: str, payload: CheckInUpdate) -> CheckIn:
        with _storage_guard("update check-in"):
            async with self._session_factory() as session:
                result = await session.execute(
                    sql_text(
                        f"""
                        UPDATE {CHECKINS_TABLE}
                        SET status_level = :status_level, note = :note, updated_at = :updated_at
                        WHERE id = :id AND user_id = :user_id
                        """
                    ),
                    {
                        "id": checkin_id,
                        "user_id": owner_id,
                        "status_level": payload.status_level,
                        "note": clean_note(payload.note),
                        "updated_at": _utcnow_iso(),
                    },
                )
                await session.commit()
        if result.rowcount == 0:
            raise NotFoundError("Check-in not found")
        return await self.fetch_by_id(owner_id, checkin_id)


class AccountRepository:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def get_account(self, email: str) -> dict | None:
        with _storage_guard("load account"):
            async with self._session_factory() as session:
                row = (await session.execute(
                    sql_text(
                        f"SELECT email, profile_id, password_hash FROM {ACCOUNTS_TABLE} WHERE email = :email"
                    ),
                    {"email": email},
                )).mappings().fetchone()
        return dict(row) if row else None

    async def create_account(self, email: str, profile_id: str, password_hash: str) -> None:
        with _storage_guard("create account"):
            async with self._session_factory() as session:
                try:
                    await session.execute(
                        sql_text(
                            f"INSERT INTO {ACCOUNTS_TABLE} (email, profile_id, password_hash, created_at) "
                            "VALUES (:email, :profile_id, :password_hash, :created_at)"
                        ),
                        {
                            "email": email,
                            "profile_id": profile_id,
                            "password_hash": password_hash,
                            "created_at": _utcnow_iso(),
                        },
                    )
                    await session.commit()
                except IntegrityError as exc:
                    await session.rollback()
                    if not _is_unique_violation(exc):
                        raise
                    raise ConflictError("An account with this email already exists") from exc

    async def create_session(self, token_hash: str, profile_id: str, expires_at: str) -> None:
        with _storage_guard("create session"):
            async with self._session_factory() as session:
                await session.execute(
                    sql_text(
                        f"INSERT INTO {AUTH_SESSIONS_TABLE} (token_hash, profile_id, created_at, expires_at) "
                        "VALUES (:token_hash, :profile_id, :created_at, :expires_at)"
                    ),
                    {
                        "token_hash": token_hash,
                        "profile_id": profile_id,
                        "created_at": _utcnow_iso(),
                        "expires_at": expires_at,
                    },
                )
                await session.commit()

    async def get_session(self, token_hash: str) -> dict | None:
        with _storage_guard("load session"):
            async with self._session_factory() as session:
                row = (await session.execute(
                    sql_text(
                        f"SELECT profile_id, expires_at FROM {AUTH_SESSIONS_TABLE} WHERE token_hash = :token_hash"
                    ),
                    {"token_hash": token_hash},
                )).mappings().fetchone()
        return dict(row) if row else None

    async def delete_session(self, token_hash: str) -> None:
        with _storage_guard("delete session"):
            async with self._session_factory() as session:
                await session.execute(
                    sql_text(f"DELETE FROM {AUTH_SESSIONS_TABLE} WHERE token_hash = :token_hash"),
                    {"token_hash": token_hash},
                )
                await session.commit()

    async def purge_expired_sessions(self, now_iso: str) -> int:
        with _storage_guard("purge sessions"):
            async with self._session_factory() as session:
                result = await session.execute(
                    sql_text(f"DELETE FROM {AUTH_SESSIONS_TABLE} WHERE expires_at <= :now"),
                    {"now": now_iso},
                )
                await session.commit()
        return result.rowcount or 0
