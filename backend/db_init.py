from __future__ import annotations

import logging

from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from backend.db import Database

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"
CHECKINS_TABLE = "checkins"
ACCOUNTS_TABLE = "accounts"
AUTH_SESSIONS_TABLE = "auth_sessions"

NOTE_MAX_LENGTH = 500


async def init_db(db: Database) -> None:
    async with db.engine.begin() as conn:
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {PROFILES_TABLE} (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    partner_id TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {CHECKINS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL REFERENCES {PROFILES_TABLE}(id),
                    period TEXT NOT NULL CHECK (period IN ('morning', 'evening')),
                    status_level INTEGER NOT NULL CHECK (status_level BETWEEN 1 AND 5),
                    note TEXT CHECK (note IS NULL OR LENGTH(note) <= {NOTE_MAX_LENGTH}),
                    checkin_date TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT,
                    UNIQUE (user_id, checkin_date, period)
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {ACCOUNTS_TABLE} (
                    email TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL REFERENCES {PROFILES_TABLE}(id),
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {AUTH_SESSIONS_TABLE} (
                    token_hash TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL REFERENCES {PROFILES_TABLE}(id),
                    created_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL
                )
                """
            )
        )

    async def ensure_index(index_sql: str) -> None:
        try:
            async with db.engine.begin() as conn:
                await conn.execute(sql_text(index_sql))
        except SQLAlchemyError:
            logger.warning("Could not create index: %s", index_sql)

    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{CHECKINS_TABLE}_user_date "
        f"ON {CHECKINS_TABLE} (user_id, checkin_date)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{AUTH_SESSIONS_TABLE}_profile "
        f"ON {AUTH_SESSIONS_TABLE} (profile_id)"
    )
