from __future__ import annotations

import logging
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine

from backend.settings import Settings

logger = logging.getLogger(__name__)


def _normalize_database_url(database_url: str) -> str:
    url = str(database_url or "").strip()
    if not url:
        return url
    if url.startswith("postgres://"):
        url = "postgresql+asyncpg://" + url[len("postgres://") :]
    elif url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://") :]
    elif url.startswith("postgresql+psycopg2://"):
        url = "postgresql+asyncpg://" + url[len("postgresql+psycopg2://") :]
    elif url.startswith("sqlite://"):
        return "sqlite+aiosqlite://" + url[len("sqlite://") :]
    elif url.startswith("sqlite+aiosqlite://"):
        return url
    try:
        parsed = urlparse(url)
        query_items = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True)]
        clean = []
        ssl_requested = False
        for key, value in query_items:
            if key == "sslmode":
                ssl_requested = True
                continue
            if key in {"channel_binding", "ssl"}:
                continue
            clean.append((key, value))
        if ssl_requested:
            clean.append(("ssl", "true"))
        parsed = parsed._replace(query=urlencode(clean))
        url = urlunparse(parsed)
    except ValueError:
        return url
    return url


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


class Database:
    """The one storage handle of the process.

    Built once by ``create_app`` and handed to the repositories; nothing
    else opens engines.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.url = _normalize_database_url(database_url)
        self.engine = self._build_engine(echo)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_url)

    def _build_engine(self, echo: bool) -> AsyncEngine:
        if _is_sqlite(self.url):
            return create_async_engine(self.url, echo=echo, future=True)
        connect_args: dict = {}
        try:
            parsed = urlparse(self.url)
            host = parsed.hostname or ""
            if host and host not in {"localhost", "127.0.0.1"}:
                connect_args["ssl"] = True
        except ValueError:
            logger.debug("Failed to parse database URL for SSL hint.")
        engine_kwargs = {"pool_pre_ping": True, "future": True, "pool_size": 20, "max_overflow": 10, "echo": echo}
        if connect_args:
            return create_async_engine(self.url, connect_args=connect_args, **engine_kwargs)
        return create_async_engine(self.url, **engine_kwargs)

    async def dispose(self) -> None:
        await self.engine.dispose()
