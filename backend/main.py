from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.db_init import init_db
from backend.deps import Services, build_services
from backend.errors import CheckInError, StorageError
from backend.routes import checkins, profile, session, status
from backend.settings import Settings, get_settings


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    app = FastAPI(title="Couple Check-in API", version="0.1.0")
    app.state.services = services or build_services(settings)

    app.include_router(session.router)
    app.include_router(profile.router)
    app.include_router(status.router)
    app.include_router(checkins.router)

    @app.on_event("startup")
    async def _startup():
        await init_db(app.state.services.db)

    @app.on_event("shutdown")
    async def _shutdown():
        await app.state.services.db.dispose()

    @app.exception_handler(CheckInError)
    async def _checkin_error_handler(request: Request, exc: CheckInError):
        if isinstance(exc, StorageError):
            logging.getLogger("backend").error("Storage error on %s: %s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger("backend").exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


app = create_app()
