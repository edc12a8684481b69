from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from backend.db import Database
from backend.repositories import AccountRepository, CheckInRepository, ProfileRepository
from backend.services.auth_service import AuthService
from backend.services.status_service import StatusService
from backend.settings import Settings


@dataclass
class Services:
    db: Database
    profiles: ProfileRepository
    checkins: CheckInRepository
    accounts: AccountRepository
    auth: AuthService
    status: StatusService


def build_services(settings: Settings, db: Database | None = None) -> Services:
    db = db or Database.from_settings(settings)
    profiles = ProfileRepository(db.sessionmaker)
    checkins = CheckInRepository(db.sessionmaker)
    accounts = AccountRepository(db.sessionmaker)
    return Services(
        db=db,
        profiles=profiles,
        checkins=checkins,
        accounts=accounts,
        auth=AuthService(
            accounts,
            profiles,
            secret=settings.backend_session_secret,
            session_ttl_hours=settings.session_ttl_hours,
        ),
        status=StatusService(profiles, checkins, tz=settings.timezone),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
