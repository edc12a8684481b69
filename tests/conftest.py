"""Shared fixtures: a throwaway SQLite database per test and a linked couple."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./.pytest-checkins.db")
os.environ.setdefault("BACKEND_SESSION_SECRET", "test-session-secret")

import pytest

from backend.db_init import init_db
from backend.deps import build_services
from backend.settings import Settings
from factories import PASSWORD


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'checkins.db'}",
        BACKEND_SESSION_SECRET="test-session-secret",
    )


@pytest.fixture
async def services(settings):
    services = build_services(settings)
    await init_db(services.db)
    yield services
    await services.db.dispose()


@pytest.fixture
async def alice(services):
    return await services.auth.create_account("Alice Doe", "alice@example.com", PASSWORD)


@pytest.fixture
async def bob(services):
    return await services.auth.create_account("Bob Roe", "bob@example.com", PASSWORD)


@pytest.fixture
async def couple(services, alice, bob):
    alice = await services.auth.link_partner(alice.id, bob.id, both=True)
    bob = await services.profiles.fetch_profile(bob.id)
    return alice, bob
