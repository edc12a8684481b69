"""Password sign-in and opaque session tokens.

Passwords are hashed with bcrypt after a SHA-256 pre-hash, which keeps long
passphrases under bcrypt's 72 byte input limit. Session tokens are random
strings handed to the client once; storage only ever sees their HMAC.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import bcrypt

from backend.errors import AuthError
from backend.repositories import AccountRepository, ProfileRepository
from backend.schemas import AuthSession, Profile

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


def _prehash_password(password: str) -> bytes:
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_prehash_password(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_prehash_password(password), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Unknown emails still pay for one bcrypt check.
    return hash_password(secrets.token_urlsafe(16))


class AuthService:
    def __init__(
        self,
        accounts: AccountRepository,
        profiles: ProfileRepository,
        secret: str,
        session_ttl_hours: int = 720,
    ):
        self._accounts = accounts
        self._profiles = profiles
        self._secret = secret.encode("utf-8")
        self._ttl = timedelta(hours=session_ttl_hours)

    def _token_hash(self, token: str) -> str:
        return hmac.new(self._secret, token.encode("utf-8"), hashlib.sha256).hexdigest()

    async def sign_in(self, email: str, password: str) -> tuple[str, AuthSession]:
        clean_email = normalize_email(email)
        account = await self._accounts.get_account(clean_email)
        stored_hash = account["password_hash"] if account else _dummy_hash()
        if not verify_password(password, stored_hash) or not account:
            logger.warning("Failed sign-in for %s", clean_email)
            raise AuthError(INVALID_CREDENTIALS)

        now = datetime.now(timezone.utc)
        purged = await self._accounts.purge_expired_sessions(now.isoformat())
        if purged:
            logger.info("Purged %s expired sessions", purged)
        token = secrets.token_urlsafe(32)
        expires_at = (now + self._ttl).isoformat()
        await self._accounts.create_session(self._token_hash(token), account["profile_id"], expires_at)
        logger.info("Signed in profile=%s", account["profile_id"])
        return token, AuthSession(profile_id=account["profile_id"], expires_at=expires_at)

    async def resolve(self, token: str | None) -> AuthSession | None:
        if not token:
            return None
        row = await self._accounts.get_session(self._token_hash(token))
        if not row:
            return None
        if row["expires_at"] <= datetime.now(timezone.utc).isoformat():
            return None
        return AuthSession(**row)

    async def sign_out(self, token: str | None) -> None:
        if not token:
            return
        await self._accounts.delete_session(self._token_hash(token))

    async def create_account(self, name: str, email: str, password: str) -> Profile:
        clean_email = normalize_email(email)
        if not clean_email or "@" not in clean_email:
            raise ValueError("A valid email is required")
        if not password:
            raise ValueError("Password cannot be empty")
        if await self._accounts.get_account(clean_email):
            raise ValueError(f"Account already exists for {clean_email}")
        profile = await self._profiles.create_profile(name)
        await self._accounts.create_account(clean_email, profile.id, hash_password(password))
        return profile

    async def link_partner(self, profile_id: str, partner_id: str, both: bool = False) -> Profile:
        await self._profiles.fetch_profile(partner_id)
        profile = await self._profiles.set_partner(profile_id, partner_id)
        if both:
            await self._profiles.set_partner(partner_id, profile_id)
        return profile
