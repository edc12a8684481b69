import logging
from typing import Any, Callable, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from backend.errors import AuthError, StorageError, error_for_status

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Token"


def _build_session():
    session = requests.Session()
    # Reads only: a retried POST could land twice on the same check-in slot.
    retry = Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _error_detail(response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return response.text or None
    if isinstance(payload, dict):
        detail = payload.get("detail")
        if isinstance(detail, str):
            return detail
        if detail:
            return str(detail)
    return None


class ApiClient:
    """HTTP client for the check-in API.

    One instance is shared by the whole Streamlit process; the session token
    of the browser session making the call is read through ``token_getter``.
    """

    def __init__(self, base_url: str, token_getter: Callable[[], Optional[str]] | None = None, timeout: int = 10, session=None):
        self.base_url = (base_url or "").rstrip("/")
        self._token_getter = token_getter
        self.timeout = timeout
        self._session = session or _build_session()

    def is_enabled(self):
        return bool(self.base_url)

    def _token(self):
        return self._token_getter() if self._token_getter else None

    def request(self, method: str, path: str, params: dict | None = None, json: dict | None = None, authenticated: bool = True) -> Any:
        if not self.base_url:
            raise RuntimeError("API_BASE_URL not configured")
        headers = {}
        if authenticated:
            token = self._token()
            if not token:
                raise AuthError("Not signed in")
            headers[SESSION_HEADER] = token
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(method, url, params=params, json=json, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("API request failed %s %s: %s", method, path, exc)
            raise StorageError("Could not reach the server. Please try again.") from exc
        if not response.ok:
            detail = _error_detail(response)
            logger.info("API error %s %s -> %s %s", method, path, response.status_code, detail)
            raise error_for_status(response.status_code, detail)
        if response.status_code == 204:
            return None
        return response.json()

    def login(self, email: str, password: str) -> dict:
        return self.request("POST", "/v1/auth/login", json={"email": email, "password": password}, authenticated=False)

    def logout(self) -> None:
        self.request("POST", "/v1/auth/logout")

    def my_profile(self) -> dict:
        return self.request("GET", "/v1/profile/me")

    def today_status(self) -> dict:
        return self.request("GET", "/v1/status/today")

    def week_status(self, days: int = 7) -> dict:
        return self.request("GET", "/v1/status/week", params={"days": days})

    def create_checkin(self, period: str, status_level: int, note: Optional[str], checkin_date: Optional[str] = None) -> dict:
        payload = {"period": period, "status_level": status_level, "note": note}
        if checkin_date:
            payload["checkin_date"] = checkin_date
        return self.request("POST", "/v1/checkins", json=payload)

    def update_checkin(self, checkin_id: str, status_level: int, note: Optional[str]) -> dict:
        return self.request("PATCH", f"/v1/checkins/{checkin_id}", json={"status_level": status_level, "note": note})
