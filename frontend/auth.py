from __future__ import annotations

import logging
import os

import streamlit as st

from backend.errors import AuthError, CheckInError
from frontend.state import session_slices

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth.token"

ENV_FALLBACK_KEYS = {
    ("app", "API_BASE_URL"): "API_BASE_URL",
}


def get_secret(path, default=None):
    env_key = ENV_FALLBACK_KEYS.get(tuple(path))
    if env_key:
        env_value = os.getenv(env_key)
        if env_value:
            return env_value
    current = st.secrets
    for key in path:
        try:
            if key not in current:
                return default
            current = current[key]
        except Exception:
            # no secrets.toml at all
            return default
    return current


def api_base_url():
    return str(get_secret(("app", "API_BASE_URL")) or "").strip()


def current_token():
    return st.session_state.get(TOKEN_KEY)


def store_session(payload):
    st.session_state[TOKEN_KEY] = payload["token"]


def clear_session():
    st.session_state.pop(TOKEN_KEY, None)
    session_slices.clear_all()


def render_login(client):
    st.markdown("<div class='section-title'>Welcome back</div>", unsafe_allow_html=True)
    st.caption("Tell each other how you feel today.")
    with st.form("login.form"):
        email = st.text_input("Email", key="login.email", placeholder="you@example.com")
        password = st.text_input("Password", type="password", key="login.password")
        submitted = st.form_submit_button("Sign in", use_container_width=True)
    if not submitted:
        return
    if not email.strip() or not password:
        st.error("Email and password are required.")
        return
    try:
        payload = client.login(email.strip(), password)
    except AuthError as exc:
        st.error(exc.message)
        return
    except CheckInError as exc:
        logger.warning("Login failed: %s", exc.message)
        st.error("An error occurred during login")
        return
    store_session(payload)
    st.rerun()


def enforce_login(client):
    if not client.is_enabled():
        st.error("API_BASE_URL is not configured.")
        st.code("[app]\nAPI_BASE_URL = \"http://localhost:8000\"", language="toml")
        st.stop()
    if current_token():
        return
    render_login(client)
    st.stop()


def logout(client):
    try:
        client.logout()
    except CheckInError as exc:
        logger.info("Logout request failed: %s", exc.message)
    clear_session()
    st.rerun()
