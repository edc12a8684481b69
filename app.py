import streamlit as st

from backend.errors import AuthError, CheckInError
from frontend import auth
from frontend.context import AppContext
from frontend.data.api_client import ApiClient
from frontend.header import render_header
from frontend.logging_config import configure_logging
from frontend.router import render_router


st.set_page_config(page_title="Couple Check-in", page_icon="💞", layout="centered")

logger = configure_logging()

st.markdown(
    """
    <style>
    .block-container { max-width: 480px; padding-top: 1.5rem; }
    .section-title { font-size: 1.3rem; font-weight: 700; margin-bottom: 0.4rem; }
    .small-label { font-size: 0.8rem; text-transform: uppercase; letter-spacing: 0.05em; opacity: 0.7; }
    </style>
    """,
    unsafe_allow_html=True,
)


@st.cache_resource
def get_client():
    return ApiClient(auth.api_base_url(), token_getter=auth.current_token)


client = get_client()
auth.enforce_login(client)

try:
    profile = client.my_profile()
except AuthError:
    logger.info("Session rejected by the API, showing login")
    auth.clear_session()
    st.rerun()
except CheckInError as exc:
    st.error(exc.message)
    st.stop()

context = AppContext(client=client, profile=profile)
render_header(context)
render_router(context)
