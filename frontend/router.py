import logging

import streamlit as st

from backend.errors import AuthError, CheckInError
from frontend import auth
from frontend.tabs.today_tab import render_today_tab
from frontend.tabs.week_tab import render_week_tab

logger = logging.getLogger(__name__)

TAB_OPTIONS = [
    "Today",
    "This Week",
]


def render_router(ctx):
    active = st.session_state.get("ui.active_tab", TAB_OPTIONS[0])
    active = st.segmented_control(
        "View",
        TAB_OPTIONS,
        key="ui.active_tab",
        default=active,
    )

    if active == "This Week":
        return _render_week(ctx)

    return _render_today(ctx)


def _signed_out_guard(render, ctx):
    # Fragments rerun on their own, so an expired session has to be caught here too.
    try:
        render(ctx)
    except AuthError:
        auth.clear_session()
        st.rerun(scope="app")
    except CheckInError as exc:
        logger.warning("Could not render %s: %s", render.__name__, exc.message)
        st.error(exc.message)


@st.fragment
def _render_today(ctx):
    _signed_out_guard(render_today_tab, ctx)


@st.fragment
def _render_week(ctx):
    _signed_out_guard(render_week_tab, ctx)
