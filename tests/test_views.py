from streamlit.testing.v1 import AppTest

# Imported here so the script runs below don't pay for pandas and plotly.
import frontend.router  # noqa: F401

OFFLINE_MESSAGE = "Could not reach the server. Please try again."


def _today_page():
    from unittest.mock import MagicMock

    import streamlit as st

    from backend.errors import StorageError
    from frontend.context import AppContext
    from frontend.router import render_router

    client = MagicMock()
    failure = st.session_state.get("test.failure")
    if failure:
        client.today_status.side_effect = StorageError(failure)
    else:
        empty = {"morning": None, "evening": None}
        client.today_status.return_value = {
            "date": st.session_state.get("test.day", "2024-05-10"),
            "user": {"profile": {"id": "a", "name": "Alice Doe"}, "check_ins": empty},
            "partner": {"profile": None, "check_ins": empty},
        }
    render_router(AppContext(client=client, profile={"id": "a", "name": "Alice Doe"}))


def _run(**state):
    at = AppTest.from_function(_today_page, default_timeout=10)
    for key, value in state.items():
        at.session_state[f"test.{key}"] = value
    return at.run()


def test_read_failure_is_shown_as_message():
    at = _run(failure=OFFLINE_MESSAGE)

    assert not at.exception
    assert [error.value for error in at.error] == [OFFLINE_MESSAGE]


def test_today_shows_server_date():
    at = _run(day="2024-05-10")

    assert not at.exception
    assert "Friday, May 10, 2024" in [caption.value for caption in at.caption]


def test_forms_follow_day_rollover():
    at = _run(day="2024-05-10")
    assert at.session_state["slice.today"]["forms_date"] == "2024-05-10"

    at.session_state["test.day"] = "2024-05-11"
    at.run()

    assert not at.exception
    assert at.session_state["slice.today"]["forms_date"] == "2024-05-11"
    assert "Saturday, May 11, 2024" in [caption.value for caption in at.caption]
