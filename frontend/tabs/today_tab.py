import streamlit as st

from frontend.constants import (
    MOOD_EMOJIS,
    MOOD_LABELS,
    NOTE_MAX_LENGTH,
    PERIOD_LABELS,
    PERIODS,
    STATUS_LEVELS,
    mood_option_label,
)
from frontend.state import session_slices
from frontend.state.checkin_form import EDITING, NO_CHECKIN, VIEWING, CheckInForm
from frontend.visualizations import first_name, long_date_label

SLICE = "today"


def _load_status(client):
    # Fetched on every run so the slot date follows the server clock past midnight.
    return client.today_status()


def _forms_for(status):
    forms = session_slices.get_value(SLICE, "forms")
    own = status["user"]["check_ins"]
    if forms is None or session_slices.get_value(SLICE, "forms_date") != status["date"]:
        forms = {period: CheckInForm.for_slot(period, own.get(period)) for period in PERIODS}
        session_slices.update_slice(SLICE, {"forms": forms, "forms_date": status["date"]})
        return forms
    for period, form in forms.items():
        form.refresh(own.get(period))
    return forms


def _render_checkin_card(period, checkin, empty_text="Not checked in yet"):
    label = PERIOD_LABELS[period]
    if not checkin:
        st.markdown(f"**{label}**")
        st.caption(empty_text)
        return
    level = int(checkin["status_level"])
    st.markdown(f"**{label}** &nbsp; <span style='font-size:2rem'>{MOOD_EMOJIS[level]}</span>", unsafe_allow_html=True)
    st.caption(MOOD_LABELS[level])
    if checkin.get("note"):
        st.markdown(f"> {checkin['note']}")


def render_partner_status(partner):
    profile = partner.get("profile")
    if not profile:
        st.info("No partner linked to your account yet.")
        return
    st.markdown(f"<div class='section-title'>How {first_name(profile)} feels today</div>", unsafe_allow_html=True)
    cols = st.columns(2)
    for col, period in zip(cols, PERIODS):
        with col:
            _render_checkin_card(period, partner["check_ins"].get(period))


def _render_form_inputs(form, key_prefix):
    options = list(STATUS_LEVELS)
    index = options.index(form.status_level) if form.status_level in options else None
    level = st.radio(
        f"How are you feeling? ({form.period})",
        options,
        index=index,
        format_func=mood_option_label,
        horizontal=True,
        key=f"{key_prefix}.level",
    )
    note = st.text_area(
        "Note (optional)",
        value=form.note,
        max_chars=NOTE_MAX_LENGTH,
        placeholder="Any thoughts to share...",
        key=f"{key_prefix}.note",
    )
    return level, note


def render_checkin_form(client, form, checkin_date):
    key_prefix = f"checkin.{form.period}.{form.revision}"

    if form.mode == VIEWING:
        _render_checkin_card(form.period, form.checkin)
        if st.button("Edit", key=f"{key_prefix}.edit"):
            form.start_edit()
            st.rerun()
        return

    with st.form(key_prefix):
        level, note = _render_form_inputs(form, key_prefix)
        if form.error:
            st.error(form.error)
        if form.mode == NO_CHECKIN:
            submitted = st.form_submit_button(f"Submit {form.period} check-in", use_container_width=True)
            cancelled = False
        else:
            save_col, cancel_col = st.columns(2)
            with save_col:
                submitted = st.form_submit_button("Save", use_container_width=True)
            with cancel_col:
                cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if cancelled and form.mode == EDITING:
        form.cancel()
        st.rerun()
    if not submitted:
        return

    form.select_level(level)
    form.set_note(note)
    with st.spinner("Submitting..."):
        form.submit(client, checkin_date)
    st.rerun()


def render_today_tab(ctx):
    client = ctx.client
    status = _load_status(client)
    forms = _forms_for(status)

    st.markdown("<div class='small-label'>Partner</div>", unsafe_allow_html=True)
    render_partner_status(status["partner"])
    st.divider()

    st.markdown("<div class='section-title'>Your check-ins today</div>", unsafe_allow_html=True)
    st.caption(long_date_label(status["date"]))
    for period in PERIODS:
        st.markdown(f"#### {PERIOD_LABELS[period]}")
        render_checkin_form(client, forms[period], status["date"])
