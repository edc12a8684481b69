import streamlit as st

from frontend import auth


def render_header(ctx):
    title_col, action_col = st.columns([4, 1])
    with title_col:
        st.markdown(f"<div class='section-title'>Welcome, {ctx.display_name}</div>", unsafe_allow_html=True)
    with action_col:
        if st.button("Logout", key="header.logout"):
            auth.logout(ctx.client)
