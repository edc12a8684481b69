import pandas as pd
import streamlit as st

from frontend.constants import WEEK_DAYS
from frontend.visualizations import build_week_grid, mood_heatmap


def render_week_tab(ctx):
    week = ctx.client.week_status(WEEK_DAYS)
    grid = build_week_grid(week)

    st.markdown("<div class='section-title'>Your week together</div>", unsafe_allow_html=True)
    if not week["partner"].get("profile"):
        st.caption("No partner linked yet. Only your check-ins are shown.")

    table = pd.DataFrame(grid["emojis"], index=grid["y_labels"], columns=grid["x_labels"])
    st.dataframe(table, use_container_width=True)

    st.plotly_chart(
        mood_heatmap(grid["z"], grid["hover_text"], x_labels=grid["x_labels"], y_labels=grid["y_labels"]),
        use_container_width=True,
    )
