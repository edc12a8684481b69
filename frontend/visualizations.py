from __future__ import annotations

import math
from datetime import date, timedelta

from frontend.constants import EMPTY_SLOT_EMOJI, MOOD_COLORS, MOOD_EMOJIS, MOOD_LABELS, PERIOD_LABELS, PERIODS


def day_label(day_iso, today_iso):
    current = date.fromisoformat(day_iso)
    today = date.fromisoformat(today_iso)
    if current == today:
        return "Today"
    if current == today - timedelta(days=1):
        return "Yesterday"
    return f"{current.day} {current.strftime('%b')}"


def long_date_label(day_iso):
    current = date.fromisoformat(day_iso)
    return f"{current.strftime('%A, %B')} {current.day}, {current.year}"


def slot_emoji(checkin):
    if not checkin:
        return EMPTY_SLOT_EMOJI
    return MOOD_EMOJIS.get(int(checkin.get("status_level") or 0), EMPTY_SLOT_EMOJI)


def first_name(profile, fallback="Partner"):
    name = str((profile or {}).get("name") or "").strip()
    return name.split()[0] if name else fallback


def build_week_grid(week_status, you_label="You"):
    """Rows per (person, period), columns per day, oldest day first."""
    dates = list(week_status.get("dates") or [])
    today_iso = dates[-1] if dates else date.today().isoformat()
    x_labels = [day_label(day, today_iso) for day in dates]

    people = [(you_label, week_status["user"])]
    partner = week_status.get("partner") or {}
    if partner.get("profile"):
        people.append((first_name(partner["profile"]), partner))

    y_labels, z, hover_text, emojis = [], [], [], []
    for label, person in people:
        by_date = {item["date"]: item for item in person.get("week_check_ins") or []}
        for period in PERIODS:
            row_z, row_hover, row_emoji = [], [], []
            for day in dates:
                checkin = (by_date.get(day) or {}).get(period)
                if checkin:
                    level = int(checkin["status_level"])
                    row_z.append(level)
                    note = checkin.get("note") or ""
                    text = f"{day} • {label} {period}: {MOOD_LABELS[level]}"
                    row_hover.append(f"{text} · {note}" if note else text)
                else:
                    row_z.append(math.nan)
                    row_hover.append(f"{day} • {label} {period}: no check-in")
                row_emoji.append(slot_emoji(checkin))
            y_labels.append(f"{label} · {PERIOD_LABELS[period]}")
            z.append(row_z)
            hover_text.append(row_hover)
            emojis.append(row_emoji)
    return {
        "x_labels": x_labels,
        "y_labels": y_labels,
        "z": z,
        "hover_text": hover_text,
        "emojis": emojis,
    }


def mood_heatmap(z, hover_text, x_labels, y_labels, title=""):
    import plotly.graph_objects as go

    levels = sorted(MOOD_COLORS)
    colorscale = []
    n = len(levels)
    for i, level in enumerate(levels):
        color = MOOD_COLORS[level]
        colorscale.append((i / n, color))
        colorscale.append(((i + 1) / n - 1e-6, color))
    colorscale[-1] = (1.0, MOOD_COLORS[levels[-1]])

    fig = go.Figure(
        data=go.Heatmap(
            z=z,
            x=x_labels,
            y=y_labels,
            text=hover_text,
            hoverinfo="text",
            colorscale=colorscale,
            showscale=False,
            zmin=levels[0] - 0.5,
            zmax=levels[-1] + 0.5,
            xgap=3,
            ygap=3,
        )
    )
    fig.update_layout(
        title=title,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        margin=dict(l=20, r=10, t=40 if title else 10, b=20),
        height=80 + 36 * max(1, len(y_labels)),
        yaxis=dict(autorange="reversed"),
    )
    return fig
