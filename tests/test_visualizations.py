import math

from frontend.constants import EMPTY_SLOT_EMOJI, MOOD_EMOJIS
from frontend.visualizations import build_week_grid, day_label, long_date_label, mood_heatmap


DATES = ["2024-05-08", "2024-05-09", "2024-05-10"]


def _checkin(level, note=None):
    return {"status_level": level, "note": note}


def _week(partner_profile=None):
    return {
        "dates": DATES,
        "user": {
            "profile": {"id": "a", "name": "Alice Doe"},
            "week_check_ins": [
                {"date": DATES[0], "morning": _checkin(2), "evening": None},
                {"date": DATES[1], "morning": None, "evening": None},
                {"date": DATES[2], "morning": _checkin(5, "sunny"), "evening": _checkin(4)},
            ],
        },
        "partner": {
            "profile": partner_profile,
            "week_check_ins": [
                {"date": DATES[0], "morning": None, "evening": _checkin(1)},
                {"date": DATES[1], "morning": None, "evening": None},
                {"date": DATES[2], "morning": None, "evening": None},
            ],
        },
    }


def test_day_labels_are_relative_to_last_day():
    assert day_label("2024-05-10", "2024-05-10") == "Today"
    assert day_label("2024-05-09", "2024-05-10") == "Yesterday"
    assert day_label("2024-05-03", "2024-05-10") == "3 May"


def test_long_date_label_has_no_padding():
    assert long_date_label("2024-05-03") == "Friday, May 3, 2024"


def test_grid_without_partner_only_has_own_rows():
    grid = build_week_grid(_week())

    assert grid["x_labels"] == ["8 May", "Yesterday", "Today"]
    assert grid["y_labels"] == ["You · Morning", "You · Evening"]
    assert grid["emojis"][0] == [MOOD_EMOJIS[2], EMPTY_SLOT_EMOJI, MOOD_EMOJIS[5]]
    assert math.isnan(grid["z"][1][0])
    assert grid["z"][1][2] == 4
    assert "sunny" in grid["hover_text"][0][2]


def test_grid_with_partner_uses_first_name():
    grid = build_week_grid(_week({"id": "b", "name": "Bob Roe"}))

    assert grid["y_labels"][2:] == ["Bob · Morning", "Bob · Evening"]
    assert grid["z"][3][0] == 1


def test_heatmap_builds_figure():
    grid = build_week_grid(_week())

    fig = mood_heatmap(grid["z"], grid["hover_text"], grid["x_labels"], grid["y_labels"])

    assert len(fig.data) == 1
    assert list(fig.data[0].x) == grid["x_labels"]
