PERIODS = ["morning", "evening"]
PERIOD_LABELS = {
    "morning": "Morning",
    "evening": "Evening",
}

STATUS_LEVELS = [1, 2, 3, 4, 5]
MOOD_EMOJIS = {
    1: "😢",
    2: "😔",
    3: "😐",
    4: "🙂",
    5: "😄",
}
MOOD_LABELS = {
    1: "Not Happy",
    2: "Somewhat Down",
    3: "Neutral",
    4: "Pretty Good",
    5: "Really Happy",
}
MOOD_COLORS = {
    1: "#9fb3d9",
    2: "#c3b5e0",
    3: "#f1e3a8",
    4: "#f7b9c4",
    5: "#f27a98",
}
EMPTY_SLOT_EMOJI = "⚪"

NOTE_MAX_LENGTH = 500
WEEK_DAYS = 7


def mood_option_label(level):
    return f"{MOOD_EMOJIS[level]} {MOOD_LABELS[level]}"
