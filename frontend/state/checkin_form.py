"""Write path of one check-in slot (one period of one day).

A form starts in ``no-checkin-yet`` or ``viewing`` depending only on the
check-in handed to it by the status view. Submitting from ``no-checkin-yet``
creates the check-in, submitting from ``editing`` updates it by id. Errors
stay on the form as a message; the mode and the typed values are kept so
the user can retry.
"""
from dataclasses import dataclass
from typing import Optional

from backend.errors import ConflictError, NotFoundError, StorageError
from frontend.constants import NOTE_MAX_LENGTH, STATUS_LEVELS

NO_CHECKIN = "no-checkin-yet"
VIEWING = "viewing"
EDITING = "editing"

MISSING_LEVEL_MESSAGE = "Please select a mood level"
CONFLICT_MESSAGE = "You have already submitted a check-in for this period today."
GENERIC_ERROR_MESSAGE = "Failed to submit check-in"
MISSING_CHECKIN_MESSAGE = "This check-in could not be found anymore."


@dataclass
class CheckInForm:
    period: str
    checkin: Optional[dict] = None
    mode: str = NO_CHECKIN
    status_level: Optional[int] = None
    note: str = ""
    error: Optional[str] = None
    # Bumped whenever displayed values are reset, so widgets keyed on it re-seed.
    revision: int = 0

    @classmethod
    def for_slot(cls, period, checkin=None):
        form = cls(period=period)
        form.load(checkin)
        return form

    @property
    def editable(self):
        return self.mode in (NO_CHECKIN, EDITING)

    def load(self, checkin):
        self.checkin = checkin or None
        self.error = None
        if self.checkin:
            self.mode = VIEWING
            self.status_level = int(self.checkin["status_level"])
            self.note = self.checkin.get("note") or ""
        else:
            self.mode = NO_CHECKIN
            self.status_level = None
            self.note = ""
        self.revision += 1

    def refresh(self, checkin):
        """Take a newer persisted value without discarding an edit in progress."""
        if (checkin or None) == self.checkin:
            return
        if self.mode == EDITING and checkin:
            self.checkin = checkin
            return
        self.load(checkin)

    def select_level(self, level):
        if not self.editable:
            return
        if level is None:
            self.status_level = None
            return
        level = int(level)
        if level not in STATUS_LEVELS:
            raise ValueError(f"Status level must be between 1 and 5, got {level}")
        self.status_level = level
        self.error = None

    def set_note(self, text):
        if not self.editable:
            return
        self.note = str(text or "")[:NOTE_MAX_LENGTH]

    def start_edit(self):
        if self.mode != VIEWING:
            return
        self.mode = EDITING
        self.status_level = int(self.checkin["status_level"])
        self.note = self.checkin.get("note") or ""
        self.error = None
        self.revision += 1

    def cancel(self):
        if self.mode != EDITING:
            return
        self.load(self.checkin)

    def submit(self, client, checkin_date=None):
        """Persist the form. Returns True when the slot moved to ``viewing``."""
        if self.mode == VIEWING:
            return False
        if self.status_level is None:
            self.error = MISSING_LEVEL_MESSAGE
            return False

        note = self.note.strip() or None
        try:
            if self.mode == NO_CHECKIN:
                saved = client.create_checkin(self.period, self.status_level, note, checkin_date)
            else:
                saved = client.update_checkin(self.checkin["id"], self.status_level, note)
        except ConflictError:
            self.error = CONFLICT_MESSAGE
            return False
        except NotFoundError:
            self.error = MISSING_CHECKIN_MESSAGE
            return False
        except StorageError:
            self.error = GENERIC_ERROR_MESSAGE
            return False

        self.load(saved)
        return True
