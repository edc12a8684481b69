from __future__ import annotations

from datetime import date
from typing import Optional, List, Literal

from pydantic import BaseModel, Field, field_validator

from backend.db_init import NOTE_MAX_LENGTH

Period = Literal["morning", "evening"]
PERIODS: tuple[str, ...] = ("morning", "evening")


def clean_note(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class Profile(BaseModel):
    id: str
    name: str
    partner_id: Optional[str] = None
    created_at: str


class CheckIn(BaseModel):
    id: str
    user_id: str
    period: Period
    status_level: int = Field(..., ge=1, le=5)
    note: Optional[str] = None
    checkin_date: str
    created_at: str
    updated_at: Optional[str] = None


class DailyCheckIns(BaseModel):
    morning: Optional[CheckIn] = None
    evening: Optional[CheckIn] = None


class DayCheckIns(DailyCheckIns):
    date: str


class PersonDay(BaseModel):
    profile: Optional[Profile] = None
    check_ins: DailyCheckIns = Field(default_factory=DailyCheckIns)


class TodayStatus(BaseModel):
    date: str
    user: PersonDay
    partner: PersonDay


class PersonWeek(BaseModel):
    profile: Optional[Profile] = None
    week_check_ins: List[DayCheckIns] = Field(default_factory=list)


class WeekStatus(BaseModel):
    dates: List[str]
    user: PersonWeek
    partner: PersonWeek


class CheckInUpdate(BaseModel):
    status_level: int = Field(..., ge=1, le=5)
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)

    @field_validator("note", mode="before")
    @classmethod
    def _blank_note_is_null(cls, value):
        return clean_note(value)


class CheckInCreate(CheckInUpdate):
    period: Period
    checkin_date: Optional[date] = None


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    token: str
    profile_id: str
    expires_at: str


class AuthSession(BaseModel):
    profile_id: str
    expires_at: str
