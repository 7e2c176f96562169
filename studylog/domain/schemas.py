"""
Record and payload models for the three collections.

Input models validate everything that reaches the store, so the store itself
never has to reject a value. Record models are what gets persisted and
returned to clients.
"""
from __future__ import annotations

import datetime as dt
import re
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

MIN_HOURS = 0.5
MAX_HOURS = 24.0

_DATE_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_calendar_date(value: str) -> dt.date:
    """Return the calendar date a session date string starts with."""
    match = _DATE_PREFIX.match(value or "")
    if not match:
        raise ValueError("Date must be a calendar date (YYYY-MM-DD)")
    return dt.date.fromisoformat(match.group(0))


def _check_date(value: str) -> str:
    value = value.strip()
    parse_calendar_date(value)
    return value


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Hours = Annotated[float, Field(ge=MIN_HOURS, le=MAX_HOURS)]
CalendarDate = Annotated[str, AfterValidator(_check_date)]

# Payloads are not coerced: "5" is not an hour count and "yes" is not a boolean.
STRICT_INPUT = ConfigDict(strict=True)


# -------------------------- study sessions --------------------------
class StudySessionCreate(BaseModel):
    model_config = STRICT_INPUT

    subject: NonEmptyStr
    hours: Hours
    date: CalendarDate


class StudySessionUpdate(BaseModel):
    model_config = STRICT_INPUT

    subject: Optional[NonEmptyStr] = None
    hours: Optional[Hours] = None
    date: Optional[CalendarDate] = None


class StudySession(BaseModel):
    id: str
    subject: NonEmptyStr
    hours: Hours
    date: CalendarDate

    @property
    def calendar_date(self) -> dt.date:
        return parse_calendar_date(self.date)


# -------------------------- todos --------------------------
class TodoCreate(BaseModel):
    model_config = STRICT_INPUT

    task: NonEmptyStr
    completed: bool = False


class TodoUpdate(BaseModel):
    model_config = STRICT_INPUT

    task: Optional[NonEmptyStr] = None
    completed: Optional[bool] = None


class Todo(BaseModel):
    id: str
    task: NonEmptyStr
    completed: bool = False


# -------------------------- feedback --------------------------
class FeedbackCreate(BaseModel):
    model_config = STRICT_INPUT

    message: NonEmptyStr


class Feedback(BaseModel):
    id: str
    message: NonEmptyStr
    timestamp: str


# -------------------------- derived views --------------------------
class StudyStats(BaseModel):
    """Aggregate over the session collection; never persisted."""

    model_config = ConfigDict(populate_by_name=True)

    total_hours: float = Field(0, alias="totalHours")
    number_of_subjects: int = Field(0, alias="numberOfSubjects")
    average_hours_per_subject: float = Field(0, alias="averageHoursPerSubject")


class SubjectHours(BaseModel):
    subject: str
    hours: float


class WeeklyHours(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    week_start: dt.date = Field(alias="weekStart")
    hours: float


def partial_fields(payload: BaseModel) -> dict:
    """Fields explicitly present (and not null) in an update payload."""
    return payload.model_dump(exclude_unset=True, exclude_none=True)
