"""
Derived statistics over study sessions.

Pure functions: they take the sessions in the order given and never touch
storage. Sums follow that order so floating point results are reproducible.
"""
from __future__ import annotations

import datetime as dt
import math
from typing import Iterable, Optional, Sequence

from .schemas import StudySession, StudyStats, SubjectHours, WeeklyHours


def compute_stats(sessions: Iterable[StudySession]) -> StudyStats:
    total_hours = 0.0
    subjects: set[str] = set()
    for session in sessions:
        total_hours += session.hours
        subjects.add(session.subject.lower())

    number_of_subjects = len(subjects)
    if not number_of_subjects:
        return StudyStats(total_hours=0, number_of_subjects=0, average_hours_per_subject=0)
    return StudyStats(
        total_hours=total_hours,
        number_of_subjects=number_of_subjects,
        average_hours_per_subject=total_hours / number_of_subjects,
    )


def round_tenth(hours: float) -> float:
    """Round to one decimal, halves upwards (2.25 -> 2.3)."""
    return math.floor(hours * 10 + 0.5) / 10


def hours_by_subject(sessions: Iterable[StudySession], limit: int = 10) -> list[SubjectHours]:
    """Total hours per subject (exact text), largest first."""
    totals: dict[str, float] = {}
    for session in sessions:
        totals[session.subject] = totals.get(session.subject, 0.0) + session.hours
    rounded = [SubjectHours(subject=subject, hours=round_tenth(hours)) for subject, hours in totals.items()]
    return sorted(rounded, key=lambda item: item.hours, reverse=True)[:limit]


def week_start(day: dt.date) -> dt.date:
    """Monday of the week containing ``day``."""
    return day - dt.timedelta(days=day.weekday())


def weekly_progress(
    sessions: Iterable[StudySession],
    weeks: int = 8,
    today: Optional[dt.date] = None,
) -> list[WeeklyHours]:
    """Hours per week for the last ``weeks`` weeks (current week included), oldest first."""
    current = week_start(today or dt.date.today())
    buckets = {current - dt.timedelta(weeks=offset): 0.0 for offset in range(weeks - 1, -1, -1)}
    for session in sessions:
        key = week_start(session.calendar_date)
        if key in buckets:
            buckets[key] += session.hours
    return [WeeklyHours(week_start=start, hours=round_tenth(hours)) for start, hours in buckets.items()]


def filter_by_date_range(
    sessions: Sequence[StudySession],
    start: Optional[dt.date] = None,
    end: Optional[dt.date] = None,
) -> list[StudySession]:
    """Sessions whose calendar date lies in [start, end]; missing bounds are open."""
    selected = []
    for session in sessions:
        day = session.calendar_date
        if start and day < start:
            continue
        if end and day > end:
            continue
        selected.append(session)
    return selected
