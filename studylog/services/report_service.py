"""
Downloadable study reports (JSON, plain text, CSV).

Every format covers the same data: the sessions inside the requested date
range and the statistics computed over exactly those sessions.
"""

from __future__ import annotations

import csv
import datetime as dt
import io
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from studylog.domain.schemas import StudySession, StudyStats
from studylog.domain.stats import compute_stats
from studylog.services.errors import InvalidRequestError
from studylog.services.study_service import StudyService

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

REPORT_FORMATS = ("json", "txt", "csv")
CSV_HEADER = ("id", "subject", "hours", "date")


def format_hours(value: float) -> str:
    """2.0 -> "2", 2.5 -> "2.5"."""
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["hours"] = format_hours
    return env


def parse_date_param(value: Optional[str], name: str) -> Optional[dt.date]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise InvalidRequestError(f"{name} must be a date (YYYY-MM-DD)") from None


@dataclass
class Report:
    filename: str
    media_type: str
    body: str


class ReportService:
    def __init__(self, study_service: StudyService) -> None:
        self.study_service = study_service
        self.env = _environment()

    def build(
        self,
        fmt: Optional[str] = "json",
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        now: Optional[dt.datetime] = None,
    ) -> Report:
        start = parse_date_param(start_date, "startDate")
        end = parse_date_param(end_date, "endDate")
        if start and end and start > end:
            raise InvalidRequestError("startDate must not be after endDate")
        now = now or dt.datetime.now(dt.timezone.utc)

        sessions = self.study_service.list_sessions(start, end)
        stats = compute_stats(sessions)

        fmt = (fmt or "json").lower()
        if fmt == "txt":
            return Report("study-report.txt", "text/plain", self.render_text(sessions, stats, now))
        if fmt == "csv":
            return Report("study-report.csv", "text/csv", self.render_csv(sessions))
        return Report("study-report.json", "application/json", self.render_json(sessions, stats, now, start, end))

    def render_json(
        self,
        sessions: list[StudySession],
        stats: StudyStats,
        now: dt.datetime,
        start: Optional[dt.date] = None,
        end: Optional[dt.date] = None,
    ) -> str:
        payload = {
            "generatedAt": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "period": {
                "startDate": start.isoformat() if start else None,
                "endDate": end.isoformat() if end else None,
            },
            "statistics": stats.model_dump(by_alias=True),
            "sessions": [session.model_dump() for session in sessions],
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)

    def render_text(self, sessions: list[StudySession], stats: StudyStats, now: dt.datetime) -> str:
        template = self.env.get_template("report.txt")
        return template.render(
            sessions=sessions,
            stats=stats,
            generated_on=now.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
        )

    def render_csv(self, sessions: list[StudySession]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for session in sessions:
            writer.writerow([session.id, session.subject, format_hours(session.hours), session.date])
        return buffer.getvalue()
