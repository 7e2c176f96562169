from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from studylog.routers.deps import get_report_service, service_errors
from studylog.services.report_service import ReportService

router = APIRouter(prefix="/api/report", tags=["report"])


@router.get("")
def download_report(
    format: str = "json",
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    svc: ReportService = Depends(get_report_service),
):
    with service_errors("Failed to generate report"):
        report = svc.build(format, start_date, end_date)
    return Response(
        content=report.body,
        media_type=report.media_type,
        headers={"Content-Disposition": f"attachment; filename={report.filename}"},
    )
