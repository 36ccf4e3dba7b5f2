from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from app.client_info import extract_client
from app.dependencies import get_summary_report_service
from app.exceptions import NotFoundException
from app.models import SubmissionSource, SummaryReportSubmission
from app.repositories import serialize_document
from app.services import SummaryReportService

router = APIRouter(prefix="/summary-reports", tags=["summary-reports"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_summary_report(
    report: SummaryReportSubmission,
    request: Request,
    service: SummaryReportService = Depends(get_summary_report_service),
):
    """Store a summary report written by a tutor."""
    stored = await service.create_report(report, SubmissionSource.MANUAL, extract_client(request))
    return serialize_document(stored)


@router.get("")
async def list_summary_reports(
    service: SummaryReportService = Depends(get_summary_report_service),
):
    """Most recent summary reports."""
    return serialize_document(await service.list_reports())


@router.get("/guardian/reports")
async def list_guardian_reports(
    email: Optional[str] = Query(default=None),
    service: SummaryReportService = Depends(get_summary_report_service),
):
    """Summary reports for every student linked to a guardian email."""
    email = (email or "").strip()
    if not email:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"message": "Email is required"}
        )

    result = await service.list_guardian_reports(email)
    if result is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": "No students found for this guardian email"},
        )

    return serialize_document(result)


@router.get("/{report_id}")
async def get_summary_report(
    report_id: str,
    service: SummaryReportService = Depends(get_summary_report_service),
):
    report = await service.get_report(report_id)
    if report is None:
        raise NotFoundException("summary report")
    return serialize_document(report)
