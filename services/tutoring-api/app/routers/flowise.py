"""
Chatbot (Flowise) integration endpoints.

Webhooks wrap the regular submission payloads as ``{id, payload}`` where
``id`` identifies the chatbot run and is stored as ``sourceId``.
"""

from fastapi import APIRouter, Depends, Request, status

from app.client_info import extract_client
from app.dependencies import (get_flowise_service, get_issue_service, get_student_service,
                              get_summary_report_service)
from app.models import (FlowiseEvent, IssueWebhook, SendEmailRequest, SendEmailResponse,
                        StudentWebhook, SubmissionSource, SummaryReportWebhook, WebhookAck)
from app.repositories import serialize_document
from app.services import FlowiseService, IssueService, StudentService, SummaryReportService

router = APIRouter(tags=["flowise"])


@router.post(
    "/flowise/student",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=WebhookAck,
)
async def receive_student(
    webhook: StudentWebhook,
    request: Request,
    service: StudentService = Depends(get_student_service),
):
    """Student enrolment collected by the chatbot."""
    stored = await service.create_student(
        webhook.payload, SubmissionSource.FLOWISE, extract_client(request), webhook.id
    )
    return WebhookAck(id=str(stored["_id"]))


@router.post(
    "/flowise/issue-report",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=WebhookAck,
)
async def receive_issue_report(
    webhook: IssueWebhook,
    request: Request,
    service: IssueService = Depends(get_issue_service),
):
    stored = await service.create_issue(
        webhook.payload.to_submission(),
        SubmissionSource.FLOWISE,
        extract_client(request),
        webhook.id,
    )
    return WebhookAck(id=str(stored["_id"]))


@router.post("/flowise/summary-report", status_code=status.HTTP_201_CREATED)
async def receive_summary_report(
    webhook: SummaryReportWebhook,
    request: Request,
    service: SummaryReportService = Depends(get_summary_report_service),
):
    stored = await service.create_report(
        webhook.payload, SubmissionSource.FLOWISE, extract_client(request), webhook.id
    )
    return serialize_document(stored)


@router.post(
    "/flowise/webhook",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=WebhookAck,
)
async def receive_event(
    event: FlowiseEvent,
    service: FlowiseService = Depends(get_flowise_service),
):
    """Capture an arbitrary chatbot event for later inspection."""
    stored = await service.record_event(event)
    return WebhookAck(id=str(stored["_id"]))


@router.post("/tools/send-email", response_model=SendEmailResponse)
async def send_email(
    request: SendEmailRequest,
    service: FlowiseService = Depends(get_flowise_service),
):
    """Send an email on behalf of a chatbot tool."""
    result = await service.send_email(request)
    return SendEmailResponse(ok=True, result=result.model_dump(by_alias=True))
