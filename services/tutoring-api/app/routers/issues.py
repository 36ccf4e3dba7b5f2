from fastapi import APIRouter, Depends, Request, status

from app.client_info import extract_client
from app.dependencies import get_issue_service
from app.exceptions import NotFoundException
from app.models import IssueSubmission, SubmissionSource
from app.repositories import serialize_document
from app.services import IssueService

router = APIRouter(prefix="/issues", tags=["issues"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_issue(
    issue: IssueSubmission,
    request: Request,
    service: IssueService = Depends(get_issue_service),
):
    """Report an issue from the web app."""
    stored = await service.create_issue(issue, SubmissionSource.MANUAL, extract_client(request))
    return serialize_document(stored)


@router.get("")
async def list_issues(service: IssueService = Depends(get_issue_service)):
    return serialize_document(await service.list_issues())


@router.get("/{issue_id}")
async def get_issue(issue_id: str, service: IssueService = Depends(get_issue_service)):
    issue = await service.get_issue(issue_id)
    if issue is None:
        raise NotFoundException("issue")
    return serialize_document(issue)
