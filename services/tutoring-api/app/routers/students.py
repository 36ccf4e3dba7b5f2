from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.client_info import extract_client
from app.dependencies import get_student_service
from app.exceptions import NotFoundException
from app.models import EmailLookupRequest, StudentSubmission, SubmissionSource
from app.repositories import serialize_document
from app.services import StudentService

router = APIRouter(prefix="/students", tags=["students"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_student(
    submission: StudentSubmission,
    request: Request,
    service: StudentService = Depends(get_student_service),
):
    """Register a student submitted through the enrolment form."""
    stored = await service.create_student(
        submission, SubmissionSource.MANUAL, extract_client(request)
    )
    return serialize_document(stored)


@router.get("")
async def list_students(service: StudentService = Depends(get_student_service)):
    """All students, newest first."""
    return serialize_document(await service.list_students())


@router.post("/verify-email")
async def verify_student_email(
    payload: Optional[EmailLookupRequest] = None,
    service: StudentService = Depends(get_student_service),
):
    """Confirm that an email belongs to a registered student."""
    email = (payload.email or "").strip() if payload else ""
    if not email:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Email is required"},
        )

    profile = await service.verify_student_email(email)
    if profile is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": "Email not found in our records"},
        )

    return {"success": True, "data": profile}


@router.get("/{student_id}")
async def get_student(
    student_id: str,
    service: StudentService = Depends(get_student_service),
):
    student = await service.get_student(student_id)
    if student is None:
        raise NotFoundException("student")
    return serialize_document(student)
