from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.dependencies import get_student_service
from app.models import EmailLookupRequest
from app.normalizers import normalize_email
from app.repositories import serialize_document
from app.services import StudentService

router = APIRouter(prefix="/guardians", tags=["guardians"])


def email_required() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"message": "Email is required"}
    )


def no_students_found() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": "No students found for this guardian email"},
    )


@router.post("/verify-email")
async def verify_guardian_email(
    payload: Optional[EmailLookupRequest] = None,
    service: StudentService = Depends(get_student_service),
):
    """Confirm that at least one student is linked to a guardian email."""
    email = (payload.email or "").strip() if payload else ""
    if not email:
        return email_required()

    students = await service.find_guardian_students(email)
    if not students:
        return no_students_found()

    return {
        "message": "Guardian email verified",
        "studentCount": len(students),
        "guardianEmail": normalize_email(email),
    }


@router.get("/students")
async def list_guardian_students(
    email: Optional[str] = Query(default=None),
    service: StudentService = Depends(get_student_service),
):
    """Students linked to a guardian email."""
    email = (email or "").strip()
    if not email:
        return email_required()

    students = await service.find_guardian_students(email)
    if not students:
        return no_students_found()

    return {"guardianEmail": normalize_email(email), "students": serialize_document(students)}
