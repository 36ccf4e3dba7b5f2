"""
Custom exceptions for the tutoring API.

Every exception carries the HTTP status and machine readable code used by
the error envelope rendered in ``app.main``.
"""

from typing import Any, Dict, List, Optional, Sequence


class TutoringServiceException(Exception):
    """Base exception for all tutoring API errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Render the standard error envelope."""
        return {
            "status": self.status_code,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class BadRequestException(TutoringServiceException):
    """Raised when a request is well formed JSON but semantically invalid."""

    status_code = 400
    code = "BAD_REQUEST"


class NotFoundException(TutoringServiceException):
    """Raised when an entity cannot be found by its identifier."""

    status_code = 404

    def __init__(self, entity: str, message: Optional[str] = None):
        code = f"{entity.upper().replace(' ', '_').replace('-', '_')}_NOT_FOUND"
        super().__init__(message=message or f"{entity.capitalize()} not found", code=code)


class ConflictException(TutoringServiceException):
    """Raised when a submission collides with an existing record."""

    status_code = 409
    code = "CONFLICT"


class StudentEmailExistsException(ConflictException):
    """Raised when the student email is already registered."""

    code = "STUDENT_EMAIL_EXISTS"

    def __init__(self):
        super().__init__("Student email address is already registered.")


class GuardianEmailExistsException(ConflictException):
    """Raised when a unique guardian email constraint is violated."""

    code = "STUDENT_GUARDIAN_EMAIL_EXISTS"

    def __init__(self):
        super().__init__("Guardian email is already associated with another student.")


class DatabaseNotConnectedException(TutoringServiceException):
    """Raised when a repository is requested before MongoDB is connected."""

    status_code = 503
    code = "DATABASE_UNAVAILABLE"

    def __init__(self):
        super().__init__("Database connection is not available")


REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


def validation_error_details(errors: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Flatten pydantic errors into ``formErrors`` and dotted ``fieldErrors``.

    The request location prefix FastAPI adds (``body``, ``query``...) is
    dropped; errors without a remaining path are form level.
    """
    form_errors: List[str] = []
    field_errors: Dict[str, List[str]] = {}

    for error in errors:
        loc = list(error.get("loc") or ())
        if loc and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        message = error.get("msg", "Invalid value")
        if not loc:
            form_errors.append(message)
            continue
        path = ".".join(str(part) for part in loc)
        field_errors.setdefault(path, []).append(message)

    return {"formErrors": form_errors, "fieldErrors": field_errors}
