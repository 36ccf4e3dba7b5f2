"""Tests for domain exceptions and validation error formatting."""

from app.exceptions import (ConflictException, GuardianEmailExistsException, NotFoundException,
                            StudentEmailExistsException, TutoringServiceException,
                            validation_error_details)


class TestExceptions:
    def test_base_defaults(self):
        exc = TutoringServiceException("Oops")

        assert exc.to_dict() == {
            "status": 500,
            "code": "INTERNAL_ERROR",
            "message": "Oops",
            "details": None,
        }

    def test_not_found_codes(self):
        assert NotFoundException("student").code == "STUDENT_NOT_FOUND"
        exc = NotFoundException("summary report")
        assert exc.code == "SUMMARY_REPORT_NOT_FOUND"
        assert exc.message == "Summary report not found"
        assert exc.status_code == 404

    def test_conflicts(self):
        student = StudentEmailExistsException()
        guardian = GuardianEmailExistsException()

        assert isinstance(student, ConflictException)
        assert student.status_code == guardian.status_code == 409
        assert student.code == "STUDENT_EMAIL_EXISTS"
        assert guardian.code == "STUDENT_GUARDIAN_EMAIL_EXISTS"


class TestValidationErrorDetails:
    def test_field_and_form_errors(self):
        details = validation_error_details(
            [
                {"loc": ("body", "enrolments", 0, "subject"), "msg": "Subject is required"},
                {"loc": ("body", "enrolments", 0, "subject"), "msg": "Too short"},
                {"loc": ("body",), "msg": "Field required"},
                {"loc": ("guardian", "email"), "msg": "Invalid email"},
            ]
        )

        assert details == {
            "formErrors": ["Field required"],
            "fieldErrors": {
                "enrolments.0.subject": ["Subject is required", "Too short"],
                "guardian.email": ["Invalid email"],
            },
        }
