"""Tests for the guardian portal endpoints."""

from bson import ObjectId


def guardian_students():
    return [
        {
            "_id": ObjectId(),
            "name": "Ada Lovelace",
            "nickname": "",
            "email": "ada@example.com",
            "enrolments": [{"subject": "Maths"}, {"subject": "Physics"}],
        },
        {"_id": ObjectId(), "name": "Byron", "nickname": "B", "email": "byron@example.com"},
    ]


class TestVerifyGuardianEmail:
    """Test guardian email verification."""

    def test_email_required(self, client):
        response = client.post("/api/v1/guardians/verify-email", json={})

        assert response.status_code == 400
        assert response.json() == {"message": "Email is required"}

    def test_unknown_guardian(self, client):
        response = client.post(
            "/api/v1/guardians/verify-email", json={"email": "nobody@example.com"}
        )

        assert response.status_code == 404
        assert response.json() == {"message": "No students found for this guardian email"}

    def test_guardian_verified(self, client, student_repository):
        student_repository.find_by_guardian_email.return_value = guardian_students()

        response = client.post(
            "/api/v1/guardians/verify-email", json={"email": " Anne@Example.com "}
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": "Guardian email verified",
            "studentCount": 2,
            "guardianEmail": "anne@example.com",
        }
        student_repository.find_by_guardian_email.assert_awaited_once_with("anne@example.com")


class TestGuardianStudents:
    """Test listing the students of a guardian."""

    def test_email_required(self, client):
        response = client.get("/api/v1/guardians/students")

        assert response.status_code == 400
        assert response.json() == {"message": "Email is required"}

    def test_unknown_guardian(self, client):
        response = client.get("/api/v1/guardians/students", params={"email": "x@example.com"})

        assert response.status_code == 404

    def test_students_summarized(self, client, student_repository):
        students = guardian_students()
        student_repository.find_by_guardian_email.return_value = students

        response = client.get("/api/v1/guardians/students", params={"email": "anne@example.com"})

        assert response.status_code == 200
        data = response.json()
        assert data["guardianEmail"] == "anne@example.com"
        assert data["students"] == [
            {
                "_id": str(students[0]["_id"]),
                "name": "Ada Lovelace",
                "nickname": None,
                "email": "ada@example.com",
                "enrolmentCount": 2,
            },
            {
                "_id": str(students[1]["_id"]),
                "name": "Byron",
                "nickname": "B",
                "email": "byron@example.com",
                "enrolmentCount": 0,
            },
        ]
