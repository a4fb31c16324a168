# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for Classes API endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from silveredge.api.dependencies import get_db
from silveredge.api.errors import register_exception_handlers
from silveredge.api.v1 import router as v1_router
from silveredge.domains.enrollment import ClassNotFoundError, InvalidStudentTypeError
from silveredge.models.classes import ClassCourseProgress, ClassStats, EnrollmentResponse


@pytest.fixture
def app():
    """Create test FastAPI app."""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(v1_router)

    async def override_db():
        yield MagicMock()

    app.dependency_overrides[get_db] = override_db
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


def enrollment(created: bool) -> EnrollmentResponse:
    return EnrollmentResponse(
        class_id="class-1",
        student_id="student-1",
        enrolled_at=datetime(2025, 3, 3, tzinfo=timezone.utc),
        created=created,
    )


class TestClassesAPIRouting:
    """Tests for classes API routing."""

    def test_routes_registered(self, app):
        """Test that class routes are registered."""
        routes = [route.path for route in app.routes]

        assert "/api/v1/classes/{class_id}/stats" in routes
        assert "/api/v1/classes/{class_id}/courses" in routes
        assert "/api/v1/classes/{class_id}/students/{student_id}" in routes


class TestClassDashboard:
    """Tests for class dashboard endpoints."""

    @patch("silveredge.api.v1.classes.ProgressAggregator")
    def test_get_stats(self, mock_aggregator_cls, client):
        """Test class statistics are returned in camelCase."""
        mock_aggregator_cls.from_session.return_value.compute_class_stats = AsyncMock(
            return_value=ClassStats(attendance_rate=67, avg_progress=25, last_activity="2025-03-03T12:00:00Z")
        )

        response = client.get("/api/v1/classes/class-1/stats")

        assert response.status_code == 200
        assert response.json() == {
            "attendanceRate": 67,
            "avgProgress": 25,
            "lastActivity": "2025-03-03T12:00:00Z",
        }

    @patch("silveredge.api.v1.classes.ProgressAggregator")
    def test_get_stats_for_unknown_class(self, mock_aggregator_cls, client):
        """Test unknown classes still report default figures."""
        mock_aggregator_cls.from_session.return_value.compute_class_stats = AsyncMock(
            return_value=ClassStats()
        )

        response = client.get("/api/v1/classes/missing/stats")

        assert response.status_code == 200
        assert response.json()["lastActivity"] == "No activity"

    @patch("silveredge.api.v1.classes.ProgressAggregator")
    def test_get_courses(self, mock_aggregator_cls, client):
        """Test assigned courses are listed with their class average."""
        mock_aggregator_cls.from_session.return_value.get_class_courses_with_progress = AsyncMock(
            return_value=[
                ClassCourseProgress(
                    course_id="course-1",
                    title="Python Basics",
                    status="published",
                    total_lessons=2,
                    progress_percent=75,
                )
            ]
        )

        response = client.get("/api/v1/classes/class-1/courses")

        assert response.status_code == 200
        assert response.json()[0]["progressPercent"] == 75


class TestClassEnrollment:
    """Tests for enrollment endpoints."""

    @patch("silveredge.api.v1.classes._get_enrollment_service")
    def test_enroll_new_student(self, mock_get_service, client):
        """Test a new enrollment returns 201."""
        mock_service = MagicMock()
        mock_service.enroll_student = AsyncMock(return_value=enrollment(created=True))
        mock_get_service.return_value = mock_service

        response = client.post("/api/v1/classes/class-1/students/student-1")

        assert response.status_code == 201
        assert response.json()["created"] is True

    @patch("silveredge.api.v1.classes._get_enrollment_service")
    def test_enroll_existing_student(self, mock_get_service, client):
        """Test re-enrolling returns the existing enrollment with 200."""
        mock_service = MagicMock()
        mock_service.enroll_student = AsyncMock(return_value=enrollment(created=False))
        mock_get_service.return_value = mock_service

        response = client.post("/api/v1/classes/class-1/students/student-1")

        assert response.status_code == 200
        assert response.json()["created"] is False

    @patch("silveredge.api.v1.classes._get_enrollment_service")
    def test_enroll_unknown_class(self, mock_get_service, client):
        """Test enrolling into a missing class is not found."""
        mock_service = MagicMock()
        mock_service.enroll_student = AsyncMock(side_effect=ClassNotFoundError("Class missing not found"))
        mock_get_service.return_value = mock_service

        response = client.post("/api/v1/classes/missing/students/student-1")

        assert response.status_code == 404
        assert response.json()["detail"] == "Class missing not found"

    @patch("silveredge.api.v1.classes._get_enrollment_service")
    def test_enroll_non_student(self, mock_get_service, client):
        """Test enrolling a teacher is not found."""
        mock_service = MagicMock()
        mock_service.enroll_student = AsyncMock(
            side_effect=InvalidStudentTypeError("User teacher-1 is not a student")
        )
        mock_get_service.return_value = mock_service

        response = client.post("/api/v1/classes/class-1/students/teacher-1")

        assert response.status_code == 404

    @patch("silveredge.api.v1.classes._get_enrollment_service")
    def test_withdraw(self, mock_get_service, client):
        """Test withdrawing returns no content."""
        mock_service = MagicMock()
        mock_service.withdraw_student = AsyncMock(return_value=True)
        mock_get_service.return_value = mock_service

        response = client.delete("/api/v1/classes/class-1/students/student-1")

        assert response.status_code == 204

    @patch("silveredge.api.v1.classes._get_enrollment_service")
    def test_withdraw_not_enrolled(self, mock_get_service, client):
        """Test withdrawing a student who is not enrolled is not found."""
        mock_service = MagicMock()
        mock_service.withdraw_student = AsyncMock(return_value=False)
        mock_get_service.return_value = mock_service

        response = client.delete("/api/v1/classes/class-1/students/student-1")

        assert response.status_code == 404
