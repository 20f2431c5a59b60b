# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for class and instructor endpoints."""

from fastapi.testclient import TestClient

INSTRUCTOR = "ada@speaksmart.io"
ADMIN = "admin@speaksmart.io"


def _create(client: TestClient, auth_headers, name: str, price: float = 50, email: str = INSTRUCTOR) -> dict:
    response = client.post(
        "/classes",
        json={"name": name, "availableSeats": 5, "price": price},
        headers=auth_headers(email, "instructor"),
    )
    assert response.status_code == 201
    return response.json()


class TestCreateClass:
    """Tests for POST /classes."""

    def test_create_class_pending(self, client: TestClient, auth_headers) -> None:
        body = _create(client, auth_headers, "Business English", price=75.5)

        assert body["status"] == "pending"
        assert body["enrolledCount"] == 0
        assert body["instructorEmail"] == INSTRUCTOR
        assert body["price"] == 75.5

    def test_student_cannot_create(self, client: TestClient, auth_headers) -> None:
        response = client.post(
            "/classes",
            json={"name": "Sneaky", "price": 10},
            headers=auth_headers("sam@speaksmart.io"),
        )

        assert response.status_code == 403
        assert response.json()["error"] is True

    def test_non_positive_price_rejected(self, client: TestClient, auth_headers) -> None:
        response = client.post(
            "/classes",
            json={"name": "Free", "price": 0},
            headers=auth_headers(INSTRUCTOR, "instructor"),
        )

        assert response.status_code == 422


class TestListClasses:
    """Tests for GET /classes."""

    def test_unknown_status_returns_empty(self, client: TestClient, auth_headers) -> None:
        _create(client, auth_headers, "Grammar")

        response = client.get("/classes", params={"status": "rejected"})

        assert response.status_code == 200
        assert response.json() == []

    def test_filter_by_status(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        _create(client, auth_headers, "Still pending")

        approved = client.get("/classes", params={"status": "approved"}).json()
        pending = client.get("/classes", params={"status": "pending"}).json()

        assert [c["id"] for c in approved] == [approved_class["id"]]
        assert [c["name"] for c in pending] == ["Still pending"]

    def test_pending_listed_first(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        _create(client, auth_headers, "Newcomer")

        statuses = [c["status"] for c in client.get("/classes").json()]

        assert statuses == ["pending", "approved"]

    def test_popular_at_most_six_approved(self, client: TestClient, auth_headers) -> None:
        for i in range(8):
            created = _create(client, auth_headers, f"Class {i}")
            if i != 0:
                client.patch(f"/classes/{created['id']}/approve", headers=auth_headers(ADMIN, "admin"))

        popular = client.get("/classes/popular").json()

        assert len(popular) == 6
        assert all(c["status"] == "approved" for c in popular)

    def test_get_missing_class(self, client: TestClient) -> None:
        response = client.get("/classes/9999")

        assert response.status_code == 404
        assert response.json()["error"] is True


class TestApproveClass:
    """Tests for PATCH /classes/{id}/approve."""

    def test_approve_is_idempotent(self, client: TestClient, auth_headers) -> None:
        created = _create(client, auth_headers, "Pronunciation")
        headers = auth_headers(ADMIN, "admin")

        first = client.patch(f"/classes/{created['id']}/approve", headers=headers)
        second = client.patch(f"/classes/{created['id']}/approve", headers=headers)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["status"] == "approved"

    def test_instructor_cannot_approve(self, client: TestClient, auth_headers) -> None:
        created = _create(client, auth_headers, "Self approved")

        response = client.patch(
            f"/classes/{created['id']}/approve",
            headers=auth_headers(INSTRUCTOR, "instructor"),
        )

        assert response.status_code == 403

    def test_approve_missing_class(self, client: TestClient, auth_headers) -> None:
        response = client.patch("/classes/9999/approve", headers=auth_headers(ADMIN, "admin"))

        assert response.status_code == 404


class TestUpdateClass:
    """Tests for PUT and PATCH /classes/{id}."""

    def test_owner_updates_pending_class(self, client: TestClient, auth_headers) -> None:
        created = _create(client, auth_headers, "Draft")

        response = client.put(
            f"/classes/{created['id']}",
            json={"name": "Final", "availableSeats": 12},
            headers=auth_headers(INSTRUCTOR, "instructor"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Final"
        assert body["availableSeats"] == 12
        assert body["price"] == 50.0

    def test_null_for_required_field_rejected(self, client: TestClient, auth_headers) -> None:
        """Test that an explicit null for a required field is a validation error."""
        created = _create(client, auth_headers, "Keeps its name")
        headers = auth_headers(INSTRUCTOR, "instructor")

        for body in ({"name": None}, {"price": None}, {"availableSeats": None}):
            response = client.patch(f"/classes/{created['id']}", json=body, headers=headers)
            assert response.status_code == 422

        unchanged = client.get(f"/classes/{created['id']}").json()
        assert unchanged["name"] == "Keeps its name"
        assert unchanged["price"] == 50.0

    def test_other_instructor_forbidden(self, client: TestClient, auth_headers) -> None:
        created = _create(client, auth_headers, "Mine")

        response = client.patch(
            f"/classes/{created['id']}",
            json={"name": "Theirs"},
            headers=auth_headers("bob@speaksmart.io", "instructor"),
        )

        assert response.status_code == 403

    def test_owner_cannot_edit_approved(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        response = client.patch(
            f"/classes/{approved_class['id']}",
            json={"price": 1},
            headers=auth_headers(INSTRUCTOR, "instructor"),
        )

        assert response.status_code == 403

    def test_admin_leaves_feedback(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        response = client.patch(
            f"/classes/{approved_class['id']}",
            json={"feedback": "Great syllabus"},
            headers=auth_headers(ADMIN, "admin"),
        )

        assert response.status_code == 200
        assert response.json()["feedback"] == "Great syllabus"


class TestInstructors:
    """Tests for /instructors."""

    def test_instructor_classes_owner_only(self, client: TestClient, auth_headers) -> None:
        _create(client, auth_headers, "Listening")

        own = client.get(f"/instructors/{INSTRUCTOR}/classes", headers=auth_headers(INSTRUCTOR, "instructor"))
        other = client.get(f"/instructors/{INSTRUCTOR}/classes", headers=auth_headers("bob@speaksmart.io", "instructor"))

        assert [c["name"] for c in own.json()] == ["Listening"]
        assert other.status_code == 403

    def test_popular_instructors(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        client.put(
            f"/users/{INSTRUCTOR}",
            json={"name": "Ada", "role": "instructor"},
            headers=auth_headers(ADMIN, "admin"),
        )

        response = client.get("/instructors/popular")

        assert response.status_code == 200
        emails = [i["email"] for i in response.json()]
        assert INSTRUCTOR in emails
