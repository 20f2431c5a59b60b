# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""End-to-end tests for select, reserve, pay and enroll over HTTP."""

from fastapi.testclient import TestClient

from speaksmart.core.exceptions import PaymentGatewayError

STUDENT = "sam@speaksmart.io"
ADMIN = "admin@speaksmart.io"


def _select(client: TestClient, auth_headers, class_id: int, email: str = STUDENT):
    return client.post(
        "/selections",
        json={"studentEmail": email, "classId": class_id},
        headers=auth_headers(email),
    )


def _enroll(client: TestClient, auth_headers, class_id: int, amount: float = 50):
    return client.post(
        "/enrollments",
        json={
            "studentEmail": STUDENT,
            "classId": class_id,
            "amount": amount,
            "transactionId": "pi_test_1",
        },
        headers=auth_headers(STUDENT),
    )


class TestSelections:
    """Tests for the selection ledger endpoints."""

    def test_select_and_list(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        created = _select(client, auth_headers, approved_class["id"])

        assert created.status_code == 201
        assert created.json()["classInfo"]["name"] == "Conversational English"

        listed = client.get(f"/selections/{STUDENT}", headers=auth_headers(STUDENT))
        assert [s["classId"] for s in listed.json()] == [approved_class["id"]]

    def test_select_for_someone_else_forbidden(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        response = client.post(
            "/selections",
            json={"studentEmail": STUDENT, "classId": approved_class["id"]},
            headers=auth_headers("eve@speaksmart.io"),
        )

        assert response.status_code == 403
        assert response.json() == {"error": True, "message": "Forbidden access!"}

    def test_select_missing_class(self, client: TestClient, auth_headers) -> None:
        assert _select(client, auth_headers, 9999).status_code == 404

    def test_list_other_students_selections_forbidden(self, client: TestClient, auth_headers) -> None:
        response = client.get(f"/selections/{STUDENT}", headers=auth_headers("eve@speaksmart.io"))

        assert response.status_code == 403

    def test_remove_selection(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        selection_id = _select(client, auth_headers, approved_class["id"]).json()["id"]

        stranger = client.delete(f"/selections/{selection_id}", headers=auth_headers("eve@speaksmart.io"))
        removed = client.delete(f"/selections/{selection_id}", headers=auth_headers(STUDENT))
        again = client.delete(f"/selections/{selection_id}", headers=auth_headers(STUDENT))

        assert stranger.status_code == 403
        assert removed.json() == {"deleted": True, "deletedCount": 1}
        assert again.json() == {"deleted": False, "deletedCount": 0}


class TestReservations:
    """Tests for POST /payment-reservations."""

    def test_reserve(self, client: TestClient, auth_headers, approved_class: dict, payment_gateway) -> None:
        response = client.post(
            "/payment-reservations",
            json={"classId": approved_class["id"], "price": 50},
            headers=auth_headers(STUDENT),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["reservationSecret"].startswith("pi_test_")
        assert body["amount"] == 50.0
        assert body["currency"] == "usd"
        assert len(payment_gateway.calls) == 1

    def test_price_mismatch_rejected(self, client: TestClient, auth_headers, approved_class: dict, payment_gateway) -> None:
        response = client.post(
            "/payment-reservations",
            json={"classId": approved_class["id"], "price": 1},
            headers=auth_headers(STUDENT),
        )

        assert response.status_code == 422
        assert payment_gateway.calls == []

    def test_pending_class_rejected(self, client: TestClient, auth_headers) -> None:
        created = client.post(
            "/classes",
            json={"name": "Not yet", "price": 20},
            headers=auth_headers("ada@speaksmart.io", "instructor"),
        ).json()

        response = client.post(
            "/payment-reservations",
            json={"classId": created["id"]},
            headers=auth_headers(STUDENT),
        )

        assert response.status_code == 422

    def test_gateway_failure(self, client: TestClient, auth_headers, approved_class: dict, payment_gateway) -> None:
        payment_gateway.error = PaymentGatewayError("card_declined", code="card_declined")

        response = client.post(
            "/payment-reservations",
            json={"classId": approved_class["id"]},
            headers=auth_headers(STUDENT),
        )

        assert response.status_code == 502
        assert response.json()["error"] is True


class TestEnrollmentFlow:
    """Tests for POST /enrollments and the student's records."""

    def test_full_flow(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        class_id = approved_class["id"]
        _select(client, auth_headers, class_id)
        client.post(
            "/payment-reservations",
            json={"classId": class_id, "price": 50},
            headers=auth_headers(STUDENT),
        )

        enrolled = _enroll(client, auth_headers, class_id)

        assert enrolled.status_code == 201
        assert enrolled.json()["classInfo"]["enrolledCount"] == 1

        headers = auth_headers(STUDENT)
        assert client.get(f"/selections/{STUDENT}", headers=headers).json() == []
        assert len(client.get(f"/payments/{STUDENT}", headers=headers).json()) == 1
        enrollments = client.get(f"/enrollments/{STUDENT}", headers=headers).json()
        assert [e["classId"] for e in enrollments] == [class_id]
        assert client.get(f"/classes/{class_id}").json()["enrolledCount"] == 1

    def test_retry_is_idempotent(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        class_id = approved_class["id"]

        first = _enroll(client, auth_headers, class_id)
        second = _enroll(client, auth_headers, class_id)

        assert second.status_code == 201
        assert second.json()["id"] == first.json()["id"]
        assert client.get(f"/classes/{class_id}").json()["enrolledCount"] == 1
        assert len(client.get(f"/payments/{STUDENT}", headers=auth_headers(STUDENT)).json()) == 1

    def test_wrong_amount_rejected(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        response = _enroll(client, auth_headers, approved_class["id"], amount=5)

        assert response.status_code == 422
        assert client.get(f"/payments/{STUDENT}", headers=auth_headers(STUDENT)).json() == []

    def test_payment_records_class_price(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        response = _enroll(client, auth_headers, approved_class["id"], amount=50.01)

        assert response.status_code == 201
        payments = client.get(f"/payments/{STUDENT}", headers=auth_headers(STUDENT)).json()
        assert payments[0]["amount"] == 50.0

    def test_amount_with_three_decimals_rejected(
        self, client: TestClient, auth_headers, approved_class: dict
    ) -> None:
        response = _enroll(client, auth_headers, approved_class["id"], amount=50.001)

        assert response.status_code == 422
        assert client.get(f"/payments/{STUDENT}", headers=auth_headers(STUDENT)).json() == []

    def test_enroll_for_someone_else_forbidden(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        response = client.post(
            "/enrollments",
            json={
                "studentEmail": "eve@speaksmart.io",
                "classId": approved_class["id"],
                "amount": 50,
                "transactionId": "pi_test_1",
            },
            headers=auth_headers(STUDENT),
        )

        assert response.status_code == 403

    def test_empty_histories(self, client: TestClient, auth_headers) -> None:
        headers = auth_headers(STUDENT)

        assert client.get(f"/enrollments/{STUDENT}", headers=headers).json() == []
        assert client.get(f"/payments/{STUDENT}", headers=headers).json() == []


class TestReconcile:
    """Tests for POST /enrollments/reconcile."""

    def test_admin_only(self, client: TestClient, auth_headers) -> None:
        assert client.post("/enrollments/reconcile", headers=auth_headers(STUDENT)).status_code == 403

    def test_nothing_to_do(self, client: TestClient, auth_headers, approved_class: dict) -> None:
        _enroll(client, auth_headers, approved_class["id"])

        response = client.post("/enrollments/reconcile", headers=auth_headers(ADMIN, "admin"))

        assert response.status_code == 200
        assert response.json() == {
            "enrollmentsCreated": 0,
            "countersApplied": 0,
            "selectionsRemoved": 0,
            "failed": [],
        }
