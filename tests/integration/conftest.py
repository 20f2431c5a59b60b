# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for HTTP-level tests.

The app is built by create_app() with the test settings, so the schema
is created in a throwaway SQLite file during the lifespan startup.
"""

from collections.abc import Callable, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from speaksmart.api.app import create_app
from speaksmart.core.config import Settings
from speaksmart.domains.auth import JWTManager


@pytest.fixture
def app(test_settings: Settings, payment_gateway) -> FastAPI:
    """Create the application with the fake payment gateway."""
    return create_app(settings=test_settings, payment_gateway=payment_gateway)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client with the lifespan running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(test_settings: Settings) -> Callable[..., dict[str, str]]:
    """Build an Authorization header for an identity."""
    manager = JWTManager(test_settings.jwt)

    def _headers(email: str, role: str = "student") -> dict[str, str]:
        credential = manager.create_access_token(email, role=role)
        return {"Authorization": f"Bearer {credential.token}"}

    return _headers


@pytest.fixture
def approved_class(client: TestClient, auth_headers) -> dict:
    """A class created by an instructor and approved by an admin."""
    created = client.post(
        "/classes",
        json={
            "name": "Conversational English",
            "instructorName": "Ada",
            "availableSeats": 10,
            "price": 50,
        },
        headers=auth_headers("ada@speaksmart.io", "instructor"),
    )
    assert created.status_code == 201

    approved = client.patch(
        f"/classes/{created.json()['id']}/approve",
        headers=auth_headers("admin@speaksmart.io", "admin"),
    )
    assert approved.status_code == 200
    return approved.json()
