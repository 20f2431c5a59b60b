# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Settings pointing at a throwaway SQLite file
- An initialized DatabaseProvider and session
- Record factories for users, classes and selections
- A fake payment gateway
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.core.config import (
    DatabaseSettings,
    JWTSettings,
    PaymentSettings,
    RateLimitSettings,
    Settings,
)
from speaksmart.core.exceptions import PaymentGatewayError
from speaksmart.infrastructure.database import DatabaseProvider
from speaksmart.infrastructure.database.models import Class, Selection, User
from speaksmart.infrastructure.payments import PaymentGateway, Reservation, to_minor_units


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (full HTTP stack)"
    )


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings for an isolated test database."""
    return Settings(
        environment="test",
        debug=True,
        log_level="DEBUG",
        database=DatabaseSettings(
            url_override=f"sqlite+aiosqlite:///{tmp_path / 'speaksmart.db'}",
            create_schema=True,
        ),
        jwt=JWTSettings(
            secret_key=SecretStr("test-secret-key-for-jwt-testing"),
            access_token_expire_minutes=30,
            issuer_secret=SecretStr("test-issuer-secret"),
        ),
        payment=PaymentSettings(
            api_key=SecretStr("sk_test_dummy"),
            currency="usd",
            price_tolerance=Decimal("0.01"),
        ),
        rate_limit=RateLimitSettings(enabled=False),
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def database(test_settings: Settings) -> AsyncGenerator[DatabaseProvider, None]:
    """Initialized provider with every table created."""
    provider = DatabaseProvider(test_settings)
    await provider.init()
    await provider.create_all()

    yield provider

    await provider.close()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: DatabaseProvider) -> AsyncGenerator[AsyncSession, None]:
    """Session on the test database."""
    async with database.session() as session:
        yield session


# =============================================================================
# Record Factories
# =============================================================================


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory storing a user."""

    async def _make_user(email: str, role: str = "student", name: str | None = None) -> User:
        user = User(email=email, role=role, name=name or email.split("@")[0])
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_class(db_session: AsyncSession) -> Callable[..., Awaitable[Class]]:
    """Factory storing a class (approved unless told otherwise)."""

    async def _make_class(
        name: str = "Conversational English",
        price: Decimal | str = "50.00",
        status: str = "approved",
        instructor_email: str = "tutor@speaksmart.io",
        enrolled_count: int = 0,
    ) -> Class:
        class_ = Class(
            name=name,
            instructor_email=instructor_email,
            instructor_name="Tutor",
            available_seats=20,
            price=Decimal(price),
            status=status,
            enrolled_count=enrolled_count,
        )
        db_session.add(class_)
        await db_session.commit()
        return class_

    return _make_class


@pytest.fixture
def make_selection(db_session: AsyncSession) -> Callable[..., Awaitable[Selection]]:
    """Factory storing a selection."""

    async def _make_selection(student_email: str, class_id: int) -> Selection:
        selection = Selection(student_email=student_email, class_id=class_id)
        db_session.add(selection)
        await db_session.commit()
        return selection

    return _make_selection


# =============================================================================
# Payment Gateway
# =============================================================================


class FakePaymentGateway(PaymentGateway):
    """In-memory gateway recording every reservation request.

    Attributes:
        calls: (amount, currency) pairs in call order.
        error: Raised instead of reserving when set.
    """

    def __init__(self, error: PaymentGatewayError | None = None) -> None:
        self.calls: list[tuple[Decimal, str]] = []
        self.error = error

    async def reserve(self, amount: Decimal, currency: str) -> Reservation:
        self.calls.append((Decimal(amount), currency))
        if self.error is not None:
            raise self.error
        n = len(self.calls)
        return Reservation(
            client_secret=f"pi_test_{n}_secret_abc",
            reservation_id=f"pi_test_{n}",
            amount_minor=to_minor_units(amount, currency),
            currency=currency.lower(),
        )


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    """Fake payment gateway."""
    return FakePaymentGateway()
