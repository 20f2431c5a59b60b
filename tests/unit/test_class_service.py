# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the class registry service."""

from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaValidationError

from speaksmart.domains.class_ import ClassLockedError, ClassNotFoundError, ClassService
from speaksmart.models.class_ import ClassCreateRequest, ClassUpdateRequest


@pytest.fixture
def class_service(db_session) -> ClassService:
    """Create class service on the test database."""
    return ClassService(db=db_session)


class TestClassServiceCreate:
    """Tests for class creation."""

    @pytest.mark.asyncio
    async def test_create_class_starts_pending(self, class_service: ClassService) -> None:
        """Test that a new class is pending with no enrollments."""
        request = ClassCreateRequest(
            name="Business English",
            instructor_name="Ada",
            available_seats=12,
            price=Decimal("75.50"),
        )

        result = await class_service.create_class("ada@speaksmart.io", request)

        assert result.id is not None
        assert result.status == "pending"
        assert result.enrolled_count == 0
        assert result.instructor_email == "ada@speaksmart.io"
        assert result.price == Decimal("75.50")
        assert result.created_at is not None

    @pytest.mark.asyncio
    async def test_get_class_not_found(self, class_service: ClassService) -> None:
        with pytest.raises(ClassNotFoundError):
            await class_service.get_class(999)


class TestClassServiceListing:
    """Tests for status and popularity listings."""

    @pytest.mark.asyncio
    async def test_list_by_status_filters(self, class_service: ClassService, make_class) -> None:
        """Test that a status filter returns only matching classes."""
        await make_class(name="A", status="approved")
        await make_class(name="B", status="pending")

        approved = await class_service.list_by_status("approved")
        pending = await class_service.list_by_status("pending")

        assert [c.name for c in approved] == ["A"]
        assert [c.name for c in pending] == ["B"]

    @pytest.mark.asyncio
    async def test_unknown_status_returns_empty(self, class_service: ClassService, make_class) -> None:
        """Test that an unrecognised status yields no classes."""
        await make_class(status="approved")

        assert await class_service.list_by_status("rejected") == []

    @pytest.mark.asyncio
    async def test_no_status_lists_pending_first(self, class_service: ClassService, make_class) -> None:
        """Test that without a filter pending classes come before approved ones."""
        await make_class(name="Approved 1", status="approved")
        await make_class(name="Pending 1", status="pending")
        await make_class(name="Approved 2", status="approved")

        result = await class_service.list_by_status(None)

        assert [c.status for c in result] == ["pending", "approved", "approved"]
        assert [c.name for c in result[1:]] == ["Approved 1", "Approved 2"]

    @pytest.mark.asyncio
    async def test_secondary_sort_descending(self, class_service: ClassService, make_class) -> None:
        await make_class(name="Cheap", price="10.00")
        await make_class(name="Dear", price="90.00")

        result = await class_service.list_by_status("approved", sort="-price")

        assert [c.name for c in result] == ["Dear", "Cheap"]

    @pytest.mark.asyncio
    async def test_list_popular_top_six_approved(self, class_service: ClassService, make_class) -> None:
        """Test the popularity ranking: approved only, at most six, ties by id."""
        for i in range(8):
            await make_class(name=f"C{i}", enrolled_count=i % 4)
        await make_class(name="Pending hit", status="pending", enrolled_count=100)

        result = await class_service.list_popular()

        assert len(result) == 6
        assert all(c.status == "approved" for c in result)
        assert [c.enrolled_count for c in result] == [3, 3, 2, 2, 1, 1]
        assert [c.name for c in result[:2]] == ["C3", "C7"]

    @pytest.mark.asyncio
    async def test_list_for_instructor(self, class_service: ClassService, make_class) -> None:
        await make_class(name="Mine", instructor_email="ada@speaksmart.io", status="pending")
        await make_class(name="Theirs", instructor_email="bob@speaksmart.io")

        result = await class_service.list_for_instructor("ada@speaksmart.io")

        assert [c.name for c in result] == ["Mine"]


class TestClassServiceApproval:
    """Tests for approval and edits."""

    @pytest.mark.asyncio
    async def test_approve_is_idempotent(self, class_service: ClassService, make_class) -> None:
        """Test that approving twice leaves the class approved."""
        class_ = await make_class(status="pending")

        first = await class_service.approve_class(class_.id)
        second = await class_service.approve_class(class_.id)

        assert first.status == "approved"
        assert second.status == "approved"
        assert second.enrolled_count == first.enrolled_count

    @pytest.mark.asyncio
    async def test_approve_missing_class(self, class_service: ClassService) -> None:
        with pytest.raises(ClassNotFoundError):
            await class_service.approve_class(404)

    @pytest.mark.asyncio
    async def test_update_merges_supplied_fields(self, class_service: ClassService, make_class) -> None:
        """Test that only supplied fields change."""
        class_ = await make_class(name="Old", status="pending", price="40.00")

        result = await class_service.update_class(class_.id, ClassUpdateRequest(name="New"))

        assert result.name == "New"
        assert result.price == Decimal("40.00")
        assert result.status == "pending"

    @pytest.mark.asyncio
    async def test_instructor_cannot_edit_approved(self, class_service: ClassService, make_class) -> None:
        class_ = await make_class(status="approved")

        with pytest.raises(ClassLockedError):
            await class_service.update_class(class_.id, ClassUpdateRequest(name="New"))

    @pytest.mark.asyncio
    async def test_only_admin_writes_feedback(self, class_service: ClassService, make_class) -> None:
        """Test that feedback from a non-admin edit is ignored."""
        class_ = await make_class(status="pending")

        as_instructor = await class_service.update_class(
            class_.id, ClassUpdateRequest(feedback="self-review")
        )
        as_admin = await class_service.update_class(
            class_.id, ClassUpdateRequest(feedback="Add a syllabus"), admin=True
        )

        assert as_instructor.feedback is None
        assert as_admin.feedback == "Add a syllabus"


class TestClassUpdateRequest:
    """Tests for the partial update schema."""

    @pytest.mark.parametrize("field", ["name", "availableSeats", "price"])
    def test_null_required_field_rejected(self, field: str) -> None:
        with pytest.raises(SchemaValidationError):
            ClassUpdateRequest.model_validate({field: None})

    def test_null_optional_field_allowed(self) -> None:
        """Test that nullable columns may be cleared."""
        request = ClassUpdateRequest.model_validate({"imageUrl": None, "feedback": None})

        assert request.model_dump(exclude_unset=True) == {"image_url": None, "feedback": None}

    def test_absent_fields_not_set(self) -> None:
        assert ClassUpdateRequest.model_validate({}).model_dump(exclude_unset=True) == {}


class TestIncrementEnrollment:
    """Tests for the enrollment counter."""

    @pytest.mark.asyncio
    async def test_increment_adds_delta(self, class_service: ClassService, make_class) -> None:
        class_ = await make_class(enrolled_count=2)

        await class_service.increment_enrollment(class_.id)
        await class_service.increment_enrollment(class_.id, delta=3)

        assert (await class_service.get_class(class_.id)).enrolled_count == 6

    @pytest.mark.asyncio
    async def test_increment_rejects_non_positive(self, class_service: ClassService, make_class) -> None:
        class_ = await make_class()

        with pytest.raises(ValueError):
            await class_service.increment_enrollment(class_.id, delta=0)

    @pytest.mark.asyncio
    async def test_increment_missing_class(self, class_service: ClassService) -> None:
        with pytest.raises(ClassNotFoundError):
            await class_service.increment_enrollment(12345)
