# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class, selection, payment and enrollment models.

Uniqueness of (student_email, class_id) on payments and enrollments is
enforced by the store; the enrollment pipeline relies on it for
idempotent retries.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from speaksmart.infrastructure.database.models.base import Base, IntegerIdMixin, TimestampMixin
from speaksmart.utils.datetime import utc_now


class Class(Base, IntegerIdMixin, TimestampMixin):
    """A class proposed by an instructor.

    Attributes:
        name: Class title.
        image_url: Cover image.
        instructor_email: Owning instructor.
        instructor_name: Instructor display name.
        available_seats: Seats advertised by the instructor.
        price: Price in major currency units.
        status: pending or approved.
        feedback: Administrator feedback to the instructor.
        enrolled_count: Number of enrollments; changed only by the pipeline.
    """

    __tablename__ = "classes"
    __table_args__ = (
        Index("ix_classes_status_enrolled_count", "status", "enrolled_count"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    instructor_email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    instructor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    available_seats: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    enrolled_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Class {self.id} {self.name!r} ({self.status})>"


class Selection(Base, IntegerIdMixin):
    """A student's provisional intent to take a class."""

    __tablename__ = "selections"

    student_email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    class_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("classes.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    class_: Mapped[Class] = relationship(lazy="joined")


class Payment(Base, IntegerIdMixin):
    """A completed payment for a class."""

    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint("student_email", "class_id"),
    )

    student_email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    class_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("classes.id"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    transaction_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    paid_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )


class Enrollment(Base, IntegerIdMixin):
    """The durable record that a student paid for and can access a class.

    Attributes:
        payment_id: The payment this enrollment was created from.
        counter_applied: Whether the class enrollment counter has been
            incremented for this enrollment.
    """

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_email", "class_id"),
    )

    student_email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    class_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("classes.id"),
        nullable=False,
    )
    payment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payments.id"),
        unique=True,
        nullable=False,
    )
    counter_applied: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    class_: Mapped[Class] = relationship(lazy="joined")
