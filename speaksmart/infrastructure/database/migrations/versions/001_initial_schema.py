# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial marketplace schema.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-06-02

Creates users, classes, selections, payments and enrollments.
payments and enrollments are unique per (student_email, class_id).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create marketplace tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("photo_url", sa.String(1024), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="student"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "classes",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("instructor_email", sa.String(255), nullable=False),
        sa.Column("instructor_name", sa.String(255), nullable=True),
        sa.Column("available_seats", sa.Integer, nullable=False, server_default="0"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("feedback", sa.Text, nullable=True),
        sa.Column("enrolled_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_classes"),
    )
    op.create_index("ix_classes_instructor_email", "classes", ["instructor_email"])
    op.create_index("ix_classes_status_enrolled_count", "classes", ["status", "enrolled_count"])

    op.create_table(
        "selections",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("student_email", sa.String(255), nullable=False),
        sa.Column("class_id", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_selections"),
        sa.ForeignKeyConstraint(
            ["class_id"],
            ["classes.id"],
            name="fk_selections_class_id_classes",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_selections_student_email", "selections", ["student_email"])
    op.create_index("ix_selections_class_id", "selections", ["class_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("student_email", sa.String(255), nullable=False),
        sa.Column("class_id", sa.Integer, nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_payments"),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"], name="fk_payments_class_id_classes"),
        sa.UniqueConstraint(
            "student_email", "class_id", name="uq_payments_student_email_class_id"
        ),
    )
    op.create_index("ix_payments_student_email", "payments", ["student_email"])

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("student_email", sa.String(255), nullable=False),
        sa.Column("class_id", sa.Integer, nullable=False),
        sa.Column("payment_id", sa.Integer, nullable=False),
        sa.Column("counter_applied", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("enrolled_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_enrollments"),
        sa.ForeignKeyConstraint(
            ["class_id"], ["classes.id"], name="fk_enrollments_class_id_classes"
        ),
        sa.ForeignKeyConstraint(
            ["payment_id"], ["payments.id"], name="fk_enrollments_payment_id_payments"
        ),
        sa.UniqueConstraint(
            "student_email", "class_id", name="uq_enrollments_student_email_class_id"
        ),
        sa.UniqueConstraint("payment_id", name="uq_enrollments_payment_id"),
    )
    op.create_index("ix_enrollments_student_email", "enrollments", ["student_email"])


def downgrade() -> None:
    """Drop marketplace tables."""
    op.drop_table("enrollments")
    op.drop_table("payments")
    op.drop_table("selections")
    op.drop_table("classes")
    op.drop_table("users")
