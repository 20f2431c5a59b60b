# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment endpoints.

- POST /enrollments - Complete an enrollment after payment
- GET /enrollments/{student_email} - A student's enrollments
- POST /enrollments/reconcile - Finish incomplete enrollments (admin)
"""

import logging

from fastapi import APIRouter, Depends, status

from speaksmart.api.dependencies import DB, AppSettings, require_admin, require_auth
from speaksmart.domains.auth import Identity, authorize_owner
from speaksmart.domains.enrollment import EnrollmentPipeline, EnrollmentService
from speaksmart.models.enrollment import (
    CompleteEnrollmentRequest,
    EnrollmentResponse,
    ReconcileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Complete enrollment",
    description=(
        "Record the payment, enroll the student, count the enrollment and "
        "clear the student's selections for the class. Safe to retry."
    ),
)
async def complete_enrollment(
    data: CompleteEnrollmentRequest,
    db: DB,
    settings: AppSettings,
    current_user: Identity = Depends(require_auth),
) -> EnrollmentResponse:
    """Complete an enrollment for the calling student."""
    authorize_owner(current_user, data.student_email)

    pipeline = EnrollmentPipeline(db=db, settings=settings.payment)
    return await pipeline.complete_enrollment(data)


@router.post(
    "/reconcile",
    response_model=ReconcileResponse,
    summary="Reconcile enrollments",
    description="Finish enrollments left incomplete by earlier failures. Requires admin access.",
)
async def reconcile_enrollments(
    db: DB,
    settings: AppSettings,
    current_user: Identity = Depends(require_admin),
) -> ReconcileResponse:
    """Run a reconciliation pass."""
    logger.info("Reconcile requested by %s", current_user.email)

    pipeline = EnrollmentPipeline(db=db, settings=settings.payment)
    return await pipeline.reconcile()


@router.get(
    "/{student_email}",
    response_model=list[EnrollmentResponse],
    summary="List enrollments",
    description="A student's enrollments with their classes, newest first.",
)
async def list_enrollments(
    student_email: str,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> list[EnrollmentResponse]:
    """List a student's enrollments."""
    authorize_owner(current_user, student_email)
    return await EnrollmentService(db=db).list_for_student(student_email)
