# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Each module provides a FastAPI router for one area of the marketplace.

Modules:
    auth: Credential issuance.
    users: User profiles.
    instructors: Instructor listings and an instructor's classes.
    classes: Class catalogue, approval and edits.
    selections: Selection ledger.
    payments: Payment reservations and payment history.
    enrollments: Enrollment completion, listing and reconciliation.
"""

from fastapi import APIRouter

from speaksmart.api.v1 import auth, classes, enrollments, instructors, payments, selections, users

# Create the main v1 router
router = APIRouter()

# Include domain routers
router.include_router(auth.router, tags=["Credentials"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(instructors.router, prefix="/instructors", tags=["Instructors"])
router.include_router(classes.router, prefix="/classes", tags=["Classes"])
router.include_router(selections.router, prefix="/selections", tags=["Selections"])
router.include_router(payments.router, tags=["Payments"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])

__all__ = ["router"]
