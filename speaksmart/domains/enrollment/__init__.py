# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain.

This package provides:
- EnrollmentPipeline: payment to enrollment, idempotent and resumable
- EnrollmentService: enrollment and payment history reads
"""

from speaksmart.domains.enrollment.pipeline import EnrollmentPipeline
from speaksmart.domains.enrollment.service import EnrollmentService

__all__ = ["EnrollmentPipeline", "EnrollmentService"]
