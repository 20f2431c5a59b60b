# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by every marketplace component.

This module defines the exception hierarchy surfaced to API callers:
- MarketplaceError: Base exception for all marketplace errors
- UnauthorizedError: Missing, malformed, invalid or expired credential
- ForbiddenError: Authenticated identity does not own the resource
- NotFoundError: No record where one is required
- ValidationError: Malformed or inconsistent input
- PaymentGatewayError: Upstream reservation failure or timeout
- EnrollmentIncompleteError: Pipeline failed after the payment was recorded
- StorageUnavailableError: The record store could not be reached

Each class carries the HTTP status code it maps to.
"""

from typing import Any


class MarketplaceError(Exception):
    """Base exception for all marketplace errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
        status_code: HTTP status code reported to API callers.
    """

    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize marketplace error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class UnauthorizedError(MarketplaceError):
    """Raised when a credential is missing, malformed, invalid or expired."""

    status_code = 401


class ForbiddenError(MarketplaceError):
    """Raised when the authenticated identity may not touch the resource."""

    status_code = 403


class NotFoundError(MarketplaceError):
    """Raised when a required record does not exist."""

    status_code = 404


class ValidationError(MarketplaceError):
    """Raised when input is malformed or inconsistent with stored records."""

    status_code = 422


class PaymentGatewayError(MarketplaceError):
    """Raised when the payment gateway rejects or fails a reservation.

    Never retried automatically; the caller resolves it with the user.

    Attributes:
        code: Gateway error code, when the gateway supplied one.
        timed_out: True when the gateway did not answer in time.
    """

    status_code = 502

    def __init__(
        self,
        message: str,
        code: str | None = None,
        timed_out: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize payment gateway error.

        Args:
            message: Human-readable error description.
            code: Gateway error code.
            timed_out: Whether the failure was a timeout.
            details: Optional dictionary with additional error context.
        """
        self.code = code
        self.timed_out = timed_out
        super().__init__(message, details)


class EnrollmentIncompleteError(MarketplaceError):
    """Raised when the enrollment pipeline fails after recording the payment.

    Retrying the whole operation is safe.

    Attributes:
        completed_steps: Names of the steps that were persisted.
        payment_id: Identifier of the recorded payment.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        completed_steps: list[str],
        payment_id: int | None = None,
    ) -> None:
        """Initialize enrollment incomplete error.

        Args:
            message: Human-readable error description.
            completed_steps: Steps persisted before the failure.
            payment_id: Identifier of the recorded payment.
        """
        self.completed_steps = completed_steps
        self.payment_id = payment_id
        super().__init__(
            message,
            {"completed_steps": completed_steps, "payment_id": payment_id},
        )


class StorageUnavailableError(MarketplaceError):
    """Raised when the record store cannot be reached."""

    status_code = 503

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize storage error.

        Args:
            message: Human-readable error description.
            original_error: The underlying driver exception.
        """
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message
