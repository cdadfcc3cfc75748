"""
Exception types raised by the provisioning core.

Expected failures travel as ``Failure`` values; the exceptions below are kept
for request-shape errors and for callers that explicitly unwrap a result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .result import FailedOperation


class ProvisioningError(RuntimeError):
    """Raised when a failed result is unwrapped."""

    def __init__(self, failed_operation: FailedOperation):
        self.failed_operation = failed_operation
        super().__init__(str(failed_operation))


class ValidationException(Exception):
    """Raised when a request is rejected because of its shape, before any remote call."""

    def __init__(
        self,
        failed_operation: FailedOperation,
        input: Optional[str] = None,
        input_error_field: Optional[str] = None,
    ):
        self.failed_operation = failed_operation
        self.input = input
        self.input_error_field = input_error_field
        super().__init__(str(failed_operation))
