"""Result model, exceptions and error payloads shared by the provisioning core."""

from .errors import (
    ErrorMoreInfo,
    RequestValidationError,
    SystemErrorResponse,
    build_request_validation_error,
    build_system_error,
    describe_sdk_error,
)
from .exceptions import ProvisioningError, ValidationException
from .result import FailedOperation, Failure, Problem, Result, Success, collect, failure

__all__ = [
    "ErrorMoreInfo",
    "FailedOperation",
    "Failure",
    "Problem",
    "ProvisioningError",
    "RequestValidationError",
    "Result",
    "Success",
    "SystemErrorResponse",
    "ValidationException",
    "build_request_validation_error",
    "build_system_error",
    "collect",
    "describe_sdk_error",
    "failure",
]
