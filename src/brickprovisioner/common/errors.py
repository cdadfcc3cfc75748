"""
Error payloads and helpers for turning failures into user-facing messages.

The payload models mirror what a provisioning caller displays: a list of
problems, a user message and a set of suggested solutions.
"""

import logging
from typing import List, Optional

from databricks.sdk.errors import (
    AlreadyExists,
    BadRequest,
    InvalidParameterValue,
    NotFound,
    PermissionDenied,
    ResourceAlreadyExists,
    ResourceConflict,
    ResourceDoesNotExist,
    ResourceExhausted,
    TemporarilyUnavailable,
    Unauthenticated,
)
from pydantic import BaseModel, ConfigDict, Field

from .result import FailedOperation

logger = logging.getLogger(__name__)

DEFAULT_VALIDATION_MESSAGE = (
    "Validation on the received descriptor failed, check the error details for more information"
)
DEFAULT_SYSTEM_MESSAGE = (
    "An unexpected error occurred while processing the request. Check the error details for more information"
)
PERSISTENT_PROBLEM_SOLUTION = "If the problem persists, contact the platform team"
SYSTEM_ERROR_SOLUTION = "Please try again and if the problem persists contact the platform team."


class ErrorMoreInfo(BaseModel):
    """Detailed problems and solutions attached to an error payload."""

    model_config = ConfigDict(populate_by_name=True)

    problems: List[str] = Field(default_factory=list)
    solutions: List[str] = Field(default_factory=list)


class RequestValidationError(BaseModel):
    """Payload describing why a request was rejected."""

    model_config = ConfigDict(populate_by_name=True)

    errors: List[str]
    user_message: Optional[str] = Field(default=None, alias="userMessage")
    input: Optional[str] = None
    input_error_field: Optional[str] = Field(default=None, alias="inputErrorField")
    more_info: Optional[ErrorMoreInfo] = Field(default=None, alias="moreInfo")


class SystemErrorResponse(BaseModel):
    """Payload describing an unexpected failure while serving a request."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    user_message: Optional[str] = Field(default=None, alias="userMessage")
    input: Optional[str] = None
    input_error_field: Optional[str] = Field(default=None, alias="inputErrorField")
    more_info: Optional[ErrorMoreInfo] = Field(default=None, alias="moreInfo")


def build_request_validation_error(
    failed_operation: FailedOperation,
    message: Optional[str] = None,
    input: Optional[str] = None,
    input_error_field: Optional[str] = None,
) -> RequestValidationError:
    """
    Build a validation error payload from a failed operation.

    Problem order is preserved. Solutions are the problems' own solutions
    followed by a generic escalation hint.

    Args:
        failed_operation: The problems that caused the rejection
        message: User message, defaults to a generic validation message
        input: The offending input, if any
        input_error_field: The offending field, if any

    Returns:
        RequestValidationError payload
    """
    problems = failed_operation.messages
    solutions = failed_operation.solutions + [PERSISTENT_PROBLEM_SOLUTION]
    return RequestValidationError(
        errors=problems,
        user_message=message or DEFAULT_VALIDATION_MESSAGE,
        input=input,
        input_error_field=input_error_field,
        more_info=ErrorMoreInfo(problems=problems, solutions=solutions),
    )


def build_system_error(error: BaseException, message: Optional[str] = None) -> SystemErrorResponse:
    """Build a system error payload from an unexpected exception."""
    description = str(error)
    return SystemErrorResponse(
        error=description,
        user_message=message or DEFAULT_SYSTEM_MESSAGE,
        more_info=ErrorMoreInfo(problems=[description], solutions=[SYSTEM_ERROR_SOLUTION]),
    )


def describe_sdk_error(error: BaseException) -> str:
    """
    Describe a Databricks SDK error with an actionable hint.

    Args:
        error: Exception raised by a Databricks SDK call

    Returns:
        Human readable description of the error
    """
    if isinstance(error, PermissionDenied):
        return f"Permission denied: {error}. Check that the service principal has the required privileges."
    if isinstance(error, (ResourceDoesNotExist, NotFound)):
        return f"Resource not found: {error}"
    if isinstance(error, (ResourceAlreadyExists, AlreadyExists, ResourceConflict)):
        return f"Resource already exists: {error}"
    if isinstance(error, (InvalidParameterValue, BadRequest)):
        return f"Invalid parameter: {error}. Check input values and naming conventions."
    if isinstance(error, Unauthenticated):
        return f"Authentication failed: {error}. Check credentials and workspace URL."
    if isinstance(error, TemporarilyUnavailable):
        return f"Service temporarily unavailable: {error}. Try again later."
    if isinstance(error, ResourceExhausted):
        return f"Resource limit exceeded: {error}. Check quotas and limits."
    return str(error)
