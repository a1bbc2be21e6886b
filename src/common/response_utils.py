"""
Standardized API Response Utilities

This module provides utility functions for creating consistent API responses
across all endpoints in the format:
{
    "success": true/false,
    "message": "Related message",
    "data": { ... }
}
"""

from typing import Any, Dict, Optional


# ---------------------------------------------------------------------
# Create a standardized API response
# ---------------------------------------------------------------------
def create_response(
    success: bool,
    message: str,
    data: Optional[Dict[str, Any]] = None,
    status_code: int = 200
) -> tuple:
    """
    Create a standardized API response

    Args:
        success (bool): Whether the operation was successful
        message (str): Response message
        data (Optional[Dict]): Response data
        status_code (int): HTTP status code

    Returns:
        tuple: Standardized response body and status code
    """
    response_data = {
        "success": success,
        "message": message,
        "data": data if data is not None else {}
    }
    return response_data, status_code


# ---------------------------------------------------------------------
# Success response
# ---------------------------------------------------------------------
def success_response(
    message: str = "Operation completed successfully",
    data: Optional[Dict[str, Any]] = None,
    status_code: int = 200
) -> tuple:
    """
    Create a success response

    Args:
        message (str): Success message
        data (Optional[Dict]): Response data
        status_code (int): HTTP status code

    Returns:
        tuple: Success response
    """
    return create_response(success=True, message=message, data=data, status_code=status_code)


# ---------------------------------------------------------------------
# Error response
# ---------------------------------------------------------------------
def error_response(
    message: str = "An error occurred",
    data: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
    error_details: Optional[str] = None
) -> tuple:
    """
    Create an error response

    Args:
        message (str): Error message
        data (Optional[Dict]): Additional error data
        status_code (int): HTTP status code
        error_details (Optional[str]): Detailed error information

    Returns:
        tuple: Error response with status code
    """
    error_data = data or {}
    if error_details:
        error_data["error_details"] = error_details

    return create_response(success=False, message=message, data=error_data, status_code=status_code)


# ---------------------------------------------------------------------
# Validation error response
# ---------------------------------------------------------------------
def validation_error_response(
    validation_errors: Any,
    message: str = "Validation failed"
) -> tuple:
    """
    Create a validation error response

    Args:
        validation_errors: Validation error details (marshmallow messages)
        message (str): Error message

    Returns:
        tuple: Validation error response
    """
    return error_response(
        message=message,
        data={"validation_errors": validation_errors},
        status_code=400
    )


# ---------------------------------------------------------------------
# Shape error response
# ---------------------------------------------------------------------
def shape_error_response(error) -> tuple:
    """
    Create a response for a dataset whose collections are malformed

    Args:
        error: ShapeError raised by the normalizer

    Returns:
        tuple: Shape error response (422)
    """
    data = {"field": error.field, "error_code": error.error_code}
    if error.details:
        data["validation_errors"] = error.details
    return error_response(message=error.message, data=data, status_code=422)


# ---------------------------------------------------------------------
# Not found response
# ---------------------------------------------------------------------
def not_found_response(
    message: str = "Resource not found",
    resource_type: str = "Resource"
) -> tuple:
    """
    Create a not found response

    Args:
        message (str): Error message
        resource_type (str): Type of resource not found

    Returns:
        tuple: Not found response
    """
    return error_response(
        message=message,
        data={"resource_type": resource_type},
        status_code=404
    )


# ---------------------------------------------------------------------
# Recalculation blocked response
# ---------------------------------------------------------------------
def not_ready_response(
    status: Dict[str, Any],
    message: str = "ROI inputs are not ready; showing last known results"
) -> tuple:
    """
    Create a response for a recalculation that the readiness gates blocked.

    The request itself succeeded, so the status code is 202 and the data
    carries the workspace status with any last-known-good results.

    Args:
        status (Dict): Workspace status payload
        message (str): Response message

    Returns:
        tuple: Accepted response
    """
    return create_response(success=True, message=message, data=status, status_code=202)


# ---------------------------------------------------------------------
# Internal error response
# ---------------------------------------------------------------------
def internal_error_response(
    message: str = "Internal server error",
    error_details: str = None
) -> tuple:
    """
    Create an internal server error response

    Args:
        message (str): Error message
        error_details (str): Detailed error information

    Returns:
        tuple: Internal error response
    """
    return error_response(
        message=message,
        data={"error_details": error_details} if error_details else {},
        status_code=500
    )
