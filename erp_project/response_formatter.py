"""
Custom Response Formatter for Standardized API Responses

Ensures all API responses follow the format:
{
    "status": "success" | "error",
    "message": "string message or empty",
    "data": {...} | [] | null
}

Business-layer exceptions (validation, not found, invalid status transition,
persistence failure) are mapped onto HTTP status codes here so every view
reports them the same way.
"""

from django.core.exceptions import ValidationError
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status as http_status
from rest_framework.renderers import JSONRenderer

from core.base.exceptions import (
    NotFoundError,
    InvalidStateTransitionError,
    PersistenceFailure,
)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that formats all error responses consistently.

    DRF exceptions are converted into the standard error envelope. Domain
    exceptions that escape a view are mapped by ``domain_error_response``
    instead of surfacing as a bare 500.
    """
    if isinstance(exc, (ValidationError, NotFoundError, PersistenceFailure)):
        return domain_error_response(exc)

    # Call DRF's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        response.data = format_error_response(response.data, response.status_code)

    return response


def format_error_response(errors, status_code):
    """
    Format error responses into standard format.

    Handles various error formats:
    - {"field": ["error1", "error2"]} -> "field: error1, error2"
    - {"detail": "message"} -> "message"
    - ["error1", "error2"] -> "error1, error2"
    """
    message = ""

    if isinstance(errors, dict):
        error_messages = []
        for field, field_errors in errors.items():
            if field == 'detail':
                message = str(field_errors)
            elif isinstance(field_errors, list):
                error_messages.append(f"{field}: {', '.join(str(e) for e in field_errors)}")
            elif isinstance(field_errors, dict):
                error_messages.append(f"{field}: {format_nested_errors(field_errors)}")
            else:
                error_messages.append(f"{field}: {str(field_errors)}")

        if error_messages:
            message = "; ".join(error_messages)

    elif isinstance(errors, list):
        message = ", ".join(str(e) for e in errors)

    else:
        message = str(errors)

    return {
        "status": "error",
        "message": message,
        "data": None
    }


def format_nested_errors(errors_dict):
    """Format nested error dictionaries."""
    messages = []
    for key, value in errors_dict.items():
        if isinstance(value, list):
            messages.append(f"{key}: {', '.join(str(v) for v in value)}")
        elif isinstance(value, dict):
            messages.append(f"{key}: {format_nested_errors(value)}")
        else:
            messages.append(f"{key}: {str(value)}")
    return "; ".join(messages)


def validation_detail(exc):
    """
    Human readable text for a Django ValidationError.

    ``str(ValidationError(...))`` renders the repr of a list, which is not
    something to show a user.
    """
    if hasattr(exc, 'error_dict'):
        return "; ".join(
            f"{field}: {', '.join(messages)}"
            for field, messages in exc.message_dict.items()
        )
    return " ".join(exc.messages)


def domain_error_response(exc, message=None):
    """
    Map a business-layer exception to a standardized error response.

    - InvalidStateTransitionError -> 409
    - ValidationError (incl. upload errors) -> 400
    - NotFoundError -> 404
    - PersistenceFailure -> 503 (retryable)
    """
    if isinstance(exc, InvalidStateTransitionError):
        detail, status_code = validation_detail(exc), http_status.HTTP_409_CONFLICT
    elif isinstance(exc, ValidationError):
        detail, status_code = validation_detail(exc), http_status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFoundError):
        detail, status_code = str(exc), http_status.HTTP_404_NOT_FOUND
    elif isinstance(exc, PersistenceFailure):
        detail, status_code = str(exc), http_status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        raise TypeError(f"Unsupported exception type: {type(exc).__name__}")

    data = {'detail': detail}
    if isinstance(exc, PersistenceFailure):
        data['retryable'] = True

    return error_response(
        message=message or detail,
        data=data,
        status_code=status_code
    )


class StandardizedJSONRenderer(JSONRenderer):
    """
    Custom JSON renderer that wraps all successful responses in standard format.

    Automatically wraps responses that aren't already formatted.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None
        # 204 responses carry no body
        if response is not None and response.status_code == 204:
            return b''
        if response is not None:
            status_code = response.status_code

            if not self.is_already_formatted(data):
                if status_code >= 400:
                    data = format_error_response(data, status_code)
                else:
                    data = self.format_success_response(data, status_code)

        return super().render(data, accepted_media_type, renderer_context)

    def is_already_formatted(self, data):
        """Check if response is already in our standard format."""
        if isinstance(data, dict):
            return 'status' in data and 'message' in data and 'data' in data
        return False

    def format_success_response(self, data, status_code):
        """Format success response data into standard format."""
        if isinstance(data, dict) and 'detail' in data:
            message = str(data['detail'])
            response_data = None
        elif data is None or (isinstance(data, dict) and not data):
            message = ""
            response_data = None
        else:
            message = ""
            response_data = data

        return {
            "status": "success",
            "message": message,
            "data": response_data
        }


def success_response(data=None, message="", status_code=http_status.HTTP_200_OK):
    """
    Helper function to create standardized success responses.

    Usage:
        return success_response(
            data=serializer.data,
            message="Purchase order created successfully",
            status_code=status.HTTP_201_CREATED
        )
    """
    return Response({
        "status": "success",
        "message": message,
        "data": data
    }, status=status_code)


def error_response(message, data=None, status_code=http_status.HTTP_400_BAD_REQUEST):
    """
    Helper function to create standardized error responses.

    Usage:
        return error_response(
            message="Vendor not found",
            status_code=status.HTTP_404_NOT_FOUND
        )
    """
    return Response({
        "status": "error",
        "message": message,
        "data": data
    }, status=status_code)
