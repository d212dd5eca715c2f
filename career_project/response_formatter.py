"""
Standardized API responses for the career service.

Every response body follows:
{
    "status": "success" | "error",
    "message": "string message or empty",
    "data": {...} | [] | null
}

Domain errors raised by services (ValidationError, Unauthorized, InvalidState,
NotFound) are translated here so views can let them propagate.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status as http_status
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.base.exceptions import InvalidState, NotFound, Unauthorized

logger = logging.getLogger(__name__)


def domain_error_status(exc):
    """Return the HTTP status for a domain error, or None if exc is not one."""
    if isinstance(exc, DjangoValidationError):
        return http_status.HTTP_400_BAD_REQUEST
    if isinstance(exc, Unauthorized):
        return http_status.HTTP_403_FORBIDDEN
    if isinstance(exc, InvalidState):
        return http_status.HTTP_409_CONFLICT
    if isinstance(exc, NotFound):
        return http_status.HTTP_404_NOT_FOUND
    return None


def domain_error_response(exc):
    """
    Build the standard error envelope for a domain error.

    Usage in views:
        try:
            req = RequestWorkflowManager.approve(pk, actor)
        except DOMAIN_ERRORS as e:
            return domain_error_response(e)
    """
    status_code = domain_error_status(exc)
    if status_code is None:
        raise exc
    if isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, 'message_dict') else exc.messages
        return error_response(format_error_response(errors, status_code)['message'], status_code=status_code)
    return error_response(str(exc), status_code=status_code)


def custom_exception_handler(exc, context):
    """
    Format all error responses consistently.

    Domain errors that escape a view are mapped first; everything else goes
    through DRF's default handler and is reformatted. Unhandled exceptions
    return None so Django produces a 500, after being logged.
    """
    if domain_error_status(exc) is not None:
        return domain_error_response(exc)

    response = exception_handler(exc, context)

    if response is not None:
        response.data = format_error_response(response.data, response.status_code)
    else:
        view = context.get('view') if context else None
        logger.exception("Unhandled error in %s", getattr(view, '__name__', view))

    return response


def format_error_response(errors, status_code):
    """
    Format error payloads into the standard envelope.

    - {"field": ["error1", "error2"]} -> "field: error1, error2"
    - {"detail": "message"} -> "message"
    - ["error1", "error2"] -> "error1, error2"
    """
    message = ""

    if isinstance(errors, dict):
        error_messages = []
        for field, field_errors in errors.items():
            if field in ('detail', '__all__'):
                if isinstance(field_errors, list):
                    error_messages.append(', '.join(str(e) for e in field_errors))
                else:
                    message = str(field_errors)
            elif isinstance(field_errors, list):
                error_messages.append(f"{field}: {', '.join(str(e) for e in field_errors)}")
            elif isinstance(field_errors, dict):
                error_messages.append(f"{field}: {format_nested_errors(field_errors)}")
            else:
                error_messages.append(f"{field}: {field_errors}")

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
            messages.append(f"{key}: {value}")
    return "; ".join(messages)


class StandardizedJSONRenderer(JSONRenderer):
    """JSON renderer that wraps bodies not already in the standard envelope."""

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None
        # 204 No Content must stay bodiless
        if response is not None and response.status_code == 204:
            return b''
        if response is not None and not self.is_already_formatted(data):
            if response.status_code >= 400:
                data = format_error_response(data, response.status_code)
            else:
                data = self.format_success_response(data)

        return super().render(data, accepted_media_type, renderer_context)

    def is_already_formatted(self, data):
        return isinstance(data, dict) and {'status', 'message', 'data'} <= data.keys()

    def format_success_response(self, data):
        if isinstance(data, dict) and 'detail' in data:
            return {"status": "success", "message": str(data['detail']), "data": None}
        if data is None or (isinstance(data, dict) and not data):
            return {"status": "success", "message": "", "data": None}
        return {"status": "success", "message": "", "data": data}


def success_response(data=None, message="", status_code=http_status.HTTP_200_OK):
    """
    Create a standardized success response.

    Usage:
        return success_response(
            data=EmployeeRequestSerializer(req).data,
            message="Request submitted",
            status_code=status.HTTP_201_CREATED
        )
    """
    return Response({
        "status": "success",
        "message": message,
        "data": data
    }, status=status_code)


def error_response(message, data=None, status_code=http_status.HTTP_400_BAD_REQUEST):
    """Create a standardized error response."""
    return Response({
        "status": "error",
        "message": message,
        "data": data
    }, status=status_code)
