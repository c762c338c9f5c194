from django.conf import settings
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    APIException, ValidationError, NotAuthenticated, AuthenticationFailed, PermissionDenied, NotFound
)
from rest_framework.response import Response
from rest_framework.views import exception_handler
import logging

logger = logging.getLogger(__name__)


class BookingConflict(APIException):
    """
    Raised when an operation would break the schedule: double booking,
    booking an unavailable slot, overlapping slots for one provider, or
    removing a slot that still holds appointments.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request conflicts with the current schedule."
    default_code = 'booking_conflict'


class InvalidStatusTransition(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "This status change is not allowed."
    default_code = 'invalid_status_transition'


DOMAIN_EXCEPTIONS = (BookingConflict, InvalidStatusTransition)


def _detail_entries(detail):
    if isinstance(detail, dict):
        details = []
        for field, messages in detail.items():
            if isinstance(messages, list):
                for message in messages:
                    details.append({"field": field, "message": str(message)})
            else:
                details.append({"field": field, "message": str(messages)})
        return details
    if isinstance(detail, list):
        return [{"field": "non_field_errors", "message": str(message)} for message in detail]
    return [{"field": "detail", "message": str(detail)}]


def custom_exception_handler(exc, context):
    # Call DRF's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        custom_response_data = {
            "error": {
                "code": "GENERIC_ERROR",
                "message": "An error occurred.",
                "details": []
            }
        }
        error_payload = custom_response_data["error"]

        if isinstance(exc, ValidationError):
            error_payload["code"] = "VALIDATION_ERROR"
            error_payload["message"] = "Invalid input data."
            error_payload["details"] = _detail_entries(exc.detail)
        elif isinstance(exc, DOMAIN_EXCEPTIONS):
            error_payload["code"] = exc.default_code.upper()
            error_payload["message"] = str(exc.detail)
            error_payload["details"] = _detail_entries(exc.detail)
            logger.warning("%s: %s", error_payload["code"], exc.detail)
        elif isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
            error_payload["code"] = "AUTHENTICATION_FAILED"
            error_payload["message"] = "Authentication credentials were not provided or are invalid."
            if getattr(exc, 'detail', None):
                error_payload["details"] = _detail_entries(exc.detail)
        elif isinstance(exc, PermissionDenied):
            error_payload["code"] = "PERMISSION_DENIED"
            error_payload["message"] = "You do not have permission to perform this action."
            if getattr(exc, 'detail', None):
                error_payload["details"] = _detail_entries(exc.detail)
        elif isinstance(exc, (NotFound, Http404)):
            # get_object_or_404 raises Django's Http404, which DRF answers as NotFound
            error_payload["code"] = "NOT_FOUND"
            error_payload["message"] = "The requested resource was not found."
            if isinstance(response.data, dict) and 'detail' in response.data:
                error_payload["details"] = [{"field": "detail", "message": str(response.data['detail'])}]
        else:
            # Other DRF exceptions (method not allowed, throttling, ...) keep their own detail
            if isinstance(response.data, dict) and 'detail' in response.data:
                error_payload["message"] = str(response.data['detail'])
                error_payload["details"] = [{"field": "detail", "message": str(response.data['detail'])}]
            elif isinstance(response.data, list):
                error_payload["details"] = [{"field": "detail", "message": str(item)} for item in response.data]

        response.data = custom_response_data
    else:
        # Exception was not handled by DRF's default handler
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        custom_response_data = {
            "error": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "A server error occurred. Please try again later.",
                # Raw exception text stays out of production responses
                "details": [{"field": "unexpected_error", "message": "An unexpected error occurred."}]
            }
        }
        if settings.DEBUG:
            custom_response_data["error"]["details"][0]["message"] = str(exc)

        return Response(custom_response_data, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return response
