import logging

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ShiftConflict(APIException):
    """The staff member already works during the requested interval."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Staff member already has a conflicting shift at this time'
    default_code = 'shift_conflict'

    def __init__(self, conflicting_shift):
        super().__init__()
        self.extra = {
            'conflictId': conflicting_shift.id,
            'conflict': {
                'shiftDate': conflicting_shift.shift_date.isoformat(),
                'startTime': conflicting_shift.start_time,
                'endTime': conflicting_shift.end_time,
                'status': conflicting_shift.status,
            },
        }


class SlotAlreadyBooked(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This time slot is already booked. Please select another time.'
    default_code = 'slot_already_booked'


class SlotUnavailable(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The doctor does not offer the selected time slot.'
    default_code = 'slot_unavailable'


class InvalidTransition(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Status change not allowed.'
    default_code = 'invalid_transition'


class StorageUnavailable(APIException):
    """Database lookup or write failed; the whole request may be retried."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Storage is temporarily unavailable, please retry the request.'
    default_code = 'storage_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    view = context.get('view')
    if resp is None:
        logger.exception('Unhandled error in %s', getattr(view, '__name__', view), exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': 'Internal server error'}}, status=500)
    if resp.status_code >= 500:
        logger.error('Request failed in %s: %s', getattr(view, '__name__', view), exc, exc_info=exc)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    if isinstance(exc, Http404):
        code = 'not_found'
    else:
        code = getattr(exc, 'default_code', 'api_error')
    error = {'code': code, 'message': detail}
    error.update(getattr(exc, 'extra', None) or {})
    return Response({'ok': False, 'error': error}, status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp) -> dict:
    # keep WWW-Authenticate / Retry-After set by DRF
    return {k: v for k, v in resp.items() if k in ('WWW-Authenticate', 'Retry-After')}
