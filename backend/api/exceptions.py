import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from examhall.errors import ExamHallError, NotFound, StorageError, ValidationError

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def exam_exception_handler(exc, context):
    """Map exam core errors to HTTP responses; anything else goes to DRF's handler."""
    if not isinstance(exc, ExamHallError):
        return exception_handler(exc, context)

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_class, code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            status_code = code
            break

    request = context.get('request')
    method = getattr(request, 'method', '')
    path = getattr(request, 'path', '')
    if status_code >= 500:
        logger.error('%s %s failed: %s', method, path, exc.detail, exc_info=exc)
    else:
        logger.info('%s %s rejected (%s): %s', method, path, status_code, exc.detail)

    data = {'detail': exc.detail}
    if isinstance(exc, ValidationError) and exc.fields:
        data['fields'] = exc.fields
    return Response(data, status=status_code)
