import logging

from rest_framework import status
from rest_framework.exceptions import APIException, NotFound
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGES = {
    'dni': 'Ya existe un paciente con ese DNI',
    'numeroHistoriaClinica': 'Ya existe un paciente con ese número de historia clínica',
}


class PatientNotFound(NotFound):
    default_detail = 'Paciente no encontrado'
    default_code = 'patient_not_found'


class SubdocumentNotFound(NotFound):
    default_detail = 'Elemento no encontrado'
    default_code = 'subdocument_not_found'


class InvalidPayload(APIException):
    """Input failed validation; ``errors`` maps field names to messages."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Datos inválidos'
    default_code = 'invalid'

    def __init__(self, errors, detail=None):
        super().__init__(detail)
        self.errors = errors


class DuplicateKey(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Error de duplicado en la base de datos'
    default_code = 'duplicate_key'

    def __init__(self, field=None):
        self.field = field
        super().__init__(DUPLICATE_MESSAGES.get(field))


class StoreUnavailable(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'La base de datos no está disponible'
    default_code = 'store_unavailable'


def _message(data) -> str:
    if isinstance(data, dict):
        detail = data.get('detail')
        if detail is not None:
            return str(detail)
        return 'Datos inválidos'
    if isinstance(data, list) and data:
        return str(data[0])
    return str(data)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        request = context.get('request')
        logger.error('unhandled error on %s', getattr(request, 'path', '?'), exc_info=exc)
        return Response({'error': 'Error interno del servidor'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    body = {'error': _message(resp.data)}
    if isinstance(exc, InvalidPayload):
        body['details'] = exc.errors
    elif isinstance(exc, DuplicateKey) and exc.field:
        body['field'] = exc.field
    elif isinstance(resp.data, dict) and 'detail' not in resp.data:
        body['details'] = resp.data
    resp.data = body
    return resp
