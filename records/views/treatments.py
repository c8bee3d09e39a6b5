from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from records.apps import get_service


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def treatments(request, pk: int):
    service = get_service()
    if request.method == 'GET':
        return Response(service.list_treatments(pk))
    # The clinical history page redraws the whole list after an add.
    _, items = service.add_treatment(pk, request.data)
    return Response(items, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([AllowAny])
def treatment_detail(request, pk: int, tid: str):
    service = get_service()
    if request.method == 'GET':
        return Response(service.treatments.get(pk, tid))
    if request.method in ('PUT', 'PATCH'):
        return Response(service.update_treatment(pk, tid, request.data))
    service.remove_treatment(pk, tid)
    return Response({'message': 'Tratamiento eliminado con éxito'})
