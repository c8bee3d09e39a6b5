"""
Image reference views.

Images are uploaded to the hosting service by the browser; these
endpoints only ever receive the resulting public URL.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from records.apps import get_service


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def images(request, pk: int):
    service = get_service()
    if request.method == 'GET':
        return Response(service.list_images(pk))
    item, _ = service.add_image(pk, request.data)
    return Response(item, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([AllowAny])
def image_detail(request, pk: int, iid: str):
    service = get_service()
    if request.method == 'GET':
        return Response(service.images.get(pk, iid))
    if request.method in ('PUT', 'PATCH'):
        return Response(service.update_image(pk, iid, request.data))
    service.remove_image(pk, iid)
    return Response({'message': 'Imagen eliminada con éxito'})
