"""
Patient record views.

These endpoints list, look up, register, edit and delete patients.
Validation, uniqueness and persistence all happen in the record
service; the views only pick the HTTP status and shape the JSON.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from records.apps import get_service
from records.serializers.patient import PatientListQuerySerializer, serialize_patient


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def patients(request):
    """List patients newest first, or register a new one.

    ``?dni=`` or ``?numeroHistoriaClinica=`` narrows the listing to the
    patient holding that key (an empty list when nobody does).
    """
    service = get_service()
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        for field, value in q.validated_data.items():
            if value:
                found = service.find_patient(field, value)
                return Response([serialize_patient(found)] if found else [])
        return Response([serialize_patient(p) for p in service.list_patients()])
    # POST
    patient = service.create_patient(request.data)
    return Response(serialize_patient(patient), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([AllowAny])
def patient_detail(request, pk: int):
    service = get_service()
    if request.method == 'GET':
        return Response(serialize_patient(service.get_patient(pk)))
    if request.method in ('PUT', 'PATCH'):
        # Both verbs merge: fields left out of the body keep their value.
        patient = service.update_patient(pk, request.data)
        return Response(serialize_patient(patient))
    # DELETE
    service.delete_patient(pk)
    return Response({'message': 'Paciente eliminado con éxito'})
