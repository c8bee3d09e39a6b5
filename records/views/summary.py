"""
Front desk summary endpoint.

Plain counts only: how many patients are on file, how many treatments
sit in each state and how many images of each type are attached.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from records.apps import get_service
from records.services.summary import record_counts


@api_view(['GET'])
@permission_classes([AllowAny])
def records_summary(request):
    return Response(record_counts(get_service().store))
