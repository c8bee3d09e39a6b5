"""
Schemas for the child records embedded in a patient document.

Both serializers are used with ``partial=True`` for updates, in which
case DRF skips required checks and defaults so only the fields sent
by the caller come back in ``validated_data``.
"""
from rest_framework import serializers

from records.serializers.fields import SanitizedCharField

TREATMENT_STATES = ('pendiente', 'en-proceso', 'completado')
IMAGE_TYPES = ('radiografia', 'fotografia', 'otro')


class TreatmentSerializer(serializers.Serializer):
    fecha = serializers.DateField()
    procedimiento = SanitizedCharField(max_length=255)
    notas = SanitizedCharField(allow_blank=True, default='')
    # Tooth number, universal notation
    diente = serializers.IntegerField(min_value=1, max_value=32, allow_null=True, default=None)
    estado = serializers.ChoiceField(choices=TREATMENT_STATES, default='pendiente')


class ImageSerializer(serializers.Serializer):
    url = serializers.URLField(max_length=2048)
    tipo = serializers.ChoiceField(choices=IMAGE_TYPES)
    descripcion = SanitizedCharField(allow_blank=True, default='')
    fecha = serializers.DateTimeField(required=False)
