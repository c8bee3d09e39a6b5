from __future__ import annotations

import re

from django.utils import timezone
from rest_framework import serializers

from records.models import Patient
from records.serializers.fields import SanitizedCharField, AllergyListField

# API name -> model field
PATIENT_FIELDS = {
    'nombre': 'nombre',
    'apellido': 'apellido',
    'numeroHistoriaClinica': 'numero_historia_clinica',
    'dni': 'dni',
    'telefono': 'telefono',
    'email': 'email',
    'fechaNacimiento': 'fecha_nacimiento',
}
CLINICAL_FIELDS = ('antecedentes', 'alergias')


def normalize_dni(value) -> str:
    # '12.345.678' and '12345678' are the same document
    return re.sub(r'[\s.\-]', '', value or '').upper()


class ClinicalHistoryInputSerializer(serializers.Serializer):
    antecedentes = SanitizedCharField(required=False, allow_blank=True)
    alergias = AllergyListField(required=False)


class PatientInputSerializer(serializers.Serializer):
    nombre = SanitizedCharField(max_length=100)
    apellido = SanitizedCharField(max_length=100)
    numeroHistoriaClinica = SanitizedCharField(max_length=50)
    dni = serializers.CharField(max_length=20)
    telefono = SanitizedCharField(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True, max_length=254)
    fechaNacimiento = serializers.DateField(required=False, allow_null=True)
    # Intake form sends these flat; the edit form nests them.
    antecedentes = SanitizedCharField(required=False, allow_blank=True)
    alergias = AllergyListField(required=False)
    historiaClinica = ClinicalHistoryInputSerializer(required=False)

    def validate_dni(self, v):
        v = normalize_dni(v)
        if not v:
            raise serializers.ValidationError('El DNI es requerido')
        if not v.isalnum():
            raise serializers.ValidationError('DNI inválido')
        return v

    def validate_fechaNacimiento(self, v):
        if v and v > timezone.localdate():
            raise serializers.ValidationError('La fecha de nacimiento no puede ser futura')
        return v


class PatientListQuerySerializer(serializers.Serializer):
    dni = serializers.CharField(required=False)
    numeroHistoriaClinica = serializers.CharField(required=False)

    def validate_dni(self, v):
        return normalize_dni(v)


def serialize_patient(patient: Patient) -> dict:
    history = patient.historia_clinica or {}
    return {
        'id': patient.id,
        'nombre': patient.nombre,
        'apellido': patient.apellido,
        'numeroHistoriaClinica': patient.numero_historia_clinica,
        'dni': patient.dni,
        'telefono': patient.telefono,
        'email': patient.email,
        'fechaNacimiento': patient.fecha_nacimiento.isoformat() if patient.fecha_nacimiento else None,
        'historiaClinica': {
            'fechaCreacion': history.get('fechaCreacion'),
            'antecedentes': history.get('antecedentes', ''),
            'alergias': list(history.get('alergias') or []),
            'tratamientos': [dict(t) for t in history.get('tratamientos') or []],
        },
        'imagenes': [dict(i) for i in patient.imagenes or []],
        'createdAt': patient.created_at.isoformat() if patient.created_at else None,
        'updatedAt': patient.updated_at.isoformat() if patient.updated_at else None,
    }
