"""
Validation and uniqueness rules for patient records.

Validation never raises: each entry point returns ``(validated, errors)``
with exactly one side set, so callers decide how to report a bad
payload.  Uniqueness is checked against the store before writing, but
the database constraint stays authoritative; the store turns a lost
race into ``DuplicateKey`` as well.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from records.models import Patient
from records.serializers.patient import CLINICAL_FIELDS, PATIENT_FIELDS, PatientInputSerializer
from records.services.store import ALTERNATE_KEYS, PatientStore


@dataclass
class ValidatedPatient:
    # model field -> value
    fields: dict
    # subset of antecedentes / alergias
    clinical: dict = field(default_factory=dict)
    # API names of alternate keys that need a uniqueness check
    check_keys: tuple = ()


def _split(data: dict) -> tuple[dict, dict]:
    fields = {PATIENT_FIELDS[k]: v for k, v in data.items() if k in PATIENT_FIELDS}
    clinical = {k: data[k] for k in CLINICAL_FIELDS if k in data}
    nested = data.get('historiaClinica') or {}
    clinical.update({k: nested[k] for k in CLINICAL_FIELDS if k in nested})
    return fields, clinical


def validate_for_create(payload) -> tuple[Optional[ValidatedPatient], Optional[dict]]:
    ser = PatientInputSerializer(data=payload)
    if not ser.is_valid():
        return None, ser.errors
    fields, clinical = _split(ser.validated_data)
    fields.setdefault('email', '')
    return ValidatedPatient(fields, clinical, tuple(ALTERNATE_KEYS)), None


def validate_for_update(existing: Patient, payload) -> tuple[Optional[ValidatedPatient], Optional[dict]]:
    """Validate a partial update; only fields present in ``payload`` are returned."""
    ser = PatientInputSerializer(data=payload, partial=True)
    if not ser.is_valid():
        return None, ser.errors
    fields, clinical = _split(ser.validated_data)
    changed = tuple(
        api_name for api_name, column in ALTERNATE_KEYS.items()
        if column in fields and fields[column] != getattr(existing, column)
    )
    return ValidatedPatient(fields, clinical, changed), None


def find_conflict(store: PatientStore, validated: ValidatedPatient, exclude_id=None) -> Optional[str]:
    """Return the API name of the first alternate key already taken by another patient."""
    for api_name in validated.check_keys:
        other = store.find_by_alternate_key(api_name, validated.fields[ALTERNATE_KEYS[api_name]])
        if other is not None and other.pk != exclude_id:
            return api_name
    return None
