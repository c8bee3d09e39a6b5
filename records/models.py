"""
Database models for the clinic records app.

A patient is stored as one document: scalar identity and contact fields
are columns, while the clinical history (with its treatments) and the
image list are embedded JSON documents that always travel with their
patient.  Deleting the row removes every embedded child with it.
"""
from __future__ import annotations

from django.db import models
from django.utils import timezone


def default_clinical_history() -> dict:
    return {
        'fechaCreacion': timezone.now().isoformat(),
        'antecedentes': '',
        'alergias': [],
        'tratamientos': [],
    }


class Patient(models.Model):
    """Root clinical record for one individual.

    ``dni`` and ``numero_historia_clinica`` are alternate keys; the
    database UNIQUE constraints on them are the final word on
    uniqueness even when the service checks beforehand.
    """
    nombre = models.CharField(max_length=100)
    apellido = models.CharField(max_length=100)
    numero_historia_clinica = models.CharField(max_length=50, unique=True)
    dni = models.CharField(max_length=20, unique=True)
    telefono = models.CharField(max_length=32)
    email = models.CharField(max_length=254, blank=True, default='')
    fecha_nacimiento = models.DateField(null=True, blank=True)
    # {fechaCreacion, antecedentes, alergias: [str], tratamientos: [Treatment]}
    historia_clinica = models.JSONField(default=default_clinical_history)
    # [Image]
    imagenes = models.JSONField(default=list, blank=True)
    # Listing sorts on this, newest first
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"{self.apellido}, {self.nombre} ({self.numero_historia_clinica})"

    @property
    def tratamientos(self) -> list[dict]:
        return (self.historia_clinica or {}).get('tratamientos') or []
