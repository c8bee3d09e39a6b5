"""
Django admin registration for patient records.

Lets staff inspect and correct records through ``/admin/`` during
development.  The embedded clinical history and image lists are shown
as raw JSON.
"""
from django.contrib import admin

from .models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('numero_historia_clinica', 'apellido', 'nombre', 'dni', 'telefono', 'created_at')
    search_fields = ('numero_historia_clinica', 'dni', 'apellido', 'nombre', 'email')
    readonly_fields = ('created_at', 'updated_at')
    ordering = ('-created_at',)
