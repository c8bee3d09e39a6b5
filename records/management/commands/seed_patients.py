"""
Management command to fill the database with demo patient records.
"""
import random
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from records.apps import get_service
from records.exceptions import DuplicateKey

NOMBRES = ['Ana', 'Juan', 'María', 'Carlos', 'Lucía', 'Diego', 'Sofía', 'Martín']
APELLIDOS = ['López', 'García', 'Fernández', 'Pérez', 'Gómez', 'Díaz', 'Romero', 'Sosa']
PROCEDIMIENTOS = ['Limpieza', 'Extracción', 'Endodoncia', 'Obturación', 'Control', 'Blanqueamiento']
ALERGIAS = ['penicilina', 'látex', 'ibuprofeno', 'anestesia local']


class Command(BaseCommand):
    help = 'Create demo patients with treatments and images'

    def add_arguments(self, parser):
        parser.add_argument('--count', type=int, default=10)
        parser.add_argument('--seed', type=int, default=None)

    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        service = get_service()
        created = 0
        for _ in range(options['count']):
            payload = {
                'nombre': rng.choice(NOMBRES),
                'apellido': rng.choice(APELLIDOS),
                'dni': str(rng.randint(10_000_000, 45_000_000)),
                'numeroHistoriaClinica': f'HC-{rng.randint(1, 99999):05d}',
                'telefono': f'555-{rng.randint(0, 9999):04d}',
                'alergias': rng.sample(ALERGIAS, k=rng.randint(0, 2)),
            }
            try:
                patient = service.create_patient(payload)
            except DuplicateKey as exc:
                self.stdout.write(self.style.WARNING(f'skipped: {exc.detail}'))
                continue
            today = timezone.localdate()
            for _ in range(rng.randint(0, 4)):
                service.add_treatment(patient.pk, {
                    'fecha': (today - timedelta(days=rng.randint(0, 365))).isoformat(),
                    'procedimiento': rng.choice(PROCEDIMIENTOS),
                    'diente': rng.randint(1, 32),
                    'estado': rng.choice(['pendiente', 'en-proceso', 'completado']),
                })
            if rng.random() < 0.5:
                service.add_image(patient.pk, {
                    'url': f'https://example.com/radiografias/{patient.pk}.jpg',
                    'tipo': 'radiografia',
                    'descripcion': 'Panorámica inicial',
                })
            created += 1
            self.stdout.write(f'ok: {patient}')
        self.stdout.write(self.style.SUCCESS(f'Created {created} patients.'))
