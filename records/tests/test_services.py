import io

import pytest
from django.core.management import call_command
from django.db import OperationalError

from records.apps import get_service
from records.exceptions import DuplicateKey, InvalidPayload, PatientNotFound, StoreUnavailable, SubdocumentNotFound
from records.models import Patient
from records.services import patients as patients_module
from records.services.store import PatientStore

pytestmark = pytest.mark.django_db

ANA = {
    'nombre': 'Ana',
    'apellido': 'Lopez',
    'dni': '12345678',
    'numeroHistoriaClinica': 'HC-001',
    'telefono': '555-0101',
}


@pytest.fixture
def service():
    return get_service()


@pytest.fixture
def ana(service):
    return service.create_patient(dict(ANA))


def test_create_then_get_returns_equal_record(service, ana):
    fetched = service.get_patient(ana.pk)
    assert fetched.pk == ana.pk
    assert fetched.dni == '12345678'
    assert fetched.historia_clinica == ana.historia_clinica
    assert fetched.imagenes == []


def test_duplicate_dni_leaves_one_record(service, ana):
    with pytest.raises(DuplicateKey) as exc:
        service.create_patient({**ANA, 'numeroHistoriaClinica': 'HC-002'})
    assert exc.value.field == 'dni'
    assert Patient.objects.filter(dni='12345678').count() == 1


def test_store_constraint_catches_race(service, ana, monkeypatch):
    # Simulate a concurrent insert slipping past the pre-write check
    monkeypatch.setattr(patients_module, 'find_conflict', lambda *a, **kw: None)
    with pytest.raises(DuplicateKey) as exc:
        service.create_patient({**ANA, 'numeroHistoriaClinica': 'HC-002'})
    assert exc.value.field == 'dni'
    assert Patient.objects.count() == 1


def test_invalid_payload_carries_field_errors(service):
    with pytest.raises(InvalidPayload) as exc:
        service.create_patient({'nombre': '  ', 'apellido': 'Lopez'})
    assert 'nombre' in exc.value.errors
    assert 'dni' in exc.value.errors


def test_creation_date_is_write_once(service, ana):
    original = ana.historia_clinica['fechaCreacion']
    updated = service.update_patient(ana.pk, {
        'historiaClinica': {'fechaCreacion': '2000-01-01T00:00:00+00:00', 'alergias': ['látex']},
    })
    assert updated.historia_clinica['fechaCreacion'] == original
    assert updated.historia_clinica['alergias'] == ['látex']


def test_update_cannot_overwrite_children(service, ana):
    service.add_treatment(ana.pk, {'fecha': '2024-01-10', 'procedimiento': 'Limpieza'})
    service.update_patient(ana.pk, {'tratamientos': [], 'imagenes': [{'url': 'x'}]})
    stored = service.get_patient(ana.pk)
    assert len(stored.tratamientos) == 1
    assert stored.imagenes == []


def test_add_treatment_appends_with_fresh_identity(service, ana):
    first, _ = service.add_treatment(ana.pk, {'fecha': '2024-01-10', 'procedimiento': 'Limpieza'})
    second, items = service.add_treatment(ana.pk, {'fecha': '2024-02-10', 'procedimiento': 'Control'})
    assert items[-1] == second
    assert second['id'] != first['id']
    assert service.get_patient(ana.pk).tratamientos[-1]['id'] == second['id']


def test_estado_transitions_are_unrestricted(service, ana):
    item, _ = service.add_treatment(ana.pk, {'fecha': '2024-01-10', 'procedimiento': 'Limpieza', 'estado': 'completado'})
    back = service.update_treatment(ana.pk, item['id'], {'estado': 'pendiente'})
    assert back['estado'] == 'pendiente'


def test_update_treatment_keeps_identity(service, ana):
    item, _ = service.add_treatment(ana.pk, {'fecha': '2024-01-10', 'procedimiento': 'Limpieza'})
    merged = service.update_treatment(ana.pk, item['id'], {'procedimiento': 'Endodoncia'})
    assert merged['id'] == item['id']
    assert merged['fecha'] == '2024-01-10'


def test_missing_children_and_parents(service, ana):
    with pytest.raises(SubdocumentNotFound):
        service.remove_treatment(ana.pk, 'missing')
    with pytest.raises(SubdocumentNotFound):
        service.remove_image(ana.pk, 'missing')
    with pytest.raises(PatientNotFound):
        service.add_image(ana.pk + 1000, {'url': 'https://example.com/a.jpg', 'tipo': 'otro'})


def test_image_update_merges(service, ana):
    image, _ = service.add_image(ana.pk, {'url': 'https://example.com/a.jpg', 'tipo': 'fotografia'})
    merged = service.update_image(ana.pk, image['id'], {'descripcion': 'Sonrisa frontal'})
    assert merged['url'] == 'https://example.com/a.jpg'
    assert merged['fecha'] == image['fecha']
    assert merged['descripcion'] == 'Sonrisa frontal'


def test_delete_patient(service, ana):
    service.delete_patient(ana.pk)
    with pytest.raises(PatientNotFound):
        service.get_patient(ana.pk)
    with pytest.raises(PatientNotFound):
        service.delete_patient(ana.pk)


def test_store_unavailable(monkeypatch):
    def broken(self):
        raise OperationalError('connection refused')
    monkeypatch.setattr(PatientStore, '_qs', broken)
    with pytest.raises(StoreUnavailable):
        PatientStore().get(1)


def test_store_unavailable_over_http(monkeypatch):
    from rest_framework.test import APIClient

    def broken(self):
        raise OperationalError('connection refused')
    monkeypatch.setattr(PatientStore, '_qs', broken)
    r = APIClient().get('/patients')
    assert r.status_code == 500
    assert r.data == {'error': 'La base de datos no está disponible'}


def test_find_by_alternate_key_rejects_other_fields(ana):
    store = PatientStore()
    assert store.find_by_alternate_key('numeroHistoriaClinica', 'HC-001').pk == ana.pk
    assert store.find_by_alternate_key('dni', '999') is None
    with pytest.raises(ValueError):
        store.find_by_alternate_key('telefono', '555-0101')


def test_seed_command_creates_valid_records():
    out = io.StringIO()
    call_command('seed_patients', count=2, seed=1, stdout=out)
    assert 'Created' in out.getvalue()
    patients = list(Patient.objects.all())
    assert 1 <= len(patients) <= 2
    for patient in patients:
        assert patient.historia_clinica['fechaCreacion']
        for treatment in patient.tratamientos:
            assert treatment['id']
            assert treatment['estado'] in ('pendiente', 'en-proceso', 'completado')
            assert 1 <= treatment['diente'] <= 32
        for image in patient.imagenes:
            assert image['tipo'] == 'radiografia'
            assert image['fecha']
