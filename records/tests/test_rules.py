import pytest

from records.services.rules import find_conflict, validate_for_create, validate_for_update
from records.services.store import PatientStore

pytestmark = pytest.mark.django_db

BASE = {
    'nombre': 'Ana',
    'apellido': 'Lopez',
    'dni': '12.345.678',
    'numeroHistoriaClinica': 'HC-001',
    'telefono': '555-0101',
}


def test_create_normalises_input():
    validated, errors = validate_for_create({
        **BASE,
        'nombre': '  <b>Ana</b> ',
        'alergias': 'penicilina, , látex',
        'antecedentes': 'Diabetes tipo 2',
    })
    assert errors is None
    assert validated.fields['nombre'] == 'Ana'
    assert validated.fields['dni'] == '12345678'
    assert validated.fields['email'] == ''
    assert validated.clinical == {'antecedentes': 'Diabetes tipo 2', 'alergias': ['penicilina', 'látex']}
    assert set(validated.check_keys) == {'dni', 'numeroHistoriaClinica'}


def test_nested_history_wins_over_flat_fields():
    validated, _ = validate_for_create({
        **BASE,
        'antecedentes': 'plano',
        'historiaClinica': {'antecedentes': 'anidado', 'alergias': ['látex']},
    })
    assert validated.clinical == {'antecedentes': 'anidado', 'alergias': ['látex']}


@pytest.mark.parametrize('override, field', [
    ({'nombre': ''}, 'nombre'),
    ({'telefono': '<i></i>'}, 'telefono'),
    ({'email': 'ana@'}, 'email'),
    ({'dni': '12#45'}, 'dni'),
    ({'fechaNacimiento': '2999-01-01'}, 'fechaNacimiento'),
])
def test_create_rejects(override, field):
    validated, errors = validate_for_create({**BASE, **override})
    assert validated is None
    assert field in errors


def test_update_only_checks_changed_keys():
    store = PatientStore()
    validated, _ = validate_for_create(BASE)
    ana = store.create(**validated.fields)

    same, errors = validate_for_update(ana, {'dni': '12345678', 'telefono': '555-2222'})
    assert errors is None
    assert same.check_keys == ()
    assert same.fields == {'dni': '12345678', 'telefono': '555-2222'}

    other_fields = dict(validated.fields, dni='22222222', numero_historia_clinica='HC-002')
    other = store.create(**other_fields)
    clash, _ = validate_for_update(other, {'numeroHistoriaClinica': 'HC-001'})
    assert clash.check_keys == ('numeroHistoriaClinica',)
    assert find_conflict(store, clash, exclude_id=other.pk) == 'numeroHistoriaClinica'


def test_partial_update_still_rejects_blank():
    store = PatientStore()
    validated, _ = validate_for_create(BASE)
    ana = store.create(**validated.fields)
    result, errors = validate_for_update(ana, {'apellido': '   '})
    assert result is None
    assert 'apellido' in errors
