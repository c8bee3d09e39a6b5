from collections import Counter

from records.serializers.subdocuments import IMAGE_TYPES, TREATMENT_STATES
from records.services.store import PatientStore


def record_counts(store: PatientStore) -> dict:
    treatments: Counter = Counter()
    images: Counter = Counter()
    for patient in store.iterate('historia_clinica', 'imagenes'):
        treatments.update(t.get('estado') for t in patient.tratamientos)
        images.update(i.get('tipo') for i in patient.imagenes or [])
    return {
        'patients': store.count(),
        'treatments': {state: treatments.get(state, 0) for state in TREATMENT_STATES},
        'images': {kind: images.get(kind, 0) for kind in IMAGE_TYPES},
    }
