import logging

from django.utils import timezone

from records.exceptions import DuplicateKey, InvalidPayload
from records.models import Patient
from records.serializers.subdocuments import ImageSerializer, TreatmentSerializer
from records.services.rules import find_conflict, validate_for_create, validate_for_update
from records.services.store import PatientStore
from records.services.subdocuments import SubdocumentCollection, now_iso

logger = logging.getLogger(__name__)


class PatientService:
    """Every operation external callers may run against patient records."""

    def __init__(self, store: PatientStore):
        self.store = store
        self.treatments = SubdocumentCollection(
            store,
            path=('historia_clinica', 'tratamientos'),
            serializer_class=TreatmentSerializer,
            label='treatment',
            not_found='Tratamiento no encontrado',
        )
        self.images = SubdocumentCollection(
            store,
            path=('imagenes',),
            serializer_class=ImageSerializer,
            label='image',
            not_found='Imagen no encontrada',
            defaults={'fecha': now_iso},
        )

    # -- patients -----------------------------------------------------------

    def list_patients(self) -> list[Patient]:
        return self.store.list_all()

    def find_patient(self, field, value):
        return self.store.find_by_alternate_key(field, value)

    def get_patient(self, pk) -> Patient:
        return self.store.get(pk)

    def create_patient(self, payload) -> Patient:
        validated, errors = validate_for_create(payload)
        if errors:
            raise InvalidPayload(errors)
        conflict = find_conflict(self.store, validated)
        if conflict:
            logger.warning('create rejected, %s already registered', conflict)
            raise DuplicateKey(conflict)
        history = {
            'fechaCreacion': timezone.now().isoformat(),
            'antecedentes': validated.clinical.get('antecedentes', ''),
            'alergias': validated.clinical.get('alergias', []),
            'tratamientos': [],
        }
        patient = self.store.create(**validated.fields, historia_clinica=history, imagenes=[])
        logger.info('patient %s created', patient.pk)
        return patient

    def update_patient(self, pk, payload) -> Patient:
        """Merge the given fields into the stored patient.

        Fields absent from ``payload`` keep their stored value.  The
        clinical history creation date and the child lists are not
        writable here.
        """
        with self.store.locked(pk) as patient:
            validated, errors = validate_for_update(patient, payload)
            if errors:
                raise InvalidPayload(errors)
            conflict = find_conflict(self.store, validated, exclude_id=patient.pk)
            if conflict:
                logger.warning('update of patient %s rejected, %s already registered', pk, conflict)
                raise DuplicateKey(conflict)
            for column, value in validated.fields.items():
                setattr(patient, column, value)
            if validated.clinical:
                history = dict(patient.historia_clinica or {})
                history.update(validated.clinical)
                patient.historia_clinica = history
            self.store.replace(patient)
        logger.info('patient %s updated', pk)
        return patient

    def delete_patient(self, pk) -> None:
        self.store.delete(pk)
        logger.info('patient %s deleted', pk)

    # -- treatments ---------------------------------------------------------

    def list_treatments(self, pk) -> list[dict]:
        return self.treatments.list(pk)

    def add_treatment(self, pk, data):
        return self.treatments.add(pk, data)

    def update_treatment(self, pk, treatment_id, patch) -> dict:
        return self.treatments.update(pk, treatment_id, patch)

    def remove_treatment(self, pk, treatment_id) -> None:
        self.treatments.remove(pk, treatment_id)

    # -- images -------------------------------------------------------------

    def list_images(self, pk) -> list[dict]:
        return self.images.list(pk)

    def add_image(self, pk, data):
        return self.images.add(pk, data)

    def update_image(self, pk, image_id, patch) -> dict:
        return self.images.update(pk, image_id, patch)

    def remove_image(self, pk, image_id) -> None:
        self.images.remove(pk, image_id)
