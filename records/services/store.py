"""
Record store for patient documents.

The store is the only code that talks to the database.  It hands out
``Patient`` instances, translates backend failures into the API error
taxonomy and offers an atomic read-modify-write block for callers that
change embedded child records.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from django.db import DatabaseError, IntegrityError, InterfaceError, OperationalError, connections, transaction

from records.exceptions import DuplicateKey, PatientNotFound, StoreUnavailable
from records.models import Patient

logger = logging.getLogger(__name__)

# API name -> model field, checked in this order when parsing constraint errors
ALTERNATE_KEYS = {
    'numeroHistoriaClinica': 'numero_historia_clinica',
    'dni': 'dni',
}


def duplicate_field(exc: IntegrityError) -> Optional[str]:
    """Best-effort guess at which alternate key a UNIQUE violation hit."""
    message = str(exc)
    for api_name, column in ALTERNATE_KEYS.items():
        if column in message:
            return api_name
    return None


@contextmanager
def _translate_errors():
    try:
        yield
    except IntegrityError as exc:
        field = duplicate_field(exc)
        logger.warning('duplicate key on %s', field or 'unknown field')
        raise DuplicateKey(field) from exc
    except (OperationalError, InterfaceError) as exc:
        logger.exception('record store unavailable')
        raise StoreUnavailable() from exc


class PatientStore:
    def __init__(self, using: str = 'default'):
        self.using = using

    def _qs(self):
        return Patient.objects.using(self.using)

    def get(self, pk) -> Patient:
        with _translate_errors():
            patient = self._qs().filter(pk=pk).first()
        if patient is None:
            raise PatientNotFound()
        return patient

    def find_by_alternate_key(self, field: str, value) -> Optional[Patient]:
        column = ALTERNATE_KEYS.get(field)
        if column is None:
            raise ValueError(f'{field} is not an alternate key')
        with _translate_errors():
            return self._qs().filter(**{column: value}).first()

    def list_all(self, ordering=('-created_at', '-id')) -> list[Patient]:
        with _translate_errors():
            return list(self._qs().order_by(*ordering))

    def count(self) -> int:
        with _translate_errors():
            return self._qs().count()

    def iterate(self, *fields) -> Iterator[Patient]:
        with _translate_errors():
            qs = self._qs().only(*fields) if fields else self._qs()
            yield from qs.iterator()

    def create(self, **fields) -> Patient:
        patient = Patient(**fields)
        with _translate_errors():
            with transaction.atomic(using=self.using):
                patient.save(using=self.using, force_insert=True)
        return patient

    def replace(self, patient: Patient, update_fields=None) -> Patient:
        if update_fields is not None:
            update_fields = list(update_fields) + ['updated_at']
        with _translate_errors():
            with transaction.atomic(using=self.using):
                patient.save(using=self.using, update_fields=update_fields)
        return patient

    def delete(self, pk) -> None:
        with _translate_errors():
            deleted, _ = self._qs().filter(pk=pk).delete()
        if not deleted:
            raise PatientNotFound()

    @contextmanager
    def locked(self, pk) -> Iterator[Patient]:
        """Load a patient under a row lock; writes inside the block commit together."""
        with _translate_errors():
            with transaction.atomic(using=self.using):
                patient = self._qs().select_for_update().filter(pk=pk).first()
                if patient is None:
                    raise PatientNotFound()
                yield patient

    def ping(self) -> bool:
        try:
            with connections[self.using].cursor() as c:
                c.execute('SELECT 1')
                row = c.fetchone()
        except DatabaseError as exc:
            logger.warning('store ping failed: %s', exc)
            return False
        return bool(row and row[0] == 1)
