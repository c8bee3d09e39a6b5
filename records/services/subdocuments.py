"""
Ordered child records embedded in a patient document.

Treatments live at ``historia_clinica.tratamientos`` and images at
``imagenes``.  Each child carries an ``id`` assigned on insertion and
never reassigned.  Lookups scan the list; a patient's history is short
enough that an index would cost more than it saves.
"""
from __future__ import annotations

import datetime
import logging
import uuid
from typing import Optional

from django.utils import timezone

from records.exceptions import InvalidPayload, SubdocumentNotFound
from records.models import Patient
from records.services.store import PatientStore

logger = logging.getLogger(__name__)


def _to_json(value):
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


def new_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return timezone.now().isoformat()


class SubdocumentCollection:
    """Add, update, remove and list one kind of child record.

    ``path`` is the chain of keys leading to the list: the first item is
    the model field, the rest are keys inside its JSON document.
    """

    def __init__(self, store: PatientStore, *, path: tuple, serializer_class, label: str,
                 not_found: str, defaults: Optional[dict] = None):
        self.store = store
        self.path = path
        self.serializer_class = serializer_class
        self.label = label
        self.not_found = not_found
        self.defaults = defaults or {}

    def _items(self, patient: Patient) -> list:
        column, *keys = self.path
        if not keys:
            items = getattr(patient, column) or []
            setattr(patient, column, items)
            return items
        doc = getattr(patient, column) or {}
        setattr(patient, column, doc)
        for key in keys[:-1]:
            doc = doc.setdefault(key, {})
        items = doc.get(keys[-1]) or []
        doc[keys[-1]] = items
        return items

    def _validate(self, data, partial: bool) -> dict:
        ser = self.serializer_class(data=data, partial=partial)
        if not ser.is_valid():
            raise InvalidPayload(ser.errors)
        return {k: _to_json(v) for k, v in ser.validated_data.items()}

    def _index(self, items: list, item_id) -> int:
        for i, item in enumerate(items):
            if str(item.get('id')) == str(item_id):
                return i
        raise SubdocumentNotFound(self.not_found)

    def list(self, parent_id) -> list[dict]:
        return list(self._items(self.store.get(parent_id)))

    def get(self, parent_id, item_id) -> dict:
        items = self._items(self.store.get(parent_id))
        return items[self._index(items, item_id)]

    def add(self, parent_id, data) -> tuple[dict, list[dict]]:
        """Append a child; returns the stored child and the whole updated list."""
        values = self._validate(data, partial=False)
        for key, default in self.defaults.items():
            if values.get(key) is None:
                values[key] = default()
        item = {'id': new_id(), **values}
        with self.store.locked(parent_id) as patient:
            items = self._items(patient)
            items.append(item)
            self.store.replace(patient, update_fields=[self.path[0]])
        logger.info('%s %s added to patient %s', self.label, item['id'], parent_id)
        return item, list(items)

    def update(self, parent_id, item_id, patch) -> dict:
        """Shallow merge ``patch`` over the stored child; absent fields are kept."""
        values = self._validate(patch, partial=True)
        with self.store.locked(parent_id) as patient:
            items = self._items(patient)
            index = self._index(items, item_id)
            merged = {**items[index], **values, 'id': items[index]['id']}
            items[index] = merged
            self.store.replace(patient, update_fields=[self.path[0]])
        logger.info('%s %s updated on patient %s', self.label, item_id, parent_id)
        return merged

    def remove(self, parent_id, item_id) -> None:
        with self.store.locked(parent_id) as patient:
            items = self._items(patient)
            del items[self._index(items, item_id)]
            self.store.replace(patient, update_fields=[self.path[0]])
        logger.info('%s %s removed from patient %s', self.label, item_id, parent_id)
