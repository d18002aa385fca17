"""In-memory implementations of the record store and activity log ports.

Intended for tests and short-lived sessions; nothing survives the process.
"""

from __future__ import annotations

import copy
from datetime import date

from domain.errors import RecordStoreError
from domain.models import JournalActivite, TypeEnregistrement
from domain.ports import ActivityLogPort, RecordStore


class InMemoryRecordStore(RecordStore):
    """RecordStore over dicts, insertion order preserved per collection."""

    def __init__(self, records: dict | None = None):
        self._collections: dict[TypeEnregistrement, dict[str, dict]] = {}
        for type_enregistrement, items in (records or {}).items():
            for item in items:
                self.upsert(type_enregistrement, item)

    def _collection(self, type_enregistrement):
        return self._collections.setdefault(type_enregistrement, {})

    def get_all(self, type_enregistrement: TypeEnregistrement) -> list[dict]:
        return [copy.deepcopy(r) for r in self._collection(type_enregistrement).values()]

    def get_by_id(self, type_enregistrement: TypeEnregistrement, record_id: str) -> dict | None:
        record = self._collection(type_enregistrement).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def upsert(self, type_enregistrement: TypeEnregistrement, record: dict) -> dict:
        if not record.get("id"):
            raise RecordStoreError(f"upsert {type_enregistrement.value}: record without id")
        self._collection(type_enregistrement)[record["id"]] = copy.deepcopy(record)
        return copy.deepcopy(record)

    def delete(self, type_enregistrement: TypeEnregistrement, record_id: str) -> bool:
        return self._collection(type_enregistrement).pop(record_id, None) is not None


class InMemoryActivityLog(ActivityLogPort):
    def __init__(self):
        self._entries: list[JournalActivite] = []

    def record(self, entry: JournalActivite) -> JournalActivite | None:
        self._entries.append(entry)
        return entry

    def list_all(self) -> list[JournalActivite]:
        return sorted(self._entries, key=lambda e: e.timestamp, reverse=True)

    def list_by_date(self, jour: date) -> list[JournalActivite]:
        return [e for e in self.list_all() if e.date == jour]

    def list_by_entity(self, entity_type: str, entity_id: str) -> list[JournalActivite]:
        return [
            e for e in self.list_all()
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
