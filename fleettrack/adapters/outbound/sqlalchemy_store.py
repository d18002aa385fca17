"""SQLAlchemy implementations of the record store and activity log ports.

Fleet documents are kept as JSON payloads, one row per (collection, id),
so the domain parse boundary stays the single place where raw fields are
interpreted.
"""

from __future__ import annotations

import copy
import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleettrack.adapters.outbound.sqlalchemy_models import (
    Enregistrement as OrmEnregistrement,
    JournalActivite as OrmJournalActivite,
)
from domain.errors import RecordStoreError
from domain.models import JournalActivite as DomainJournalActivite, TypeEnregistrement
from domain.ports import ActivityLogPort, RecordStore

logger = logging.getLogger(__name__)


class SqlAlchemyRecordStore(RecordStore):
    """SQLAlchemy adapter for the RecordStore port.

    Each command commits on its own; a database error rolls the session
    back and surfaces as ``RecordStoreError``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _row(self, type_enregistrement: TypeEnregistrement, record_id: str):
        stmt = (
            select(OrmEnregistrement)
            .where(OrmEnregistrement.collection == type_enregistrement.value)
            .where(OrmEnregistrement.record_id == record_id)
        )
        return self._session.scalars(stmt).first()

    def _fail(self, operation: str, type_enregistrement: TypeEnregistrement, e: Exception):
        self._session.rollback()
        logger.error("%s on %s failed: %s", operation, type_enregistrement.value, e)
        raise RecordStoreError(
            f"{operation} {type_enregistrement.value}: {e}"
        ) from e

    # ── Queries ────────────────────────────────────────────────────────

    def get_all(self, type_enregistrement: TypeEnregistrement) -> list[dict]:
        stmt = (
            select(OrmEnregistrement.data)
            .where(OrmEnregistrement.collection == type_enregistrement.value)
            .order_by(OrmEnregistrement.id)
        )
        try:
            return [copy.deepcopy(data) for data in self._session.scalars(stmt)]
        except SQLAlchemyError as e:
            self._fail("get_all", type_enregistrement, e)

    def get_by_id(self, type_enregistrement: TypeEnregistrement, record_id: str) -> dict | None:
        try:
            row = self._row(type_enregistrement, record_id)
        except SQLAlchemyError as e:
            self._fail("get_by_id", type_enregistrement, e)
        return copy.deepcopy(row.data) if row else None

    # ── Commands ───────────────────────────────────────────────────────

    def upsert(self, type_enregistrement: TypeEnregistrement, record: dict) -> dict:
        record_id = record.get("id")
        if not record_id:
            raise RecordStoreError(f"upsert {type_enregistrement.value}: record without id")
        data = copy.deepcopy(record)
        try:
            row = self._row(type_enregistrement, record_id)
            if row is None:
                self._session.add(OrmEnregistrement(
                    collection=type_enregistrement.value,
                    record_id=record_id,
                    data=data,
                ))
            else:
                row.data = data
            self._session.commit()
        except SQLAlchemyError as e:
            self._fail("upsert", type_enregistrement, e)
        return copy.deepcopy(data)

    def delete(self, type_enregistrement: TypeEnregistrement, record_id: str) -> bool:
        try:
            row = self._row(type_enregistrement, record_id)
            if row is None:
                return False
            self._session.delete(row)
            self._session.commit()
        except SQLAlchemyError as e:
            self._fail("delete", type_enregistrement, e)
        return True


class SqlAlchemyActivityLog(ActivityLogPort):
    """SQLAlchemy adapter for the ActivityLogPort.

    Audit writes never propagate a database error to the caller.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ── Queries ────────────────────────────────────────────────────────

    def list_all(self) -> list[DomainJournalActivite]:
        stmt = select(OrmJournalActivite).order_by(OrmJournalActivite.timestamp.desc())
        return [self._to_domain(orm) for orm in self._session.scalars(stmt)]

    def list_by_date(self, jour: date) -> list[DomainJournalActivite]:
        stmt = (
            select(OrmJournalActivite)
            .where(OrmJournalActivite.date == jour)
            .order_by(OrmJournalActivite.timestamp.desc())
        )
        return [self._to_domain(orm) for orm in self._session.scalars(stmt)]

    def list_by_entity(self, entity_type: str, entity_id: str) -> list[DomainJournalActivite]:
        stmt = (
            select(OrmJournalActivite)
            .where(OrmJournalActivite.entity_type == entity_type)
            .where(OrmJournalActivite.entity_id == entity_id)
            .order_by(OrmJournalActivite.timestamp.desc())
        )
        return [self._to_domain(orm) for orm in self._session.scalars(stmt)]

    # ── Commands ───────────────────────────────────────────────────────

    def record(self, entry: DomainJournalActivite) -> DomainJournalActivite | None:
        try:
            self._session.add(OrmJournalActivite(
                id=entry.id,
                timestamp=entry.timestamp,
                date=entry.date,
                action=entry.action,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                details=entry.details,
            ))
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.warning("Activity log write failed for %s %s: %s",
                           entry.entity_type, entry.entity_id, e)
            return None
        return entry

    # ── Mapping helpers ────────────────────────────────────────────────

    @staticmethod
    def _to_domain(orm: OrmJournalActivite) -> DomainJournalActivite:
        return DomainJournalActivite(
            id=orm.id,
            timestamp=orm.timestamp,
            date=orm.date,
            action=orm.action,
            entity_type=orm.entity_type,
            entity_id=orm.entity_id,
            details=dict(orm.details or {}),
        )
