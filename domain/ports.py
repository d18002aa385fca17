"""Domain ports — abstract interfaces for the record store and infrastructure.

Only stdlib (abc) and domain.models imports allowed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from domain.models import JournalActivite, TypeEnregistrement


# ── Repository Ports ──────────────────────────────────────────────────────


class RecordStore(ABC):
    """Persistence port for raw fleet documents, one collection per record type.

    Records are plain dicts keyed the way the document store keeps them
    (camelCase, ``id`` included). Implementations raise
    ``domain.errors.RecordStoreError`` on I/O failure.
    """

    @abstractmethod
    def get_all(self, type_enregistrement: TypeEnregistrement) -> list[dict]: ...

    @abstractmethod
    def get_by_id(self, type_enregistrement: TypeEnregistrement, record_id: str) -> dict | None: ...

    @abstractmethod
    def upsert(self, type_enregistrement: TypeEnregistrement, record: dict) -> dict: ...

    @abstractmethod
    def delete(self, type_enregistrement: TypeEnregistrement, record_id: str) -> bool: ...


class ActivityLogPort(ABC):
    """Persistence port for the activity audit trail.

    ``record`` must not raise: a failed audit write never blocks the
    operation being audited.
    """

    @abstractmethod
    def record(self, entry: JournalActivite) -> JournalActivite | None: ...

    @abstractmethod
    def list_all(self) -> list[JournalActivite]: ...

    @abstractmethod
    def list_by_date(self, jour: date) -> list[JournalActivite]: ...

    @abstractmethod
    def list_by_entity(self, entity_type: str, entity_id: str) -> list[JournalActivite]: ...


# ── Infrastructure Ports ──────────────────────────────────────────────────


class CachePort(ABC):
    """Port for key-value caching (Redis, in-memory, etc.)."""

    @abstractmethod
    def get(self, key: str) -> object | None: ...

    @abstractmethod
    def set(self, key: str, value: object, ttl: int = 3600) -> None: ...

    @abstractmethod
    def invalidate(self, prefix: str) -> None: ...
