"""Tests for domain.record_service — writes, ids, audit trail, invalidation."""

import re
from datetime import date, datetime

import pytest

from domain.errors import RecordNotFoundError
from domain.models import Camion, Chauffeur, Entree, Parametres, Planification, TypeEnregistrement
from domain.record_service import RecordService, generate_id
from domain.snapshot import SnapshotProvider
from fleettrack.adapters.outbound.memory_store import InMemoryActivityLog, InMemoryRecordStore

NOW = datetime(2026, 2, 4, 9, 30)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def journal():
    return InMemoryActivityLog()


@pytest.fixture
def provider(store):
    return SnapshotProvider(store)


@pytest.fixture
def service(store, journal, provider):
    return RecordService(store, journal, provider, clock=lambda: NOW)


class TestGenerateId:
    def test_format(self):
        assert re.fullmatch(r"id_[0-9a-z]+", generate_id())

    def test_unique(self):
        assert len({generate_id() for _ in range(200)}) == 200


class TestSaveEntree:
    def test_new_entry_gets_id_and_timestamps(self, service, store):
        saved = service.save_entree(Entree(id="", date=date(2026, 2, 4), camion_id="t1",
                                           quantite_gasoil=10.0))
        assert saved.id.startswith("id_")
        assert saved.created_at == NOW
        assert saved.updated_at == NOW
        raw = store.get_by_id(TypeEnregistrement.ENTREE, saved.id)
        assert raw["camionId"] == "t1"
        assert raw["createdAt"] == NOW.isoformat()

    def test_update_keeps_created_at(self, service):
        created = datetime(2026, 1, 1, 8, 0)
        saved = service.save_entree(Entree(id="e1", date=date(2026, 2, 4), created_at=created))
        assert saved.created_at == created

    def test_activity_is_logged(self, service, journal):
        saved = service.save_entree(Entree(id="", date=date(2026, 2, 4), destination="Sfax"))
        service.save_entree(saved)
        actions = [e.action for e in journal.list_by_entity("entry", saved.id)]
        assert sorted(actions) == ["CREATE", "UPDATE"]
        assert journal.list_by_date(date(2026, 2, 4))[0].details["destination"] == "Sfax"

    def test_write_invalidates_snapshot(self, service, provider):
        before = provider.get()
        service.save_entree(Entree(id="", date=date(2026, 2, 4)))
        after = provider.get()
        assert after is not before
        assert len(after.entrees) == 1

    def test_get(self, service):
        saved = service.save_entree(Entree(id="e1", date=date(2026, 2, 4), prix_gasoil_litre=0.0))
        assert service.get_entree("e1") == saved
        assert service.get_entree("nope") is None


class TestDelete:
    def test_delete_logs_previous_values(self, service, journal, store):
        service.save_camion(Camion(id="t1", matricule="8565 TU 257"))
        service.delete_camion("t1")
        assert store.get_by_id(TypeEnregistrement.CAMION, "t1") is None
        entries = journal.list_by_entity("truck", "t1")
        assert sorted(e.action for e in entries) == ["DELETE", "UPDATE"]
        deleted = next(e for e in entries if e.action == "DELETE")
        assert deleted.details == {"matricule": "8565 TU 257"}

    def test_delete_unknown(self, service):
        with pytest.raises(RecordNotFoundError):
            service.delete_entree("missing")


class TestOtherRecords:
    def test_chauffeur(self, service):
        saved = service.save_chauffeur(Chauffeur(id="", nom="HEDI", camion_id="t7"))
        assert service.get_chauffeur(saved.id).nom == "HEDI"

    def test_planification(self, service):
        saved = service.save_planification(Planification(id="", date=date(2026, 2, 5)))
        assert service.get_planification(saved.id).date == date(2026, 2, 5)
        service.delete_planification(saved.id)
        assert service.get_planification(saved.id) is None

    def test_parametres(self, service, journal):
        assert service.get_parametres() == Parametres()
        service.save_parametres(Parametres(default_fuel_price=2.4, id="x"))
        assert service.get_parametres().default_fuel_price == 2.4
        assert journal.list_by_entity("settings", "default")[0].action == "UPDATE"

    def test_without_journal(self, store):
        service = RecordService(store)
        assert service.log_activity("CREATE", "entry", "e1") is None
        assert service.save_camion(Camion(id="t1", matricule="x")).id == "t1"


class TestRepair:
    def test_repairs_and_logs(self, service, store, journal, provider):
        store.upsert(TypeEnregistrement.CAMION, {"id": "t1", "matricule": "8565 TU 257"})
        store.upsert(TypeEnregistrement.ENTREE, {
            "id": "entry_2026-02-04_t1", "date": "2026-02-04", "camionId": "truck_8565_TU_257",
        })
        repaired, deleted = service.repair_entries(provider.get())
        assert (repaired, deleted) == (1, 0)
        assert store.get_by_id(TypeEnregistrement.ENTREE, "entry_2026-02-04_t1")["camionId"] == "t1"
        assert journal.list_by_entity("entry", "all")[0].action == "REPAIR"

    def test_nothing_to_repair(self, service, journal, provider):
        assert service.repair_entries(provider.get()) == (0, 0)
        assert journal.list_all() == []
