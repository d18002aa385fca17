"""Tests for domain.snapshot — caller-owned view and its invalidation."""

from datetime import date

import pytest

from domain.models import StatutPlanification, TypeEnregistrement
from domain.snapshot import KPI_CACHE_PREFIX, SnapshotProvider, load_snapshot
from fleettrack.adapters.outbound.memory_store import InMemoryRecordStore
from fleettrack.adapters.outbound.redis_cache import InMemoryCacheAdapter


@pytest.fixture
def store():
    return InMemoryRecordStore({
        TypeEnregistrement.CAMION: [{"id": "t1", "matricule": "8565 TU 257"}],
        TypeEnregistrement.CHAUFFEUR: [{"id": "d1", "nom": "CHOKAIRI", "camionId": "t1"}],
        TypeEnregistrement.ENTREE: [
            {"id": "e1", "date": "2026-02-04", "camionId": "t1", "chauffeurId": "d1"},
            {"id": "e2", "date": "2026-03-01", "camionId": "t1", "chauffeurId": "d2"},
        ],
        TypeEnregistrement.PLANIFICATION: [
            {"id": "p1", "date": "2026-02-04", "statut": "termine", "chauffeurId": "d1"},
            {"id": "p2", "date": "2026-02-04", "statut": "attente_confirmation"},
        ],
        TypeEnregistrement.PARAMETRES: [{"id": "default", "defaultFuelPrice": 2.3}],
    })


class TestLoadSnapshot:
    def test_parses_every_collection(self, store):
        snapshot = load_snapshot(store)
        assert len(snapshot.camions) == 1
        assert snapshot.entrees[0].date == date(2026, 2, 4)
        assert snapshot.planifications[1].statut is StatutPlanification.ATTENTE_CONFIRMATION
        assert snapshot.parametres.default_fuel_price == 2.3

    def test_empty_store(self):
        snapshot = load_snapshot(InMemoryRecordStore())
        assert snapshot.entrees == ()
        assert snapshot.parametres.default_fuel_price == 2.0

    def test_lookups(self, store):
        snapshot = load_snapshot(store)
        assert snapshot.camion("truck_8565_TU_257").id == "t1"
        assert snapshot.chauffeur("d1").nom == "CHOKAIRI"


class TestScopedEntries:
    def test_financial_entries(self, store):
        snapshot = load_snapshot(store)
        assert [e.id for e in snapshot.entrees_financieres()] == ["e1", "e2", "p1"]
        assert [e.id for e in snapshot.entrees_financieres(True)] == ["e1", "e2", "p1", "p2"]

    def test_driver_scope(self, store):
        snapshot = load_snapshot(store)
        assert [e.id for e in snapshot.entrees_financieres(driver_id="d1")] == ["e1", "p1"]

    def test_day_and_month(self, store):
        snapshot = load_snapshot(store)
        assert [e.id for e in snapshot.entrees_du_jour("2026-02-04")] == ["e1", "p1"]
        assert [e.id for e in snapshot.entrees_du_mois(2026, 3)] == ["e2"]


class TestSnapshotProvider:
    def test_snapshot_is_reused_until_invalidated(self, store):
        provider = SnapshotProvider(store)
        first = provider.get()
        store.upsert(TypeEnregistrement.ENTREE, {"id": "e3", "date": "2026-02-05"})
        assert provider.get() is first
        provider.invalidate()
        assert len(provider.get().entrees) == 3

    def test_refresh(self, store):
        provider = SnapshotProvider(store)
        first = provider.get()
        assert provider.refresh() is not first

    def test_invalidation_clears_kpi_cache(self, store):
        cache = InMemoryCacheAdapter()
        cache.set(f"{KPI_CACHE_PREFIX}2026-02-04:all", {"total_km": 1})
        cache.set("other", 1)
        SnapshotProvider(store, cache).invalidate()
        assert cache.get(f"{KPI_CACHE_PREFIX}2026-02-04:all") is None
        assert cache.get("other") == 1
