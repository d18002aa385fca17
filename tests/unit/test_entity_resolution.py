"""Tests for domain.entity_resolution — id lookup with legacy fallback."""

from domain.entity_resolution import (
    driver_name,
    index_camions,
    index_chauffeurs,
    legacy_value,
)
from domain.models import Camion, Chauffeur

CAMIONS = [Camion(id="t1", matricule="8565 TU 257"), Camion(id="t2", matricule="8563 TU 257")]
CHAUFFEURS = [Chauffeur(id="d9", nom="LASSAD AMRI")]


class TestLegacyValue:
    def test_decodes_underscores(self):
        assert legacy_value("truck_8565_TU_257", "truck_") == "8565 TU 257"

    def test_not_legacy(self):
        assert legacy_value("t1", "truck_") is None
        assert legacy_value(None, "truck_") is None


class TestReferenceIndex:
    def test_by_id(self):
        assert index_camions(CAMIONS).get("t2").matricule == "8563 TU 257"

    def test_legacy_truck_id(self):
        assert index_camions(CAMIONS).get("truck_8565_TU_257").id == "t1"

    def test_legacy_driver_id(self):
        assert index_chauffeurs(CHAUFFEURS).get("driver_LASSAD_AMRI").id == "d9"

    def test_unknown(self):
        index = index_camions(CAMIONS)
        assert index.get("t99") is None
        assert index.get("truck_0000_TU_0") is None
        assert index.get(None) is None
        assert "t99" not in index

    def test_keeps_input_order(self):
        index = index_camions(CAMIONS)
        assert [c.id for c in index.values()] == ["t1", "t2"]
        assert len(index) == 2

    def test_indexing_an_index_is_a_no_op(self):
        index = index_camions(CAMIONS)
        assert index_camions(index) is index


class TestDriverName:
    def test_known(self):
        assert driver_name(CHAUFFEURS, "d9") == "LASSAD AMRI"

    def test_unknown_default(self):
        assert driver_name(CHAUFFEURS, "d1") == "Inconnu"
        assert driver_name(CHAUFFEURS, "d1", default="-") == "-"
