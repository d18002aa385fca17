"""Tests for domain.normalization — the raw record parse boundary."""

from datetime import date, datetime, time

import pytest

from domain.models import (
    Entree,
    Parametres,
    PhotosVoyage,
    Planification,
    StatutPlanification,
    TypeCamion,
)
from domain.normalization import (
    camel,
    parse_camion,
    parse_chauffeur,
    parse_entree,
    parse_journal,
    parse_parametres,
    parse_planification,
    to_amount,
    to_optional_amount,
    to_record,
    to_timestamp,
)


class TestToAmount:
    @pytest.mark.parametrize("raw,expected", [
        (None, 0.0),
        ("", 0.0),
        ("abc", 0.0),
        (True, 0.0),
        (-12.0, 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        ("12,5", 12.5),
        (" 1 200.5 ", 1200.5),
        (42, 42.0),
        ("0", 0.0),
    ])
    def test_coercion(self, raw, expected):
        assert to_amount(raw) == expected

    def test_optional_keeps_absence(self):
        assert to_optional_amount(None) is None
        assert to_optional_amount("  ") is None
        assert to_optional_amount(0) == 0.0
        assert to_optional_amount("2,1") == 2.1


class TestToTimestamp:
    def test_zulu_is_converted_to_naive_utc(self):
        assert to_timestamp("2026-02-04T08:30:00Z") == datetime(2026, 2, 4, 8, 30)

    def test_offset_is_converted(self):
        assert to_timestamp("2026-02-04T09:30:00+01:00") == datetime(2026, 2, 4, 8, 30)

    def test_invalid(self):
        assert to_timestamp("hier") is None
        assert to_timestamp(None) is None


class TestParseCamion:
    def test_full_record(self):
        camion = parse_camion({
            "id": "t1", "matricule": "8565 TU 257", "type": "BENNE",
            "chargesFixes": 400, "montantAssurance": "32", "montantTaxe": 20,
            "chargePersonnel": 80,
        })
        assert camion.type is TypeCamion.BENNE
        assert camion.charges_journalieres == 532.0

    def test_defaults(self):
        camion = parse_camion({"id": "t9"})
        assert camion.matricule == ""
        assert camion.type is TypeCamion.PLATEAU
        assert camion.charges_journalieres == 0.0

    def test_unknown_type_falls_back(self):
        assert parse_camion({"id": "t9", "type": "REMORQUE"}).type is TypeCamion.PLATEAU


class TestParseEntree:
    def test_camel_case_fields(self):
        entree = parse_entree({
            "id": "e1", "date": "2026-02-04", "camionId": "t1", "chauffeurId": "d1",
            "kilometrage": "250", "quantiteGasoil": 80, "prixGasoilLitre": 2.1,
            "prixLivraison": "1 100", "createdAt": "2026-02-04T07:00:00Z",
        })
        assert entree.date == date(2026, 2, 4)
        assert entree.kilometrage == 250.0
        assert entree.prix_gasoil_litre == 2.1
        assert entree.prix_livraison == 1100.0
        assert entree.created_at == datetime(2026, 2, 4, 7, 0)

    def test_missing_price_stays_none(self):
        assert parse_entree({"id": "e1", "date": "2026-02-04"}).prix_gasoil_litre is None

    def test_zero_price_is_kept(self):
        assert parse_entree({"id": "e1", "prixGasoilLitre": 0}).prix_gasoil_litre == 0.0

    def test_missing_date(self):
        assert parse_entree({"id": "e1"}).date == date.min

    def test_negative_values_clamped(self):
        entree = parse_entree({"id": "e1", "maintenance": -50, "kilometrage": "n/a"})
        assert entree.maintenance == 0.0
        assert entree.kilometrage == 0.0


class TestParsePlanification:
    def test_status_time_and_photos(self):
        plan = parse_planification({
            "id": "p1", "date": "2026-02-04", "statut": "en_cours",
            "heureDepart": "07:45", "estimatedDistance": "320",
            "photosDebut": {"dashboard": "a", "fullTruck": "b", "document": "c", "cargo": "d"},
        })
        assert isinstance(plan, Planification)
        assert plan.statut is StatutPlanification.EN_COURS
        assert plan.heure_depart == time(7, 45)
        assert plan.distance_estimee == 320.0
        assert plan.photos_debut.est_complet
        assert plan.photos_fin is None

    def test_unknown_status(self):
        assert parse_planification({"id": "p1", "statut": "?"}).statut is StatutPlanification.PLANIFIE


class TestParseParametres:
    def test_missing_document(self):
        assert parse_parametres(None) == Parametres()

    def test_zero_price_falls_back(self):
        assert parse_parametres({"defaultFuelPrice": 0}).default_fuel_price == 2.0

    def test_values(self):
        parametres = parse_parametres({"defaultFuelPrice": "2,35", "currency": "EUR"})
        assert parametres.default_fuel_price == 2.35
        assert parametres.currency == "EUR"


class TestParseOthers:
    def test_chauffeur(self):
        chauffeur = parse_chauffeur({"id": "d1", "nom": " CHOKAIRI ", "camionId": "t1"})
        assert chauffeur.nom == "CHOKAIRI"
        assert chauffeur.camion_id == "t1"

    def test_journal_date_from_timestamp(self):
        entry = parse_journal({"action": "CREATE", "timestamp": "2026-02-04T10:00:00"})
        assert entry.date == date(2026, 2, 4)


class TestToRecord:
    def test_camel_helper(self):
        assert camel("prix_gasoil_litre") == "prixGasoilLitre"

    def test_entree_document_shape(self):
        record = to_record(Entree(id="e1", date=date(2026, 2, 4), camion_id="t1",
                                  quantite_gasoil=10.0))
        assert record["date"] == "2026-02-04"
        assert record["camionId"] == "t1"
        assert record["quantiteGasoil"] == 10.0
        assert "prixGasoilLitre" not in record

    def test_planification_survives_a_round_trip(self):
        plan = Planification(
            id="p1", date=date(2026, 2, 4), statut=StatutPlanification.EN_COURS,
            heure_depart=time(8, 0), distance_estimee=120.0,
            photos_debut=PhotosVoyage(dashboard="a", full_truck="b", document="c", cargo="d"),
        )
        record = to_record(plan)
        assert record["statut"] == "en_cours"
        assert record["estimatedDistance"] == 120.0
        assert record["photosDebut"]["fullTruck"] == "b"
        assert parse_planification(record) == plan
