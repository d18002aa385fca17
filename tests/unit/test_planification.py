"""Tests for domain.planification — photo-gated status workflow."""

from datetime import date, datetime, time

import pytest

from domain.errors import TransitionError
from domain.models import Entree, PhotosVoyage, Planification, Role, StatutPlanification
from domain.planification import (
    apply_transition,
    cancel_trip,
    confirm_trip,
    financial_entries,
    finish_trip,
    is_financially_included,
    missing_photos,
    refresh_loading_status,
    refresh_loading_statuses,
    start_trip,
)

PHOTOS = PhotosVoyage(dashboard="d.jpg", full_truck="t.jpg", document="doc.jpg", cargo="c.jpg")


def _plan(statut=StatutPlanification.PLANIFIE, **fields):
    return Planification(id="p1", date=date(2026, 2, 4), camion_id="t1", statut=statut, **fields)


class TestMissingPhotos:
    def test_complete_bundle(self):
        assert missing_photos(PHOTOS) == []
        assert PHOTOS.est_complet

    def test_no_bundle(self):
        assert missing_photos(None) == ["dashboard", "full_truck", "document", "cargo"]

    def test_partial_bundle(self):
        assert missing_photos(PhotosVoyage(dashboard="d.jpg", cargo="c.jpg")) == [
            "full_truck", "document",
        ]


class TestStartTrip:
    @pytest.mark.parametrize("statut", [
        StatutPlanification.PLANIFIE, StatutPlanification.EN_COURS_CHARGEMENT,
    ])
    def test_start_with_four_photos(self, statut):
        plan = _plan(statut)
        resultat = start_trip(plan, PHOTOS)
        assert resultat.accepte
        assert resultat.statut_initial is statut
        assert plan.statut is StatutPlanification.EN_COURS
        assert plan.photos_debut == PHOTOS

    def test_three_photos_are_refused(self):
        plan = _plan()
        resultat = start_trip(plan, PhotosVoyage(dashboard="d", full_truck="t", document="x"))
        assert not resultat.accepte
        assert resultat.details["manquantes"] == ["cargo"]
        assert plan.statut is StatutPlanification.PLANIFIE
        assert plan.photos_debut is None

    def test_already_running(self):
        plan = _plan(StatutPlanification.EN_COURS)
        assert not start_trip(plan, PHOTOS).accepte


class TestFinishAndConfirm:
    def test_finish_goes_to_awaiting_confirmation(self):
        plan = _plan(StatutPlanification.EN_COURS)
        assert finish_trip(plan, PHOTOS).accepte
        assert plan.statut is StatutPlanification.ATTENTE_CONFIRMATION
        assert plan.photos_fin == PHOTOS

    def test_finish_without_photos(self):
        plan = _plan(StatutPlanification.EN_COURS)
        assert not finish_trip(plan, None).accepte
        assert plan.statut is StatutPlanification.EN_COURS

    def test_only_admin_confirms(self):
        plan = _plan(StatutPlanification.ATTENTE_CONFIRMATION)
        assert not confirm_trip(plan, Role.CHAUFFEUR).accepte
        assert plan.statut is StatutPlanification.ATTENTE_CONFIRMATION
        assert confirm_trip(plan, Role.ADMIN).accepte
        assert plan.statut is StatutPlanification.TERMINE

    def test_confirm_requires_awaiting_status(self):
        plan = _plan(StatutPlanification.EN_COURS)
        assert not confirm_trip(plan, Role.ADMIN).accepte


class TestCancel:
    @pytest.mark.parametrize("statut", [
        StatutPlanification.PLANIFIE,
        StatutPlanification.EN_COURS_CHARGEMENT,
        StatutPlanification.EN_COURS,
        StatutPlanification.ATTENTE_CONFIRMATION,
    ])
    def test_admin_cancels_open_trip(self, statut):
        plan = _plan(statut)
        assert cancel_trip(plan, Role.ADMIN).accepte
        assert plan.statut is StatutPlanification.ANNULE

    @pytest.mark.parametrize("statut", [StatutPlanification.TERMINE, StatutPlanification.ANNULE])
    def test_terminal_status_is_final(self, statut):
        plan = _plan(statut)
        assert not cancel_trip(plan, Role.ADMIN).accepte
        assert plan.statut is statut

    def test_driver_cannot_cancel(self):
        plan = _plan()
        assert not cancel_trip(plan, Role.CHAUFFEUR).accepte


class TestLoadingStatus:
    def test_due_plan_moves_to_loading(self):
        plan = _plan(heure_depart=time(8, 0))
        assert refresh_loading_status(plan, datetime(2026, 2, 4, 8, 0)).accepte
        assert plan.statut is StatutPlanification.EN_COURS_CHARGEMENT

    def test_future_plan_stays(self):
        plan = _plan(heure_depart=time(8, 0))
        assert not refresh_loading_status(plan, datetime(2026, 2, 4, 7, 59)).accepte
        assert plan.statut is StatutPlanification.PLANIFIE

    def test_only_changed_plans_returned(self):
        due = _plan()
        later = Planification(id="p2", date=date(2026, 2, 5))
        running = _plan(StatutPlanification.EN_COURS)
        changed = refresh_loading_statuses([due, later, running], datetime(2026, 2, 4, 12))
        assert changed == [due]


class TestApplyTransition:
    def test_dispatch_by_target(self):
        plan = _plan()
        assert apply_transition(plan, "en_cours", Role.CHAUFFEUR, PHOTOS).accepte
        assert apply_transition(plan, StatutPlanification.ATTENTE_CONFIRMATION,
                                Role.CHAUFFEUR, PHOTOS).accepte
        assert apply_transition(plan, "termine", Role.ADMIN).accepte
        assert plan.statut is StatutPlanification.TERMINE

    def test_unknown_status(self):
        with pytest.raises(TransitionError):
            apply_transition(_plan(), "livre", Role.ADMIN)

    def test_status_not_requestable(self):
        with pytest.raises(TransitionError):
            apply_transition(_plan(), StatutPlanification.PLANIFIE, Role.ADMIN)


class TestFinancialInclusion:
    def test_completed_trips_count(self):
        assert is_financially_included(StatutPlanification.TERMINE)

    def test_awaiting_confirmation_is_configurable(self):
        assert not is_financially_included(StatutPlanification.ATTENTE_CONFIRMATION)
        assert is_financially_included(StatutPlanification.ATTENTE_CONFIRMATION, True)

    @pytest.mark.parametrize("statut", [
        StatutPlanification.PLANIFIE, StatutPlanification.EN_COURS, StatutPlanification.ANNULE,
    ])
    def test_open_or_cancelled_trips_do_not_count(self, statut):
        assert not is_financially_included(statut, True)

    def test_financial_entries(self):
        entree = Entree(id="e1", date=date(2026, 2, 4))
        plans = [
            Planification(id="p1", date=date(2026, 2, 4), statut=StatutPlanification.TERMINE),
            Planification(id="p2", date=date(2026, 2, 4),
                          statut=StatutPlanification.ATTENTE_CONFIRMATION),
            Planification(id="p3", date=date(2026, 2, 4), statut=StatutPlanification.ANNULE),
        ]
        assert [e.id for e in financial_entries([entree], plans)] == ["e1", "p1"]
        assert [e.id for e in financial_entries([entree], plans, True)] == ["e1", "p1", "p2"]
