"""Domain planification workflow — pure functions, zero external dependencies.

    planifie ──(time elapsed)──> en_cours_chargement
    planifie | en_cours_chargement ──(4 start photos)──> en_cours
    en_cours ──(4 end photos)──> attente_confirmation
    attente_confirmation ──(admin)──> termine
    any non-terminal ──(admin)──> annule

A refused transition is not an error: the planification keeps its status and
the returned ``ResultatTransition`` says why.

Only stdlib and domain imports allowed.
"""

from __future__ import annotations

from datetime import datetime, time

from domain.errors import TransitionError
from domain.models import ResultatTransition, Role, StatutPlanification

PHOTO_SLOTS = ("dashboard", "full_truck", "document", "cargo")

TERMINAL = frozenset({StatutPlanification.TERMINE, StatutPlanification.ANNULE})

_DEPART = frozenset({StatutPlanification.PLANIFIE, StatutPlanification.EN_COURS_CHARGEMENT})


def missing_photos(photos):
    """Names of the photo slots still empty in a bundle (all of them if None)."""
    if photos is None:
        return list(PHOTO_SLOTS)
    return [slot for slot in PHOTO_SLOTS if not getattr(photos, slot)]


def _refuse(plan, motif, **details):
    return ResultatTransition(
        accepte=False,
        statut_initial=plan.statut,
        statut=plan.statut,
        motif=motif,
        details=details,
    )


def _accept(plan, cible, motif):
    initial = plan.statut
    plan.statut = cible
    return ResultatTransition(accepte=True, statut_initial=initial, statut=cible, motif=motif)


def start_trip(plan, photos):
    """Driver confirms departure with the four start photos."""
    if plan.statut not in _DEPART:
        return _refuse(plan, "Le voyage n'est pas en attente de depart")
    manquantes = missing_photos(photos)
    if manquantes:
        return _refuse(plan, "Photos de depart incompletes", manquantes=manquantes)
    plan.photos_debut = photos
    return _accept(plan, StatutPlanification.EN_COURS, "Voyage demarre")


def finish_trip(plan, photos):
    """Driver confirms arrival with the four end photos; admin review follows."""
    if plan.statut is not StatutPlanification.EN_COURS:
        return _refuse(plan, "Le voyage n'est pas en cours")
    manquantes = missing_photos(photos)
    if manquantes:
        return _refuse(plan, "Photos d'arrivee incompletes", manquantes=manquantes)
    plan.photos_fin = photos
    return _accept(plan, StatutPlanification.ATTENTE_CONFIRMATION, "En attente de confirmation")


def confirm_trip(plan, role):
    """Admin validates a trip awaiting confirmation."""
    if role is not Role.ADMIN:
        return _refuse(plan, "Confirmation reservee a l'administrateur")
    if plan.statut is not StatutPlanification.ATTENTE_CONFIRMATION:
        return _refuse(plan, "Le voyage n'attend pas de confirmation")
    return _accept(plan, StatutPlanification.TERMINE, "Voyage termine")


def cancel_trip(plan, role):
    """Admin cancels any trip that has not reached a terminal status."""
    if role is not Role.ADMIN:
        return _refuse(plan, "Annulation reservee a l'administrateur")
    if plan.statut in TERMINAL:
        return _refuse(plan, "Le voyage est deja clos")
    return _accept(plan, StatutPlanification.ANNULE, "Voyage annule")


def scheduled_at(plan):
    """Scheduled departure; a plan without time starts at the beginning of its day."""
    return datetime.combine(plan.date, plan.heure_depart or time.min)


def refresh_loading_status(plan, now):
    """Time-triggered move from ``planifie`` to ``en_cours_chargement``."""
    if plan.statut is not StatutPlanification.PLANIFIE:
        return _refuse(plan, "Statut non concerne")
    if now < scheduled_at(plan):
        return _refuse(plan, "Heure de depart non atteinte")
    return _accept(plan, StatutPlanification.EN_COURS_CHARGEMENT, "Chargement en cours")


def refresh_loading_statuses(plans, now):
    """Periodic check over many plans; returns the plans whose status changed."""
    return [plan for plan in plans if refresh_loading_status(plan, now).accepte]


def apply_transition(plan, cible, role, photos=None):
    """Dispatch a transition request to the matching workflow step.

    Raises:
        TransitionError: ``cible`` is not a status reachable by request.
    """
    if not isinstance(cible, StatutPlanification):
        try:
            cible = StatutPlanification(cible)
        except ValueError as exc:
            raise TransitionError(f"Statut inconnu: {cible!r}") from exc
    if cible is StatutPlanification.EN_COURS:
        return start_trip(plan, photos)
    if cible is StatutPlanification.ATTENTE_CONFIRMATION:
        return finish_trip(plan, photos)
    if cible is StatutPlanification.TERMINE:
        return confirm_trip(plan, role)
    if cible is StatutPlanification.ANNULE:
        return cancel_trip(plan, role)
    raise TransitionError(f"Transition vers {cible.value} non demandable")


def is_financially_included(statut, include_awaiting_confirmation=False):
    """Whether trips in ``statut`` feed revenue and cost KPIs."""
    if statut is StatutPlanification.TERMINE:
        return True
    if statut is StatutPlanification.ATTENTE_CONFIRMATION:
        return include_awaiting_confirmation
    return False


def financial_entries(entrees, planifications, include_awaiting_confirmation=False):
    """Completed trips plus planifications whose status makes their figures real."""
    return list(entrees) + [
        plan for plan in planifications
        if is_financially_included(plan.statut, include_awaiting_confirmation)
    ]
