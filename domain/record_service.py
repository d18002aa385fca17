"""Domain service for record writes — ids, timestamps, audit trail, invalidation."""

from __future__ import annotations

import random
import string
import time as _time
from dataclasses import replace
from datetime import datetime

from domain.errors import RecordNotFoundError
from domain.models import JournalActivite, TypeEnregistrement
from domain.normalization import (
    parse_camion,
    parse_chauffeur,
    parse_entree,
    parse_parametres,
    parse_planification,
    to_record,
)
from domain.repair import repair_entries

_BASE36 = string.digits + string.ascii_lowercase

_ENTITY_TYPES = {
    TypeEnregistrement.CAMION: "truck",
    TypeEnregistrement.CHAUFFEUR: "driver",
    TypeEnregistrement.ENTREE: "entry",
    TypeEnregistrement.PLANIFICATION: "planification",
    TypeEnregistrement.PARAMETRES: "settings",
}


def _base36(number):
    digits = ""
    while True:
        number, rest = divmod(number, 36)
        digits = _BASE36[rest] + digits
        if number == 0:
            return digits


def generate_id():
    """``id_`` + base-36 milliseconds + 9 random base-36 characters."""
    millis = int(_time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"id_{_base36(millis)}{suffix}"


class RecordService:
    """Writes records through the store and keeps the session consistent.

    Every write stamps ``updated_at``, records an activity entry and
    invalidates the snapshot provider so the next read reflects it.
    """

    def __init__(self, store, journal=None, provider=None, clock=datetime.now):
        self._store = store
        self._journal = journal
        self._provider = provider
        self._clock = clock

    # ── Audit ──────────────────────────────────────────────────────────

    def log_activity(self, action, entity_type, entity_id, details=None):
        if self._journal is None:
            return None
        now = self._clock()
        return self._journal.record(JournalActivite(
            id=generate_id(),
            timestamp=now,
            date=now.date(),
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details or {},
        ))

    # ── Generic commands ───────────────────────────────────────────────

    def _save(self, type_enregistrement, obj, details):
        is_new = not obj.id
        changes = {"updated_at": self._clock()}
        if is_new:
            changes["id"] = generate_id()
        if hasattr(obj, "created_at") and obj.created_at is None:
            changes["created_at"] = changes["updated_at"]
        saved = replace(obj, **changes)
        self._store.upsert(type_enregistrement, to_record(saved))
        self.log_activity(
            "CREATE" if is_new else "UPDATE",
            _ENTITY_TYPES[type_enregistrement],
            saved.id,
            details(saved),
        )
        self._invalidate()
        return saved

    def _delete(self, type_enregistrement, record_id, details):
        existing = self._store.get_by_id(type_enregistrement, record_id)
        if existing is None:
            raise RecordNotFoundError(type_enregistrement, record_id)
        self._store.delete(type_enregistrement, record_id)
        self.log_activity("DELETE", _ENTITY_TYPES[type_enregistrement], record_id,
                          details(existing))
        self._invalidate()

    def _invalidate(self):
        if self._provider is not None:
            self._provider.invalidate()

    # ── Trucks ─────────────────────────────────────────────────────────

    def save_camion(self, camion):
        return self._save(
            TypeEnregistrement.CAMION, camion,
            lambda c: {"matricule": c.matricule, "type": c.type.value},
        )

    def delete_camion(self, camion_id):
        self._delete(TypeEnregistrement.CAMION, camion_id,
                     lambda r: {"matricule": r.get("matricule")})

    def get_camion(self, camion_id):
        raw = self._store.get_by_id(TypeEnregistrement.CAMION, camion_id)
        return parse_camion(raw) if raw else None

    # ── Drivers ────────────────────────────────────────────────────────

    def save_chauffeur(self, chauffeur):
        return self._save(
            TypeEnregistrement.CHAUFFEUR, chauffeur,
            lambda c: {"nom": c.nom, "camionId": c.camion_id},
        )

    def delete_chauffeur(self, chauffeur_id):
        self._delete(TypeEnregistrement.CHAUFFEUR, chauffeur_id,
                     lambda r: {"nom": r.get("nom")})

    def get_chauffeur(self, chauffeur_id):
        raw = self._store.get_by_id(TypeEnregistrement.CHAUFFEUR, chauffeur_id)
        return parse_chauffeur(raw) if raw else None

    # ── Trips ──────────────────────────────────────────────────────────

    def save_entree(self, entree):
        """Save a trip; the first save also sets ``created_at``."""
        return self._save(
            TypeEnregistrement.ENTREE, entree,
            lambda e: {
                k: v for k, v in to_record(e).items()
                if k in ("date", "camionId", "chauffeurId", "origine", "destination",
                         "kilometrage", "quantiteGasoil", "prixGasoilLitre",
                         "maintenance", "prixLivraison", "remarques")
            },
        )

    def delete_entree(self, entree_id):
        self._delete(
            TypeEnregistrement.ENTREE, entree_id,
            lambda r: {"date": r.get("date"), "destination": r.get("destination"),
                       "origine": r.get("origine")},
        )

    def get_entree(self, entree_id):
        raw = self._store.get_by_id(TypeEnregistrement.ENTREE, entree_id)
        return parse_entree(raw) if raw else None

    # ── Planifications ─────────────────────────────────────────────────

    def save_planification(self, plan):
        return self._save(
            TypeEnregistrement.PLANIFICATION, plan,
            lambda p: {"date": p.date.isoformat(), "statut": p.statut.value,
                       "camionId": p.camion_id, "chauffeurId": p.chauffeur_id},
        )

    def delete_planification(self, plan_id):
        self._delete(TypeEnregistrement.PLANIFICATION, plan_id,
                     lambda r: {"date": r.get("date"), "statut": r.get("statut")})

    def get_planification(self, plan_id):
        raw = self._store.get_by_id(TypeEnregistrement.PLANIFICATION, plan_id)
        return parse_planification(raw) if raw else None

    # ── Settings ───────────────────────────────────────────────────────

    def get_parametres(self):
        return parse_parametres(self._store.get_by_id(TypeEnregistrement.PARAMETRES, "default"))

    def save_parametres(self, parametres):
        parametres = replace(parametres, id="default")
        record = to_record(parametres)
        self._store.upsert(TypeEnregistrement.PARAMETRES, record)
        self.log_activity("UPDATE", "settings", "default", record)
        self._invalidate()
        return parametres

    # ── Maintenance ────────────────────────────────────────────────────

    def repair_entries(self, snapshot):
        """Rewrite legacy references and drop duplicate trips.

        Returns:
            (number of repaired trips, number of deleted trips)
        """
        reparation = repair_entries(snapshot.entrees, snapshot.camions, snapshot.chauffeurs)
        for entree in reparation.a_mettre_a_jour:
            self._store.upsert(TypeEnregistrement.ENTREE, to_record(entree))
        for entree_id in reparation.a_supprimer:
            self._store.delete(TypeEnregistrement.ENTREE, entree_id)
        if reparation.a_mettre_a_jour or reparation.a_supprimer:
            self.log_activity("REPAIR", "entry", "all", {
                "repaired": len(reparation.a_mettre_a_jour),
                "deleted": len(reparation.a_supprimer),
            })
            self._invalidate()
        return len(reparation.a_mettre_a_jour), len(reparation.a_supprimer)
