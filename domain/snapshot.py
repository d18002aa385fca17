"""Caller-owned, immutable view of the fleet records.

The analytics functions never read the store themselves: a ``Snapshot`` is
loaded once, passed in, and replaced when the ``SnapshotProvider`` is
invalidated after a write.

Only stdlib and domain imports allowed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from domain.analytics.flotte import entries_for_day, entries_for_month, scope_to_driver
from domain.entity_resolution import index_camions, index_chauffeurs
from domain.models import Parametres, TypeEnregistrement
from domain.normalization import (
    parse_camion,
    parse_chauffeur,
    parse_entree,
    parse_parametres,
    parse_planification,
)
from domain.planification import financial_entries

KPI_CACHE_PREFIX = "kpi:"


@dataclass(frozen=True)
class Snapshot:
    """Parsed records at one point in time."""

    camions: tuple = ()
    chauffeurs: tuple = ()
    entrees: tuple = ()
    planifications: tuple = ()
    parametres: Parametres = field(default_factory=Parametres)

    @cached_property
    def index_camions(self):
        return index_camions(self.camions)

    @cached_property
    def index_chauffeurs(self):
        return index_chauffeurs(self.chauffeurs)

    def camion(self, ref):
        return self.index_camions.get(ref)

    def chauffeur(self, ref):
        return self.index_chauffeurs.get(ref)

    def entrees_financieres(self, include_awaiting_confirmation=False, driver_id=None):
        """Trips that feed financial KPIs, restricted to a driver when given."""
        entrees = financial_entries(
            self.entrees, self.planifications, include_awaiting_confirmation
        )
        return scope_to_driver(entrees, driver_id)

    def entrees_du_jour(self, jour, include_awaiting_confirmation=False, driver_id=None):
        return entries_for_day(
            self.entrees_financieres(include_awaiting_confirmation, driver_id), jour
        )

    def entrees_du_mois(self, annee, mois, include_awaiting_confirmation=False, driver_id=None):
        return entries_for_month(
            self.entrees_financieres(include_awaiting_confirmation, driver_id), annee, mois
        )


def load_snapshot(store):
    """Read every collection through the parse boundary.

    Raises:
        RecordStoreError: propagated from the store.
    """
    settings = store.get_by_id(TypeEnregistrement.PARAMETRES, "default")
    return Snapshot(
        camions=tuple(parse_camion(r) for r in store.get_all(TypeEnregistrement.CAMION)),
        chauffeurs=tuple(parse_chauffeur(r) for r in store.get_all(TypeEnregistrement.CHAUFFEUR)),
        entrees=tuple(parse_entree(r) for r in store.get_all(TypeEnregistrement.ENTREE)),
        planifications=tuple(
            parse_planification(r) for r in store.get_all(TypeEnregistrement.PLANIFICATION)
        ),
        parametres=parse_parametres(settings),
    )


class SnapshotProvider:
    """Holds the current snapshot for one session and reloads it on demand."""

    def __init__(self, store, cache=None):
        self._store = store
        self._cache = cache
        self._snapshot = None

    def get(self):
        if self._snapshot is None:
            self._snapshot = load_snapshot(self._store)
        return self._snapshot

    def refresh(self):
        self.invalidate()
        return self.get()

    def invalidate(self):
        """Drop the snapshot and every KPI computed from it."""
        self._snapshot = None
        if self._cache is not None:
            self._cache.invalidate(KPI_CACHE_PREFIX)
