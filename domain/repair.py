"""Domain entry repair — pure functions, zero external dependencies.

Spreadsheet imports left trips with legacy truck/driver ids, missing display
names, and sometimes two rows for the same truck and day. The canonical id
scheme for imported trips is ``entry_<YYYY-MM-DD>_t<N>``.

Only stdlib and domain imports allowed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

from domain.entity_resolution import (
    LEGACY_TRUCK_PREFIX,
    index_camions,
    index_chauffeurs,
    legacy_value,
)

CANONICAL_ENTRY_ID = re.compile(r"^entry_\d{4}-\d{2}-\d{2}_t\d+$")


@dataclass(frozen=True)
class Reparation:
    """Planned changes: trips to rewrite and trip ids to delete."""

    a_mettre_a_jour: list = field(default_factory=list)
    a_supprimer: list = field(default_factory=list)


def repair_entry(entree, camions, chauffeurs):
    """Return a corrected copy of a trip, or None when nothing changes."""
    camion = index_camions(camions).get(entree.camion_id)
    chauffeur = index_chauffeurs(chauffeurs).get(entree.chauffeur_id)
    changes = {}
    if camion is not None:
        if camion.id != entree.camion_id:
            changes["camion_id"] = camion.id
        if not entree.matricule:
            changes["matricule"] = camion.matricule
    if chauffeur is not None:
        if chauffeur.id != entree.chauffeur_id:
            changes["chauffeur_id"] = chauffeur.id
        if not entree.chauffeur:
            changes["chauffeur"] = chauffeur.nom
    return replace(entree, **changes) if changes else None


def _is_legacy(entree):
    return bool(legacy_value(entree.camion_id, LEGACY_TRUCK_PREFIX))


def repair_entries(entrees, camions, chauffeurs):
    """Plan the repair of a whole trip set.

    Only imported trips (canonical id or legacy truck id) take part in
    deduplication: for one (date, truck), the canonical-id trip is kept,
    otherwise the first one seen. Trips entered by hand are never deleted,
    several trips per truck and day being legitimate.
    """
    camions = index_camions(camions)
    chauffeurs = index_chauffeurs(chauffeurs)
    repaired = {}
    kept = {}
    a_supprimer = []
    for entree in entrees:
        corrigee = repair_entry(entree, camions, chauffeurs)
        if corrigee is not None:
            repaired[entree.id] = corrigee
        if not (CANONICAL_ENTRY_ID.match(entree.id) or _is_legacy(entree)):
            continue
        courante = corrigee or entree
        key = (courante.date, courante.camion_id)
        existing = kept.get(key)
        if existing is None:
            kept[key] = courante
        elif CANONICAL_ENTRY_ID.match(courante.id) and not CANONICAL_ENTRY_ID.match(existing.id):
            a_supprimer.append(existing.id)
            kept[key] = courante
        else:
            a_supprimer.append(courante.id)

    deleted = set(a_supprimer)
    return Reparation(
        a_mettre_a_jour=[e for i, e in repaired.items() if i not in deleted],
        a_supprimer=a_supprimer,
    )
