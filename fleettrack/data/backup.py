"""Backup export, restore and reset of the whole record store."""

from __future__ import annotations

import logging
from datetime import datetime

from fleettrack.data.seed import write_defaults
from domain.models import TypeEnregistrement
from domain.normalization import (
    parse_camion,
    parse_chauffeur,
    parse_entree,
    parse_parametres,
    parse_planification,
    to_record,
)

logger = logging.getLogger(__name__)

# Backup key -> (collection, parser)
_SECTIONS = {
    "trucks": (TypeEnregistrement.CAMION, parse_camion),
    "drivers": (TypeEnregistrement.CHAUFFEUR, parse_chauffeur),
    "entries": (TypeEnregistrement.ENTREE, parse_entree),
    "planifications": (TypeEnregistrement.PLANIFICATION, parse_planification),
}


def export_data(store, journal=None, service=None, clock=datetime.now) -> dict:
    """Return every record, the settings and the activity log as a JSON-ready dict."""
    exported_at = clock().isoformat()
    if service is not None:
        service.log_activity("EXPORT", "all", "backup", {"timestamp": exported_at})

    data = {key: store.get_all(type_) for key, (type_, _) in _SECTIONS.items()}
    data["settings"] = to_record(
        parse_parametres(store.get_by_id(TypeEnregistrement.PARAMETRES, "default"))
    )
    data["logs"] = [to_record(e) for e in journal.list_all()] if journal is not None else []
    data["exportDate"] = exported_at
    return data


def import_data(store, data: dict, service=None, provider=None) -> dict:
    """Upsert every record of a backup, normalized through the parse boundary.

    Records without an id are skipped. Existing records not present in the
    backup are kept.

    Returns:
        Imported record count per section.
    """
    counts = {}
    for key, (type_, parser) in _SECTIONS.items():
        records = [r for r in (data.get(key) or []) if r.get("id")]
        for raw in records:
            store.upsert(type_, to_record(parser(raw)))
        counts[key] = len(records)

    if data.get("settings"):
        store.upsert(TypeEnregistrement.PARAMETRES, to_record(parse_parametres(data["settings"])))

    if service is not None:
        service.log_activity("IMPORT", "all", "restore", {
            "trucksCount": counts["trucks"],
            "driversCount": counts["drivers"],
            "entriesCount": counts["entries"],
        })
    if provider is not None:
        provider.invalidate()
    logger.info("Imported backup: %s", counts)
    return counts


def reset_data(store, service=None, provider=None, clock=datetime.now) -> int:
    """Delete every trip and restore the default trucks, drivers and settings.

    Returns:
        Number of trips deleted.
    """
    if service is not None:
        service.log_activity("RESET", "all", "reset", {"timestamp": clock().isoformat()})

    entries = store.get_all(TypeEnregistrement.ENTREE)
    for raw in entries:
        store.delete(TypeEnregistrement.ENTREE, raw["id"])
    write_defaults(store)

    if provider is not None:
        provider.invalidate()
    logger.info("Reset data: %d entries deleted", len(entries))
    return len(entries)
