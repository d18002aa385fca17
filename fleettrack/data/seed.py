"""Default fleet: the trucks, drivers and settings an empty store starts with."""

from __future__ import annotations

import logging

from domain.models import TypeEnregistrement

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {"id": "default", "defaultFuelPrice": 2, "currency": "TND"}

# (id, matricule, type, chargesFixes, montantAssurance, montantTaxe, chargePersonnel)
_TRUCKS = [
    ("t1", "8565 TU 257", "PLATEAU", 400, 32, 20, 80),
    ("t2", "8563 TU 257", "PLATEAU", 400, 32, 20, 80),
    ("t3", "5305 TU 236", "PLATEAU", 80, 20, 20, 80),
    ("t4", "924 TU 98", "PLATEAU", 80, 20, 20, 80),
    ("t5", "6980 TU 101", "PLATEAU", 80, 20, 20, 80),
    ("t6", "7775 TU 252", "PLATEAU", 400, 20, 20, 80),
    ("t7", "4176 TU 250", "PLATEAU", 400, 32, 20, 80),
    ("t8", "3380 TU 104", "PLATEAU", 80, 20, 20, 80),
    ("t9", "446 TU 228", "PLATEAU", 80, 20, 20, 80),
    ("t10", "7243 TU 75", "PLATEAU", 80, 20, 20, 80),
    ("t11", "4188 TU 80", "PLATEAU", 80, 20, 20, 80),
    ("t12", "2318 TU 155", "BENNE", 80, 20, 20, 80),
    ("t13", "788 TU 99", "BENNE", 80, 20, 20, 80),
    ("t14", "8564 TU 257", "BENNE", 400, 32, 20, 80),
    ("t15", "8566 TU 257", "BENNE", 400, 32, 20, 80),
]

_DRIVERS = [
    ("d1", "CHOKAIRI", "t1"),
    ("d2", "LASSAD CHATAOUI", "t2"),
    ("d3", "HAMZA", "t3"),
    ("d4", "IKRAMI", "t4"),
    ("d5", "ABDELBARI", "t5"),
    ("d6", "JAMIL", "t6"),
    ("d7", "HEDI", "t7"),
    ("d8", "MALEK", "t8"),
    ("d9", "LASSAD AMRI", "t10"),
    ("d10", "SAMI", "t11"),
    ("d11", "KAMEL CH", "t12"),
    ("d12", "KAMEL ZAY", "t13"),
    ("d13", "CHOKRI THAMER", "t14"),
    ("d14", "HSAN REBII", "t15"),
]

DEFAULT_TRUCKS = [
    {
        "id": id_, "matricule": matricule, "type": type_,
        "chargesFixes": charges, "montantAssurance": assurance,
        "montantTaxe": taxe, "chargePersonnel": personnel,
    }
    for id_, matricule, type_, charges, assurance, taxe, personnel in _TRUCKS
]

DEFAULT_DRIVERS = [
    {"id": id_, "nom": nom, "camionId": camion_id}
    for id_, nom, camion_id in _DRIVERS
]


def write_defaults(store) -> None:
    """Overwrite trucks, drivers and settings with the default fleet."""
    for truck in DEFAULT_TRUCKS:
        store.upsert(TypeEnregistrement.CAMION, truck)
    for driver in DEFAULT_DRIVERS:
        store.upsert(TypeEnregistrement.CHAUFFEUR, driver)
    store.upsert(TypeEnregistrement.PARAMETRES, DEFAULT_SETTINGS)


def seed_defaults(store, service=None, settings: dict | None = None) -> dict:
    """Populate each empty collection with its defaults.

    Collections that already hold records are left alone. *settings*
    overrides the default settings document when one is written.

    Returns:
        {"trucks": n, "drivers": n, "settings": n} records written.
    """
    counts = {"trucks": 0, "drivers": 0, "settings": 0}

    if not store.get_all(TypeEnregistrement.CAMION):
        for truck in DEFAULT_TRUCKS:
            store.upsert(TypeEnregistrement.CAMION, truck)
        counts["trucks"] = len(DEFAULT_TRUCKS)

    if not store.get_all(TypeEnregistrement.CHAUFFEUR):
        for driver in DEFAULT_DRIVERS:
            store.upsert(TypeEnregistrement.CHAUFFEUR, driver)
        counts["drivers"] = len(DEFAULT_DRIVERS)

    if store.get_by_id(TypeEnregistrement.PARAMETRES, "default") is None:
        document = {**DEFAULT_SETTINGS, **(settings or {}), "id": "default"}
        store.upsert(TypeEnregistrement.PARAMETRES, document)
        counts["settings"] = 1

    if service is not None:
        for entity_type, count in counts.items():
            if count:
                entity_id = "default" if entity_type == "settings" else "all"
                service.log_activity("INIT", entity_type, entity_id, {"count": count})
    if any(counts.values()):
        logger.info("Seeded defaults: %s", counts)
    return counts
