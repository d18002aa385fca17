#!/usr/bin/env python3
"""Seed the default fleet and a week of demo trips.

Usage:
    PYTHONPATH=. python scripts/load_demo_data.py [--days 7] [--database-url URL]

Trucks, drivers and settings are only written to empty collections. Demo
trips use the canonical import ids (``entry_<date>_t<N>``), so running the
script twice overwrites the same trips instead of duplicating them.
"""
import argparse
import os
import random
import sys
from datetime import date, datetime, time, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fleettrack.bootstrap import FleetTrack
from fleettrack.config import configure_logging, load_config
from fleettrack.data.seed import DEFAULT_DRIVERS
from domain.models import TypeEnregistrement

# (origine gouvernorat, delegation, destination gouvernorat, delegation, km)
ROUTES = [
    ("Sfax", "Sfax Ville", "Tunis", "Bab Bhar", 270),
    ("Sfax", "Sakiet Ezzit", "Sousse", "Msaken", 120),
    ("Gabes", "Gabes Ville", "Sfax", "Sfax Ville", 140),
    ("Tunis", "La Marsa", "Bizerte", "Menzel Bourguiba", 75),
]


def demo_entries(jour, rng):
    """One trip per assigned driver, a second one for some trucks."""
    entries = []
    for driver in DEFAULT_DRIVERS:
        if rng.random() < 0.3:
            continue
        truck_number = driver["camionId"][1:]
        for trip in range(2 if rng.random() < 0.2 else 1):
            orig_gov, orig_del, gov, deleg, km = rng.choice(ROUTES)
            suffix = "" if trip == 0 else f"_{trip + 1}"
            entries.append({
                "id": f"entry_{jour.isoformat()}_t{truck_number}{suffix}",
                "date": jour.isoformat(),
                "camionId": driver["camionId"],
                "chauffeurId": driver["id"],
                "origineGouvernorat": orig_gov,
                "origineDelegation": orig_del,
                "gouvernorat": gov,
                "delegation": deleg,
                "kilometrage": km,
                "quantiteGasoil": round(km * rng.uniform(0.28, 0.36), 1),
                "prixLivraison": round(km * rng.uniform(2.4, 3.6)),
                "maintenance": rng.choice([0, 0, 0, 25, 60]),
                "createdAt": datetime.combine(jour, time(7 + 6 * trip)).isoformat(),
                "source": "demo",
            })
    return entries


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--days", type=int, default=7)
    parser.add_argument("--database-url")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    config = load_config()
    if args.database_url:
        config["database"]["url"] = args.database_url
    configure_logging(config)

    app = FleetTrack.from_config(config)
    counts = app.initialize(repair=False)

    rng = random.Random(args.seed)
    today = date.today()
    written = 0
    for offset in range(args.days):
        for entry in demo_entries(today - timedelta(days=offset), rng):
            app.store.upsert(TypeEnregistrement.ENTREE, entry)
            written += 1
    app.service.log_activity("IMPORT", "entry", "demo", {"entriesCount": written})
    app.provider.invalidate()

    kpis = app.kpis(today)
    print(f"Seeded: {counts}")
    print(f"Demo trips written: {written}")
    print(f"Today: {kpis['active_trucks']} trucks, result {kpis['total_result']:.2f} "
          f"{config['pricing']['currency']}")


if __name__ == "__main__":
    main()
