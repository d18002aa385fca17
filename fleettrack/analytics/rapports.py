"""Fleet reports -- pandas facade over domain/analytics/flotte.py.

Each function takes a ``Snapshot`` and returns a DataFrame ready for
display or export. Domain-pure equivalents: domain.analytics.flotte
(monthly_report, daily_summary, cost_breakdown, time_series, rank_entities,
dashboard_kpis).
"""

from __future__ import annotations

from dataclasses import asdict

import pandas as pd

from fleettrack.data.cache import get_or_compute
from domain.analytics.flotte import (
    cost_breakdown,
    daily_summary,
    dashboard_kpis,
    monthly_report,
    rank_entities,
    resolved_scope_key,
    time_series,
)
from domain.dates import format_court, format_jour, parse_jour
from domain.snapshot import KPI_CACHE_PREFIX

_CATEGORIES = {
    "gasoil": "Gasoil",
    "charges_fixes": "Charges fixes",
    "assurance": "Assurance",
    "taxe": "Taxe",
    "personnel": "Personnel",
    "maintenance": "Maintenance",
}


def _fuel_price(snapshot):
    return snapshot.parametres.default_fuel_price


def rapport_mensuel(snapshot, annee: int, mois: int, include_awaiting_confirmation=False,
                    driver_id=None) -> pd.DataFrame:
    """Per-truck monthly totals; the last row is the monthly total."""
    entrees = snapshot.entrees_financieres(include_awaiting_confirmation, driver_id)
    rapport = monthly_report(entrees, snapshot.index_camions, annee, mois, _fuel_price(snapshot))
    df = pd.DataFrame(
        [asdict(l) for l in rapport.lignes] + [asdict(rapport.totaux)],
        columns=["matricule", "total_km", "total_gasoil", "total_gasoil_cost",
                 "total_cost", "total_revenue", "result", "camion_id"],
    )
    return df.drop(columns=["camion_id"])


def resume_journalier(snapshot, jour, include_awaiting_confirmation=False,
                      driver_id=None) -> pd.DataFrame:
    entrees = snapshot.entrees_financieres(include_awaiting_confirmation)
    rows = daily_summary(entrees, snapshot.index_camions, snapshot.index_chauffeurs,
                         jour, driver_id, _fuel_price(snapshot))
    return pd.DataFrame(
        [asdict(r) for r in rows],
        columns=["entree_id", "matricule", "chauffeur", "destination", "kilometrage",
                 "quantite_gasoil", "prix_livraison", "resultat"],
    )


def repartition_couts(snapshot, annee: int | None = None, mois: int | None = None,
                      include_awaiting_confirmation=False, driver_id=None) -> pd.DataFrame:
    """Cost per category with its share of the total, in percent."""
    if annee is not None and mois is not None:
        entrees = snapshot.entrees_du_mois(annee, mois, include_awaiting_confirmation, driver_id)
    else:
        entrees = snapshot.entrees_financieres(include_awaiting_confirmation, driver_id)
    repartition = cost_breakdown(entrees, snapshot.index_camions, _fuel_price(snapshot))
    total = repartition.total
    df = pd.DataFrame(
        [(label, getattr(repartition, attr)) for attr, label in _CATEGORIES.items()],
        columns=["categorie", "montant"],
    )
    df["part_pct"] = df["montant"] / total * 100 if total > 0 else 0.0
    return df


def tendance(snapshot, anchor_date, window_days: int = 30,
             include_awaiting_confirmation=False, driver_id=None) -> pd.DataFrame:
    """Daily result over the window ending at *anchor_date*, oldest first."""
    entrees = snapshot.entrees_financieres(include_awaiting_confirmation, driver_id)
    points = time_series(entrees, snapshot.index_camions, window_days, anchor_date,
                         _fuel_price(snapshot))
    return pd.DataFrame({
        "date": [p.date for p in points],
        "label": [format_court(p.date) for p in points],
        "daily_result": [p.daily_result for p in points],
    })


def performance_camions(snapshot, annee: int | None = None, mois: int | None = None,
                        include_awaiting_confirmation=False) -> pd.DataFrame:
    """Trucks ranked by result, best first."""
    if annee is not None and mois is not None:
        entrees = snapshot.entrees_du_mois(annee, mois, include_awaiting_confirmation)
    else:
        entrees = snapshot.entrees_financieres(include_awaiting_confirmation)
    index = snapshot.index_camions

    def matricule(entree):
        camion = index.get(entree.camion_id)
        return camion.matricule if camion else entree.camion_id

    classement = rank_entities(entrees, index, matricule, resolved_scope_key(index),
                               _fuel_price(snapshot))
    return pd.DataFrame(
        [{"matricule": c.key, **asdict(c.stats)} for c in classement],
        columns=["matricule", "total_km", "total_gasoil", "total_cost", "total_revenue",
                 "result", "cost_per_km", "consumption_l100km", "trip_count",
                 "performance_pct"],
    )


def kpis_du_jour(snapshot, jour, cache=None, driver_id=None,
                 include_awaiting_confirmation=False, ttl: int = 3600) -> dict:
    """Dashboard KPIs for one day, cached until the snapshot is invalidated."""
    jour = parse_jour(jour)
    if jour is None:
        raise ValueError("jour illisible")
    key = (f"{KPI_CACHE_PREFIX}{format_jour(jour)}:{driver_id or 'all'}"
           f":{int(bool(include_awaiting_confirmation))}")

    def compute():
        entrees = snapshot.entrees_financieres(include_awaiting_confirmation)
        kpis = dashboard_kpis(entrees, snapshot.index_camions, jour, driver_id,
                              _fuel_price(snapshot))
        payload = asdict(kpis)
        payload["jour"] = format_jour(kpis.jour)
        return payload

    return get_or_compute(cache, key, compute, ttl)
