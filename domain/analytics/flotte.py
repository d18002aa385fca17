"""Domain fleet analytics — pure functions, zero external dependencies.

Every function takes an already scoped sequence of trips (date window, driver
role, status filter are applied by the caller) and re-derives the
first-trip-of-the-day flags inside that sequence before folding costs.
When trucks are known, flags are keyed on the truck a trip resolves to, so a
legacy ``truck_<matricule>`` id and the canonical id share one daily charge.

Only stdlib and domain imports allowed.
"""

from __future__ import annotations

from datetime import datetime

from domain.costs import compute_costs
from domain.dates import cle_mois, fenetre_jours, meme_mois, parse_jour
from domain.entity_resolution import canonical_id, driver_name, index_camions, index_chauffeurs
from domain.models import (
    ClassementEntite,
    KpisTableauDeBord,
    LigneRapportMensuel,
    LigneResumeJournalier,
    PointSerie,
    RapportMensuel,
    RepartitionCouts,
    StatistiquesAgregees,
)
from domain.normalization import DEFAULT_FUEL_PRICE


def default_scope_key(entree):
    """Fixed charges are due once per truck and calendar day."""
    return (entree.camion_id, entree.date)


def resolved_scope_key(camions):
    """Scope key that maps legacy truck ids onto the truck they designate."""
    index = index_camions(camions)

    def key(entree):
        return (canonical_id(index, entree.camion_id), entree.date)

    return key


def _creation_order_key(entree):
    # Trips without createdAt sort after dated ones; sorted() keeps input order on ties.
    if entree.created_at is None:
        return (1, datetime.min)
    return (0, entree.created_at)


def first_trip_flags(entrees, scope_key=default_scope_key):
    """Flag, for each trip, whether it is the first of its scope group.

    Within a group, trips are ordered by ``created_at`` ascending; trips
    without a timestamp keep their relative input order after the others.
    """
    entrees = list(entrees)
    order = sorted(range(len(entrees)), key=lambda i: _creation_order_key(entrees[i]))
    flags = [False] * len(entrees)
    seen = set()
    for i in order:
        key = scope_key(entrees[i])
        if key not in seen:
            seen.add(key)
            flags[i] = True
    return flags


def cost_entries(entrees, camions, scope_key=None,
                 default_fuel_price=DEFAULT_FUEL_PRICE):
    """Pair every trip with its costs, in input order.

    Without an explicit ``scope_key``, trips are grouped on the resolved
    truck and the calendar day.
    """
    entrees = list(entrees)
    index = index_camions(camions)
    flags = first_trip_flags(entrees, scope_key or resolved_scope_key(index))
    return [
        (entree, compute_costs(entree, index.get(entree.camion_id), first, default_fuel_price))
        for entree, first in zip(entrees, flags)
    ]


class _Accumulateur:
    """Running totals for one aggregation group."""

    def __init__(self):
        self.km = 0.0
        self.gasoil = 0.0
        self.cost = 0.0
        self.revenue = 0.0
        self.count = 0

    def add(self, entree, couts):
        self.km += entree.kilometrage
        self.gasoil += entree.quantite_gasoil
        self.cost += couts.cout_total
        self.revenue += entree.prix_livraison
        self.count += 1

    def stats(self):
        result = self.revenue - self.cost
        return StatistiquesAgregees(
            total_km=self.km,
            total_gasoil=self.gasoil,
            total_cost=self.cost,
            total_revenue=self.revenue,
            result=result,
            cost_per_km=self.cost / self.km if self.km > 0 else 0.0,
            consumption_l100km=(self.gasoil / self.km) * 100 if self.km > 0 else 0.0,
            trip_count=self.count,
            performance_pct=(result / self.revenue) * 100 if self.revenue > 0 else 0.0,
        )


def aggregate_for_scope(entrees, camions, scope_key=None,
                        default_fuel_price=DEFAULT_FUEL_PRICE):
    """Fold a set of trips into totals and ratios.

    An empty set yields an all-zero ``StatistiquesAgregees``.
    """
    acc = _Accumulateur()
    for entree, couts in cost_entries(entrees, camions, scope_key, default_fuel_price):
        acc.add(entree, couts)
    return acc.stats()


def rank_entities(entrees, camions, group_by, scope_key=None,
                  default_fuel_price=DEFAULT_FUEL_PRICE):
    """Group trips by ``group_by(entree)`` and rank groups by result, best first.

    First-trip flags are computed over the whole set, then trips are
    distributed to their group. Groups with equal results keep the order in
    which they first appear in the input.
    """
    groups = {}
    for entree, couts in cost_entries(entrees, camions, scope_key, default_fuel_price):
        groups.setdefault(group_by(entree), _Accumulateur()).add(entree, couts)
    ranked = [ClassementEntite(key=key, stats=acc.stats()) for key, acc in groups.items()]
    ranked.sort(key=lambda c: c.stats.result, reverse=True)
    return ranked


def time_series(entrees, camions, window_days, anchor_date,
                default_fuel_price=DEFAULT_FUEL_PRICE):
    """Daily result for the ``window_days`` days ending at ``anchor_date``.

    Exactly one point per calendar day, oldest first; days without trips
    are 0.0.
    """
    anchor = parse_jour(anchor_date)
    if anchor is None:
        raise ValueError(f"anchor_date illisible: {anchor_date!r}")
    jours = fenetre_jours(anchor, window_days)
    if not jours:
        return []
    totals = {jour: 0.0 for jour in jours}
    in_window = [e for e in entrees if e.date in totals]
    for entree, couts in cost_entries(in_window, camions, default_fuel_price=default_fuel_price):
        totals[entree.date] += couts.resultat
    return [PointSerie(date=jour, daily_result=totals[jour]) for jour in jours]


# ── Scoped views ─────────────────────────────────────────────────────────


def scope_to_driver(entrees, driver_id):
    """Driver-role scope; must be applied before any aggregation."""
    if driver_id is None:
        return list(entrees)
    return [e for e in entrees if e.chauffeur_id == driver_id]


def entries_for_day(entrees, jour):
    jour = parse_jour(jour)
    return [e for e in entrees if e.date == jour]


def entries_for_month(entrees, annee, mois):
    return [e for e in entrees if meme_mois(e.date, annee, mois)]


def available_months(entrees):
    """Months present in the data as ``YYYY-MM``, most recent first."""
    return sorted({cle_mois(e.date) for e in entrees if e.date.year > 1}, reverse=True)


def truck_stats(entrees, camions, truck_id, default_fuel_price=DEFAULT_FUEL_PRICE):
    """Statistics of one truck; legacy truck ids on trips are matched too."""
    index = index_camions(camions)
    camion = index.get(truck_id)
    if camion is None:
        return StatistiquesAgregees()
    own = [e for e in entrees if index.get(e.camion_id) is camion]
    return aggregate_for_scope(own, index, resolved_scope_key(index), default_fuel_price)


def driver_stats(entrees, camions, driver_id, chauffeurs=(),
                 default_fuel_price=DEFAULT_FUEL_PRICE):
    """Statistics of one driver; the driver filter runs before first-trip flags."""
    index = index_chauffeurs(chauffeurs)
    chauffeur = index.get(driver_id)
    if chauffeur is None:
        own = scope_to_driver(entrees, driver_id)
    else:
        own = [e for e in entrees if index.get(e.chauffeur_id) is chauffeur]
    return aggregate_for_scope(own, camions, default_fuel_price=default_fuel_price)


def dashboard_kpis(entrees, camions, jour, driver_id=None,
                   default_fuel_price=DEFAULT_FUEL_PRICE):
    """Headline KPIs for one day, optionally restricted to one driver."""
    jour = parse_jour(jour)
    index = index_camions(camions)
    scoped = scope_to_driver(entries_for_day(entrees, jour), driver_id)
    stats = aggregate_for_scope(scoped, index, default_fuel_price=default_fuel_price)
    return KpisTableauDeBord(
        jour=jour,
        active_trucks=len({canonical_id(index, e.camion_id) for e in scoped if e.camion_id}),
        total_km=stats.total_km,
        total_gasoil=stats.total_gasoil,
        total_cost=stats.total_cost,
        total_revenue=stats.total_revenue,
        total_result=stats.result,
        cost_per_km=stats.cost_per_km,
    )


def cost_breakdown(entrees, camions, default_fuel_price=DEFAULT_FUEL_PRICE):
    """Split total cost by category under the first-trip rule."""
    entrees = list(entrees)
    index = index_camions(camions)
    flags = first_trip_flags(entrees, resolved_scope_key(index))
    totals = dict.fromkeys(
        ["gasoil", "charges_fixes", "assurance", "taxe", "personnel", "maintenance"], 0.0
    )
    for entree, first in zip(entrees, flags):
        couts = compute_costs(entree, None, False, default_fuel_price)
        totals["gasoil"] += couts.montant_gasoil
        totals["maintenance"] += entree.maintenance
        camion = index.get(entree.camion_id)
        if first and camion is not None:
            totals["charges_fixes"] += camion.charges_fixes
            totals["assurance"] += camion.montant_assurance
            totals["taxe"] += camion.montant_taxe
            totals["personnel"] += camion.charge_personnel
    return RepartitionCouts(**totals)


def monthly_report(entrees, camions, annee, mois, default_fuel_price=DEFAULT_FUEL_PRICE):
    """Per-truck totals for one month, active trucks only, in fleet order.

    Trips whose truck cannot be resolved are left out of the report.
    """
    index = index_camions(camions)
    du_mois = entries_for_month(entrees, annee, mois)
    par_camion = {camion.id: [] for camion in index.values()}
    for entree, couts in cost_entries(du_mois, index, resolved_scope_key(index), default_fuel_price):
        camion = index.get(entree.camion_id)
        if camion is not None:
            par_camion[camion.id].append((entree, couts))

    lignes = []
    for camion in index.values():
        pairs = par_camion[camion.id]
        ligne = LigneRapportMensuel(
            matricule=camion.matricule,
            camion_id=camion.id,
            total_km=sum(e.kilometrage for e, _ in pairs),
            total_gasoil=sum(e.quantite_gasoil for e, _ in pairs),
            total_gasoil_cost=sum(c.montant_gasoil for _, c in pairs),
            total_cost=sum(c.cout_total for _, c in pairs),
            total_revenue=sum(e.prix_livraison for e, _ in pairs),
            result=sum(c.resultat for _, c in pairs),
        )
        if ligne.total_km > 0 or ligne.total_revenue > 0:
            lignes.append(ligne)

    totaux = LigneRapportMensuel(
        matricule="TOTAL MENSUEL",
        total_km=sum(l.total_km for l in lignes),
        total_gasoil=sum(l.total_gasoil for l in lignes),
        total_gasoil_cost=sum(l.total_gasoil_cost for l in lignes),
        total_cost=sum(l.total_cost for l in lignes),
        total_revenue=sum(l.total_revenue for l in lignes),
        result=sum(l.result for l in lignes),
    )
    return RapportMensuel(mois=f"{annee:04d}-{mois:02d}", lignes=lignes, totaux=totaux)


def daily_summary(entrees, camions, chauffeurs, jour, driver_id=None,
                  default_fuel_price=DEFAULT_FUEL_PRICE):
    """One row per trip of the day, in input order."""
    scoped = scope_to_driver(entries_for_day(entrees, jour), driver_id)
    index = index_camions(camions)
    drivers = index_chauffeurs(chauffeurs)
    rows = []
    for entree, couts in cost_entries(scoped, index, default_fuel_price=default_fuel_price):
        camion = index.get(entree.camion_id)
        rows.append(LigneResumeJournalier(
            entree_id=entree.id,
            matricule=camion.matricule if camion else "-",
            chauffeur=driver_name(drivers, entree.chauffeur_id, default="-"),
            destination=entree.libelle_destination,
            kilometrage=entree.kilometrage,
            quantite_gasoil=entree.quantite_gasoil,
            prix_livraison=entree.prix_livraison,
            resultat=couts.resultat,
        ))
    return rows
