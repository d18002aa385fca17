"""Domain route analytics — pure functions, zero external dependencies.

Routes match by exact equality on origin governorate/delegation and
destination governorate/delegation; there is no fuzzy matching.

Only stdlib and domain imports allowed.
"""

from __future__ import annotations

from domain.analytics.flotte import cost_entries
from domain.entity_resolution import canonical_id, driver_name, index_camions, index_chauffeurs
from domain.models import (
    ComparaisonChauffeur,
    ComparaisonTrajet,
    RangTrajet,
    ResultatVoyage,
    StatistiquesTrajet,
    StatistiquesTrajetCamion,
)
from domain.normalization import DEFAULT_FUEL_PRICE


def route_entries(entrees, itineraire):
    return [e for e in entrees if itineraire.correspond(e)]


def _par_chauffeur(pairs, drivers):
    # Legacy driver ids group with the driver they designate.
    groups = {}
    for entree, couts in pairs:
        groups.setdefault(canonical_id(drivers, entree.chauffeur_id), []).append((entree, couts))
    return groups


def driver_rank_for_route(entrees, camions, driver_id, itineraire, chauffeurs=(),
                          default_fuel_price=DEFAULT_FUEL_PRICE):
    """Rank of a driver among all drivers of a route, by average result.

    Returns None when nobody drove the route or the driver never did.
    """
    pairs = cost_entries(route_entries(entrees, itineraire), camions,
                         default_fuel_price=default_fuel_price)
    if not pairs:
        return None
    drivers = index_chauffeurs(chauffeurs)
    moyennes = [
        (chauffeur_id, sum(c.resultat for _, c in group) / len(group))
        for chauffeur_id, group in _par_chauffeur(pairs, drivers).items()
    ]
    moyennes.sort(key=lambda item: item[1], reverse=True)
    cible = canonical_id(drivers, driver_id)
    for position, (chauffeur_id, _) in enumerate(moyennes, start=1):
        if chauffeur_id == cible:
            return RangTrajet(rank=position, total=len(moyennes))
    return None


def trajectory_stats(entrees, camions, driver_id, itineraire, chauffeurs=(),
                     default_fuel_price=DEFAULT_FUEL_PRICE):
    """Historical averages of one driver on one exact route, with their rank."""
    drivers = index_chauffeurs(chauffeurs)
    cible = canonical_id(drivers, driver_id)
    own = [
        e for e in route_entries(entrees, itineraire)
        if canonical_id(drivers, e.chauffeur_id) == cible
    ]
    if not own:
        return StatistiquesTrajet()

    pairs = cost_entries(own, camions, default_fuel_price=default_fuel_price)
    count = len(pairs)
    total_cost = sum(c.cout_total for _, c in pairs)
    total_revenue = sum(e.prix_livraison for e, _ in pairs)

    voyages = [
        ResultatVoyage(date=e.date, result=c.resultat, km=e.kilometrage, fuel=e.quantite_gasoil)
        for e, c in pairs
    ]
    voyages.sort(key=lambda v: v.result, reverse=True)

    return StatistiquesTrajet(
        trip_count=count,
        avg_km=sum(e.kilometrage for e in own) / count,
        avg_fuel=sum(e.quantite_gasoil for e in own) / count,
        avg_cost=total_cost / count,
        avg_revenue=total_revenue / count,
        avg_result=(total_revenue - total_cost) / count,
        best_result=voyages[0],
        worst_result=voyages[-1],
        last_trip=max(e.date for e in own),
        rank=driver_rank_for_route(entrees, camions, driver_id, itineraire, drivers,
                                   default_fuel_price),
        driver_name=driver_name(drivers, driver_id),
    )


def truck_trajectory_stats(entrees, camions, truck_id, itineraire):
    """Trip count, average distance/fuel and consumption of one truck on one route."""
    index = index_camions(camions)
    camion = index.get(truck_id)
    matricule = camion.matricule if camion else "Inconnu"
    cible = canonical_id(index, truck_id)
    own = [
        e for e in route_entries(entrees, itineraire)
        if canonical_id(index, e.camion_id) == cible
    ]
    if not own:
        return StatistiquesTrajetCamion(truck_matricule=matricule)

    count = len(own)
    total_km = sum(e.kilometrage for e in own)
    total_fuel = sum(e.quantite_gasoil for e in own)
    return StatistiquesTrajetCamion(
        truck_matricule=matricule,
        trip_count=count,
        avg_km=total_km / count,
        avg_fuel=total_fuel / count,
        avg_consumption=(total_fuel / total_km) * 100 if total_km > 0 else 0.0,
    )


def route_comparison(entrees, camions, chauffeurs, itineraire,
                     default_fuel_price=DEFAULT_FUEL_PRICE):
    """Compare every driver of a route, best average result first."""
    pairs = cost_entries(route_entries(entrees, itineraire), camions,
                         default_fuel_price=default_fuel_price)
    if not pairs:
        return ComparaisonTrajet(data=[])

    drivers = index_chauffeurs(chauffeurs)
    data = []
    for chauffeur_id, group in _par_chauffeur(pairs, drivers).items():
        count = len(group)
        total_km = sum(e.kilometrage for e, _ in group)
        total_fuel = sum(e.quantite_gasoil for e, _ in group)
        total_revenue = sum(e.prix_livraison for e, _ in group)
        total_cost = sum(c.cout_total for _, c in group)
        data.append(ComparaisonChauffeur(
            driver_id=chauffeur_id,
            driver_name=driver_name(drivers, chauffeur_id),
            trip_count=count,
            total_km=total_km,
            total_fuel=total_fuel,
            total_revenue=total_revenue,
            total_cost=total_cost,
            avg_km=total_km / count,
            avg_fuel=total_fuel / count,
            avg_revenue=total_revenue / count,
            avg_cost=total_cost / count,
            avg_result=(total_revenue - total_cost) / count,
        ))
    data.sort(key=lambda d: d.avg_result, reverse=True)

    return ComparaisonTrajet(
        data=data,
        total_trips=len(pairs),
        total_drivers=len(data),
        avg_km=sum(d.avg_km for d in data) / len(data),
        avg_result=sum(d.avg_result for d in data) / len(data),
    )
