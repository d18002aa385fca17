"""Domain trip cost calculator — pure functions, zero external dependencies.

Only stdlib and domain.models imports allowed.
"""

from domain.models import CoutsEntree
from domain.normalization import DEFAULT_FUEL_PRICE


def fuel_price(entree, default_fuel_price=DEFAULT_FUEL_PRICE):
    """Price per liter for a trip: its own price when set (0 included), else the default."""
    if entree.prix_gasoil_litre is None:
        return default_fuel_price
    return entree.prix_gasoil_litre


def fixed_charges(camion, is_first_trip_of_day):
    """Daily fixed charges attributed to a trip.

    Only the first trip of a truck on a given day carries them; a trip whose
    truck cannot be resolved carries none.
    """
    if camion is None or not is_first_trip_of_day:
        return 0.0
    return camion.charges_journalieres


def compute_costs(entree, camion, is_first_trip_of_day, default_fuel_price=DEFAULT_FUEL_PRICE):
    """Compute fuel cost, total cost and net result of one trip.

    Args:
        entree: The trip, already normalized (non-negative numbers).
        camion: The owning truck, or None when it cannot be resolved.
        is_first_trip_of_day: Whether this trip absorbs the truck's daily charges.
        default_fuel_price: Price per liter used when the trip has none.
    """
    montant_gasoil = entree.quantite_gasoil * fuel_price(entree, default_fuel_price)
    cout_total = (
        montant_gasoil
        + entree.maintenance
        + fixed_charges(camion, is_first_trip_of_day)
    )
    return CoutsEntree(
        montant_gasoil=montant_gasoil,
        cout_total=cout_total,
        resultat=entree.prix_livraison - cout_total,
    )
