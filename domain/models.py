"""Domain models — pure Python, zero external dependencies.

Only stdlib imports allowed: dataclasses, datetime, enum.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum


class TypeCamion(Enum):
    """Body type of a truck."""

    PLATEAU = "PLATEAU"
    BENNE = "BENNE"
    CITERNE = "CITERNE"


class StatutPlanification(Enum):
    """Lifecycle status of a scheduled trip."""

    PLANIFIE = "planifie"
    EN_COURS_CHARGEMENT = "en_cours_chargement"
    EN_COURS = "en_cours"
    ATTENTE_CONFIRMATION = "attente_confirmation"
    TERMINE = "termine"
    ANNULE = "annule"


class Role(Enum):
    """Role of the user triggering a workflow action."""

    ADMIN = "admin"
    CHAUFFEUR = "chauffeur"


class TypeEnregistrement(Enum):
    """Record collections held by the record store."""

    CAMION = "trucks"
    CHAUFFEUR = "drivers"
    ENTREE = "entries"
    PLANIFICATION = "planifications"
    PARAMETRES = "settings"


# ── Value Objects ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class PhotosVoyage:
    """Photo evidence bundle submitted at trip start or trip end."""

    dashboard: str = ""
    full_truck: str = ""
    document: str = ""
    cargo: str = ""
    timestamp: datetime | None = None

    @property
    def est_complet(self) -> bool:
        return all([self.dashboard, self.full_truck, self.document, self.cargo])


@dataclass(frozen=True)
class Itineraire:
    """An exact origin/destination pair at governorate + delegation level."""

    origine_gouvernorat: str
    origine_delegation: str
    gouvernorat: str
    delegation: str

    def correspond(self, entree: Entree) -> bool:
        return (
            entree.origine_gouvernorat == self.origine_gouvernorat
            and entree.origine_delegation == self.origine_delegation
            and entree.gouvernorat == self.gouvernorat
            and entree.delegation == self.delegation
        )


# ── Entities ────────────────────────────────────────────────────────────


@dataclass
class Camion:
    """A truck with daily fixed charges."""

    id: str
    matricule: str
    type: TypeCamion = TypeCamion.PLATEAU
    charges_fixes: float = 0.0
    montant_assurance: float = 0.0
    montant_taxe: float = 0.0
    charge_personnel: float = 0.0
    marque: str | None = None
    updated_at: datetime | None = None

    @property
    def charges_journalieres(self) -> float:
        """Sum of the four daily fixed charges."""
        return (
            self.charges_fixes
            + self.montant_assurance
            + self.montant_taxe
            + self.charge_personnel
        )


@dataclass
class Chauffeur:
    """A driver, optionally assigned to one truck."""

    id: str
    nom: str
    camion_id: str | None = None
    telephone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Entree:
    """A single trip (delivery movement) by one truck and one driver."""

    id: str
    date: date
    camion_id: str | None = None
    chauffeur_id: str | None = None
    origine_gouvernorat: str | None = None
    origine_delegation: str | None = None
    origine: str | None = None
    gouvernorat: str | None = None
    delegation: str | None = None
    destination: str | None = None
    kilometrage: float = 0.0
    quantite_gasoil: float = 0.0
    prix_gasoil_litre: float | None = None
    maintenance: float = 0.0
    prix_livraison: float = 0.0
    remarques: str = ""
    matricule: str | None = None
    chauffeur: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    source: str | None = None

    @property
    def libelle_destination(self) -> str:
        if self.gouvernorat and self.delegation:
            return self.delegation
        return self.destination or "-"


@dataclass
class Planification(Entree):
    """A scheduled trip following the photo-gated status workflow."""

    statut: StatutPlanification = StatutPlanification.PLANIFIE
    heure_depart: time | None = None
    distance_estimee: float | None = None
    photos_debut: PhotosVoyage | None = None
    photos_fin: PhotosVoyage | None = None


@dataclass
class Parametres:
    """Global application settings (singleton record)."""

    default_fuel_price: float = 2.0
    currency: str = "TND"
    id: str = "default"


@dataclass
class JournalActivite:
    """Audit record written for every data mutation."""

    action: str
    entity_type: str
    entity_id: str
    details: dict = field(default_factory=dict)
    timestamp: datetime | None = None
    date: date | None = None
    id: str | None = None


# ── Result Value Objects ────────────────────────────────────────────────


@dataclass(frozen=True)
class CoutsEntree:
    """Cost breakdown and net result for one trip."""

    montant_gasoil: float
    cout_total: float
    resultat: float


@dataclass(frozen=True)
class RepartitionCouts:
    """Total cost split by category."""

    gasoil: float = 0.0
    charges_fixes: float = 0.0
    assurance: float = 0.0
    taxe: float = 0.0
    personnel: float = 0.0
    maintenance: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.gasoil + self.charges_fixes + self.assurance
            + self.taxe + self.personnel + self.maintenance
        )


@dataclass(frozen=True)
class StatistiquesAgregees:
    """Financial KPIs folded over a set of trips."""

    total_km: float = 0.0
    total_gasoil: float = 0.0
    total_cost: float = 0.0
    total_revenue: float = 0.0
    result: float = 0.0
    cost_per_km: float = 0.0
    consumption_l100km: float = 0.0
    trip_count: int = 0
    performance_pct: float = 0.0


@dataclass(frozen=True)
class ClassementEntite:
    """Read-only ranking entry: grouping key and its statistics."""

    key: object
    stats: StatistiquesAgregees


@dataclass(frozen=True)
class PointSerie:
    """One calendar day of a result time series."""

    date: date
    daily_result: float


@dataclass(frozen=True)
class KpisTableauDeBord:
    """Headline figures for one day."""

    jour: date
    active_trucks: int
    total_km: float
    total_gasoil: float
    total_cost: float
    total_revenue: float
    total_result: float
    cost_per_km: float


@dataclass(frozen=True)
class LigneRapportMensuel:
    """Monthly totals for one truck (or the whole fleet)."""

    matricule: str
    total_km: float = 0.0
    total_gasoil: float = 0.0
    total_gasoil_cost: float = 0.0
    total_cost: float = 0.0
    total_revenue: float = 0.0
    result: float = 0.0
    camion_id: str | None = None


@dataclass(frozen=True)
class RapportMensuel:
    """Per-truck monthly report with grand totals."""

    mois: str
    lignes: list[LigneRapportMensuel]
    totaux: LigneRapportMensuel


@dataclass(frozen=True)
class LigneResumeJournalier:
    """One row of the daily trip summary."""

    entree_id: str
    matricule: str
    chauffeur: str
    destination: str
    kilometrage: float
    quantite_gasoil: float
    prix_livraison: float
    resultat: float


@dataclass(frozen=True)
class ResultatVoyage:
    """Result of one trip on a route, used for best/worst lookups."""

    date: date
    result: float
    km: float
    fuel: float


@dataclass(frozen=True)
class RangTrajet:
    """Rank of a driver among all drivers of a route (1 = best)."""

    rank: int
    total: int


@dataclass(frozen=True)
class StatistiquesTrajet:
    """Historical averages of one driver on one exact route."""

    trip_count: int = 0
    avg_km: float = 0.0
    avg_fuel: float = 0.0
    avg_cost: float = 0.0
    avg_revenue: float = 0.0
    avg_result: float = 0.0
    best_result: ResultatVoyage | None = None
    worst_result: ResultatVoyage | None = None
    last_trip: date | None = None
    rank: RangTrajet | None = None
    driver_name: str | None = None


@dataclass(frozen=True)
class StatistiquesTrajetCamion:
    """Historical averages of one truck on one exact route."""

    truck_matricule: str
    trip_count: int = 0
    avg_km: float = 0.0
    avg_fuel: float = 0.0
    avg_consumption: float = 0.0


@dataclass(frozen=True)
class ComparaisonChauffeur:
    """Per-driver totals and averages on one route."""

    driver_id: str | None
    driver_name: str
    trip_count: int
    total_km: float
    total_fuel: float
    total_revenue: float
    total_cost: float
    avg_km: float
    avg_fuel: float
    avg_revenue: float
    avg_cost: float
    avg_result: float


@dataclass(frozen=True)
class ComparaisonTrajet:
    """Route comparison: drivers ranked by average result, plus route summary."""

    data: list[ComparaisonChauffeur]
    total_trips: int = 0
    total_drivers: int = 0
    avg_km: float = 0.0
    avg_result: float = 0.0


@dataclass(frozen=True)
class ResultatTransition:
    """Outcome of a planification status transition request."""

    accepte: bool
    statut_initial: StatutPlanification
    statut: StatutPlanification
    motif: str
    details: dict = field(default_factory=dict)
