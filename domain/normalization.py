"""Domain normalization — pure functions, zero external dependencies.

Raw records come from a loosely typed document store (manual entry, legacy
spreadsheet imports). Every record goes through ``parse_*`` here so the rest
of the domain only ever sees fully defaulted dataclasses. ``to_record`` does
the reverse and produces the camelCase document shape the store keeps.

Only stdlib and domain imports allowed.
"""

from __future__ import annotations

import math
import re
from dataclasses import fields
from datetime import date, datetime, time, timezone
from enum import Enum

from domain.dates import parse_jour
from domain.models import (
    Camion,
    Chauffeur,
    Entree,
    JournalActivite,
    Parametres,
    PhotosVoyage,
    Planification,
    StatutPlanification,
    TypeCamion,
)

_SNAKE = re.compile(r"_([a-z])")

DEFAULT_FUEL_PRICE = 2.0


# ── Field coercion ───────────────────────────────────────────────────────


def to_amount(value):
    """Coerce a monetary/distance field to a finite, non-negative float.

    Anything unreadable, negative or non-finite becomes 0.0. Decimal commas
    ("12,5") are accepted.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(" ", "").replace(",", ".")
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def to_optional_amount(value):
    """Like ``to_amount`` but keeps absence (None / empty string) as None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return to_amount(value)


def to_text(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_timestamp(value):
    """Parse an ISO timestamp; aware values are converted to naive UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_time(value):
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _enum(enum_cls, value, default):
    valid = {m.value for m in enum_cls}
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str) and value in valid:
        return enum_cls(value)
    return default


def camel(name):
    """``prix_gasoil_litre`` -> ``prixGasoilLitre``."""
    return _SNAKE.sub(lambda m: m.group(1).upper(), name)


# ── Record parsers ───────────────────────────────────────────────────────


def parse_camion(raw):
    """Build a Camion from a raw truck document."""
    return Camion(
        id=str(raw.get("id") or ""),
        matricule=to_text(raw.get("matricule")) or "",
        type=_enum(TypeCamion, raw.get("type"), TypeCamion.PLATEAU),
        charges_fixes=to_amount(raw.get("chargesFixes")),
        montant_assurance=to_amount(raw.get("montantAssurance")),
        montant_taxe=to_amount(raw.get("montantTaxe")),
        charge_personnel=to_amount(raw.get("chargePersonnel")),
        marque=to_text(raw.get("marque")),
        updated_at=to_timestamp(raw.get("updatedAt")),
    )


def parse_chauffeur(raw):
    """Build a Chauffeur from a raw driver document."""
    return Chauffeur(
        id=str(raw.get("id") or ""),
        nom=to_text(raw.get("nom")) or "",
        camion_id=to_text(raw.get("camionId")),
        telephone=to_text(raw.get("telephone")),
        created_at=to_timestamp(raw.get("createdAt")),
        updated_at=to_timestamp(raw.get("updatedAt")),
    )


def _entree_kwargs(raw):
    return dict(
        id=str(raw.get("id") or ""),
        date=parse_jour(raw.get("date")) or date.min,
        camion_id=to_text(raw.get("camionId")),
        chauffeur_id=to_text(raw.get("chauffeurId")),
        origine_gouvernorat=to_text(raw.get("origineGouvernorat")),
        origine_delegation=to_text(raw.get("origineDelegation")),
        origine=to_text(raw.get("origine")),
        gouvernorat=to_text(raw.get("gouvernorat")),
        delegation=to_text(raw.get("delegation")),
        destination=to_text(raw.get("destination")),
        kilometrage=to_amount(raw.get("kilometrage")),
        quantite_gasoil=to_amount(raw.get("quantiteGasoil")),
        prix_gasoil_litre=to_optional_amount(raw.get("prixGasoilLitre")),
        maintenance=to_amount(raw.get("maintenance")),
        prix_livraison=to_amount(raw.get("prixLivraison")),
        remarques=to_text(raw.get("remarques")) or "",
        matricule=to_text(raw.get("matricule")),
        chauffeur=to_text(raw.get("chauffeur")),
        created_at=to_timestamp(raw.get("createdAt")),
        updated_at=to_timestamp(raw.get("updatedAt")),
        source=to_text(raw.get("source")),
    )


def parse_entree(raw):
    """Build an Entree from a raw trip document.

    A missing or unreadable date becomes ``date.min`` so the trip never
    matches a real calendar day instead of failing the whole snapshot.
    """
    return Entree(**_entree_kwargs(raw))


def parse_photos(raw):
    if not raw:
        return None
    return PhotosVoyage(
        dashboard=to_text(raw.get("dashboard")) or "",
        full_truck=to_text(raw.get("fullTruck")) or "",
        document=to_text(raw.get("document")) or "",
        cargo=to_text(raw.get("cargo")) or "",
        timestamp=to_timestamp(raw.get("timestamp")),
    )


def parse_planification(raw):
    """Build a Planification; unknown statuses fall back to ``planifie``."""
    return Planification(
        **_entree_kwargs(raw),
        statut=_enum(StatutPlanification, raw.get("statut"), StatutPlanification.PLANIFIE),
        heure_depart=to_time(raw.get("heureDepart")),
        distance_estimee=to_optional_amount(raw.get("estimatedDistance")),
        photos_debut=parse_photos(raw.get("photosDebut")),
        photos_fin=parse_photos(raw.get("photosFin")),
    )


def parse_parametres(raw):
    """Build Parametres; a missing or zero fuel price falls back to the default."""
    if not raw:
        return Parametres()
    prix = to_amount(raw.get("defaultFuelPrice"))
    return Parametres(
        default_fuel_price=prix or DEFAULT_FUEL_PRICE,
        currency=to_text(raw.get("currency")) or "TND",
        id=str(raw.get("id") or "default"),
    )


def parse_journal(raw):
    timestamp = to_timestamp(raw.get("timestamp"))
    return JournalActivite(
        action=to_text(raw.get("action")) or "",
        entity_type=to_text(raw.get("entityType")) or "",
        entity_id=str(raw.get("entityId") or ""),
        details=dict(raw.get("details") or {}),
        timestamp=timestamp,
        date=parse_jour(raw.get("date")) or (timestamp.date() if timestamp else None),
        id=to_text(raw.get("id")),
    )


# ── Serialization ────────────────────────────────────────────────────────

_RENAMED = {
    "distance_estimee": "estimatedDistance",
}


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items() if v is not None}
    if hasattr(value, "__dataclass_fields__"):
        return to_record(value)
    return value


def to_record(obj):
    """Serialize a domain dataclass to a camelCase, JSON-ready document.

    None values are dropped so an absent fuel price stays absent.
    """
    record = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        key = _RENAMED.get(f.name) or camel(f.name)
        record[key] = _plain(value)
    return record
