"""Composition root: wires config, store, cache and services for one session."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from fleettrack.adapters.outbound.sqlalchemy_store import SqlAlchemyActivityLog, SqlAlchemyRecordStore
from fleettrack.analytics.rapports import kpis_du_jour
from fleettrack.config import load_config
from fleettrack.data.cache import build_cache
from fleettrack.data.db import get_engine, get_session, init_db
from fleettrack.data.seed import seed_defaults
from domain.errors import RecordNotFoundError
from domain.models import TypeEnregistrement
from domain.planification import apply_transition, refresh_loading_statuses
from domain.record_service import RecordService
from domain.snapshot import SnapshotProvider

logger = logging.getLogger(__name__)


class FleetTrack:
    """One user session over the fleet records.

    Holds the snapshot provider, so every write made through ``service``
    is visible on the next ``snapshot()`` call.
    """

    def __init__(self, store, journal=None, cache=None, config: dict | None = None,
                 clock=datetime.now):
        self.config = config or load_config()
        self.store = store
        self.journal = journal
        self.cache = cache
        self.clock = clock
        self.provider = SnapshotProvider(store, cache)
        self.service = RecordService(store, journal, self.provider, clock)

    @classmethod
    def from_config(cls, config: dict | None = None) -> FleetTrack:
        """Open the configured database and cache, creating tables if needed."""
        config = config or load_config()
        engine = init_db(get_engine(config["database"]["url"]))
        session = get_session(engine)
        logger.info("Opened record store at %s", engine.url.render_as_string(hide_password=True))
        return cls(
            store=SqlAlchemyRecordStore(session),
            journal=SqlAlchemyActivityLog(session),
            cache=build_cache(config),
            config=config,
        )

    # ── Setup ──────────────────────────────────────────────────────────

    def initialize(self, repair: bool = True) -> dict:
        """Seed an empty store and repair imported trips."""
        pricing = self.config["pricing"]
        counts = seed_defaults(self.store, self.service, settings={
            "defaultFuelPrice": pricing["default_fuel_price"],
            "currency": pricing["currency"],
        })
        if repair:
            repaired, deleted = self.service.repair_entries(self.snapshot())
            counts["repaired"] = repaired
            counts["deleted"] = deleted
        self.provider.invalidate()
        return counts

    # ── Reads ──────────────────────────────────────────────────────────

    def snapshot(self):
        return self.provider.get()

    @property
    def include_awaiting_confirmation(self) -> bool:
        return bool(self.config["aggregation"]["include_awaiting_confirmation"])

    def kpis(self, jour, driver_id=None) -> dict:
        return kpis_du_jour(
            self.snapshot(), jour, self.cache, driver_id,
            self.include_awaiting_confirmation, self.config["cache"]["ttl"],
        )

    # ── Planification workflow ─────────────────────────────────────────

    def transition_planification(self, plan_id, cible, role, photos=None):
        """Apply a status transition and persist it when accepted.

        Raises:
            RecordNotFoundError: unknown planification id.
            TransitionError: ``cible`` cannot be requested.
        """
        plan = self.service.get_planification(plan_id)
        if plan is None:
            raise RecordNotFoundError(TypeEnregistrement.PLANIFICATION, plan_id)
        resultat = apply_transition(plan, cible, role, photos)
        if resultat.accepte:
            self.service.save_planification(plan)
        else:
            logger.info("Transition of %s to %s refused: %s", plan_id, cible, resultat.motif)
        return resultat

    def refresh_loading(self, now: datetime | None = None) -> list:
        """Move due planifications to loading; returns the plans that changed."""
        if not self.config["planification"]["auto_loading"]:
            return []
        plans = [replace(p) for p in self.snapshot().planifications]
        changed = refresh_loading_statuses(plans, now or self.clock())
        for plan in changed:
            self.service.save_planification(plan)
        return changed
