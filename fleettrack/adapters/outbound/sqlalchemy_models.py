from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Date, DateTime, JSON, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def _utcnow():
    return datetime.now(timezone.utc)


class Enregistrement(Base):
    """One fleet document (truck, driver, trip, planification, settings)."""

    __tablename__ = "enregistrements"

    id = Column(Integer, primary_key=True)
    collection = Column(String, nullable=False)
    record_id = Column(String, nullable=False)
    data = Column(JSON, nullable=False)
    date_creation = Column(DateTime, default=_utcnow)
    date_modification = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        UniqueConstraint("collection", "record_id", name="uq_enregistrements_collection_id"),
        Index("idx_enregistrements_collection", "collection"),
    )


class JournalActivite(Base):
    __tablename__ = "activity_logs"

    id = Column(String, primary_key=True)
    timestamp = Column(DateTime, nullable=False)
    date = Column(Date, nullable=False)
    action = Column(String, nullable=False)
    entity_type = Column(String, nullable=False)
    entity_id = Column(String, nullable=False)
    details = Column(JSON)

    __table_args__ = (
        Index("idx_activity_logs_date", "date"),
        Index("idx_activity_logs_entity", "entity_type", "entity_id"),
    )
