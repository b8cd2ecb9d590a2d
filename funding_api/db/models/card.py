from sqlalchemy import Column, DateTime, Index, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID

from funding_api.db.base import Base


class Card(Base):
    __tablename__ = "cards"
    __table_args__ = (Index("ix_cards_tags", "tags", postgresql_using="gin"),)

    id = Column(UUID(as_uuid=True), primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    creators = Column(ARRAY(Text), nullable=True)
    date = Column(DateTime(timezone=True), nullable=True)
    contributors = Column(Integer, nullable=True)
    tags = Column(ARRAY(Text), nullable=True)
    priority = Column(String(10), nullable=True, index=True)
    funding_earned = Column(Numeric(20, 8), nullable=True)
    funding_spent = Column(Numeric(20, 8), nullable=True)
    funding_requested = Column(Numeric(20, 8), nullable=True)
    funding_received = Column(Numeric(20, 8), nullable=True)
    funding_available = Column(Numeric(20, 8), nullable=True)
    percent_funded = Column(Numeric(10, 2), nullable=True)
    visibility = Column(String(20), nullable=False, default="PUBLIC", index=True)
    # Opaque to this service; returned exactly as stored
    milestones = Column(JSONB, nullable=True)
    status = Column(String(20), nullable=True, index=True)
    stage = Column(String(20), nullable=True, index=True)
    created_by = Column(Text, nullable=True)
    owned_by = Column(Text, nullable=True)
    last_updated = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    wallet_addresses = Column(ARRAY(Text), nullable=True)
    view_keys = Column(ARRAY(Text), nullable=True)
