from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID

from funding_api.db.base import Base


class CardStageFunding(Base):
    __tablename__ = "card_stage_funding"

    id = Column(Integer, primary_key=True)
    card_id = Column(UUID(as_uuid=True), ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    stage = Column(String(20), nullable=False)
    funding_requested = Column(Numeric(20, 8), nullable=True)
    currency = Column(String(10), nullable=True)
    note = Column(Text, nullable=True)
