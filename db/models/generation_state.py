# db/models/generation_state.py

from sqlalchemy import Column, String, Integer, BigInteger
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from db.models.base import Base

class GenerationStateModel(Base):
    __tablename__ = 'generation_state'

    user_id = Column(String(128), primary_key=True)
    last_generated_at_ms = Column(BigInteger, nullable=False, default=0, server_default='0')
    messages_since_last_generation = Column(Integer, nullable=False, default=0, server_default='0')

    # Touched on every write; drives TTL eviction
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
