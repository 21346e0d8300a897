"""Database models for the relational progress store."""
from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String

from lingodeck.models.base import Base


class LearningSessionRecord(Base):
    """One recorded practice attempt."""

    __tablename__ = "learning_sessions"
    __table_args__ = (
        Index("idx_word", "word"),
        Index("idx_timestamp", "timestamp"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    word = Column(String, nullable=False)
    translation = Column(String, nullable=False)
    correct = Column(Boolean, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
