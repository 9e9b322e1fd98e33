from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class Summary(Base):
    """
    One generated version of a patient's discharge/death summary.

    Generation always appends a row. Review edits the newest row in place and
    flips ``reviewed``; ``updated_at`` stays null until the first review.
    """
    __tablename__ = "discharge_summaries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(
        Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    summary_text = Column(Text, nullable=False)
    reviewed = Column(Boolean, nullable=False, default=False)
    generated_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=True)

    patient = relationship("Patient", back_populates="summaries")
