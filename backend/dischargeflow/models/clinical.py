from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class ClinicalData(Base, TimestampMixin):
    __tablename__ = "clinical_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(
        Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    final_diagnosis = Column(Text, nullable=False)
    chief_complaints = Column(Text, nullable=False)
    past_medical_history = Column(Text, nullable=True)
    oemd = Column(Text, nullable=True)  # On examination at emergency department
    hospital_course = Column(Text, nullable=False)
    investigations = Column(Text, nullable=False)

    patient = relationship("Patient", back_populates="clinical_data")
