from sqlalchemy import Column, Integer, String, Date
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Patient(Base, TimestampMixin):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String(20), nullable=False)
    regd_no = Column(String(50), nullable=True)  # Hospital registration number
    ip_no = Column(String(50), nullable=True)    # In-patient admission number
    department = Column(String(100), nullable=False)
    ward = Column(String(100), nullable=False)
    doa = Column(Date, nullable=False)           # Date of admission
    dodeath = Column(Date, nullable=True)        # Date of death
    primary_consultant = Column(String(200), nullable=False)

    clinical_data = relationship(
        "ClinicalData",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ClinicalData.created_at",
    )
    summaries = relationship(
        "Summary",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Summary.generated_at",
    )
