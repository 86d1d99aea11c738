from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class PatientRow(Base):
    __tablename__ = "patients"
    id = Column(Integer, primary_key=True)
    external_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    location = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class ReadingRow(Base):
    __tablename__ = "readings"
    id = Column(Integer, primary_key=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), index=True, nullable=False)
    ts = Column(DateTime(timezone=True), index=True, nullable=False)

    respiratory_rate = Column(Float, nullable=False)
    systolic_bp = Column(Float, nullable=False)
    mental_status = Column(String, nullable=False)

    # scored once at write time, never updated
    qsofa_score = Column(Integer, nullable=False)
    qsofa_risk_label = Column(String, nullable=False)
    qsofa_reasons_json = Column(Text, nullable=False)  # JSON list of reason strings

    created_at = Column(DateTime(timezone=True), server_default=func.now())
