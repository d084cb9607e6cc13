"""
ORM tables for ICU event sources: patients, medications, lab results, discharges, vitals.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


def _uuid():
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    pass


class Patient(Base):
    __tablename__ = "patients"

    id = Column(String(64), primary_key=True, default=_uuid)
    mrn = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False, default="")
    status = Column(String(20), nullable=True)  # Stable | Critical | Discharged
    diagnosis = Column(String(200), nullable=True)
    admission_date = Column(DateTime, nullable=False, default=datetime.now, index=True)


class Medication(Base):
    __tablename__ = "medications"

    id = Column(String(64), primary_key=True, default=_uuid)
    patient_id = Column(String(64), ForeignKey("patients.id"), nullable=False)
    name = Column(String(200), nullable=False, default="")
    dosage = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)


class LabResult(Base):
    __tablename__ = "lab_results"

    id = Column(String(64), primary_key=True, default=_uuid)
    patient_id = Column(String(64), ForeignKey("patients.id"), nullable=False)
    test_name = Column(String(200), nullable=False, default="")
    result_value = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)


class Discharge(Base):
    __tablename__ = "discharges"

    id = Column(String(64), primary_key=True, default=_uuid)
    patient_id = Column(String(64), ForeignKey("patients.id"), nullable=False)
    discharge_date = Column(DateTime, nullable=False, default=datetime.now, index=True)
    discharge_condition = Column(String(20), nullable=True)  # Improved | Stable | Deteriorated | Deceased
    summary = Column(Text, nullable=True)


class Vital(Base):
    __tablename__ = "vitals"

    id = Column(String(64), primary_key=True, default=_uuid)
    patient_id = Column(String(64), ForeignKey("patients.id"), nullable=False)
    heart_rate = Column(Integer, nullable=True)
    blood_pressure = Column(String(20), nullable=True)
    temperature = Column(Float, nullable=True)
    oxygen_saturation = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
