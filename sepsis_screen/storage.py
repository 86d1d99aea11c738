import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import desc, select
from sqlalchemy.orm import sessionmaker

from .models import PatientRow, ReadingRow
from .risk_engine import ScoredReading

logger = structlog.get_logger(__name__)


class PatientNotFound(LookupError):
    def __init__(self, external_id: str):
        super().__init__(f"Unknown patient: {external_id}")
        self.external_id = external_id


@dataclass(frozen=True)
class PatientInfo:
    external_id: str
    name: Optional[str]
    location: Optional[str]
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "externalId": self.external_id,
            "name": self.name,
            "location": self.location,
        }


def as_utc(ts: datetime) -> datetime:
    # naive timestamps are taken as UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _patient_info(row: PatientRow) -> PatientInfo:
    return PatientInfo(
        external_id=row.external_id,
        name=row.name,
        location=row.location,
        created_at=as_utc(row.created_at) if row.created_at else None,
    )


def _scored_reading(row: ReadingRow) -> ScoredReading:
    return ScoredReading(
        timestamp=as_utc(row.ts),
        respiratory_rate=row.respiratory_rate,
        systolic_bp=row.systolic_bp,
        mental_status=row.mental_status,
        qsofa_score=row.qsofa_score,
        qsofa_risk_label=row.qsofa_risk_label,
        qsofa_reasons=tuple(json.loads(row.qsofa_reasons_json)),
    )


def _find_patient(s, external_id: str) -> Optional[PatientRow]:
    q = select(PatientRow).where(PatientRow.external_id == external_id)
    return s.execute(q).scalars().first()


def upsert_patient(
    Session: sessionmaker, external_id: str, name: Optional[str] = None, location: Optional[str] = None
) -> PatientInfo:
    """
    Creates the patient if needed. Existing name/location are only replaced
    by non-empty values.
    """
    with Session() as s:
        row = _find_patient(s, external_id)
        if row is None:
            row = PatientRow(external_id=external_id, name=name or None, location=location or None)
            s.add(row)
            s.commit()
            logger.info("patient_created", external_id=external_id)
        elif (name and name != row.name) or (location and location != row.location):
            row.name = name or row.name
            row.location = location or row.location
            s.commit()
            logger.info("patient_updated", external_id=external_id)
        return _patient_info(row)


def get_patient(Session: sessionmaker, external_id: str) -> Optional[PatientInfo]:
    with Session() as s:
        row = _find_patient(s, external_id)
        return _patient_info(row) if row else None


def list_patients(Session: sessionmaker) -> List[PatientInfo]:
    with Session() as s:
        q = select(PatientRow).order_by(desc(PatientRow.created_at), desc(PatientRow.id))
        return [_patient_info(r) for r in s.execute(q).scalars().all()]


def save_reading(Session: sessionmaker, external_id: str, reading: ScoredReading) -> int:
    with Session() as s:
        patient = _find_patient(s, external_id)
        if patient is None:
            raise PatientNotFound(external_id)
        row = ReadingRow(
            patient_id=patient.id,
            ts=as_utc(reading.timestamp),
            respiratory_rate=reading.respiratory_rate,
            systolic_bp=reading.systolic_bp,
            mental_status=reading.mental_status,
            qsofa_score=reading.qsofa_score,
            qsofa_risk_label=reading.qsofa_risk_label,
            qsofa_reasons_json=json.dumps(list(reading.qsofa_reasons), ensure_ascii=False),
        )
        s.add(row)
        s.commit()
        return row.id


def load_readings(Session: sessionmaker, external_id: str) -> List[ScoredReading]:
    """
    All readings for a patient, oldest first. Equal timestamps keep insertion order.
    """
    with Session() as s:
        q = (
            select(ReadingRow)
            .join(PatientRow, ReadingRow.patient_id == PatientRow.id)
            .where(PatientRow.external_id == external_id)
            .order_by(ReadingRow.ts, ReadingRow.id)
        )
        return [_scored_reading(r) for r in s.execute(q).scalars().all()]


def list_recent_readings(Session: sessionmaker, limit: int = 100) -> List[Dict[str, Any]]:
    with Session() as s:
        q = (
            select(ReadingRow, PatientRow)
            .join(PatientRow, ReadingRow.patient_id == PatientRow.id)
            .order_by(desc(ReadingRow.ts), desc(ReadingRow.id))
            .limit(limit)
        )
        out = []
        for reading, patient in s.execute(q).all():
            item = _scored_reading(reading).to_dict()
            item["patient"] = _patient_info(patient).to_dict()
            out.append(item)
        return out
