from datetime import datetime
from typing import Any, Dict, Optional

import structlog
from sqlalchemy.orm import sessionmaker

from .risk_engine import Observation, ScoredReading
from .storage import get_patient, load_readings, save_reading, upsert_patient
from .trends import analyze_trends, summarize

logger = structlog.get_logger(__name__)


def record_reading(
    Session: sessionmaker,
    external_id: str,
    obs: Observation,
    timestamp: datetime,
    name: Optional[str] = None,
    location: Optional[str] = None,
) -> ScoredReading:
    upsert_patient(Session, external_id, name, location)
    reading = ScoredReading.from_observation(obs, timestamp)
    save_reading(Session, external_id, reading)
    logger.info(
        "reading_recorded",
        external_id=external_id,
        qsofa_score=reading.qsofa_score,
        risk_label=reading.qsofa_risk_label,
    )
    return reading


def patient_summary(Session: sessionmaker, external_id: str) -> Optional[Dict[str, Any]]:
    """
    Returns: {patient, readings, alerts, overall} or None for an unknown patient.
    Alerts are recomputed from the full history on every call.
    """
    patient = get_patient(Session, external_id)
    if patient is None:
        return None

    readings = load_readings(Session, external_id)
    if not readings:
        return {"patient": patient.to_dict(), "readings": [], "alerts": [], "overall": None}

    alerts = analyze_trends(readings)
    return {
        "patient": patient.to_dict(),
        "readings": [r.to_dict() for r in readings],
        "alerts": [a.to_dict() for a in alerts],
        "overall": summarize(readings).to_dict(),
    }
