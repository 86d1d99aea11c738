from datetime import date, datetime, time, timezone
from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .risk_engine import Observation, ScoredReading
from .service import record_reading

logger = structlog.get_logger(__name__)


def entry_timestamp(day: date, at: time) -> datetime:
    """Form date + time as a UTC timestamp. Entered times are read as UTC."""
    return datetime.combine(day, at.replace(tzinfo=None), tzinfo=timezone.utc)


def submit_reading(
    Session: sessionmaker,
    external_id: str,
    obs: Observation,
    timestamp: datetime,
    name: Optional[str] = None,
    location: Optional[str] = None,
) -> Optional[ScoredReading]:
    """
    Records a reading from the entry form. Returns None when storage fails.
    """
    try:
        return record_reading(Session, external_id, obs, timestamp, name, location)
    except SQLAlchemyError:
        logger.exception("reading_create_failed", external_id=external_id)
        return None
