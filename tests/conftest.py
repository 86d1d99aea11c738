from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import pytest

from sepsis_screen.db import close_db, init_db
from sepsis_screen.risk_engine import Observation, ScoredReading

T0 = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_readings() -> Callable[..., List[ScoredReading]]:
    """
    Builds scored readings 15 minutes apart from parallel value lists.
    """

    def _make(rr: List[float], sbp: List[float], mental: Optional[List[str]] = None) -> List[ScoredReading]:
        mental = mental or ["Alert"] * len(rr)
        return [
            ScoredReading.from_observation(Observation(r, s, m), T0 + timedelta(minutes=15 * i))
            for i, (r, s, m) in enumerate(zip(rr, sbp, mental))
        ]

    return _make


@pytest.fixture
def Session(tmp_path):
    factory = init_db(f"sqlite:///{tmp_path / 'test.db'}")
    yield factory
    close_db(factory)
