from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .risk_engine import Observation, ScoredReading

SCENARIO_NAME = "Gradual escalation over first hour on the ward"
OFFSETS_MIN = [0, 15, 30, 45]


@dataclass(frozen=True)
class DemoScenario:
    name: str
    readings: List[ScoredReading]

    def to_dict(self) -> Dict[str, Any]:
        return {"scenarioName": self.name, "readings": [r.to_dict() for r in self.readings]}


def demo_observation(idx: int) -> Observation:
    return Observation(
        respiratory_rate=18 + idx * 2,  # gradually rising
        systolic_bp=115 - idx * 5,  # gradually falling
        mental_status="Alert" if idx < 3 else "Drowsy",
    )


def demo_scenario(now: Optional[datetime] = None) -> DemoScenario:
    """
    Synthetic four-point deterioration, 15 minutes apart. Never persisted.
    """
    start = now or datetime.now(timezone.utc)
    readings = [
        ScoredReading.from_observation(demo_observation(idx), start + timedelta(minutes=minutes))
        for idx, minutes in enumerate(OFFSETS_MIN)
    ]
    return DemoScenario(name=SCENARIO_NAME, readings=readings)
