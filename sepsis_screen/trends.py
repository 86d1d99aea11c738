from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .risk_engine import RR_THRESHOLD, SBP_THRESHOLD, ScoredReading, is_alert

PairFn = Callable[[ScoredReading, ScoredReading], Any]


@dataclass(frozen=True)
class Alert:
    type: str
    level: str  # warning / high
    timestamp: datetime
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "level": self.level,
            "timestamp": self.timestamp.isoformat(),
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class TrendRule:
    type: str
    level: str
    applies: PairFn
    explain: PairFn

    def evaluate(self, prev: ScoredReading, curr: ScoredReading) -> Optional[Alert]:
        if not self.applies(prev, curr):
            return None
        return Alert(
            type=self.type,
            level=self.level,
            timestamp=curr.timestamp,
            explanation=self.explain(prev, curr),
        )


def _fixed(text: str) -> PairFn:
    return lambda prev, curr: text


TREND_RULES: Tuple[TrendRule, ...] = (
    TrendRule(
        type="Risk escalating",
        level="warning",
        applies=lambda prev, curr: curr.qsofa_score > prev.qsofa_score,
        explain=lambda prev, curr: (
            f"qSOFA screening score increased from {prev.qsofa_score} "
            f"to {curr.qsofa_score} between readings."
        ),
    ),
    # level check, fires on every pair with a high current score
    TrendRule(
        type="High risk screening score",
        level="high",
        applies=lambda prev, curr: curr.qsofa_score >= 2,
        explain=_fixed(
            "qSOFA screening score is at or above 2 based on respiratory rate, "
            "blood pressure, and mental status criteria."
        ),
    ),
    TrendRule(
        type="Respiratory rate threshold crossed",
        level="warning",
        applies=lambda prev, curr: (
            curr.respiratory_rate >= RR_THRESHOLD and prev.respiratory_rate < RR_THRESHOLD
        ),
        explain=_fixed(
            "Respiratory rate increased above the screening threshold of "
            "22 breaths/min compared to the prior reading."
        ),
    ),
    TrendRule(
        type="Blood pressure threshold crossed",
        level="warning",
        applies=lambda prev, curr: (
            curr.systolic_bp <= SBP_THRESHOLD and prev.systolic_bp > SBP_THRESHOLD
        ),
        explain=_fixed(
            "Systolic blood pressure dropped to or below the screening threshold "
            "of 100 mmHg compared to the prior reading."
        ),
    ),
    TrendRule(
        type="Change in mental status",
        level="high",
        applies=lambda prev, curr: is_alert(prev.mental_status) and not is_alert(curr.mental_status),
        explain=_fixed(
            "Mental status changed from fully alert to an altered state between "
            "readings based on recorded input."
        ),
    ),
)


def analyze_trends(
    readings: Sequence[ScoredReading], rules: Sequence[TrendRule] = TREND_RULES
) -> List[Alert]:
    """
    Compares each reading with the one before it.
    Expects readings in ascending time order; output is ordered by pair, then by rule.
    """
    alerts: List[Alert] = []
    for i in range(1, len(readings)):
        prev, curr = readings[i - 1], readings[i]
        for rule in rules:
            alert = rule.evaluate(prev, curr)
            if alert is not None:
                alerts.append(alert)
    return alerts


@dataclass(frozen=True)
class Summary:
    latest_score: int
    latest_risk_label: str
    total_readings: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latestQSOFA": self.latest_score,
            "latestRiskLabel": self.latest_risk_label,
            "totalReadings": self.total_readings,
        }


def summarize(readings: Sequence[ScoredReading]) -> Optional[Summary]:
    if not readings:
        return None
    latest = readings[-1]
    return Summary(
        latest_score=latest.qsofa_score,
        latest_risk_label=latest.qsofa_risk_label,
        total_readings=len(readings),
    )
