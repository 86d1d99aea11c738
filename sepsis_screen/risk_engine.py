from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

# qSOFA screening lines
RR_THRESHOLD = 22
SBP_THRESHOLD = 100

REASON_RR = "Respiratory rate at or above 22 breaths/min"
REASON_SBP = "Systolic blood pressure at or below 100 mmHg"
REASON_MENTAL = "Altered mental status (not fully alert)"


@dataclass(frozen=True)
class Observation:
    respiratory_rate: float
    systolic_bp: float
    mental_status: Optional[str]


@dataclass(frozen=True)
class ScoreResult:
    score: int
    risk_label: str
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "riskLabel": self.risk_label, "reasons": list(self.reasons)}


def is_alert(mental_status: Optional[str]) -> bool:
    return (mental_status or "").lower() == "alert"


def risk_label(score: int) -> str:
    if score >= 2:
        return "High screening score"
    if score == 1:
        return "Intermediate screening score"
    return "Low screening score"


def score_observation(obs: Observation) -> ScoreResult:
    """
    Returns the qSOFA screening result for one observation.
    Each criterion adds one point; reasons follow evaluation order.
    """
    reasons: List[str] = []

    if obs.respiratory_rate >= RR_THRESHOLD:
        reasons.append(REASON_RR)
    if obs.systolic_bp <= SBP_THRESHOLD:
        reasons.append(REASON_SBP)
    # empty / missing status counts as alert
    if obs.mental_status and not is_alert(obs.mental_status):
        reasons.append(REASON_MENTAL)

    score = len(reasons)
    return ScoreResult(score=score, risk_label=risk_label(score), reasons=tuple(reasons))


@dataclass(frozen=True)
class ScoredReading:
    timestamp: datetime
    respiratory_rate: float
    systolic_bp: float
    mental_status: Optional[str]
    qsofa_score: int
    qsofa_risk_label: str
    qsofa_reasons: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_observation(cls, obs: Observation, timestamp: datetime) -> "ScoredReading":
        result = score_observation(obs)
        return cls(
            timestamp=timestamp,
            respiratory_rate=obs.respiratory_rate,
            systolic_bp=obs.systolic_bp,
            mental_status=obs.mental_status,
            qsofa_score=result.score,
            qsofa_risk_label=result.risk_label,
            qsofa_reasons=result.reasons,
        )

    @property
    def observation(self) -> Observation:
        return Observation(self.respiratory_rate, self.systolic_bp, self.mental_status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "respiratoryRate": self.respiratory_rate,
            "systolicBP": self.systolic_bp,
            "mentalStatus": self.mental_status,
            "qsofaScore": self.qsofa_score,
            "qsofaRiskLabel": self.qsofa_risk_label,
            "qsofaReasons": list(self.qsofa_reasons),
        }
