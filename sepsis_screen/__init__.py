from .risk_engine import Observation, ScoredReading, ScoreResult, risk_label, score_observation
from .simulator import DemoScenario, demo_scenario
from .trends import TREND_RULES, Alert, Summary, TrendRule, analyze_trends, summarize

__all__ = [
    "Alert",
    "DemoScenario",
    "Observation",
    "ScoreResult",
    "ScoredReading",
    "Summary",
    "TREND_RULES",
    "TrendRule",
    "analyze_trends",
    "demo_scenario",
    "risk_label",
    "score_observation",
    "summarize",
]
