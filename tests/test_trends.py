from datetime import datetime, timedelta, timezone

import pytest

from sepsis_screen.risk_engine import Observation, ScoredReading
from sepsis_screen.trends import TREND_RULES, Alert, Summary, analyze_trends, summarize

T0 = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


def _types(alerts):
    return [a.type for a in alerts]


def test_empty_and_single_reading_produce_no_alerts(make_readings):
    assert analyze_trends([]) == []
    assert analyze_trends(make_readings([30], [80], ["Confused"])) == []


def test_rising_scores_escalate_then_flag_high_risk(make_readings):
    readings = make_readings([18, 24, 24], [120, 120, 90])
    assert [r.qsofa_score for r in readings] == [0, 1, 2]

    alerts = analyze_trends(readings)

    assert _types(alerts) == [
        "Risk escalating",
        "Respiratory rate threshold crossed",
        "Risk escalating",
        "High risk screening score",
        "Blood pressure threshold crossed",
    ]
    assert alerts[0].explanation == "qSOFA screening score increased from 0 to 1 between readings."
    assert alerts[2].explanation == "qSOFA screening score increased from 1 to 2 between readings."
    assert alerts[0].timestamp == readings[1].timestamp
    assert alerts[3].timestamp == readings[2].timestamp


def test_levels(make_readings):
    alerts = analyze_trends(make_readings([18, 24], [120, 90], ["Alert", "Confused"]))
    assert [(a.type, a.level) for a in alerts] == [
        ("Risk escalating", "warning"),
        ("High risk screening score", "high"),
        ("Respiratory rate threshold crossed", "warning"),
        ("Blood pressure threshold crossed", "warning"),
        ("Change in mental status", "high"),
    ]


def test_respiratory_rate_already_elevated_does_not_refire(make_readings):
    alerts = analyze_trends(make_readings([25, 25, 25], [120, 120, 120]))
    assert "Respiratory rate threshold crossed" not in _types(alerts)
    assert alerts == []


def test_threshold_rules_ignore_downward_crossing(make_readings):
    alerts = analyze_trends(make_readings([24, 18], [90, 120]))
    assert alerts == []


def test_blood_pressure_crossing_fires_once(make_readings):
    alerts = analyze_trends(make_readings([18, 18, 18, 18], [110, 100, 95, 101]))
    crossed = [a for a in alerts if a.type == "Blood pressure threshold crossed"]
    assert len(crossed) == 1
    assert crossed[0].timestamp == T0 + timedelta(minutes=15)


def test_mental_status_improvement_is_not_an_alert(make_readings):
    readings = make_readings([18, 18, 18], [120, 120, 120], ["Alert", "Confused", "Alert"])
    alerts = [a for a in analyze_trends(readings) if a.type == "Change in mental status"]
    assert len(alerts) == 1
    assert alerts[0].timestamp == readings[1].timestamp


def test_mental_status_oscillating_while_altered_does_not_refire(make_readings):
    readings = make_readings([18] * 4, [120] * 4, ["ALERT", "Confused", "Drowsy", "Confused"])
    alerts = [a for a in analyze_trends(readings) if a.type == "Change in mental status"]
    assert len(alerts) == 1


def test_identical_low_readings_produce_nothing(make_readings):
    assert analyze_trends(make_readings([18] * 5, [120] * 5)) == []


def test_high_risk_repeats_on_every_high_pair(make_readings):
    alerts = analyze_trends(make_readings([24, 24, 24], [90, 90, 90]))
    assert _types(alerts) == ["High risk screening score", "High risk screening score"]


def test_fluctuating_score_escalates_each_time_it_rises(make_readings):
    readings = make_readings([18, 24, 18, 24], [120, 120, 120, 120])
    escalations = [a for a in analyze_trends(readings) if a.type == "Risk escalating"]
    assert [a.timestamp for a in escalations] == [readings[1].timestamp, readings[3].timestamp]


def test_analysis_is_repeatable(make_readings):
    readings = make_readings([18, 22, 26, 19], [130, 100, 90, 105], ["Alert", "Alert", "Confused", "Alert"])
    assert analyze_trends(readings) == analyze_trends(list(readings))


def test_custom_rule_subset(make_readings):
    readings = make_readings([18, 24], [120, 90], ["Alert", "Confused"])
    alerts = analyze_trends(readings, rules=[TREND_RULES[4]])
    assert _types(alerts) == ["Change in mental status"]


@pytest.mark.parametrize(
    "index, prev, curr, fires",
    [
        (0, (18, 120, "Alert"), (24, 120, "Alert"), True),
        (0, (24, 120, "Alert"), (24, 120, "Alert"), False),
        (1, (24, 90, "Alert"), (24, 90, "Alert"), True),
        (1, (18, 120, "Alert"), (24, 120, "Alert"), False),
        (2, (21, 120, "Alert"), (22, 120, "Alert"), True),
        (2, (22, 120, "Alert"), (30, 120, "Alert"), False),
        (3, (18, 100, "Alert"), (18, 100, "Alert"), False),
        (3, (18, 101, "Alert"), (18, 100, "Alert"), True),
        (4, (18, 120, "alert"), (18, 120, "Lethargic"), True),
        (4, (18, 120, "Confused"), (18, 120, "Alert"), False),
    ],
)
def test_each_rule_in_isolation(index, prev, curr, fires):
    a = ScoredReading.from_observation(Observation(*prev), T0)
    b = ScoredReading.from_observation(Observation(*curr), T0 + timedelta(minutes=5))
    alert = TREND_RULES[index].evaluate(a, b)
    assert (alert is not None) == fires
    if fires:
        assert alert.timestamp == b.timestamp


def test_alert_to_dict():
    alert = Alert(type="Risk escalating", level="warning", timestamp=T0, explanation="x")
    assert alert.to_dict() == {
        "type": "Risk escalating",
        "level": "warning",
        "timestamp": "2024-05-01T08:00:00+00:00",
        "explanation": "x",
    }


def test_summarize(make_readings):
    assert summarize([]) is None

    readings = make_readings([18, 30], [120, 80], ["Alert", "Confused"])
    summary = summarize(readings)
    assert summary == Summary(latest_score=3, latest_risk_label="High screening score", total_readings=2)
    assert summary.to_dict() == {
        "latestQSOFA": 3,
        "latestRiskLabel": "High screening score",
        "totalReadings": 2,
    }
