from typing import Any, Dict, Sequence

import pandas as pd

READING_COLUMNS = ["timestamp", "respiratory_rate", "systolic_bp", "mental_status", "qsofa_score", "risk_label", "reasons"]
ALERT_COLUMNS = ["timestamp", "level", "type", "explanation"]


def readings_frame(readings: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    """Readings (wire dicts) as a table, oldest first."""
    rows = [
        {
            "timestamp": pd.Timestamp(r["timestamp"]),
            "respiratory_rate": r["respiratoryRate"],
            "systolic_bp": r["systolicBP"],
            "mental_status": r["mentalStatus"],
            "qsofa_score": r["qsofaScore"],
            "risk_label": r["qsofaRiskLabel"],
            "reasons": " | ".join(r["qsofaReasons"]) if r["qsofaReasons"] else "",
        }
        for r in readings
    ]
    return pd.DataFrame(rows, columns=READING_COLUMNS)


def trend_frame(readings: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    # chart input: one column per series, indexed by time
    df = readings_frame(readings)
    return df.set_index("timestamp")[["respiratory_rate", "systolic_bp", "qsofa_score"]]


def alerts_frame(alerts: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    # newest first for the feed
    df = pd.DataFrame(list(alerts), columns=ALERT_COLUMNS)
    if df.empty:
        return df
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df.iloc[::-1].reset_index(drop=True)
