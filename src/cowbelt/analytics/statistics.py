from __future__ import annotations

from typing import Any

import pandas as pd

ALERT_COLUMNS = ["type", "severity", "status", "resolution_time"]
READING_COLUMNS = ["cow_id", "temperature", "motion_change", "disease", "risk_level"]


def _counts(series: pd.Series, *, key: str) -> list[dict[str, Any]]:
    vc = series.dropna().value_counts()
    return [{key: str(k), "count": int(v)} for k, v in vc.items()]


def summarize_alerts(rows: list[dict[str, Any]]) -> dict[str, Any]:
    df = pd.DataFrame(rows, columns=ALERT_COLUMNS)
    if df.empty:
        return {
            "overview": {
                "totalAlerts": 0,
                "activeAlerts": 0,
                "acknowledgedAlerts": 0,
                "resolvedAlerts": 0,
                "criticalAlerts": 0,
                "highPriorityAlerts": 0,
                "avgResolutionTime": None,
            },
            "byType": [],
            "bySeverity": [],
        }

    resolution = pd.to_numeric(df["resolution_time"], errors="coerce")
    overview = {
        "totalAlerts": int(len(df)),
        "activeAlerts": int((df["status"] == "Active").sum()),
        "acknowledgedAlerts": int((df["status"] == "Acknowledged").sum()),
        "resolvedAlerts": int((df["status"] == "Resolved").sum()),
        "criticalAlerts": int((df["severity"] == "Critical").sum()),
        "highPriorityAlerts": int((df["severity"] == "High").sum()),
        "avgResolutionTime": float(resolution.mean()) if resolution.notna().any() else None,
    }
    return {
        "overview": overview,
        "byType": _counts(df["type"], key="type"),
        "bySeverity": _counts(df["severity"], key="severity"),
    }


def summarize_readings(rows: list[dict[str, Any]]) -> dict[str, Any]:
    df = pd.DataFrame(rows, columns=READING_COLUMNS)
    if df.empty:
        return {
            "totalReadings": 0,
            "totalCows": 0,
            "averages": {"temperature": None, "motionChange": None},
            "readingsPerCow": {},
            "diseaseDistribution": {},
            "riskDistribution": {},
        }

    temps = pd.to_numeric(df["temperature"], errors="coerce")
    motions = pd.to_numeric(df["motion_change"], errors="coerce")
    per_cow = df.groupby("cow_id").size()

    return {
        "totalReadings": int(len(df)),
        "totalCows": int(per_cow.size),
        "averages": {
            "temperature": float(temps.mean()) if temps.notna().any() else None,
            "motionChange": float(motions.mean()) if motions.notna().any() else None,
        },
        "readingsPerCow": {str(k): int(v) for k, v in per_cow.items()},
        "diseaseDistribution": {str(k): int(v) for k, v in df["disease"].dropna().value_counts().items()},
        "riskDistribution": {str(k): int(v) for k, v in df["risk_level"].dropna().value_counts().items()},
    }
