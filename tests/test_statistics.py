import pytest

from cowbelt.analytics.statistics import summarize_alerts, summarize_readings


def test_alert_summary() -> None:
    rows = [
        {"type": "Health", "severity": "Critical", "status": "Active", "resolution_time": None},
        {"type": "Health", "severity": "High", "status": "Resolved", "resolution_time": 30},
        {"type": "Motion", "severity": "High", "status": "Resolved", "resolution_time": 90},
        {"type": "Temperature", "severity": "Critical", "status": "Acknowledged", "resolution_time": None},
    ]
    out = summarize_alerts(rows)
    overview = out["overview"]
    assert overview["totalAlerts"] == 4
    assert overview["activeAlerts"] == 1
    assert overview["acknowledgedAlerts"] == 1
    assert overview["resolvedAlerts"] == 2
    assert overview["criticalAlerts"] == 2
    assert overview["highPriorityAlerts"] == 2
    assert overview["avgResolutionTime"] == pytest.approx(60.0)
    assert out["byType"][0] == {"type": "Health", "count": 2}
    assert {d["severity"]: d["count"] for d in out["bySeverity"]} == {"Critical": 2, "High": 2}


def test_alert_summary_without_resolutions() -> None:
    out = summarize_alerts([{"type": "Health", "severity": "High", "status": "Active", "resolution_time": None}])
    assert out["overview"]["avgResolutionTime"] is None
    empty = summarize_alerts([])["overview"]
    assert empty["totalAlerts"] == 0
    assert empty["avgResolutionTime"] is None


def test_reading_summary() -> None:
    rows = [
        {"cow_id": "C1", "temperature": 38.0, "motion_change": 40.0, "disease": "Normal", "risk_level": "Low"},
        {"cow_id": "C1", "temperature": 40.0, "motion_change": 20.0, "disease": "Fever", "risk_level": "High"},
        {"cow_id": "C2", "temperature": None, "motion_change": None, "disease": "Unknown", "risk_level": "Critical"},
    ]
    out = summarize_readings(rows)
    assert out["totalReadings"] == 3
    assert out["totalCows"] == 2
    assert out["readingsPerCow"] == {"C1": 2, "C2": 1}
    assert out["averages"]["temperature"] == pytest.approx(39.0)
    assert out["averages"]["motionChange"] == pytest.approx(30.0)
    assert out["diseaseDistribution"] == {"Normal": 1, "Fever": 1, "Unknown": 1}
    assert summarize_readings([])["totalCows"] == 0
