from __future__ import annotations

from dataclasses import dataclass
from typing import Any

TEMPERATURE_SPIKE = "Temperature Spike"
TEMPERATURE_DROP = "Temperature Drop"
MOTION_ANOMALY = "Motion Anomaly"
DATA_INCONSISTENCY = "Data Inconsistency"

ANOMALY_TYPES = (TEMPERATURE_SPIKE, TEMPERATURE_DROP, MOTION_ANOMALY, DATA_INCONSISTENCY)

# Anomaly severities are lower case, unlike alert severities.
ANOMALY_SEVERITIES = ("low", "medium", "high", "critical")


@dataclass(frozen=True)
class Anomaly:
    type: str
    severity: str
    message: str
    value: float | None = None
    values: dict[str, float] | None = None

    @property
    def is_alertable(self) -> bool:
        return self.severity in ("high", "critical")

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, "severity": self.severity, "message": self.message}
        if self.values is not None:
            out["values"] = dict(self.values)
        else:
            out["value"] = self.value
        return out


def detect_temperature_anomalies(temperature: float) -> list[Anomaly]:
    anomalies: list[Anomaly] = []
    if temperature > 41.0:
        anomalies.append(Anomaly(TEMPERATURE_SPIKE, "critical", "Critical temperature spike detected", temperature))
    if temperature < 35.0:
        anomalies.append(Anomaly(TEMPERATURE_DROP, "critical", "Critical temperature drop detected", temperature))
    if temperature > 39.5:
        anomalies.append(Anomaly(TEMPERATURE_SPIKE, "medium", "Elevated temperature detected", temperature))
    return anomalies


def detect_motion_anomalies(motion_change: float) -> list[Anomaly]:
    anomalies: list[Anomaly] = []
    # The excessive and unusual bands share the 250 boundary; both fire there.
    if motion_change >= 250:
        anomalies.append(Anomaly(MOTION_ANOMALY, "high", "Excessive activity detected", motion_change))
    if motion_change < 3:
        anomalies.append(Anomaly(MOTION_ANOMALY, "high", "Lethargy detected", motion_change))
    if 150 < motion_change <= 250:
        anomalies.append(Anomaly(MOTION_ANOMALY, "medium", "Unusual activity pattern detected", motion_change))
    return anomalies


def detect_combined_anomalies(temperature: float, motion_change: float) -> list[Anomaly]:
    anomalies: list[Anomaly] = []
    values = {"temperature": temperature, "motion": motion_change}
    if temperature > 39.0 and motion_change < 10:
        anomalies.append(
            Anomaly(
                DATA_INCONSISTENCY,
                "high",
                "Potential illness: High temperature with low activity",
                values=values,
            )
        )
    if temperature < 37.0 and motion_change > 100:
        anomalies.append(
            Anomaly(
                DATA_INCONSISTENCY,
                "medium",
                "Potential stress: Low temperature with high activity",
                values=values,
            )
        )
    if temperature > 40.0 and motion_change > 200:
        anomalies.append(
            Anomaly(
                DATA_INCONSISTENCY,
                "critical",
                "Critical condition: Extreme temperature and activity",
                values=values,
            )
        )
    return anomalies


def _numeric(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def detect_anomalies(temperature: Any, motion_change: Any) -> list[Anomaly]:
    """Scan a single reading; every matching rule fires, absent fields are skipped."""
    temp = _numeric(temperature)
    motion = _numeric(motion_change)

    anomalies: list[Anomaly] = []
    if temp is not None:
        anomalies.extend(detect_temperature_anomalies(temp))
    if motion is not None:
        anomalies.extend(detect_motion_anomalies(motion))
    if temp is not None and motion is not None:
        anomalies.extend(detect_combined_anomalies(temp, motion))
    return anomalies
