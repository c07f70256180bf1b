from __future__ import annotations

from cowbelt.classifiers.reference import (
    CRITICAL,
    HIGH,
    HIGH_FEVER,
    HYPOTHERMIA,
    LOW,
    MEDIUM,
    NORMAL,
    STRESS,
    Prediction,
)

SEVERITY_HIGH = "high"
SEVERITY_MEDIUM = "medium"
SEVERITY_LOW = "low"


def temperature_severity(temperature: float) -> str:
    if temperature >= 41.0 or temperature <= 35.0:
        return SEVERITY_HIGH
    if temperature >= 39.0 or temperature <= 36.0:
        return SEVERITY_MEDIUM
    return SEVERITY_LOW


def motion_severity(motion_change: float) -> str:
    if motion_change >= 200 or motion_change <= 5:
        return SEVERITY_HIGH
    if motion_change >= 100 or motion_change <= 15:
        return SEVERITY_MEDIUM
    return SEVERITY_LOW


def orientation_severity(pitch: float, roll: float) -> str:
    pitch_abs = abs(pitch)
    roll_abs = abs(roll)
    if pitch_abs > 45 or roll_abs > 45:
        return SEVERITY_HIGH
    if pitch_abs > 30 or roll_abs > 30:
        return SEVERITY_MEDIUM
    return SEVERITY_LOW


def pattern_prediction(
    temperature: float,
    motion_change: float,
    pitch: float | None = None,
    roll: float | None = None,
) -> Prediction:
    temp_sev = temperature_severity(temperature)
    motion_sev = motion_severity(motion_change)

    if pitch is not None and roll is not None:
        # Orientation is fused into the reading but does not change the label yet.
        orientation_severity(pitch, roll)

        if temp_sev == SEVERITY_HIGH and motion_sev == SEVERITY_HIGH:
            return Prediction(HIGH_FEVER, 0.9, CRITICAL)
        if temp_sev == SEVERITY_MEDIUM and motion_sev == SEVERITY_HIGH:
            return Prediction(STRESS, 0.85, HIGH)
        if temp_sev == SEVERITY_LOW and motion_sev == SEVERITY_LOW:
            return Prediction(HYPOTHERMIA, 0.8, MEDIUM)
        return Prediction(NORMAL, 0.7, LOW)

    if temp_sev == SEVERITY_HIGH:
        return Prediction(HIGH_FEVER, 0.85, HIGH)
    if motion_sev == SEVERITY_HIGH:
        return Prediction(STRESS, 0.8, MEDIUM)
    return Prediction(NORMAL, 0.7, LOW)
