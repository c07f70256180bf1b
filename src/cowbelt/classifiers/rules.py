from __future__ import annotations

from cowbelt.classifiers.reference import (
    CRITICAL,
    FEVER,
    HIGH,
    HIGH_FEVER,
    HYPOTHERMIA,
    LOW,
    MEDIUM,
    NORMAL,
    STRESS,
    Prediction,
)

MAX_RULE_CONFIDENCE = 0.95


def rule_based_prediction(temperature: float, motion_change: float) -> Prediction:
    """Nested threshold checks; temperature decides first, motion only adjusts."""
    if temperature >= 41.5:
        disease, confidence, risk = HIGH_FEVER, 0.95, CRITICAL
    elif temperature >= 40.5:
        disease, confidence, risk = HIGH_FEVER, 0.90, HIGH
    elif temperature >= 39.5:
        disease, confidence, risk = FEVER, 0.80, MEDIUM
    elif temperature <= 35.0:
        disease, confidence, risk = HYPOTHERMIA, 0.95, CRITICAL
    elif temperature <= 36.5:
        disease, confidence, risk = HYPOTHERMIA, 0.85, HIGH
    else:
        disease, confidence, risk = NORMAL, 0.80, LOW

    if motion_change > 200:
        if disease == NORMAL:
            disease, confidence, risk = STRESS, 0.85, MEDIUM
        else:
            confidence = min(confidence + 0.1, MAX_RULE_CONFIDENCE)
    elif motion_change < 5:
        if disease == NORMAL:
            disease, confidence, risk = HYPOTHERMIA, 0.75, MEDIUM
        else:
            confidence = min(confidence + 0.05, MAX_RULE_CONFIDENCE)

    return Prediction(disease, confidence, risk)
