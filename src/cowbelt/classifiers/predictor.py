from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from cowbelt.classifiers.ensemble import ensemble_prediction
from cowbelt.classifiers.patterns import pattern_prediction
from cowbelt.classifiers.reference import (
    ALGORITHM,
    CRITICAL,
    MAX_VALID_TEMPERATURE,
    MIN_VALID_TEMPERATURE,
    UNKNOWN,
)
from cowbelt.classifiers.rules import rule_based_prediction
from cowbelt.classifiers.similarity import similarity_prediction


@dataclass(frozen=True)
class HealthClassification:
    disease: str
    confidence: float
    risk_level: str
    algorithm: str = ALGORITHM
    reason: str | None = None

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "disease": self.disease,
            "confidence": self.confidence,
            "riskLevel": self.risk_level,
            "algorithm": self.algorithm,
        }
        if self.reason is not None:
            out["reason"] = self.reason
        return out


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def unclassifiable(reason: str) -> HealthClassification:
    return HealthClassification(disease=UNKNOWN, confidence=0.0, risk_level=CRITICAL, reason=reason)


def classify(
    temperature: Any,
    motion_change: Any,
    humidity: float | None = None,
    pitch: float | None = None,
    roll: float | None = None,
) -> HealthClassification:
    """Classify one reading with the rule, similarity and pattern ensemble.

    Never raises: readings that cannot be classified come back as ``Unknown``
    with zero confidence and ``Critical`` risk. ``humidity`` is accepted for
    call-site compatibility and does not influence the result.
    """
    if not is_number(temperature) or not is_number(motion_change):
        return unclassifiable("Invalid input parameters")

    temperature = float(temperature)
    motion_change = float(motion_change)
    if not math.isfinite(motion_change):
        return unclassifiable("Invalid input parameters")
    # NaN fails both comparisons, so test the valid band positively.
    if not (MIN_VALID_TEMPERATURE <= temperature <= MAX_VALID_TEMPERATURE):
        return unclassifiable("Temperature reading outside valid range")

    combined = ensemble_prediction(
        [
            rule_based_prediction(temperature, motion_change),
            similarity_prediction(temperature, motion_change),
            pattern_prediction(temperature, motion_change, pitch, roll),
        ]
    )
    return HealthClassification(
        disease=combined.disease,
        confidence=combined.confidence,
        risk_level=combined.risk_level,
    )
