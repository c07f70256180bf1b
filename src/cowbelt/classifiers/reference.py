from __future__ import annotations

from dataclasses import dataclass

NORMAL = "Normal"
FEVER = "Fever"
HIGH_FEVER = "Heat / High Fever"
HYPOTHERMIA = "Low Fever / Hypothermia"
STRESS = "Stress / Unusual Movement"
UNKNOWN = "Unknown"

DISEASES = (NORMAL, FEVER, HIGH_FEVER, HYPOTHERMIA, STRESS, UNKNOWN)

LOW = "Low"
MEDIUM = "Medium"
HIGH = "High"
CRITICAL = "Critical"

# Ordered least to most severe.
RISK_LEVELS = (LOW, MEDIUM, HIGH, CRITICAL)

ALGORITHM = "Ensemble ML + Rules + Patterns"

# Readings outside this band are unclassifiable.
MIN_VALID_TEMPERATURE = 30.0
MAX_VALID_TEMPERATURE = 45.0

# Normalisation ranges for the similarity score.
TEMPERATURE_RANGE = 7.0
MOTION_RANGE = 300.0


@dataclass(frozen=True)
class Prediction:
    disease: str
    confidence: float
    risk_level: str

    def as_dict(self) -> dict:
        return {"disease": self.disease, "confidence": self.confidence, "riskLevel": self.risk_level}


@dataclass(frozen=True)
class ReferencePoint:
    temperature: float
    motion: float
    disease: str
    confidence: float


REFERENCE_TABLE: tuple[ReferencePoint, ...] = (
    ReferencePoint(37.5, 25, NORMAL, 0.95),
    ReferencePoint(38.0, 30, NORMAL, 0.90),
    ReferencePoint(38.5, 35, NORMAL, 0.85),
    ReferencePoint(39.0, 40, NORMAL, 0.80),
    ReferencePoint(39.5, 45, FEVER, 0.75),
    ReferencePoint(40.0, 50, HIGH_FEVER, 0.85),
    ReferencePoint(40.5, 55, HIGH_FEVER, 0.90),
    ReferencePoint(41.0, 60, HIGH_FEVER, 0.95),
    ReferencePoint(37.0, 15, HYPOTHERMIA, 0.70),
    ReferencePoint(36.5, 10, HYPOTHERMIA, 0.80),
    ReferencePoint(36.0, 5, HYPOTHERMIA, 0.90),
    ReferencePoint(35.5, 2, HYPOTHERMIA, 0.95),
    ReferencePoint(38.0, 80, STRESS, 0.75),
    ReferencePoint(38.5, 100, STRESS, 0.85),
    ReferencePoint(39.0, 150, STRESS, 0.90),
    ReferencePoint(39.5, 200, STRESS, 0.95),
)


def risk_rank(level: str) -> int:
    return RISK_LEVELS.index(level)
