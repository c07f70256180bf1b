from __future__ import annotations

import numpy as np

from cowbelt.classifiers.reference import (
    HIGH,
    LOW,
    MEDIUM,
    MOTION_RANGE,
    NORMAL,
    REFERENCE_TABLE,
    TEMPERATURE_RANGE,
    Prediction,
    ReferencePoint,
)

TOP_K = 3

_REF_TEMPS = np.array([r.temperature for r in REFERENCE_TABLE], dtype=float)
_REF_MOTIONS = np.array([r.motion for r in REFERENCE_TABLE], dtype=float)


def similarity_scores(temperature: float, motion_change: float) -> np.ndarray:
    """Similarity of the input to every reference row, in table order, floored at 0."""
    temp_diff = np.abs(temperature - _REF_TEMPS) / TEMPERATURE_RANGE
    motion_diff = np.abs(motion_change - _REF_MOTIONS) / MOTION_RANGE
    return np.maximum(1.0 - (temp_diff + motion_diff) / 2, 0.0)


def nearest_references(temperature: float, motion_change: float, *, k: int = TOP_K) -> list[tuple[ReferencePoint, float]]:
    scores = similarity_scores(temperature, motion_change)
    # Stable sort so that earlier table rows win ties.
    order = np.argsort(-scores, kind="stable")[:k]
    return [(REFERENCE_TABLE[int(i)], float(scores[int(i)])) for i in order.tolist()]


def similarity_prediction(temperature: float, motion_change: float) -> Prediction:
    votes: dict[str, float] = {}
    total_weight = 0.0
    for ref, sim in nearest_references(temperature, motion_change):
        weight = sim * ref.confidence
        votes[ref.disease] = votes.get(ref.disease, 0.0) + weight
        total_weight += weight

    best_disease = NORMAL
    best_score = 0.0
    for disease, score in votes.items():
        if score > best_score:
            best_disease = disease
            best_score = score

    confidence = best_score / total_weight if total_weight > 0 else 0.5

    if confidence > 0.8:
        risk = HIGH
    elif confidence > 0.6:
        risk = MEDIUM
    else:
        risk = LOW

    return Prediction(best_disease, confidence, risk)
