from __future__ import annotations

from collections.abc import Sequence

from cowbelt.classifiers.reference import LOW, NORMAL, Prediction, risk_rank


def ensemble_prediction(results: Sequence[Prediction]) -> Prediction:
    """Confidence-weighted label vote; the most severe risk among the voters wins."""
    votes: dict[str, float] = {}
    total_confidence = 0.0
    for r in results:
        votes[r.disease] = votes.get(r.disease, 0.0) + r.confidence
        total_confidence += r.confidence

    best_disease = NORMAL
    best_score = 0.0
    for disease, score in votes.items():
        if score > best_score:
            best_disease = disease
            best_score = score

    confidence = best_score / total_confidence if total_confidence > 0 else 0.5
    risk = max((r.risk_level for r in results), key=risk_rank, default=LOW)

    return Prediction(best_disease, confidence, risk)
