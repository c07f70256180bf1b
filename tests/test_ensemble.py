import math

import pytest

from cowbelt.classifiers.ensemble import ensemble_prediction
from cowbelt.classifiers.predictor import classify
from cowbelt.classifiers.reference import (
    ALGORITHM,
    CRITICAL,
    FEVER,
    HIGH,
    HIGH_FEVER,
    LOW,
    NORMAL,
    STRESS,
    UNKNOWN,
    Prediction,
)


def test_any_critical_vote_forces_critical_risk() -> None:
    out = ensemble_prediction(
        [
            Prediction(NORMAL, 0.8, LOW),
            Prediction(NORMAL, 0.7, LOW),
            Prediction(HIGH_FEVER, 0.9, CRITICAL),
        ]
    )
    assert out.disease == NORMAL
    assert out.risk_level == CRITICAL
    assert out.confidence == pytest.approx(1.5 / 2.4)


def test_first_label_to_reach_the_top_weight_wins_ties() -> None:
    out = ensemble_prediction([Prediction(FEVER, 0.5, LOW), Prediction(STRESS, 0.5, LOW)])
    assert out.disease == FEVER
    assert out.confidence == pytest.approx(0.5)


def test_zero_confidence_falls_back_to_normal() -> None:
    out = ensemble_prediction([Prediction(FEVER, 0.0, HIGH)] * 3)
    assert out.disease == NORMAL
    assert out.confidence == 0.5
    assert out.risk_level == HIGH


@pytest.mark.parametrize("temperature", [29.9, 45.01, 10, 60, math.nan, math.inf])
def test_out_of_range_temperature_is_unknown(temperature: float) -> None:
    for motion in (0, 50, 400):
        out = classify(temperature, motion)
        assert (out.disease, out.confidence, out.risk_level) == (UNKNOWN, 0.0, CRITICAL)
        assert out.reason


@pytest.mark.parametrize("temperature, motion", [("38.5", 20), (None, 20), (38.5, None), (True, 20), (38.5, [1])])
def test_non_numeric_input_is_unknown(temperature, motion) -> None:
    out = classify(temperature, motion)
    assert (out.disease, out.confidence, out.risk_level) == (UNKNOWN, 0.0, CRITICAL)
    assert out.reason == "Invalid input parameters"


def test_range_limits_are_classifiable() -> None:
    assert classify(30.0, 20).disease != UNKNOWN
    assert classify(45.0, 20).disease != UNKNOWN


def test_fever_with_hyperactivity_end_to_end() -> None:
    out = classify(41.8, 220, pitch=5, roll=5)
    # rule: Heat / High Fever 0.95 Critical; pattern: Heat / High Fever 0.9 Critical;
    # similarity votes Stress / Unusual Movement from the nearest stress rows.
    assert out.disease == HIGH_FEVER
    assert out.risk_level == CRITICAL
    assert out.algorithm == ALGORITHM
    assert 0 < out.confidence < 1
    assert out.as_dict()["riskLevel"] == CRITICAL
