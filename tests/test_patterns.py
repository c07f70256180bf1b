from cowbelt.classifiers.patterns import motion_severity, orientation_severity, pattern_prediction, temperature_severity
from cowbelt.classifiers.reference import CRITICAL, HIGH, HIGH_FEVER, HYPOTHERMIA, LOW, MEDIUM, NORMAL, STRESS


def test_severity_bands() -> None:
    assert temperature_severity(41.0) == "high"
    assert temperature_severity(35.0) == "high"
    assert temperature_severity(39.0) == "medium"
    assert temperature_severity(36.0) == "medium"
    assert temperature_severity(38.5) == "low"

    assert motion_severity(200) == "high"
    assert motion_severity(5) == "high"
    assert motion_severity(100) == "medium"
    assert motion_severity(15) == "medium"
    assert motion_severity(50) == "low"

    assert orientation_severity(46, 0) == "high"
    assert orientation_severity(0, -31) == "medium"
    assert orientation_severity(10, 10) == "low"


def test_fused_branches() -> None:
    p = pattern_prediction(41.5, 250, 0, 0)
    assert (p.disease, p.confidence, p.risk_level) == (HIGH_FEVER, 0.9, CRITICAL)

    p = pattern_prediction(39.5, 250, 0, 0)
    assert (p.disease, p.confidence, p.risk_level) == (STRESS, 0.85, HIGH)

    # Calm readings land in the low/low branch.
    p = pattern_prediction(38.0, 50, 0, 0)
    assert (p.disease, p.confidence, p.risk_level) == (HYPOTHERMIA, 0.8, MEDIUM)

    p = pattern_prediction(41.5, 50, 0, 0)
    assert (p.disease, p.confidence, p.risk_level) == (NORMAL, 0.7, LOW)


def test_orientation_does_not_change_outcome() -> None:
    for temperature, motion in [(38.0, 250), (41.5, 250), (38.0, 50), (39.5, 250)]:
        assert pattern_prediction(temperature, motion, 80, -80) == pattern_prediction(temperature, motion, 0, 0)


def test_fallback_without_orientation() -> None:
    p = pattern_prediction(41.0, 50)
    assert (p.disease, p.confidence, p.risk_level) == (HIGH_FEVER, 0.85, HIGH)

    p = pattern_prediction(38.0, 3)
    assert (p.disease, p.confidence, p.risk_level) == (STRESS, 0.8, MEDIUM)

    p = pattern_prediction(38.0, 50)
    assert (p.disease, p.confidence, p.risk_level) == (NORMAL, 0.7, LOW)

    # A single orientation angle is not enough for fusion.
    assert pattern_prediction(38.0, 50, pitch=10) == pattern_prediction(38.0, 50)
