import pytest

from cowbelt.classifiers.reference import HIGH, HYPOTHERMIA, MEDIUM, NORMAL, REFERENCE_TABLE, STRESS
from cowbelt.classifiers.similarity import nearest_references, similarity_prediction, similarity_scores


def test_reference_table_has_sixteen_rows() -> None:
    assert len(REFERENCE_TABLE) == 16
    assert REFERENCE_TABLE[0].temperature == 37.5
    assert REFERENCE_TABLE[0].motion == 25


def test_exact_match_on_first_row_is_selected_and_weighted_by_hand() -> None:
    top = nearest_references(37.5, 25)
    assert [ref for ref, _ in top] == [REFERENCE_TABLE[0], REFERENCE_TABLE[1], REFERENCE_TABLE[8]]
    assert top[0][1] == 1.0

    s1 = 1 - ((0.5 / 7) + (5 / 300)) / 2
    s8 = 1 - ((0.5 / 7) + (10 / 300)) / 2
    w_normal = 1.0 * 0.95 + s1 * 0.90
    w_hypo = s8 * 0.70
    expected = w_normal / (w_normal + w_hypo)

    p = similarity_prediction(37.5, 25)
    assert p.disease == NORMAL
    assert p.confidence == pytest.approx(expected, abs=1e-12)
    assert p.risk_level == MEDIUM


def test_ties_keep_table_order() -> None:
    top = nearest_references(38.0, 55)
    assert top[0][0] is REFERENCE_TABLE[1]
    assert top[1][0] is REFERENCE_TABLE[12]
    assert top[0][1] == top[1][1]


def test_similarity_is_floored_at_zero() -> None:
    scores = similarity_scores(30.0, 5000)
    assert scores.min() == 0.0
    assert len(scores) == 16


def test_unanimous_vote_gives_full_confidence_and_high_risk() -> None:
    p = similarity_prediction(35.5, 2)
    assert p.disease == HYPOTHERMIA
    assert p.confidence == pytest.approx(1.0)
    assert p.risk_level == HIGH


def test_stress_region() -> None:
    p = similarity_prediction(39.2, 180)
    assert p.disease == STRESS
