import pytest

from pfandfinder.domain import scoring


def test_haversine_is_symmetric():
    a = (52.5200, 13.4050)
    b = (48.1351, 11.5820)
    assert scoring.haversine_km(*a, *b) == scoring.haversine_km(*b, *a)


def test_haversine_zero_for_same_point():
    assert scoring.haversine_km(52.52, 13.405, 52.52, 13.405) == 0


def test_haversine_known_distance_berlin_munich():
    distance = scoring.haversine_km(52.5200, 13.4050, 48.1351, 11.5820)
    assert distance == pytest.approx(504, abs=2)


def test_degree_distance_is_planar():
    assert scoring.degree_distance(0, 0, 0.003, 0.004) == pytest.approx(0.005)


def test_proximity_score_formula():
    assert scoring.proximity_score(90, 80, 0.0) == pytest.approx(0.72)
    assert scoring.proximity_score(100, 100, 0.005) == pytest.approx(0.5)
