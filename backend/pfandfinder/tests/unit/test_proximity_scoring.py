from __future__ import annotations

import pytest

from pfandfinder.domain import scoring
from pfandfinder.domain.models import DataPoint


def make_bin(point_id: str, lat: float, lng: float, fill) -> DataPoint:
    return DataPoint(id=point_id, lat=lat, lng=lng, attributes={"fillLevel": fill})


def make_area(point_id: str, lat: float, lng: float, density) -> DataPoint:
    return DataPoint(id=point_id, lat=lat, lng=lng, attributes={"density": density})


def test_close_full_bin_and_dense_area_is_candidate():
    bins = [make_bin("b1", 52.5200, 13.4050, 90)]
    areas = [make_area("p1", 52.5201, 13.4051, 80)]
    candidates = scoring.score_hotspots(bins, areas)
    assert len(candidates) == 1
    candidate = candidates[0]
    assert candidate.distance_deg == pytest.approx(0.000141, abs=1e-5)
    assert candidate.score == pytest.approx(0.710, abs=1e-3)
    assert candidate.distance_km == pytest.approx(0.0130, abs=1e-3)
    assert candidate.point_a.id == "b1"
    assert candidate.point_b.id == "p1"


def test_threshold_filters_low_fill_and_low_density():
    bins = [make_bin("low", 52.52, 13.405, 74), make_bin("full", 52.52, 13.405, 75)]
    areas = [make_area("sparse", 52.52, 13.405, 69), make_area("dense", 52.52, 13.405, 70)]
    candidates = scoring.score_hotspots(bins, areas)
    assert [(c.point_a.id, c.point_b.id) for c in candidates] == [("full", "dense")]
    for c in candidates:
        assert c.point_a.number("fillLevel") >= 75
        assert c.point_b.number("density") >= 70


def test_distant_pairs_are_ignored():
    bins = [make_bin("b1", 52.52, 13.405, 95)]
    areas = [make_area("p1", 52.52, 13.411, 95)]
    assert scoring.score_hotspots(bins, areas) == []


def test_only_top_five_of_each_side_are_paired():
    bins = [make_bin(f"b{i}", 52.52, 13.405, 100 - i) for i in range(7)]
    areas = [make_area(f"p{i}", 52.52, 13.405, 100 - i) for i in range(7)]
    candidates = scoring.score_hotspots(bins, areas)
    assert len(candidates) == 25
    assert {c.point_a.id for c in candidates} == {f"b{i}" for i in range(5)}
    assert {c.point_b.id for c in candidates} == {f"p{i}" for i in range(5)}


def test_candidates_are_sorted_by_score_descending():
    bins = [make_bin("b1", 52.52, 13.405, 80), make_bin("b2", 52.50, 13.40, 99)]
    areas = [make_area("p1", 52.5201, 13.405, 90), make_area("p2", 52.5002, 13.40, 90)]
    candidates = scoring.score_hotspots(bins, areas)
    scores = [c.score for c in candidates]
    assert scores == sorted(scores, reverse=True)
    assert candidates[0].point_a.id == "b2"


def test_string_metrics_from_csv_are_coerced():
    bins = [make_bin("b1", 52.52, 13.405, "88")]
    areas = [make_area("p1", 52.52, 13.405, "not-a-number"), make_area("p2", 52.52, 13.405, "77")]
    candidates = scoring.score_hotspots(bins, areas)
    assert [c.point_b.id for c in candidates] == ["p2"]


def test_scoring_is_idempotent():
    bins = (make_bin("b1", 52.52, 13.405, 90), make_bin("b2", 52.5201, 13.4052, 85))
    areas = (make_area("p1", 52.5201, 13.4051, 80), make_area("p2", 52.5199, 13.4049, 75))
    assert scoring.score_hotspots(bins, areas) == scoring.score_hotspots(bins, areas)


def test_empty_inputs_produce_no_candidates():
    assert scoring.score_hotspots([], []) == []


def test_top_by_metric_keeps_source_order_on_ties():
    points = [DataPoint(id=str(i), lat=52.52, lng=13.405, attributes={"fillLevel": 80}) for i in range(7)]
    points.insert(3, DataPoint(id="full", lat=52.52, lng=13.405, attributes={"fillLevel": 95}))
    top = scoring._top_by_metric(points, scoring.FILL_LEVEL_KEY, scoring.FULL_BIN_THRESHOLD)
    assert [p.id for p in top] == ["full", "0", "1", "2", "3"]
