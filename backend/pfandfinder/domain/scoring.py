from __future__ import annotations

import math
from typing import Iterable, List

from .models import DataPoint, ScoredCandidate

EARTH_RADIUS_KM = 6371.0

FILL_LEVEL_KEY = "fillLevel"
DENSITY_KEY = "density"

FULL_BIN_THRESHOLD = 75.0
HIGH_DENSITY_THRESHOLD = 70.0
TOP_PER_SIDE = 5
# Flat cutoff in decimal degrees, roughly 500 m; ignores that longitude degrees shrink with latitude
PROXIMITY_THRESHOLD_DEG = 0.005


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def degree_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return math.hypot(lat2 - lat1, lon2 - lon1)


def proximity_score(fill_level: float, density: float, distance_deg: float) -> float:
    return (fill_level / 100) * (density / 100) * (1 - distance_deg * 100)


def _top_by_metric(points: Iterable[DataPoint], key: str, threshold: float) -> List[DataPoint]:
    eligible = [
        p
        for p in points
        if math.isfinite(p.lat) and math.isfinite(p.lng) and p.number(key) >= threshold
    ]
    # sorted() is stable, so ties keep source order
    eligible = sorted(eligible, key=lambda p: p.number(key), reverse=True)
    return eligible[:TOP_PER_SIDE]


def score_hotspots(bins: Iterable[DataPoint], density: Iterable[DataPoint]) -> List[ScoredCandidate]:
    """Pair full bins with dense pedestrian points that sit close together.

    Only the five fullest bins (fill >= 75) and the five densest points
    (density >= 70) are considered, so at most 25 pairs are evaluated.
    Candidates are returned best score first.
    """
    full_bins = _top_by_metric(bins, FILL_LEVEL_KEY, FULL_BIN_THRESHOLD)
    dense_points = _top_by_metric(density, DENSITY_KEY, HIGH_DENSITY_THRESHOLD)

    candidates: List[ScoredCandidate] = []
    for bin_point in full_bins:
        for area in dense_points:
            distance_deg = degree_distance(bin_point.lat, bin_point.lng, area.lat, area.lng)
            if distance_deg >= PROXIMITY_THRESHOLD_DEG:
                continue
            candidates.append(
                ScoredCandidate(
                    point_a=bin_point,
                    point_b=area,
                    distance_km=haversine_km(bin_point.lat, bin_point.lng, area.lat, area.lng),
                    distance_deg=distance_deg,
                    score=proximity_score(
                        bin_point.number(FILL_LEVEL_KEY),
                        area.number(DENSITY_KEY),
                        distance_deg,
                    ),
                )
            )

    candidates.sort(key=lambda c: c.score, reverse=True)
    return candidates
