from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class DataPoint:
    id: str
    lat: float
    lng: float
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def number(self, key: str, default: float = 0.0) -> float:
        """Return attribute ``key`` as a float, or ``default`` when missing or unparseable."""
        value = self.attributes.get(key)
        if value is None or isinstance(value, bool):
            return default
        try:
            parsed = float(value)
        except (TypeError, ValueError):
            return default
        if not math.isfinite(parsed):
            return default
        return parsed


@dataclass(frozen=True)
class Dataset:
    id: str
    points: Tuple[DataPoint, ...] = ()
    source: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("dataset id is required")
        object.__setattr__(self, "id", self.id.lower())
        object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)


@dataclass(frozen=True)
class Hotspot:
    latitude: float
    longitude: float
    priority: int
    description: str

    def __post_init__(self):
        if not is_valid_coordinate(self.latitude, self.longitude):
            raise ValueError(f"invalid hotspot coordinates ({self.latitude}, {self.longitude})")
        if self.priority < 1:
            raise ValueError("priority must be >= 1")


@dataclass(frozen=True)
class ScoredCandidate:
    point_a: DataPoint
    point_b: DataPoint
    distance_km: float
    distance_deg: float
    score: float


@dataclass(frozen=True)
class Insight:
    text: str
    is_fallback: bool


@dataclass(frozen=True)
class AnalysisResult:
    text: str
    is_fallback: bool
    hotspots: Tuple[Hotspot, ...] = ()


def is_valid_coordinate(lat: float, lng: float) -> bool:
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0
