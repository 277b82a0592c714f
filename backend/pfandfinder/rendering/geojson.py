from __future__ import annotations

from typing import Callable, Mapping, Optional, Sequence

from pfandfinder.domain.models import DataPoint, Hotspot
from pfandfinder.hub.hotspot_channel import HotspotChannel

from .base import Bounds, MapHandle, MapRenderer

# Heatmap weights are normalized from a 0-100 metric
HEATMAP_SCALE = 100.0
HOTSPOT_INFLUENCE_M = 500.0


def _feature(point: DataPoint) -> dict:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [point.lng, point.lat]},
        "properties": {"id": point.id, **dict(point.attributes)},
    }


def _collection(features: list[dict]) -> dict:
    return {"type": "FeatureCollection", "features": features}


class GeoJSONMapRenderer(MapRenderer):
    """Renders layers and markers as GeoJSON documents on a ``MapHandle``."""

    def __init__(self, handle: Optional[MapHandle] = None) -> None:
        self.handle = handle or MapHandle()

    def clear_layers(self) -> None:
        self.handle.layers = {}
        self.handle.bounds = None

    def render_points(self, layer_id: str, points: Sequence[DataPoint], style: Mapping[str, object]) -> None:
        self.handle.layers[layer_id] = {
            "type": "circle",
            "style": dict(style),
            "data": _collection([_feature(p) for p in points]),
        }

    def render_heatmap(self, layer_id: str, points: Sequence[DataPoint], weight_key: str) -> None:
        features = []
        for point in points:
            feature = _feature(point)
            weight = point.number(weight_key) / HEATMAP_SCALE
            feature["properties"]["weight"] = max(0.0, min(1.0, weight))
            features.append(feature)
        self.handle.layers[layer_id] = {"type": "heatmap", "weight_key": weight_key, "data": _collection(features)}

    def render_markers(self, hotspots: Sequence[Hotspot]) -> None:
        self.handle.markers = [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [h.longitude, h.latitude]},
                "properties": {"priority": h.priority, "description": h.description},
            }
            for h in hotspots
        ]

    def fit_bounds(self, points: Sequence[DataPoint]) -> Optional[Bounds]:
        if not points:
            return None
        lats = [p.lat for p in points]
        lngs = [p.lng for p in points]
        self.handle.bounds = (min(lngs), min(lats), max(lngs), max(lats))
        return self.handle.bounds

    def focus_hotspot(self, hotspot: Hotspot, radius_m: float = HOTSPOT_INFLUENCE_M) -> None:
        self.handle.center = (hotspot.latitude, hotspot.longitude)
        self.handle.show_influence(hotspot.latitude, hotspot.longitude, radius_m)

    def attach(self, channel: HotspotChannel) -> Callable[[], None]:
        return channel.subscribe(self.render_markers)

    def markers_geojson(self) -> dict:
        return _collection(list(self.handle.markers))
