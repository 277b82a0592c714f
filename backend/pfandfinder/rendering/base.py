from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from pfandfinder.domain.models import DataPoint, Hotspot

InfluenceListener = Callable[[float, float, float], None]
Bounds = Tuple[float, float, float, float]


@dataclass
class MapHandle:
    """Explicit map state shared by a renderer and whoever displays it."""

    center: Tuple[float, float] = (52.52, 13.405)
    zoom: float = 13.0
    layers: Dict[str, dict] = field(default_factory=dict)
    markers: List[dict] = field(default_factory=list)
    bounds: Optional[Bounds] = None
    _influence_listeners: List[InfluenceListener] = field(default_factory=list, repr=False)

    def on_influence(self, listener: InfluenceListener) -> Callable[[], None]:
        self._influence_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._influence_listeners:
                self._influence_listeners.remove(listener)

        return unsubscribe

    def show_influence(self, lat: float, lng: float, radius_m: float) -> None:
        for listener in list(self._influence_listeners):
            listener(lat, lng, radius_m)


class MapRenderer(Protocol):
    """Contract for map backends (tile widget, canvas, GeoJSON export)."""

    handle: MapHandle

    def render_points(self, layer_id: str, points: Sequence[DataPoint], style: Mapping[str, object]) -> None:
        raise NotImplementedError

    def render_heatmap(self, layer_id: str, points: Sequence[DataPoint], weight_key: str) -> None:
        raise NotImplementedError

    def render_markers(self, hotspots: Sequence[Hotspot]) -> None:
        """Replace every previously rendered marker with ``hotspots``."""
        raise NotImplementedError

    def fit_bounds(self, points: Sequence[DataPoint]) -> Optional[Bounds]:
        raise NotImplementedError
