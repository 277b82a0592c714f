from __future__ import annotations

import pytest

from pfandfinder.domain.models import DataPoint, Hotspot
from pfandfinder.hub.hotspot_channel import HotspotChannel
from pfandfinder.rendering.geojson import GeoJSONMapRenderer


def _points():
    return [
        DataPoint(id="1", lat=52.52, lng=13.405, attributes={"fillLevel": 90}),
        DataPoint(id="2", lat=52.50, lng=13.38, attributes={"fillLevel": 150}),
        DataPoint(id="3", lat=52.55, lng=13.42, attributes={}),
    ]


def test_render_points_builds_feature_collection():
    renderer = GeoJSONMapRenderer()
    renderer.render_points("trashcans", _points(), {"color": "#ef4444"})

    layer = renderer.handle.layers["trashcans"]
    assert layer["type"] == "circle"
    assert layer["style"] == {"color": "#ef4444"}
    first = layer["data"]["features"][0]
    assert first["geometry"]["coordinates"] == [13.405, 52.52]
    assert first["properties"]["id"] == "1"


def test_heatmap_weights_are_clamped():
    renderer = GeoJSONMapRenderer()
    renderer.render_heatmap("bins-heat", _points(), "fillLevel")

    weights = [f["properties"]["weight"] for f in renderer.handle.layers["bins-heat"]["data"]["features"]]
    assert weights == [pytest.approx(0.9), 1.0, 0.0]


def test_render_markers_replaces_previous_set():
    renderer = GeoJSONMapRenderer()
    renderer.render_markers([Hotspot(52.52, 13.405, 1, "first"), Hotspot(52.5, 13.4, 2, "second")])
    renderer.render_markers([Hotspot(52.51, 13.39, 1, "only")])

    markers = renderer.markers_geojson()["features"]
    assert len(markers) == 1
    assert markers[0]["properties"] == {"priority": 1, "description": "only"}


def test_fit_bounds():
    renderer = GeoJSONMapRenderer()
    assert renderer.fit_bounds([]) is None
    assert renderer.fit_bounds(_points()) == (13.38, 52.50, 13.42, 52.55)
    assert renderer.handle.bounds == (13.38, 52.50, 13.42, 52.55)


def test_focus_hotspot_notifies_influence_listeners():
    renderer = GeoJSONMapRenderer()
    calls = []
    renderer.handle.on_influence(lambda lat, lng, radius: calls.append((lat, lng, radius)))

    renderer.focus_hotspot(Hotspot(52.5, 13.4, 1, "x"))

    assert renderer.handle.center == (52.5, 13.4)
    assert calls == [(52.5, 13.4, 500.0)]


def test_attach_follows_channel():
    channel = HotspotChannel()
    renderer = GeoJSONMapRenderer()
    detach = renderer.attach(channel)

    channel.publish([Hotspot(52.52, 13.405, 1, "a")])
    assert len(renderer.handle.markers) == 1

    detach()
    channel.publish([])
    assert len(renderer.handle.markers) == 1
