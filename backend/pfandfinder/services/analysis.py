from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, Optional

from pfandfinder.domain.extraction import extract_hotspots
from pfandfinder.domain.models import AnalysisResult, Dataset
from pfandfinder.hub.dataset_registry import DatasetSelection
from pfandfinder.hub.hotspot_channel import HotspotChannel
from pfandfinder.providers.datasets.loader import load_all

from .insight import NO_DATASETS_MESSAGE, InsightService

PREGENERATED_INSIGHTS = {
    "trashcans": (
        "Analysis shows 40% of trash cans are over capacity in downtown areas, particularly during lunch "
        "hours (12-2pm) and after work (5-7pm). Consider adding more bins at these peak times or increasing "
        "collection frequency in high-traffic areas."
    ),
    "events": (
        "Event scheduling shows potential congestion in the central district this weekend with three major "
        "events overlapping. Consider coordinating with event organizers to stagger start times or prepare "
        "additional transportation options."
    ),
    "parks": (
        "Park usage data indicates concentrated activity around playgrounds and picnic areas, with 70% higher "
        "foot traffic on weekends. Facilities in these high-traffic areas show increased wear and may require "
        "more frequent maintenance."
    ),
    "people": (
        "Pedestrian traffic is concentrated in commercial districts during lunch hours and early evening on "
        "weekdays. Weekend patterns differ significantly with more dispersed activity throughout the day."
    ),
    "events,parks,people,trashcans": (
        "Comprehensive analysis reveals five critical hotspots where all factors converge. Downtown Junction "
        "shows the highest pressure point with upcoming events, peak pedestrian traffic, park proximity, and "
        "insufficient waste facilities. Recommend coordinated intervention including increased waste "
        "collection, traffic management, and potentially event rescheduling to distribute impact."
    ),
}
GENERIC_PREGENERATED_INSIGHT = (
    "Analysis of the selected datasets shows several potential hotspots requiring attention. The correlation "
    "between these factors suggests targeted interventions could significantly improve urban efficiency and "
    "cleanliness."
)

DatasetSource = Callable[[Iterable[str]], Mapping[str, Dataset]]


def pregenerated_insight(active_ids: Iterable[str]) -> str:
    key = ",".join(sorted(dataset_id.lower() for dataset_id in active_ids))
    return PREGENERATED_INSIGHTS.get(key, GENERIC_PREGENERATED_INSIGHT)


def directory_source(data_dir: str | Path | None = None) -> DatasetSource:
    def _load(ids: Iterable[str]) -> Dict[str, Dataset]:
        return load_all(data_dir, ids=ids)

    return _load


class AnalysisRunner:
    """Runs one analysis: load datasets, ask for an insight, extract hotspots, publish.

    Each run replaces the previous result on the channel.
    """

    def __init__(
        self,
        insight_service: InsightService,
        *,
        selection: Optional[DatasetSelection] = None,
        channel: Optional[HotspotChannel] = None,
        source: Optional[DatasetSource] = None,
    ) -> None:
        self.insight_service = insight_service
        self.selection = selection or DatasetSelection()
        self.channel = channel or HotspotChannel()
        self.source = source or directory_source()

    def run(self, active_ids: Optional[Iterable[str]] = None) -> AnalysisResult:
        active = [i.lower() for i in (self.selection.active if active_ids is None else active_ids)]
        if not active:
            self.channel.publish(())
            return AnalysisResult(text=NO_DATASETS_MESSAGE, is_fallback=True)

        try:
            datasets = self.source(active)
            insight = self.insight_service.generate_insight(active, datasets)
            text, is_fallback = insight.text, insight.is_fallback
        except (OSError, ValueError) as exc:
            print(f"[analysis] ERROR: analysis failed ({exc}); using pre-generated insight")
            text, is_fallback = pregenerated_insight(active), True

        hotspots = tuple(extract_hotspots(text))
        self.channel.publish(hotspots)
        return AnalysisResult(text=text, is_fallback=is_fallback, hotspots=hotspots)
