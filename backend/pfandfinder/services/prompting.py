from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping, Optional

from pfandfinder.domain.models import DataPoint, Dataset
from pfandfinder.domain.scoring import DENSITY_KEY, FILL_LEVEL_KEY, FULL_BIN_THRESHOLD
from pfandfinder.providers.llm.base import Prompt

BINS_ID = "trashcans"
EVENTS_ID = "events"
DENSITY_ID = "people"

TOP_ENTRIES = 3
ATTENDEES_KEY = "attendees"

SYSTEM_PROMPT = (
    "You are an urban data analyst specialized in identifying waste management hotspots based on urban data. "
    "Your task is to analyze data about trashcans, people density, and events to find areas where trash is "
    "likely to accumulate and where additional waste management resources should be deployed."
)
USER_TEMPLATE = (
    "I need to optimize trash collection in Berlin. I have the following data:\n\n{descriptions}\n\n"
    "Analyze this data to identify potential hotspots where trash is likely to accumulate. Focus on areas "
    "with high people density, near events, and with currently full trashcans. Provide a specific analysis "
    "with geographic coordinates for the top 3 priority areas that need immediate attention."
)

DEFAULT_DESCRIPTIONS = {
    BINS_ID: "250 public trash cans with 40% over capacity in downtown areas, particularly near commercial zones.",
    EVENTS_ID: (
        "15 public events scheduled this week with estimated attendance of 5000 people "
        "in central and northern districts."
    ),
    DENSITY_ID: (
        "Pedestrian traffic data shows consistent patterns with concentration in commercial districts "
        "during peak hours."
    ),
}

_LEADING_INT_RE = re.compile(r"^\s*([-+]?\d+)")


def format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_int(value: Any) -> int:
    """Parse a leading integer the way attendance counts arrive; anything else is 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else 0


def default_description(dataset_id: str) -> str:
    return DEFAULT_DESCRIPTIONS.get(dataset_id.lower(), "")


def _coords(point: DataPoint) -> str:
    return f"({format_number(point.lat)}, {format_number(point.lng)})"


def describe_bins(points: tuple[DataPoint, ...]) -> str:
    full = sum(1 for p in points if p.number(FILL_LEVEL_KEY) >= FULL_BIN_THRESHOLD)
    fullest = sorted(points, key=lambda p: p.number(FILL_LEVEL_KEY), reverse=True)[:TOP_ENTRIES]
    listing = ", ".join(
        f"{_coords(p)} at {format_number(p.number(FILL_LEVEL_KEY))}% capacity" for p in fullest
    )
    return (
        f"{len(points)} public trash cans with {full} over 75% capacity. "
        f"The fullest trashcans are at coordinates {listing}"
    )


def describe_events(points: tuple[DataPoint, ...]) -> str:
    total = sum(coerce_int(p.attributes.get(ATTENDEES_KEY)) for p in points)
    largest = sorted(points, key=lambda p: coerce_int(p.attributes.get(ATTENDEES_KEY)), reverse=True)
    listing = ", ".join(
        f"{p.attributes.get('name') or 'Unnamed event'} at {_coords(p)} "
        f"with {coerce_int(p.attributes.get(ATTENDEES_KEY))} attendees"
        for p in largest[:TOP_ENTRIES]
    )
    return (
        f"{len(points)} public events scheduled with estimated attendance of {total} people. "
        f"Largest events: {listing}"
    )


def describe_density(points: tuple[DataPoint, ...]) -> str:
    densest = sorted(points, key=lambda p: p.number(DENSITY_KEY), reverse=True)[:TOP_ENTRIES]
    listing = ", ".join(f"{_coords(p)} with density {format_number(p.number(DENSITY_KEY))}" for p in densest)
    return f"People density data shows concentration at {listing}"


_DESCRIBERS = {
    BINS_ID: describe_bins,
    EVENTS_ID: describe_events,
    DENSITY_ID: describe_density,
}


def describe_dataset(dataset_id: str, dataset: Optional[Dataset]) -> str:
    dataset_id = dataset_id.lower()
    if dataset is None or not dataset.points:
        return default_description(dataset_id)
    describer = _DESCRIBERS.get(dataset_id)
    if describer is None:
        return default_description(dataset_id)
    return describer(dataset.points)


def build_dataset_descriptions(active_ids: Iterable[str], datasets: Mapping[str, Dataset]) -> str:
    parts = (describe_dataset(dataset_id, datasets.get(dataset_id.lower())) for dataset_id in active_ids)
    return ". ".join(part for part in parts if part)


def build_prompt(active_ids: Iterable[str], datasets: Mapping[str, Dataset]) -> Prompt:
    descriptions = build_dataset_descriptions(active_ids, datasets)
    return Prompt(system=SYSTEM_PROMPT, user=USER_TEMPLATE.format(descriptions=descriptions))
