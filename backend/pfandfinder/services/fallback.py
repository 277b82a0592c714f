from __future__ import annotations

from typing import Iterable, List, Mapping

from pfandfinder.domain.models import Dataset, ScoredCandidate
from pfandfinder.domain.scoring import DENSITY_KEY, FILL_LEVEL_KEY, score_hotspots

from .prompting import BINS_ID, DENSITY_ID, format_number

BASE_INSIGHT = "Based on the available data, I recommend focusing on the following areas:"
MAX_FALLBACK_AREAS = 3

CANNED_BINS_AND_DENSITY = (
    "1. Priority Area: Downtown commercial district - High pedestrian traffic and trashcans consistently "
    "over 80% capacity.\n\n"
    "2. Priority Area: Public transportation hubs - Subway and bus stations show increased waste "
    "accumulation during rush hours.\n\n"
    "3. Priority Area: Weekend market zones - Areas that host regular public markets show significant "
    "waste accumulation patterns."
)
CANNED_BINS_ONLY = (
    "1. Priority Area: Centrally located trashcans showing consistent high fill levels.\n\n"
    "2. Priority Area: Trashcans that have remained over 75% capacity for more than 24 hours.\n\n"
    "3. Priority Area: Clusters of multiple trashcans all showing high capacity."
)
CANNED_DENSITY_ONLY = (
    "1. Priority Area: High-density pedestrian zones which likely correlate with higher waste generation.\n\n"
    "2. Priority Area: Commercial districts during lunch hours showing peak density patterns.\n\n"
    "3. Priority Area: Weekend recreational areas with sustained high people density."
)
CANNED_NO_DATA = (
    "I recommend collecting more data on trashcan fill levels and people density to properly identify "
    "priority areas for waste management."
)


def candidate_sentence(rank: int, candidate: ScoredCandidate) -> str:
    bin_point, area = candidate.point_a, candidate.point_b
    return (
        f"{rank}. Priority Area: Coordinates ({format_number(bin_point.lat)}, {format_number(bin_point.lng)}) "
        f"- Trashcan at {format_number(bin_point.number(FILL_LEVEL_KEY))}% capacity in an area with "
        f"{format_number(area.number(DENSITY_KEY))}% people density."
    )


def proximity_candidates(active_ids: Iterable[str], datasets: Mapping[str, Dataset]) -> List[ScoredCandidate]:
    active = {i.lower() for i in active_ids}
    bins = datasets.get(BINS_ID)
    density = datasets.get(DENSITY_ID)
    if BINS_ID not in active or DENSITY_ID not in active or not bins or not density:
        return []
    return score_hotspots(bins.points, density.points)


def fallback_insight(active_ids: Iterable[str], datasets: Mapping[str, Dataset]) -> str:
    """Build the locally computed insight used when the language model is unavailable."""
    active = [i.lower() for i in active_ids]
    candidates = proximity_candidates(active, datasets)
    if candidates:
        lines = [
            candidate_sentence(rank, candidate)
            for rank, candidate in enumerate(candidates[:MAX_FALLBACK_AREAS], start=1)
        ]
        return f"{BASE_INSIGHT}\n\n" + "\n\n".join(lines)

    if BINS_ID in active and DENSITY_ID in active:
        body = CANNED_BINS_AND_DENSITY
    elif BINS_ID in active:
        body = CANNED_BINS_ONLY
    elif DENSITY_ID in active:
        body = CANNED_DENSITY_ONLY
    else:
        body = CANNED_NO_DATA
    return f"{BASE_INSIGHT}\n\n{body}"
