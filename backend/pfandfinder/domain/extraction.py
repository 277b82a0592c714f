"""Turn free-form analysis text into prioritized, geo-located hotspots.

Extraction runs in two passes. The structured pass splits the text on
numbered "Priority Area" markers and looks for one coordinate pair per block
using ``COORDINATE_PATTERNS`` in order. When that finds nothing, the
unstructured pass scans the whole text for bare decimal pairs and uses the
surrounding sentence as the description.

Both passes are pure: the same string always yields the same list, and the
list order is the priority order.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .models import Hotspot, is_valid_coordinate

MAX_DESCRIPTION_LENGTH = 200
MAX_UNSTRUCTURED_HOTSPOTS = 5
CONTEXT_RADIUS = 100

_NUMBER = r"-?\d{1,3}(?:\.\d+)?"
_DECIMAL = r"-?\d{1,3}\.\d+"
_UNSIGNED = r"\d{1,3}(?:\.\d+)?"

_MARKER_RE = re.compile(
    r"(?<![\w.])(\d+)\s*[.)]\s*\**\s*(?:top\s+)?priority\s+(?:area|zone|location|hotspot)\b"
    r"|priority\s+(?:area|zone|location|hotspot)\s*#?\s*(\d+)",
    re.IGNORECASE,
)
_GENERIC_PAIR_RE = re.compile(
    rf"(?<![\d.])({_DECIMAL})\s*°?\s*(?:([NS])\b)?\s*,\s*({_DECIMAL})\s*°?\s*(?:([EW])\b)?"
)
_LEADING_NOISE = " \t\r\n.-–—:,;|*"
_TRAILING_PUNCTUATION = " \t\r\n.,;:!?*"
_WHITESPACE_RE = re.compile(r"\s+")

Coordinates = Tuple[float, float]


@dataclass(frozen=True)
class CoordinatePattern:
    name: str
    regex: re.Pattern
    extract: Callable[[re.Match], Coordinates]


def _plain_pair(match: re.Match) -> Coordinates:
    return float(match.group(1)), float(match.group(2))


def _hemisphere_pair(match: re.Match) -> Coordinates:
    lat = float(match.group(1))
    lng = float(match.group(3))
    if match.group(2).upper() == "S":
        lat = -lat
    if match.group(4).upper() == "W":
        lng = -lng
    return lat, lng


COORDINATE_PATTERNS: Tuple[CoordinatePattern, ...] = (
    CoordinatePattern(
        "parenthesized_decimal",
        re.compile(rf"\(\s*({_DECIMAL})\s*,\s*({_DECIMAL})\s*\)"),
        _plain_pair,
    ),
    CoordinatePattern(
        "parenthesized",
        re.compile(rf"\(\s*({_NUMBER})\s*°?\s*,\s*({_NUMBER})\s*°?\s*\)"),
        _plain_pair,
    ),
    CoordinatePattern(
        "degrees_hemisphere",
        re.compile(rf"({_UNSIGNED})\s*°?\s*([NS])\b\s*,?\s*({_UNSIGNED})\s*°?\s*([EW])\b"),
        _hemisphere_pair,
    ),
    CoordinatePattern(
        "labeled_lat_lng",
        re.compile(
            rf"lat(?:itude)?\s*[:=]?\s*({_NUMBER})\s*°?\s*[,;/]?\s*(?:and\s+)?"
            rf"(?:lng|lon|long|longitude)\s*[:=]?\s*({_NUMBER})",
            re.IGNORECASE,
        ),
        _plain_pair,
    ),
    CoordinatePattern(
        "labeled_coordinates",
        re.compile(
            rf"coord(?:inate)?s?\s*[:=]?\s*[\[(]?\s*({_NUMBER})\s*,\s*({_NUMBER})",
            re.IGNORECASE,
        ),
        _plain_pair,
    ),
)


def extract_hotspots(text: str) -> List[Hotspot]:
    if not text:
        return []
    hotspots = _extract_structured(text)
    if hotspots:
        return hotspots
    return _extract_unstructured(text)


def clean_description(raw: str) -> str:
    text = _WHITESPACE_RE.sub(" ", raw).strip()
    text = text.lstrip(_LEADING_NOISE).rstrip(_TRAILING_PUNCTUATION)
    if len(text) > MAX_DESCRIPTION_LENGTH:
        text = text[:MAX_DESCRIPTION_LENGTH] + "..."
    return text


def match_coordinates(block: str) -> Optional[Tuple[Coordinates, re.Match]]:
    """Return the first valid coordinate pair in ``block`` and the match that produced it."""
    for pattern in COORDINATE_PATTERNS:
        for match in pattern.regex.finditer(block):
            try:
                lat, lng = pattern.extract(match)
            except (TypeError, ValueError):
                continue
            if is_valid_coordinate(lat, lng):
                return (lat, lng), match
    return None


def _priority_blocks(text: str) -> List[str]:
    markers = list(_MARKER_RE.finditer(text))
    blocks: List[str] = []
    for idx, marker in enumerate(markers):
        end = markers[idx + 1].start() if idx + 1 < len(markers) else len(text)
        blocks.append(text[marker.end():end])
    return blocks


def _extract_structured(text: str) -> List[Hotspot]:
    hotspots: List[Hotspot] = []
    for block in _priority_blocks(text):
        found = match_coordinates(block)
        if found is None:
            continue
        (lat, lng), match = found
        rank = len(hotspots) + 1
        description = clean_description(block[match.end():]) or f"Priority Area {rank}"
        hotspots.append(Hotspot(latitude=lat, longitude=lng, priority=rank, description=description))
    return hotspots


def _extract_unstructured(text: str) -> List[Hotspot]:
    hotspots: List[Hotspot] = []
    for match in _GENERIC_PAIR_RE.finditer(text):
        lat = float(match.group(1))
        lng = float(match.group(3))
        if match.group(2) == "S":
            lat = -abs(lat)
        if match.group(4) == "W":
            lng = -abs(lng)
        if not is_valid_coordinate(lat, lng):
            continue
        rank = len(hotspots) + 1
        description = clean_description(_sentence_context(text, match)) or f"Priority Area {rank}"
        hotspots.append(Hotspot(latitude=lat, longitude=lng, priority=rank, description=description))
        if len(hotspots) >= MAX_UNSTRUCTURED_HOTSPOTS:
            break
    return hotspots


def _sentence_context(text: str, match: re.Match) -> str:
    window_start = max(0, match.start() - CONTEXT_RADIUS)
    window_end = min(len(text), match.end() + CONTEXT_RADIUS)
    window = text[window_start:window_end]
    rel_start = match.start() - window_start
    rel_end = match.end() - window_start

    previous = window[:rel_start].rfind(". ")
    begin = previous + 2 if previous >= 0 else 0
    following = window[rel_end:].find(". ")
    stop = rel_end + following + 1 if following >= 0 else len(window)
    return window[begin:stop]
