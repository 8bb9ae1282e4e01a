"""
engine/overlap.py

Greedy overlap correction for a zone that is being dragged or resized.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, List, Optional

from engine.snap import snap_zone_edges
from models import CANVAS_MAX, CANVAS_MIN, MIN_ZONE_SIZE, SNAP_THRESHOLD, Zone, clamp

log = logging.getLogger(__name__)


def zones_overlap(a: Zone, b: Zone) -> bool:
    """Return True if the interiors of *a* and *b* intersect."""
    return a.overlaps(b)


def _spans_overlap(a0: float, a1: float, b0: float, b1: float) -> bool:
    return a0 < b1 and a1 > b0


def prevent_overlaps(
    zone: Zone,
    zones: Iterable[Zone],
    exclude_id: Optional[str],
    threshold: float = SNAP_THRESHOLD,
) -> Zone:
    """Push *zone* off the siblings it overlaps.

    For each intersecting sibling, in collection order:

    - horizontally (when the vertical spans overlap): compare the distance
      needed to put the zone's left edge on the sibling's right edge against
      the distance to put its right edge on the sibling's left edge, and move
      by the smaller one if it is below *threshold*;
    - vertically (when the horizontal spans overlap): the same with top and
      bottom edges.

    The zone is clamped into the canvas after each sibling. This is a single
    greedy pass; with three or more siblings overlapping at once some overlap
    may remain (see :func:`residual_overlaps`).
    """
    x, y, w, h = zone.x, zone.y, zone.width, zone.height

    for other in zones:
        if other.id == exclude_id:
            continue
        if not (_spans_overlap(x, x + w, other.x, other.right)
                and _spans_overlap(y, y + h, other.y, other.bottom)):
            continue

        if _spans_overlap(y, y + h, other.y, other.bottom):
            to_right = abs(x - other.right)
            to_left = abs((x + w) - other.x)
            if to_right < to_left and to_right < threshold:
                x = other.right
            elif to_left < threshold:
                x = other.x - w

        if _spans_overlap(x, x + w, other.x, other.right):
            to_bottom = abs(y - other.bottom)
            to_top = abs((y + h) - other.y)
            if to_bottom < to_top and to_bottom < threshold:
                y = other.bottom
            elif to_top < threshold:
                y = other.y - h

        x = clamp(x, CANVAS_MIN, CANVAS_MAX - w)
        y = clamp(y, CANVAS_MIN, CANVAS_MAX - h)

    return dataclasses.replace(zone, x=x, y=y)


def residual_overlaps(zone: Zone, zones: Iterable[Zone], exclude_id: Optional[str]) -> List[str]:
    """Return the ids of siblings that still overlap *zone*."""
    return [
        other.id for other in zones
        if other.id != exclude_id and zone.overlaps(other)
    ]


def resolve_candidate(
    zone: Zone,
    zones: List[Zone],
    snap_enabled: bool = True,
    threshold: float = SNAP_THRESHOLD,
    min_size: float = MIN_ZONE_SIZE,
) -> Zone:
    """Run the commit pipeline shared by drag and resize.

    Snap (when enabled) then overlap correction, both against the collection
    as it was before the candidate was computed.
    """
    if snap_enabled:
        zone = snap_zone_edges(zone, zones, zone.id, threshold, min_size)
    zone = prevent_overlaps(zone, zones, zone.id, threshold)

    leftover = residual_overlaps(zone, zones, zone.id)
    if leftover:
        log.debug("Zone %s still overlaps %s after correction", zone.id, leftover)
    return zone
