"""
engine/snap.py

Edge snapping of a candidate zone to sibling edges and the canvas border.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, List, NamedTuple, Optional

from models import CANVAS_MAX, CANVAS_MIN, MIN_ZONE_SIZE, SNAP_THRESHOLD, Zone, clamp


class SnapPoints(NamedTuple):
    """Sorted, distinct snap coordinates for each axis."""
    x: List[float]  # vertical lines (left/right edges)
    y: List[float]  # horizontal lines (top/bottom edges)


def get_snap_points(zones: Iterable[Zone], exclude_id: Optional[str]) -> SnapPoints:
    """Collect the edges of every zone except *exclude_id*, plus the canvas border."""
    xs = {CANVAS_MIN, CANVAS_MAX}
    ys = {CANVAS_MIN, CANVAS_MAX}
    for z in zones:
        if z.id == exclude_id:
            continue
        xs.add(z.x)
        xs.add(z.right)
        ys.add(z.y)
        ys.add(z.bottom)
    return SnapPoints(sorted(xs), sorted(ys))


def snap_value(value: float, points: List[float], threshold: float = SNAP_THRESHOLD) -> float:
    """Return the nearest point if it lies within *threshold*, else *value*.

    Ties go to the lower point.
    """
    if not points:
        return value
    nearest = min(points, key=lambda p: abs(value - p))
    if abs(value - nearest) <= threshold:
        return nearest
    return value


def _floor_anchor(far: float, points: List[float], threshold: float, min_size: float):
    """Place the near edge *min_size* before *far*, snapping it outward only.

    Only points that keep the side at or above the floor are eligible, so a
    second snap pass leaves the result where it is.
    """
    anchor = far - min_size
    if anchor < CANVAS_MIN:
        return CANVAS_MIN, min_size
    anchor = snap_value(anchor, [p for p in points if p <= anchor], threshold)
    return anchor, far - anchor


def snap_zone_edges(
    zone: Zone,
    zones: Iterable[Zone],
    exclude_id: Optional[str],
    threshold: float = SNAP_THRESHOLD,
    min_size: float = MIN_ZONE_SIZE,
) -> Zone:
    """Snap each edge of *zone* to the nearest sibling/canvas edge.

    Width and height are recomputed from the snapped edges. When a snapped
    dimension drops below *min_size* the right (or bottom) edge is kept and the
    left (or top) edge moves back to the floor, then snaps outward to a point
    within *threshold* if there is one. The result is clamped into the canvas
    and snapping it again returns it unchanged.

    Args:
        zone: Candidate zone.
        zones: Full zone collection (the candidate's own entry is ignored).
        exclude_id: Id of the zone being edited.
        threshold: Snap distance in percent. Default: 0.2
        min_size: Minimum width/height in percent. Default: 5.0

    Returns:
        A new zone with the same id and number.
    """
    points = get_snap_points(zones, exclude_id)
    left = snap_value(zone.x, points.x, threshold)
    right = snap_value(zone.right, points.x, threshold)
    top = snap_value(zone.y, points.y, threshold)
    bottom = snap_value(zone.bottom, points.y, threshold)

    width = right - left
    height = bottom - top
    x = left
    y = top

    if width < min_size:
        x, width = _floor_anchor(right, points.x, threshold, min_size)
    if height < min_size:
        y, height = _floor_anchor(bottom, points.y, threshold, min_size)

    x = clamp(x, CANVAS_MIN, CANVAS_MAX - width)
    y = clamp(y, CANVAS_MIN, CANVAS_MAX - height)

    return dataclasses.replace(zone, x=x, y=y, width=width, height=height)
