"""
engine/operations.py

Structural zone operations: split, merge and grow.

Each operation takes the current arena and returns the arena to commit. An
operation that does nothing returns the arena it was given, so callers can
test ``result is arena`` to detect a no-op.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from engine.arena import ZoneArena
from models import (
    CANVAS_MAX,
    CANVAS_MIN,
    SplitAxis,
    SurfaceRect,
    Zone,
    generate_zone_id,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Split
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SplitPreview:
    """Where a click would split a zone.

    Attributes:
        axis: SplitAxis.HORIZONTAL (vertical bar) or SplitAxis.VERTICAL
            (horizontal bar).
        position: Bar position in canvas percent (x for horizontal, y for
            vertical).
        first_percent: Size of the left/top half as a percentage of the zone.
        second_percent: Size of the right/bottom half as a percentage of the zone.
    """
    axis: str
    position: float
    first_percent: float
    second_percent: float


def split_preview(
    zone: Zone,
    cx: float,
    cy: float,
    axis: str,
    surface: SurfaceRect,
) -> Optional[SplitPreview]:
    """Compute the split bar for a pointer at client ``(cx, cy)``.

    Returns:
        None when the pointer is outside the zone's span on the split axis.
    """
    px, py = surface.to_percent_point(cx, cy)
    if axis == SplitAxis.HORIZONTAL:
        if px < zone.x or px > zone.right:
            return None
        first = (px - zone.x) / zone.width * 100.0
        return SplitPreview(axis, px, first, 100.0 - first)
    if py < zone.y or py > zone.bottom:
        return None
    first = (py - zone.y) / zone.height * 100.0
    return SplitPreview(axis, py, first, 100.0 - first)


def split_zone(
    arena: ZoneArena,
    zone_id: str,
    coordinate: float,
    axis: str,
    surface: SurfaceRect,
    id_factory: Callable[[], str] = generate_zone_id,
) -> ZoneArena:
    """Split a zone in two at a client-space coordinate.

    Args:
        arena: Current zones.
        zone_id: Zone to split.
        coordinate: Client x for a horizontal (left/right) split, client y for
            a vertical (top/bottom) split.
        axis: SplitAxis.HORIZONTAL or SplitAxis.VERTICAL.
        surface: Pixel rectangle of the editing surface.
        id_factory: Id generator for the second half.

    Returns:
        The new arena. The left/top half keeps the zone's id and number; the
        right/bottom half gets a new id and the next free number. The input
        arena is returned unchanged when the split position is on or outside
        the zone's edges.

    Raises:
        KeyError: If *zone_id* is unknown.
    """
    zone = arena[zone_id]

    if axis == SplitAxis.HORIZONTAL:
        split_percent = (coordinate - surface.left) / surface.width * 100.0
        relative = split_percent - zone.x
        if relative <= 0 or relative >= zone.width:
            log.debug("Split of %s ignored: x offset %.3f outside (0, %.3f)",
                      zone_id, relative, zone.width)
            return arena
        first = dataclasses.replace(zone, width=relative)
        second = Zone(
            id_factory(),
            zone.x + relative,
            zone.y,
            zone.width - relative,
            zone.height,
            arena.next_number(),
        )
    elif axis == SplitAxis.VERTICAL:
        split_percent = (coordinate - surface.top) / surface.height * 100.0
        relative = split_percent - zone.y
        if relative <= 0 or relative >= zone.height:
            log.debug("Split of %s ignored: y offset %.3f outside (0, %.3f)",
                      zone_id, relative, zone.height)
            return arena
        first = dataclasses.replace(zone, height=relative)
        second = Zone(
            id_factory(),
            zone.x,
            zone.y + relative,
            zone.width,
            zone.height - relative,
            arena.next_number(),
        )
    else:
        raise ValueError(f"Unknown split axis: {axis!r}")

    log.debug("Split %s -> %s + %s", zone_id, first.id, second.id)
    return arena.replace(first).insert(second)


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

def merge_zones(
    arena: ZoneArena,
    dragged_id: str,
    target_id: str,
    pre_drag: Optional[Zone] = None,
) -> ZoneArena:
    """Replace two zones with their bounding box.

    Args:
        arena: Current zones.
        dragged_id: Zone that was dropped onto the target.
        target_id: Zone that keeps its id in the result.
        pre_drag: The dragged zone as it was before the drag started. Its
            rectangle is used instead of the live (dragged) one.

    Returns:
        The new arena, renumbered 1..N in reading order.
    """
    dragged = pre_drag if pre_drag is not None else arena[dragged_id]
    target = arena[target_id]

    left = min(dragged.x, target.x)
    top = min(dragged.y, target.y)
    right = max(dragged.right, target.right)
    bottom = max(dragged.bottom, target.bottom)
    merged = Zone(target.id, left, top, right - left, bottom - top, target.number)

    log.debug("Merge %s into %s", dragged_id, target_id)
    return arena.remove(dragged_id, target_id).insert(merged).renumbered()


# ---------------------------------------------------------------------------
# Grow
# ---------------------------------------------------------------------------

def grow_zone(arena: ZoneArena, zone_id: str) -> ZoneArena:
    """Expand a zone on all four sides up to the nearest blocking sibling.

    Only siblings sharing part of the zone's vertical span can block it
    horizontally, and only those sharing part of its horizontal span can
    block it vertically. Without a blocker the canvas edge is the limit.

    Returns:
        The new arena, or *arena* itself when the zone cannot grow.
    """
    zone = arena[zone_id]
    max_left = CANVAS_MIN
    max_right = CANVAS_MAX
    max_top = CANVAS_MIN
    max_bottom = CANVAS_MAX

    for other in arena.others(zone_id):
        vertical_overlap = not (zone.bottom <= other.y or zone.y >= other.bottom)
        horizontal_overlap = not (zone.right <= other.x or zone.x >= other.right)

        if vertical_overlap:
            if other.right <= zone.x:
                max_left = max(max_left, other.right)
            if other.x >= zone.right:
                max_right = min(max_right, other.x)

        if horizontal_overlap:
            if other.bottom <= zone.y:
                max_top = max(max_top, other.bottom)
            if other.y >= zone.bottom:
                max_bottom = min(max_bottom, other.y)

    grown = dataclasses.replace(
        zone,
        x=max_left,
        y=max_top,
        width=max_right - max_left,
        height=max_bottom - max_top,
    )
    if grown.same_rect(zone):
        return arena
    log.debug("Grow %s to (%.2f, %.2f, %.2f, %.2f)",
              zone_id, grown.x, grown.y, grown.width, grown.height)
    return arena.replace(grown)
