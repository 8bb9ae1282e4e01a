"""
engine/drag.py

Drag gesture state machine: moves a zone with the pointer and tracks the
zone it would merge into on release.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from engine.arena import ZoneArena
from engine.operations import merge_zones
from engine.overlap import resolve_candidate
from models import (
    CANVAS_MAX,
    CANVAS_MIN,
    MIN_ZONE_SIZE,
    SNAP_THRESHOLD,
    SurfaceRect,
    Zone,
    clamp,
)

log = logging.getLogger(__name__)


class DragState:
    """Drag controller states."""
    IDLE = "idle"
    DRAGGING = "dragging"
    MERGE_PENDING = "merge_pending"


@dataclass(frozen=True)
class MergeRequest:
    """A proposed merge waiting for the user's yes/no answer."""
    dragged_id: str
    target_id: str
    pre_drag: Zone


def drag_zone(
    zone: Zone,
    dx: float,
    dy: float,
    zones: List[Zone],
    snap_enabled: bool = True,
    threshold: float = SNAP_THRESHOLD,
    min_size: float = MIN_ZONE_SIZE,
) -> Zone:
    """Move *zone* by a percent delta and run it through snap + overlap correction.

    The moved zone is kept fully inside the canvas before snapping.
    """
    x = clamp(zone.x + dx, CANVAS_MIN, CANVAS_MAX - zone.width)
    y = clamp(zone.y + dy, CANVAS_MIN, CANVAS_MAX - zone.height)
    moved = dataclasses.replace(zone, x=x, y=y)
    return resolve_candidate(moved, zones, snap_enabled, threshold, min_size)


class DragController:
    """Explicit drag state machine.

    ``IDLE -> DRAGGING(zone) -> IDLE | MERGE_PENDING(dragged, target)``

    The controller never owns the zone collection: every transition takes the
    current arena and returns the arena to commit.

    Args:
        threshold: Snap distance in percent. Default: 0.2
        min_size: Minimum zone side in percent. Default: 5.0
        drag_threshold_px: Pointer travel (pixels) after which the gesture
            counts as a real drag and the following click is ignored.
            Default: 5.0
    """

    def __init__(
        self,
        threshold: float = SNAP_THRESHOLD,
        min_size: float = MIN_ZONE_SIZE,
        drag_threshold_px: float = 5.0,
    ):
        self.threshold = threshold
        self.min_size = min_size
        self.drag_threshold_px = drag_threshold_px
        self.state = DragState.IDLE
        self.zone_id: Optional[str] = None
        self.merge_target: Optional[str] = None
        self.pre_drag: Optional[Zone] = None
        self.pending: Optional[MergeRequest] = None
        self._start_pointer: Optional[Tuple[float, float]] = None
        self._last_pointer: Optional[Tuple[float, float]] = None
        self._has_dragged = False

    def begin(self, arena: ZoneArena, zone_id: str, cx: float, cy: float) -> bool:
        """Start dragging *zone_id* from client point ``(cx, cy)``.

        Returns:
            False if a gesture or merge is already in progress or the zone is
            unknown.
        """
        if self.state != DragState.IDLE:
            return False
        zone = arena.get(zone_id)
        if zone is None:
            return False
        self.state = DragState.DRAGGING
        self.zone_id = zone_id
        self.pre_drag = zone
        self.merge_target = None
        self._start_pointer = (cx, cy)
        self._last_pointer = (cx, cy)
        self._has_dragged = False
        log.debug("Drag start: %s at (%s, %s)", zone_id, cx, cy)
        return True

    def move(
        self,
        arena: ZoneArena,
        cx: float,
        cy: float,
        surface: SurfaceRect,
        snap_enabled: bool = True,
    ) -> ZoneArena:
        """Apply the pointer movement since the previous move.

        Returns:
            The arena with the dragged zone moved (the same arena when idle).
        """
        if self.state != DragState.DRAGGING or self._last_pointer is None:
            return arena
        zone = arena.get(self.zone_id)
        if zone is None:
            return arena

        if self._start_pointer is not None and not self._has_dragged:
            sx, sy = self._start_pointer
            if math.hypot(cx - sx, cy - sy) > self.drag_threshold_px:
                self._has_dragged = True

        lx, ly = self._last_pointer
        dx, dy = surface.to_percent_delta(cx - lx, cy - ly)
        self._last_pointer = (cx, cy)

        moved = drag_zone(zone, dx, dy, arena.zones(), snap_enabled, self.threshold, self.min_size)
        arena = arena.replace(moved)

        px, py = surface.to_percent_point(cx, cy)
        target = arena.zone_at(px, py, exclude_id=self.zone_id)
        self.merge_target = target.id if target else None
        return arena

    def release(self) -> Optional[MergeRequest]:
        """Finish the drag.

        Returns:
            A :class:`MergeRequest` (state becomes ``MERGE_PENDING``) when the
            pointer ended over another zone, else None (state becomes
            ``IDLE`` and the last committed position stays).
        """
        if self.state != DragState.DRAGGING:
            return None
        if self.merge_target is not None and self.pre_drag is not None:
            self.pending = MergeRequest(self.zone_id, self.merge_target, self.pre_drag)
            self.state = DragState.MERGE_PENDING
            # A drop onto another zone is never a click
            self._has_dragged = True
            log.debug("Merge proposed: %s -> %s", self.zone_id, self.merge_target)
            return self.pending
        self._clear()
        return None

    def confirm_merge(self, arena: ZoneArena) -> ZoneArena:
        """Commit the pending merge and return to ``IDLE``."""
        request = self._require_pending()
        merged = merge_zones(arena, request.dragged_id, request.target_id, request.pre_drag)
        self._clear()
        return merged

    def cancel_merge(self, arena: ZoneArena) -> ZoneArena:
        """Put the dragged zone back where the drag started and return to ``IDLE``."""
        request = self._require_pending()
        restored = arena.replace(request.pre_drag)
        self._clear()
        return restored

    def abort(self, arena: ZoneArena) -> ZoneArena:
        """Abandon a drag in progress and put the zone back where it started.

        The release that ends the aborted gesture is treated as a drag, so it
        does not split. Outside ``DRAGGING`` the arena is returned unchanged.
        """
        if self.state != DragState.DRAGGING:
            return arena
        if self.pre_drag is not None and self.pre_drag.id in arena:
            arena = arena.replace(self.pre_drag)
        log.debug("Drag aborted: %s", self.zone_id)
        self._clear()
        self._has_dragged = True
        return arena

    def consume_click_suppression(self) -> bool:
        """Return True once if the last gesture was a real drag.

        The pointer release that ends a drag also produces a click; this lets
        the caller ignore it instead of splitting the zone.
        """
        dragged = self._has_dragged
        self._has_dragged = False
        return dragged

    def reset(self) -> None:
        self._clear()
        self._has_dragged = False

    def involves(self, zone_id: str) -> bool:
        """Return True if *zone_id* takes part in the current drag or pending merge."""
        if self.state == DragState.IDLE:
            return False
        if zone_id == self.zone_id:
            return True
        return self.pending is not None and zone_id == self.pending.target_id

    def _require_pending(self) -> MergeRequest:
        if self.state != DragState.MERGE_PENDING or self.pending is None:
            raise RuntimeError("No merge is pending")
        return self.pending

    def _clear(self) -> None:
        self.state = DragState.IDLE
        self.zone_id = None
        self.merge_target = None
        self.pre_drag = None
        self.pending = None
        self._start_pointer = None
        self._last_pointer = None
