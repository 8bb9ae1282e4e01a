"""
engine/resize.py

Resize gesture state machine for the eight edge/corner handles.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional, Tuple

from engine.arena import ZoneArena
from engine.overlap import resolve_candidate
from models import (
    CANVAS_MAX,
    CANVAS_MIN,
    MIN_ZONE_SIZE,
    SNAP_THRESHOLD,
    ResizeHandle,
    SurfaceRect,
    Zone,
)

log = logging.getLogger(__name__)


def resize_rect(
    original: Zone,
    handle: str,
    dx: float,
    dy: float,
    min_size: float = MIN_ZONE_SIZE,
) -> Zone:
    """Apply a percent delta to the edges controlled by *handle*.

    The edge opposite each moving edge stays where it was. Moving edges are
    kept inside the canvas; when a side would drop below *min_size* the
    moving edge is pulled back so the fixed edge really stays fixed.

    Args:
        original: The zone as it was when the gesture started.
        handle: One of the :class:`ResizeHandle` constants.
        dx: Horizontal delta in percent, measured from the gesture start.
        dy: Vertical delta in percent, measured from the gesture start.
        min_size: Minimum width/height in percent. Default: 5.0
    """
    if handle not in ResizeHandle.ALL:
        raise ValueError(f"Unknown resize handle: {handle!r}")

    left = original.x
    top = original.y
    right = original.right
    bottom = original.bottom

    if handle in ResizeHandle.MOVES_LEFT:
        left = max(CANVAS_MIN, left + dx)
    if handle in ResizeHandle.MOVES_RIGHT:
        right = min(CANVAS_MAX, right + dx)
    if handle in ResizeHandle.MOVES_TOP:
        top = max(CANVAS_MIN, top + dy)
    if handle in ResizeHandle.MOVES_BOTTOM:
        bottom = min(CANVAS_MAX, bottom + dy)

    if (right - left) < min_size:
        if handle in ResizeHandle.MOVES_LEFT:
            left = right - min_size
        else:
            right = left + min_size

    if (bottom - top) < min_size:
        if handle in ResizeHandle.MOVES_TOP:
            top = bottom - min_size
        else:
            bottom = top + min_size

    return dataclasses.replace(
        original, x=left, y=top, width=right - left, height=bottom - top
    )


class ResizeController:
    """Resize state machine: ``IDLE -> RESIZING(zone, handle) -> IDLE``.

    Deltas are measured from the pointer position at :meth:`begin` and applied
    to the zone as it was at that moment, so rounding does not accumulate.
    """

    def __init__(self, threshold: float = SNAP_THRESHOLD, min_size: float = MIN_ZONE_SIZE):
        self.threshold = threshold
        self.min_size = min_size
        self.zone_id: Optional[str] = None
        self.handle: Optional[str] = None
        self._start_pointer: Optional[Tuple[float, float]] = None
        self._start_zone: Optional[Zone] = None

    @property
    def active(self) -> bool:
        return self.zone_id is not None

    def begin(self, arena: ZoneArena, zone_id: str, handle: str, cx: float, cy: float) -> bool:
        if self.active or handle not in ResizeHandle.ALL:
            return False
        zone = arena.get(zone_id)
        if zone is None:
            return False
        self.zone_id = zone_id
        self.handle = handle
        self._start_pointer = (cx, cy)
        self._start_zone = zone
        log.debug("Resize start: %s handle=%s", zone_id, handle)
        return True

    def move(
        self,
        arena: ZoneArena,
        cx: float,
        cy: float,
        surface: SurfaceRect,
        snap_enabled: bool = True,
    ) -> ZoneArena:
        if not self.active or self._start_pointer is None or self._start_zone is None:
            return arena
        if self.zone_id not in arena:
            return arena

        sx, sy = self._start_pointer
        dx, dy = surface.to_percent_delta(cx - sx, cy - sy)
        candidate = resize_rect(self._start_zone, self.handle, dx, dy, self.min_size)
        candidate = resolve_candidate(
            candidate, arena.zones(), snap_enabled, self.threshold, self.min_size
        )
        return arena.replace(candidate)

    def cancel(self, arena: ZoneArena) -> ZoneArena:
        """Restore the zone as it was at :meth:`begin` and end the gesture."""
        if self.active and self._start_zone is not None and self.zone_id in arena:
            arena = arena.replace(self._start_zone)
        self.end()
        return arena

    def end(self) -> None:
        if self.active:
            log.debug("Resize end: %s", self.zone_id)
        self.zone_id = None
        self.handle = None
        self._start_pointer = None
        self._start_zone = None
