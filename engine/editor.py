"""
engine/editor.py

Editor session: owns the zone collection and routes pointer and keyboard
events to the drag/resize controllers and the structural operations.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from engine.arena import ZoneArena
from engine.drag import DragController, DragState, MergeRequest
from engine.operations import SplitPreview, grow_zone, split_preview, split_zone
from engine.resize import ResizeController
from engine.zorder import compute_z_order, paint_order
from models import (
    Key,
    SplitAxis,
    SurfaceRect,
    Zone,
    ZoneLayout,
    default_zone,
    find_overlaps,
    generate_layout_id,
    validate_zone,
)
from settings import AppSettings, get_settings

log = logging.getLogger(__name__)


class EditorStateError(RuntimeError):
    """Raised when an editor call does not fit the current session state."""


class EditorState:
    """Session states as seen from outside the editor."""
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"
    MERGE_PENDING = "merge_pending"


class ZoneEditor:
    """Zone layout editing session.

    The editor holds the only authoritative zone collection. Gestures and
    operations compute a new collection and the editor swaps it in with a
    single assignment, then notifies listeners.

    Args:
        zones: Initial zones. An empty collection starts with one
            full-canvas zone.
        settings: Settings to use. Defaults to the global settings.
        request_merge: Called with a :class:`MergeRequest` when a drag ends
            over another zone. The collaborator answers later through
            :meth:`resolve_merge`.
        on_close: Called with the final zones when the user closes the editor.
    """

    def __init__(
        self,
        zones: Optional[Iterable[Zone]] = None,
        settings: Optional[AppSettings] = None,
        request_merge: Optional[Callable[[MergeRequest], None]] = None,
        on_close: Optional[Callable[[List[Zone]], None]] = None,
    ):
        self._settings = settings if settings is not None else get_settings().settings
        ed = self._settings.editor
        self._arena = ZoneArena()
        self._drag = DragController(ed.snap_threshold, ed.min_zone_size, ed.drag_threshold_px)
        self._resize = ResizeController(ed.snap_threshold, ed.min_zone_size)
        self._listeners: List[Callable[[List[Zone]], None]] = []
        self._swallow_click = False
        self._request_merge = request_merge
        self._on_close = on_close

        self.snap_enabled = ed.snap_enabled
        self.split_axis = SplitAxis.HORIZONTAL
        self.surface: Optional[SurfaceRect] = None
        self.hovered_zone_id: Optional[str] = None
        self.pointer: Optional[Tuple[float, float]] = None

        self.load(zones or [])

    # ------------------------------------------------------------------
    # Collection access
    # ------------------------------------------------------------------

    @property
    def zones(self) -> List[Zone]:
        return self._arena.zones()

    @property
    def arena(self) -> ZoneArena:
        return self._arena

    def zone(self, zone_id: str) -> Optional[Zone]:
        return self._arena.get(zone_id)

    def load(self, zones: Iterable[Zone]) -> None:
        """Replace the collection, e.g. with zones from a saved layout."""
        zones = list(zones)
        if not zones:
            zones = [default_zone()]
        for z in zones:
            for problem in validate_zone(z, self._settings.editor.min_zone_size):
                log.warning("Loaded zone violates invariants: %s", problem)
        for a, b in find_overlaps(zones):
            log.warning("Loaded zones overlap: %s and %s", a, b)
        self._drag.reset()
        self._resize.end()
        self._swallow_click = False
        self.hovered_zone_id = None
        self._commit(ZoneArena(zones))

    def to_layout(
        self,
        layout_id: Optional[str] = None,
        name: str = "",
        screen_width: Optional[int] = None,
        screen_height: Optional[int] = None,
    ) -> ZoneLayout:
        """Wrap the current zones in a :class:`ZoneLayout` for saving."""
        return ZoneLayout(
            id=layout_id or generate_layout_id(),
            name=name,
            zones=self.zones,
            screen_width=screen_width,
            screen_height=screen_height,
        )

    def add_listener(self, callback: Callable[[List[Zone]], None]) -> None:
        """Register a callback invoked with the zones after every change."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[List[Zone]], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def set_surface(self, surface: SurfaceRect) -> None:
        """Set the pixel rectangle of the editing surface."""
        self.surface = surface

    def toggle_snap(self) -> bool:
        self.snap_enabled = not self.snap_enabled
        return self.snap_enabled

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> str:
        if self._drag.state == DragState.MERGE_PENDING:
            return EditorState.MERGE_PENDING
        if self._drag.state == DragState.DRAGGING:
            return EditorState.DRAGGING
        if self._resize.active:
            return EditorState.RESIZING
        return EditorState.IDLE

    @property
    def active_zone_id(self) -> Optional[str]:
        """Zone currently being dragged, resized or waiting on a merge answer."""
        if self._drag.state != DragState.IDLE:
            return self._drag.zone_id
        return self._resize.zone_id

    @property
    def merge_target(self) -> Optional[str]:
        return self._drag.merge_target

    @property
    def pending_merge(self) -> Optional[MergeRequest]:
        return self._drag.pending

    def z_order(self) -> Dict[str, int]:
        zo = self._settings.canvas.zorder
        return compute_z_order(self._arena, zo.base, zo.step, self.active_zone_id)

    def paint_order(self) -> List[Zone]:
        zo = self._settings.canvas.zorder
        return paint_order(self._arena, zo.base, zo.step, self.active_zone_id)

    def split_preview(self) -> Optional[SplitPreview]:
        """Split bar for the hovered zone, or None while a gesture is active."""
        if self.state != EditorState.IDLE or self.surface is None or self.pointer is None:
            return None
        zone = self._arena.get(self.hovered_zone_id) if self.hovered_zone_id else None
        if zone is None:
            return None
        cx, cy = self.pointer
        return split_preview(zone, cx, cy, self.split_axis, self.surface)

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(
        self,
        cx: float,
        cy: float,
        zone_id: Optional[str],
        handle: Optional[str] = None,
        on_control: bool = False,
    ) -> bool:
        """Start a resize (when *handle* is given) or a drag on *zone_id*.

        Args:
            cx, cy: Client coordinates of the press.
            zone_id: Zone under the pointer, if any.
            handle: ResizeHandle constant when the press hit a handle.
            on_control: True when the press landed on an interactive control
                inside the zone (e.g. a button); no gesture starts.

        Returns:
            True if a gesture started.
        """
        self.pointer = (cx, cy)
        self._swallow_click = False
        if on_control or zone_id is None or zone_id not in self._arena:
            return False
        if self.state != EditorState.IDLE:
            return False
        if handle is not None:
            return self._resize.begin(self._arena, zone_id, handle, cx, cy)
        return self._drag.begin(self._arena, zone_id, cx, cy)

    def pointer_move(self, cx: float, cy: float) -> None:
        self.pointer = (cx, cy)
        if self.surface is None:
            return
        state = self.state
        if state == EditorState.DRAGGING:
            self._commit(self._drag.move(self._arena, cx, cy, self.surface, self.snap_enabled))
        elif state == EditorState.RESIZING:
            self._commit(self._resize.move(self._arena, cx, cy, self.surface, self.snap_enabled))
        elif state == EditorState.IDLE:
            px, py = self.surface.to_percent_point(cx, cy)
            hit = self._arena.zone_at(px, py)
            self.hovered_zone_id = hit.id if hit else None

    def pointer_up(self, cx: float, cy: float) -> Optional[MergeRequest]:
        """Finish the active gesture.

        Returns:
            The merge request when the drag ended over another zone.
        """
        self.pointer = (cx, cy)
        state = self.state
        if state == EditorState.RESIZING:
            self._resize.end()
            return None
        if state != EditorState.DRAGGING:
            return None
        request = self._drag.release()
        if request is not None and self._request_merge is not None:
            self._request_merge(request)
        return request

    def pointer_leave(self) -> None:
        if self.state == EditorState.IDLE:
            self.hovered_zone_id = None
            self.pointer = None

    def resolve_merge(self, confirmed: bool) -> None:
        """Answer the pending merge question.

        Raises:
            EditorStateError: If no merge is pending.
        """
        if self.state != EditorState.MERGE_PENDING:
            raise EditorStateError("No merge is pending")
        if confirmed:
            self._commit(self._drag.confirm_merge(self._arena))
        else:
            self._commit(self._drag.cancel_merge(self._arena))

    def click(self, cx: float, cy: float, zone_id: Optional[str], ctrl: bool = False) -> bool:
        """Split the zone at the pointer, or grow it when *ctrl* is held.

        The click that ends a drag or a cancelled gesture is ignored.

        Returns:
            True if the zones changed.
        """
        dragged = self._drag.consume_click_suppression()
        swallow, self._swallow_click = self._swallow_click, False
        if dragged or swallow:
            return False
        if self.state != EditorState.IDLE:
            return False
        if zone_id is None or zone_id not in self._arena:
            return False

        if ctrl:
            arena = grow_zone(self._arena, zone_id)
        else:
            if self.surface is None:
                return False
            coordinate = cx if self.split_axis == SplitAxis.HORIZONTAL else cy
            arena = split_zone(self._arena, zone_id, coordinate, self.split_axis, self.surface)

        if arena is self._arena:
            return False
        self._commit(arena)
        return True

    # ------------------------------------------------------------------
    # Keyboard events
    # ------------------------------------------------------------------

    def key_down(self, key: str) -> None:
        if key == Key.SHIFT:
            self.split_axis = SplitAxis.VERTICAL
        elif key == Key.ESCAPE:
            if not self.cancel_gesture():
                self.close()

    def key_up(self, key: str) -> None:
        if key == Key.SHIFT:
            self.split_axis = SplitAxis.HORIZONTAL

    def cancel_gesture(self) -> bool:
        """Undo the gesture in progress, including a pending merge.

        The zone goes back to where the gesture started and the session
        returns to idle, so no half-finished state is ever handed out.

        Returns:
            False if the session was already idle.
        """
        state = self.state
        if state == EditorState.MERGE_PENDING:
            self.resolve_merge(False)
        elif state == EditorState.DRAGGING:
            self._commit(self._drag.abort(self._arena))
        elif state == EditorState.RESIZING:
            self._commit(self._resize.cancel(self._arena))
            self._swallow_click = True
        else:
            return False
        log.debug("Gesture cancelled from %s", state)
        return True

    def close(self) -> None:
        """Hand the final zones to the close callback."""
        log.debug("Closing editor with %d zones", len(self._arena))
        if self._on_close is not None:
            self._on_close(self.zones)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit(self, arena: ZoneArena) -> None:
        if arena is self._arena:
            return
        self._arena = arena
        if self.hovered_zone_id is not None and self.hovered_zone_id not in arena:
            self.hovered_zone_id = None
        zones = arena.zones()
        for cb in list(self._listeners):
            cb(zones)
