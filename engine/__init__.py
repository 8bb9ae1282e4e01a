"""
engine package

Pure zone geometry and interaction logic: snapping, overlap correction,
drag/resize gestures, split/merge/grow operations and stacking order.
"""

from engine.arena import ZoneArena
from engine.snap import SnapPoints, get_snap_points, snap_value, snap_zone_edges
from engine.overlap import prevent_overlaps, residual_overlaps, resolve_candidate, zones_overlap
from engine.operations import SplitPreview, grow_zone, merge_zones, split_preview, split_zone
from engine.drag import DragController, DragState, MergeRequest, drag_zone
from engine.resize import ResizeController, resize_rect
from engine.zorder import compute_z_order, paint_order
from engine.editor import EditorState, EditorStateError, ZoneEditor

__all__ = [
    "ZoneArena",
    "SnapPoints",
    "get_snap_points",
    "snap_value",
    "snap_zone_edges",
    "prevent_overlaps",
    "residual_overlaps",
    "resolve_candidate",
    "zones_overlap",
    "SplitPreview",
    "grow_zone",
    "merge_zones",
    "split_preview",
    "split_zone",
    "DragController",
    "DragState",
    "MergeRequest",
    "drag_zone",
    "ResizeController",
    "resize_rect",
    "compute_z_order",
    "paint_order",
    "EditorState",
    "EditorStateError",
    "ZoneEditor",
]
