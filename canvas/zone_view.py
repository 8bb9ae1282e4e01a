"""
canvas/zone_view.py

QWidget editing surface: draws the zones and feeds mouse/keyboard input to a
ZoneEditor.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from PyQt6.QtCore import QLineF, QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPen
from PyQt6.QtWidgets import QMessageBox, QWidget

from debug_trace import trace
from engine.drag import MergeRequest
from engine.editor import EditorState, ZoneEditor
from models import Key, ResizeHandle, SplitAxis, SurfaceRect, Zone
from settings import AppSettings, get_settings

# Cursor per resize handle
_HANDLE_CURSORS = {
    ResizeHandle.NW: Qt.CursorShape.SizeFDiagCursor,
    ResizeHandle.SE: Qt.CursorShape.SizeFDiagCursor,
    ResizeHandle.NE: Qt.CursorShape.SizeBDiagCursor,
    ResizeHandle.SW: Qt.CursorShape.SizeBDiagCursor,
    ResizeHandle.N: Qt.CursorShape.SizeVerCursor,
    ResizeHandle.S: Qt.CursorShape.SizeVerCursor,
    ResizeHandle.E: Qt.CursorShape.SizeHorCursor,
    ResizeHandle.W: Qt.CursorShape.SizeHorCursor,
}


def handle_points(rect: QRectF) -> Dict[str, QPointF]:
    """Return the eight handle positions of a pixel rectangle."""
    cx = rect.left() + rect.width() / 2
    cy = rect.top() + rect.height() / 2
    return {
        ResizeHandle.NW: QPointF(rect.left(), rect.top()),
        ResizeHandle.NE: QPointF(rect.right(), rect.top()),
        ResizeHandle.SW: QPointF(rect.left(), rect.bottom()),
        ResizeHandle.SE: QPointF(rect.right(), rect.bottom()),
        ResizeHandle.N: QPointF(cx, rect.top()),
        ResizeHandle.S: QPointF(cx, rect.bottom()),
        ResizeHandle.W: QPointF(rect.left(), cy),
        ResizeHandle.E: QPointF(rect.right(), cy),
    }


def format_percent(value: float) -> str:
    return f"{value:.0f}%"


class ZoneCanvas(QWidget):
    """
    Full-window zone editing surface.

    Mouse behavior:
    - Press on a zone and move: drag the zone (drop onto another zone to merge)
    - Press on a handle of the hovered zone and move: resize
    - Click: split at the pointer (Shift held: top/bottom split)
    - Ctrl + click: grow the zone into the free space around it

    Keys:
    - Escape: cancel the active gesture or pending merge, otherwise close the editor
    - S: toggle edge snapping

    Signals:
        zonesChanged(list): Emitted with the zone list after every change.
        closeRequested(list): Emitted with the final zones on Escape.
    """

    zonesChanged = pyqtSignal(list)
    closeRequested = pyqtSignal(list)

    def __init__(
        self,
        zones: Optional[Iterable[Zone]] = None,
        settings: Optional[AppSettings] = None,
        confirm_merge: Optional[Callable[[MergeRequest], bool]] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._settings = settings if settings is not None else get_settings().settings
        self._confirm_merge = confirm_merge or self._ask_merge
        self.editor = ZoneEditor(
            zones,
            settings=self._settings,
            request_merge=self._on_merge_requested,
            on_close=self._on_editor_close,
        )
        self.editor.add_listener(self._on_zones_changed)

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(200, 150)
        self._sync_surface()

    # ------------------------------------------------------------------
    # Geometry helpers
    # ------------------------------------------------------------------

    def _sync_surface(self) -> None:
        self.editor.set_surface(SurfaceRect(0.0, 0.0, float(self.width()), float(self.height())))

    def zone_rect(self, zone: Zone) -> QRectF:
        """Pixel rectangle of *zone* in widget coordinates."""
        surface = self.editor.surface
        if surface is None:
            return QRectF()
        return QRectF(*surface.to_pixel_rect(zone))

    def zone_at_pos(self, pos: QPointF) -> Optional[Zone]:
        surface = self.editor.surface
        if surface is None:
            return None
        px, py = surface.to_percent_point(pos.x(), pos.y())
        return self.editor.arena.zone_at(px, py)

    def _handle_zone(self) -> Optional[Zone]:
        """Zone whose handles are shown: the active zone, else the hovered one."""
        zone_id = self.editor.active_zone_id or self.editor.hovered_zone_id
        return self.editor.zone(zone_id) if zone_id else None

    def _hit_test_handle(self, pos: QPointF) -> Optional[Tuple[str, str]]:
        """Return ``(zone_id, handle)`` for the handle under *pos*, if any."""
        zone = self._handle_zone()
        if zone is None:
            return None
        # Hit distance from settings. Default: 10.0 pixels
        hit_dist = self._settings.canvas.handles.hit_distance
        for handle, hp in handle_points(self.zone_rect(zone)).items():
            if QLineF(pos, hp).length() <= hit_dist:
                return zone.id, handle
        return None

    # ------------------------------------------------------------------
    # Editor callbacks
    # ------------------------------------------------------------------

    def _on_zones_changed(self, zones: List[Zone]) -> None:
        self.zonesChanged.emit(zones)
        self.update()

    def _on_editor_close(self, zones: List[Zone]) -> None:
        trace(f"Close requested with {len(zones)} zones", "CANVAS")
        self.closeRequested.emit(zones)

    def _on_merge_requested(self, request: MergeRequest) -> None:
        confirmed = bool(self._confirm_merge(request))
        trace(f"Merge {request.dragged_id} -> {request.target_id}: {confirmed}", "CANVAS")
        self.editor.resolve_merge(confirmed)

    def _ask_merge(self, request: MergeRequest) -> bool:
        dragged = request.pre_drag
        target = self.editor.zone(request.target_id)
        target_label = target.number if target is not None else "?"
        answer = QMessageBox.question(
            self,
            "Merge zones",
            f"Merge zone {dragged.number} into zone {target_label}?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return answer == QMessageBox.StandardButton.Yes

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def resizeEvent(self, event):
        self._sync_surface()
        super().resizeEvent(event)

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        hit = self._hit_test_handle(pos)
        if hit is not None:
            zone_id, handle = hit
            self.editor.pointer_down(pos.x(), pos.y(), zone_id, handle=handle)
        else:
            zone = self.zone_at_pos(pos)
            self.editor.pointer_down(pos.x(), pos.y(), zone.id if zone else None)
        self.update()
        event.accept()

    def mouseMoveEvent(self, event):
        pos = event.position()
        self.editor.pointer_move(pos.x(), pos.y())
        self._update_cursor(pos)
        self.update()
        event.accept()

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        pos = event.position()
        was_resizing = self.editor.state == EditorState.RESIZING
        self.editor.pointer_up(pos.x(), pos.y())
        if not was_resizing:
            zone = self.zone_at_pos(pos)
            ctrl = bool(event.modifiers() & (
                Qt.KeyboardModifier.ControlModifier | Qt.KeyboardModifier.MetaModifier
            ))
            self.editor.click(pos.x(), pos.y(), zone.id if zone else None, ctrl=ctrl)
        self._update_cursor(pos)
        self.update()
        event.accept()

    def leaveEvent(self, event):
        self.editor.pointer_leave()
        self.update()
        super().leaveEvent(event)

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_Escape:
            self.editor.key_down(Key.ESCAPE)
        elif key == Qt.Key.Key_Shift:
            self.editor.key_down(Key.SHIFT)
        elif key == Qt.Key.Key_S:
            enabled = self.editor.toggle_snap()
            trace(f"Snapping {'on' if enabled else 'off'}", "CANVAS")
        else:
            super().keyPressEvent(event)
            return
        self.update()
        event.accept()

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.editor.key_up(Key.SHIFT)
            self.update()
            event.accept()
            return
        super().keyReleaseEvent(event)

    def _update_cursor(self, pos: QPointF) -> None:
        state = self.editor.state
        if state == EditorState.DRAGGING:
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            return
        if state == EditorState.RESIZING:
            return
        hit = self._hit_test_handle(pos)
        if hit is not None:
            self.setCursor(_HANDLE_CURSORS[hit[1]])
        elif self.editor.hovered_zone_id is not None:
            if self.editor.split_axis == SplitAxis.HORIZONTAL:
                self.setCursor(Qt.CursorShape.SplitHCursor)
            else:
                self.setCursor(Qt.CursorShape.SplitVCursor)
        else:
            self.setCursor(Qt.CursorShape.ArrowCursor)

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event):
        trace(f"paintEvent {len(self.editor.arena)} zones", "PAINT")
        colors = self._settings.canvas.colors
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), QColor(colors.background))

        highlight = {self.editor.hovered_zone_id, self.editor.merge_target}
        for zone in self.editor.paint_order():
            self._paint_zone(painter, zone, zone.id in highlight)

        handle_zone = self._handle_zone()
        if handle_zone is not None and self.editor.state != EditorState.MERGE_PENDING:
            self._paint_handles(painter, self.zone_rect(handle_zone))

        self._paint_split_bar(painter)
        painter.end()

    def _paint_zone(self, painter: QPainter, zone: Zone, highlighted: bool) -> None:
        colors = self._settings.canvas.colors
        rect = self.zone_rect(zone)
        border = QColor(colors.hover_border if highlighted else colors.zone_border)
        fill = QColor(colors.hover_fill if highlighted else colors.zone_fill)
        painter.setPen(QPen(border, 2))
        painter.setBrush(QBrush(fill))
        painter.drawRect(rect)

        painter.setPen(QPen(QColor(colors.label)))
        number_font = QFont(painter.font())
        number_font.setPointSizeF(max(10.0, min(48.0, min(rect.width(), rect.height()) / 5)))
        number_font.setBold(True)
        painter.setFont(number_font)
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, str(zone.number))

        size_font = QFont(painter.font())
        size_font.setPointSizeF(9.0)
        size_font.setBold(False)
        painter.setFont(size_font)
        size_rect = rect.adjusted(0, 0, 0, -6)
        painter.drawText(
            size_rect,
            Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignBottom,
            f"{format_percent(zone.width)} × {format_percent(zone.height)}",
        )

    def _paint_handles(self, painter: QPainter, rect: QRectF) -> None:
        handles = self._settings.canvas.handles
        painter.setPen(QPen(QColor(handles.border_color), 1))
        painter.setBrush(QBrush(QColor(handles.fill_color)))
        half = handles.size / 2
        for pos in handle_points(rect).values():
            painter.drawRect(QRectF(pos.x() - half, pos.y() - half, handles.size, handles.size))

    def _paint_split_bar(self, painter: QPainter) -> None:
        preview = self.editor.split_preview()
        zone = self.editor.zone(self.editor.hovered_zone_id) if self.editor.hovered_zone_id else None
        if preview is None or zone is None or self._hit_test_handle(self._pointer_point()) is not None:
            return
        rect = self.zone_rect(zone)
        surface = self.editor.surface
        painter.setPen(QPen(QColor(self._settings.canvas.colors.split_bar), 2, Qt.PenStyle.DashLine))
        painter.setFont(QFont(painter.font()))

        if preview.axis == SplitAxis.HORIZONTAL:
            x = surface.left + preview.position / 100.0 * surface.width
            painter.drawLine(QPointF(x, rect.top()), QPointF(x, rect.bottom()))
            cy = rect.top() + rect.height() / 2
            painter.drawText(
                QRectF(rect.left(), cy - 10, x - rect.left() - 4, 20),
                Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter,
                format_percent(preview.first_percent),
            )
            painter.drawText(
                QRectF(x + 4, cy - 10, rect.right() - x - 4, 20),
                Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter,
                format_percent(preview.second_percent),
            )
        else:
            y = surface.top + preview.position / 100.0 * surface.height
            painter.drawLine(QPointF(rect.left(), y), QPointF(rect.right(), y))
            painter.drawText(
                QRectF(rect.left(), rect.top(), rect.width(), y - rect.top() - 2),
                Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignBottom,
                format_percent(preview.first_percent),
            )
            painter.drawText(
                QRectF(rect.left(), y + 2, rect.width(), rect.bottom() - y - 2),
                Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop,
                format_percent(preview.second_percent),
            )

    def _pointer_point(self) -> QPointF:
        if self.editor.pointer is None:
            return QPointF(-1e6, -1e6)
        return QPointF(*self.editor.pointer)
