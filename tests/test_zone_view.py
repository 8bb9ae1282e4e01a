"""Tests for canvas/zone_view.py: Qt event mapping on an offscreen surface."""
from __future__ import annotations

import pytest
from PyQt6.QtCore import QEvent, QPointF, QRectF, Qt
from PyQt6.QtGui import QKeyEvent, QMouseEvent

from canvas.zone_view import ZoneCanvas, format_percent, handle_points
from engine.editor import EditorState
from models import ResizeHandle, SurfaceRect, Zone
from settings import AppSettings


def _mouse(canvas, kind, x, y, modifiers=Qt.KeyboardModifier.NoModifier):
    """Deliver a synthetic left-button mouse event straight to the handler."""
    pos = QPointF(x, y)
    if kind == "move":
        event = QMouseEvent(QEvent.Type.MouseMove, pos, pos, Qt.MouseButton.NoButton,
                            Qt.MouseButton.LeftButton, modifiers)
        canvas.mouseMoveEvent(event)
    elif kind == "press":
        event = QMouseEvent(QEvent.Type.MouseButtonPress, pos, pos, Qt.MouseButton.LeftButton,
                            Qt.MouseButton.LeftButton, modifiers)
        canvas.mousePressEvent(event)
    else:
        event = QMouseEvent(QEvent.Type.MouseButtonRelease, pos, pos, Qt.MouseButton.LeftButton,
                            Qt.MouseButton.NoButton, modifiers)
        canvas.mouseReleaseEvent(event)


def _key(canvas, key, press=True):
    kind = QEvent.Type.KeyPress if press else QEvent.Type.KeyRelease
    event = QKeyEvent(kind, key.value, Qt.KeyboardModifier.NoModifier)
    if press:
        canvas.keyPressEvent(event)
    else:
        canvas.keyReleaseEvent(event)


@pytest.fixture
def make_canvas(qapp):
    created = []

    def _make(zones=None, answer=True):
        asked = []

        def confirm(request):
            asked.append(request)
            return answer

        canvas = ZoneCanvas(zones, settings=AppSettings(), confirm_merge=confirm)
        canvas.asked = asked
        canvas.resize(1000, 1000)
        canvas.show()
        qapp.processEvents()
        # Pin the geometry in case the platform clamps the window to its screen
        canvas.editor.set_surface(SurfaceRect(0.0, 0.0, 1000.0, 1000.0))
        created.append(canvas)
        return canvas

    yield _make
    for canvas in created:
        canvas.close()
        canvas.deleteLater()


class TestHelpers:
    def test_handle_points(self):
        pts = handle_points(QRectF(0, 0, 100, 50))
        assert set(pts) == set(ResizeHandle.ALL)
        assert pts[ResizeHandle.SE] == QPointF(100, 50)
        assert pts[ResizeHandle.N] == QPointF(50, 0)
        assert pts[ResizeHandle.W] == QPointF(0, 25)

    def test_format_percent(self):
        assert format_percent(33.333) == "33%"
        assert format_percent(50.0) == "50%"


class TestZoneCanvas:
    def test_surface_follows_widget_size(self, make_canvas, qapp):
        canvas = make_canvas()
        canvas.resize(400, 300)
        qapp.processEvents()
        assert canvas.editor.surface == SurfaceRect(0.0, 0.0, float(canvas.width()), float(canvas.height()))

    def test_click_splits(self, make_canvas):
        canvas = make_canvas()
        changes = []
        canvas.zonesChanged.connect(changes.append)
        _mouse(canvas, "press", 500, 500)
        _mouse(canvas, "release", 500, 500)
        assert len(canvas.editor.zones) == 2
        assert sorted(z.width for z in canvas.editor.zones) == [50.0, 50.0]
        assert len(changes) == 1

    def test_shift_click_splits_top_bottom(self, make_canvas):
        canvas = make_canvas()
        _key(canvas, Qt.Key.Key_Shift)
        _mouse(canvas, "press", 500, 300)
        _mouse(canvas, "release", 500, 300)
        _key(canvas, Qt.Key.Key_Shift, press=False)
        assert sorted(z.height for z in canvas.editor.zones) == [30.0, 70.0]

    def test_ctrl_click_grows(self, make_canvas):
        canvas = make_canvas([Zone("a", 20.0, 20.0, 30.0, 30.0, 1)])
        ctrl = Qt.KeyboardModifier.ControlModifier
        _mouse(canvas, "press", 300, 300, ctrl)
        _mouse(canvas, "release", 300, 300, ctrl)
        z = canvas.editor.zone("a")
        assert (z.x, z.y, z.width, z.height) == (0.0, 0.0, 100.0, 100.0)

    def test_drag_onto_zone_merges_after_confirmation(self, make_canvas, side_by_side):
        canvas = make_canvas(side_by_side, answer=True)
        _mouse(canvas, "press", 100, 100)
        _mouse(canvas, "move", 600, 100)
        assert canvas.editor.merge_target == "b"
        _mouse(canvas, "release", 600, 100)
        assert len(canvas.asked) == 1
        assert [z.id for z in canvas.editor.zones] == ["b"]
        assert canvas.editor.state == EditorState.IDLE

    def test_declined_merge_restores_zone(self, make_canvas, side_by_side):
        canvas = make_canvas(side_by_side, answer=False)
        _mouse(canvas, "press", 100, 100)
        _mouse(canvas, "move", 600, 100)
        _mouse(canvas, "release", 600, 100)
        assert canvas.editor.zone("a") == side_by_side[0]
        assert len(canvas.editor.zones) == 2

    def test_handle_drag_resizes_without_splitting(self, make_canvas):
        canvas = make_canvas()
        _mouse(canvas, "move", 900, 500)
        zone_id = canvas.editor.hovered_zone_id
        assert canvas._hit_test_handle(QPointF(995, 500)) == (zone_id, ResizeHandle.E)
        _mouse(canvas, "press", 995, 500)
        assert canvas.editor.state == EditorState.RESIZING
        _mouse(canvas, "move", 495, 500)
        _mouse(canvas, "release", 495, 500)
        assert len(canvas.editor.zones) == 1
        assert canvas.editor.zones[0].width == 50.0

    def test_escape_emits_close(self, make_canvas, side_by_side):
        canvas = make_canvas(side_by_side)
        closed = []
        canvas.closeRequested.connect(closed.append)
        _key(canvas, Qt.Key.Key_Escape)
        assert len(closed) == 1
        assert [z.id for z in closed[0]] == ["a", "b"]

    def test_escape_mid_drag_cancels_without_closing(self, make_canvas, side_by_side):
        canvas = make_canvas(side_by_side)
        closed = []
        canvas.closeRequested.connect(closed.append)
        _mouse(canvas, "press", 100, 100)
        _mouse(canvas, "move", 550, 100)
        _key(canvas, Qt.Key.Key_Escape)
        _mouse(canvas, "release", 550, 100)
        assert closed == []
        assert canvas.editor.zone("a") == side_by_side[0]
        assert len(canvas.editor.zones) == 2

    def test_s_toggles_snap(self, make_canvas):
        canvas = make_canvas()
        _key(canvas, Qt.Key.Key_S)
        assert canvas.editor.snap_enabled is False

    def test_paints(self, make_canvas, side_by_side):
        canvas = make_canvas(side_by_side)
        _mouse(canvas, "move", 100, 100)
        pixmap = canvas.grab()
        assert not pixmap.isNull()
