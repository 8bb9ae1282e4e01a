"""Shared pytest setup: import path, headless Qt and common zone fixtures."""
from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from models import SurfaceRect, Zone


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def surface() -> SurfaceRect:
    """1000x1000 px surface: 10 px == 1 percent."""
    return SurfaceRect(0.0, 0.0, 1000.0, 1000.0)


@pytest.fixture
def side_by_side():
    """Zone A at the top-left and zone B with a gap to its right."""
    return [
        Zone("a", 0.0, 0.0, 30.0, 30.0, 1),
        Zone("b", 50.0, 0.0, 30.0, 30.0, 2),
    ]


@pytest.fixture
def boxed_in():
    """A centre zone with one sibling on each side."""
    return [
        Zone("c", 30.0, 30.0, 40.0, 40.0, 1),
        Zone("l", 0.0, 20.0, 10.0, 60.0, 2),
        Zone("r", 90.0, 20.0, 10.0, 60.0, 3),
        Zone("t", 20.0, 0.0, 60.0, 10.0, 4),
        Zone("b", 20.0, 90.0, 60.0, 10.0, 5),
    ]
