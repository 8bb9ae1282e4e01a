"""Tests for models.py: zone values, layouts, ids and surface geometry."""
from __future__ import annotations

import re

import pytest

from models import (
    SurfaceRect,
    Zone,
    ZoneLayout,
    clamp,
    default_zone,
    find_overlaps,
    generate_layout_id,
    generate_zone_id,
    validate_zone,
)


class TestZoneGeometry:
    def test_derived_edges(self):
        z = Zone("z", 10.0, 20.0, 30.0, 40.0)
        assert z.right == 40.0
        assert z.bottom == 60.0
        assert z.area == 1200.0

    def test_contains_point_includes_edges(self):
        z = Zone("z", 10.0, 10.0, 20.0, 20.0)
        assert z.contains_point(10.0, 10.0)
        assert z.contains_point(30.0, 30.0)
        assert z.contains_point(20.0, 15.0)
        assert not z.contains_point(30.5, 15.0)

    def test_shared_edge_is_not_overlap(self):
        a = Zone("a", 0.0, 0.0, 30.0, 30.0)
        b = Zone("b", 30.0, 0.0, 30.0, 30.0)
        assert not a.overlaps(b)
        assert not b.overlaps(a)

    def test_interior_overlap(self):
        a = Zone("a", 0.0, 0.0, 30.0, 30.0)
        b = Zone("b", 29.5, 10.0, 30.0, 30.0)
        assert a.overlaps(b)

    def test_zone_is_frozen(self):
        z = Zone("z", 0.0, 0.0, 10.0, 10.0)
        with pytest.raises(AttributeError):
            z.x = 5.0


class TestScreenRect:
    def test_half_screen_with_origin(self):
        z = Zone("z", 50.0, 25.0, 50.0, 50.0)
        assert z.to_screen_rect(1920, 1080, origin=(100, 0)) == (1060, 270, 960, 540)

    def test_values_are_truncated(self):
        z = Zone("z", 0.09, 0.0, 99.91, 100.0)
        x, y, w, h = z.to_screen_rect(1000, 1000)
        assert x == 0
        assert w == 999


class TestSerialization:
    def test_zone_from_dict_fills_defaults(self):
        z = Zone.from_dict({"id": "z", "x": 5, "y": 6, "width": 7, "height": 8})
        assert z == Zone("z", 5.0, 6.0, 7.0, 8.0, 1)

    def test_layout_omits_unknown_screen_size(self):
        layout = ZoneLayout("layout-1", "Main", [Zone("z", 0.0, 0.0, 100.0, 100.0)])
        d = layout.to_dict()
        assert "screenWidth" not in d
        assert "screenHeight" not in d
        assert d["zones"][0]["number"] == 1

    def test_layout_screen_size_keys(self):
        layout = ZoneLayout("layout-1", "Main", [], screen_width=2560, screen_height=1440)
        d = layout.to_dict()
        assert d["screenWidth"] == 2560
        assert d["screenHeight"] == 1440
        again = ZoneLayout.from_dict(d)
        assert again.screen_width == 2560
        assert again.screen_height == 1440

    def test_layout_without_id_gets_one(self):
        layout = ZoneLayout.from_dict({"name": "Fresh", "zones": []})
        assert layout.id.startswith("layout-")
        assert layout.zones == []


class TestIdentifiers:
    def test_zone_id_format(self):
        assert re.match(r"^zone-\d+-[a-z0-9]{7}$", generate_zone_id())

    def test_layout_id_prefix(self):
        assert generate_layout_id().startswith("layout-")

    def test_ids_are_unique(self):
        ids = {generate_zone_id() for _ in range(200)}
        assert len(ids) == 200

    def test_default_zone_covers_canvas(self):
        z = default_zone()
        assert (z.x, z.y, z.width, z.height, z.number) == (0.0, 0.0, 100.0, 100.0, 1)


class TestValidation:
    def test_valid_zone(self):
        assert validate_zone(Zone("z", 0.0, 0.0, 100.0, 100.0)) == []

    def test_out_of_bounds_and_too_small(self):
        problems = validate_zone(Zone("z", -1.0, 98.0, 3.0, 4.0))
        assert len(problems) == 4
        assert any("left of the canvas" in p for p in problems)
        assert any("bottom edge" in p for p in problems)

    def test_tolerance(self):
        assert validate_zone(Zone("z", 0.0, 0.0, 100.0000001, 4.9999999)) == []

    def test_find_overlaps(self):
        zones = [
            Zone("a", 0.0, 0.0, 30.0, 30.0),
            Zone("b", 30.0, 0.0, 30.0, 30.0),
            Zone("c", 20.0, 20.0, 20.0, 20.0),
        ]
        assert find_overlaps(zones) == [("a", "c"), ("b", "c")]


class TestSurfaceRect:
    def test_point_to_percent(self):
        s = SurfaceRect(100.0, 50.0, 1000.0, 500.0)
        assert s.to_percent_point(600.0, 300.0) == (50.0, 50.0)

    def test_delta_to_percent(self):
        s = SurfaceRect(100.0, 50.0, 1000.0, 500.0)
        assert s.to_percent_delta(100.0, 50.0) == (10.0, 10.0)

    def test_pixel_rect(self):
        s = SurfaceRect(100.0, 50.0, 1000.0, 500.0)
        assert s.to_pixel_rect(Zone("z", 50.0, 50.0, 50.0, 50.0)) == (600.0, 300.0, 500.0, 250.0)


def test_clamp():
    assert clamp(-5.0, 0.0, 100.0) == 0.0
    assert clamp(105.0, 0.0, 100.0) == 100.0
    assert clamp(42.0, 0.0, 100.0) == 42.0
