"""Tests for the layout file helpers and CLI parsing in main.py."""
from __future__ import annotations

import json

import pytest

from main import load_layout, parse_args, save_layout
from models import Zone, ZoneLayout


class TestLayoutFiles:
    def test_missing_file_gives_empty_layout(self, tmp_path):
        layout = load_layout(tmp_path / "desk.json")
        assert layout.name == "desk"
        assert layout.zones == []

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "desk.json"
        layout = ZoneLayout("layout-1", "Desk", [Zone("a", 0.0, 0.0, 50.0, 100.0, 1)], 1920, 1080)
        save_layout(layout, path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["screenWidth"] == 1920
        loaded = load_layout(path)
        assert loaded.zones == layout.zones
        assert loaded.id == "layout-1"

    def test_rejects_non_layout_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_layout(path)

    def test_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_layout(path)

    @pytest.mark.parametrize("zones", [
        [{"x": 0.0, "y": 0.0, "width": 50.0, "height": 100.0}],
        [{"id": "a", "x": None}],
        [{"id": "a", "x": "left"}],
        [42],
    ])
    def test_malformed_zone_entry_is_a_value_error(self, tmp_path, zones):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"id": "layout-1", "zones": zones}), encoding="utf-8")
        with pytest.raises(ValueError, match="bad.json"):
            load_layout(path)


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.layout is None
        assert args.windowed is False

    def test_layout_and_flags(self):
        args = parse_args(["desk.json", "--name", "Desk", "--windowed"])
        assert args.layout == "desk.json"
        assert args.name == "Desk"
        assert args.windowed is True
