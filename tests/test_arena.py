"""Tests for engine/arena.py: copy-on-write zone collection."""
from __future__ import annotations

import dataclasses

import pytest

from engine.arena import ZoneArena
from models import Zone


class TestCopyOnWrite:
    def test_replace_returns_new_arena(self, side_by_side):
        arena = ZoneArena(side_by_side)
        moved = dataclasses.replace(arena["a"], x=5.0)
        new = arena.replace(moved)
        assert new is not arena
        assert new["a"].x == 5.0
        assert arena["a"].x == 0.0

    def test_replace_keeps_order(self, side_by_side):
        arena = ZoneArena(side_by_side)
        new = arena.replace(dataclasses.replace(arena["a"], y=10.0))
        assert [z.id for z in new] == ["a", "b"]

    def test_replace_unknown_raises(self, side_by_side):
        with pytest.raises(KeyError):
            ZoneArena(side_by_side).replace(Zone("nope", 0.0, 0.0, 10.0, 10.0))

    def test_insert_and_remove(self, side_by_side):
        arena = ZoneArena(side_by_side)
        extra = Zone("c", 0.0, 50.0, 20.0, 20.0, 3)
        grown = arena.insert(extra)
        assert len(grown) == 3
        assert len(arena) == 2
        shrunk = grown.remove("a", "c")
        assert [z.id for z in shrunk] == ["b"]

    def test_remove_unknown_raises(self, side_by_side):
        with pytest.raises(KeyError):
            ZoneArena(side_by_side).remove("a", "missing")

    def test_equality(self, side_by_side):
        assert ZoneArena(side_by_side) == ZoneArena(list(side_by_side))
        assert ZoneArena(side_by_side) != ZoneArena(side_by_side[:1])


class TestHitTesting:
    def test_smallest_zone_wins(self):
        arena = ZoneArena([
            Zone("big", 0.0, 0.0, 100.0, 100.0, 1),
            Zone("small", 10.0, 10.0, 20.0, 20.0, 2),
        ])
        assert arena.zone_at(15.0, 15.0).id == "small"
        assert [z.id for z in arena.zones_at(15.0, 15.0)] == ["small", "big"]

    def test_exclude_id(self):
        arena = ZoneArena([
            Zone("big", 0.0, 0.0, 100.0, 100.0, 1),
            Zone("small", 10.0, 10.0, 20.0, 20.0, 2),
        ])
        assert arena.zone_at(15.0, 15.0, exclude_id="small").id == "big"

    def test_miss(self, side_by_side):
        assert ZoneArena(side_by_side).zone_at(40.0, 10.0) is None


class TestNumbering:
    def test_next_number(self):
        arena = ZoneArena([
            Zone("a", 0.0, 0.0, 10.0, 10.0, 1),
            Zone("b", 20.0, 0.0, 10.0, 10.0, 2),
            Zone("c", 40.0, 0.0, 10.0, 10.0, 5),
        ])
        assert arena.next_number() == 6

    def test_next_number_empty(self):
        assert ZoneArena().next_number() == 1

    def test_renumbered_in_reading_order(self):
        arena = ZoneArena([
            Zone("bottom", 0.0, 50.0, 50.0, 50.0, 1),
            Zone("top-right", 50.0, 0.0, 50.0, 50.0, 7),
            Zone("top-left", 0.0, 0.0, 50.0, 50.0, 3),
        ])
        numbers = {z.id: z.number for z in arena.renumbered()}
        assert numbers == {"top-left": 1, "top-right": 2, "bottom": 3}
