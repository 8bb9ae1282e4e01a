"""
engine/arena.py

Copy-on-write zone collection keyed by zone id.
"""

from __future__ import annotations

import dataclasses
from typing import Dict, Iterable, Iterator, List, Optional

from models import Zone


class ZoneArena:
    """Ordered mapping of zone id to zone.

    Every mutating method returns a new arena and leaves the receiver
    untouched, so the editor can swap its collection in one assignment and
    gesture code can keep a snapshot of the state it started from.
    """

    __slots__ = ("_zones",)

    def __init__(self, zones: Iterable[Zone] = ()):
        self._zones: Dict[str, Zone] = {}
        for z in zones:
            self._zones[z.id] = z

    # -- read access --------------------------------------------------------

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self) -> Iterator[Zone]:
        return iter(self._zones.values())

    def __contains__(self, zone_id: object) -> bool:
        return zone_id in self._zones

    def __getitem__(self, zone_id: str) -> Zone:
        return self._zones[zone_id]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZoneArena):
            return NotImplemented
        return list(self._zones.values()) == list(other._zones.values())

    def __repr__(self) -> str:
        return f"ZoneArena({list(self._zones.values())!r})"

    def get(self, zone_id: str) -> Optional[Zone]:
        return self._zones.get(zone_id)

    def zones(self) -> List[Zone]:
        return list(self._zones.values())

    def others(self, exclude_id: Optional[str]) -> List[Zone]:
        return [z for z in self._zones.values() if z.id != exclude_id]

    def next_number(self) -> int:
        """Return one past the highest display number (1 for an empty arena)."""
        if not self._zones:
            return 1
        return max(z.number for z in self._zones.values()) + 1

    def zones_at(self, px: float, py: float, exclude_id: Optional[str] = None) -> List[Zone]:
        """Return every zone containing the canvas point, smallest area first."""
        hits = [
            z for z in self._zones.values()
            if z.id != exclude_id and z.contains_point(px, py)
        ]
        hits.sort(key=lambda z: (z.area, z.number))
        return hits

    def zone_at(self, px: float, py: float, exclude_id: Optional[str] = None) -> Optional[Zone]:
        """Return the topmost zone at the canvas point.

        The topmost zone is the smallest one, matching the z-order used while
        zones are nested during editing.
        """
        hits = self.zones_at(px, py, exclude_id)
        return hits[0] if hits else None

    # -- copy-on-write mutation ---------------------------------------------

    def replace(self, zone: Zone) -> "ZoneArena":
        """Return a new arena with the zone of the same id swapped in place.

        Raises:
            KeyError: If no zone with that id exists.
        """
        if zone.id not in self._zones:
            raise KeyError(zone.id)
        new = ZoneArena()
        new._zones = dict(self._zones)
        new._zones[zone.id] = zone
        return new

    def insert(self, *zones: Zone) -> "ZoneArena":
        """Return a new arena with the zones appended (or replaced by id)."""
        new = ZoneArena()
        new._zones = dict(self._zones)
        for z in zones:
            new._zones[z.id] = z
        return new

    def remove(self, *zone_ids: str) -> "ZoneArena":
        """Return a new arena without the given ids.

        Raises:
            KeyError: If one of the ids is unknown.
        """
        for zid in zone_ids:
            if zid not in self._zones:
                raise KeyError(zid)
        new = ZoneArena()
        new._zones = {k: v for k, v in self._zones.items() if k not in zone_ids}
        return new

    def renumbered(self) -> "ZoneArena":
        """Return a new arena numbered 1..N in reading order (y, then x)."""
        ordered = sorted(self._zones.values(), key=lambda z: (z.y, z.x))
        return ZoneArena(
            dataclasses.replace(z, number=index)
            for index, z in enumerate(ordered, start=1)
        )
