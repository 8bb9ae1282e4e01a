"""
models.py

Data models and constants for the ZoneSnap layout editor.
"""

from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple


# ----------------------------
# Canvas constants
# ----------------------------

CANVAS_MIN = 0.0
CANVAS_MAX = 100.0

# Zone geometry constants (percent of canvas)
# NOTE: The editor reads the live values from get_settings().settings.editor;
# these are the defaults used by the pure engine functions.
MIN_ZONE_SIZE = 5.0    # Default: 5.0 percent - smallest usable zone side
SNAP_THRESHOLD = 0.2   # Default: 0.2 percent - edge snapping distance
EPSILON = 1e-6         # Floating tolerance for invariant checks


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* into ``[lo, hi]``."""
    return max(lo, min(hi, value))


# ----------------------------
# Identifiers
# ----------------------------

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(prefix: str) -> str:
    """Generate a unique id made of alphanumerics and hyphens.

    Format: ``<prefix>-<milliseconds>-<7 random chars>``.
    """
    random_part = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"{prefix}-{int(time.time() * 1000)}-{random_part}"


def generate_zone_id() -> str:
    return generate_id("zone")


def generate_layout_id() -> str:
    return generate_id("layout")


# ----------------------------
# Zone model
# ----------------------------

@dataclass(frozen=True)
class Zone:
    """A rectangular window-snap target in percent-of-canvas coordinates.

    Zones are values: drag and resize produce a new ``Zone`` carrying the
    same ``id``, split and merge produce zones with new geometry (and, for
    the second half of a split, a new id).
    """
    id: str
    x: float
    y: float
    width: float
    height: float
    number: int = 1

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains_point(self, px: float, py: float) -> bool:
        """Return True if the point lies inside the zone, edges included."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def overlaps(self, other: "Zone") -> bool:
        """Return True if the interiors of both zones intersect.

        Zones that only share an edge do not overlap.
        """
        return (
            self.x < other.right
            and self.right > other.x
            and self.y < other.bottom
            and self.bottom > other.y
        )

    def same_rect(self, other: "Zone") -> bool:
        return (
            self.x == other.x
            and self.y == other.y
            and self.width == other.width
            and self.height == other.height
        )

    def to_screen_rect(
        self,
        screen_width: int,
        screen_height: int,
        origin: Tuple[int, int] = (0, 0),
    ) -> Tuple[int, int, int, int]:
        """Convert to pixel geometry ``(x, y, width, height)`` on a screen.

        Values are truncated toward zero, matching how windows are placed
        into zones.
        """
        ox, oy = origin
        return (
            int(screen_width * self.x / 100.0) + ox,
            int(screen_height * self.y / 100.0) + oy,
            int(screen_width * self.width / 100.0),
            int(screen_height * self.height / 100.0),
        )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Zone":
        return cls(
            id=str(d["id"]),
            x=float(d.get("x", 0.0)),
            y=float(d.get("y", 0.0)),
            width=float(d.get("width", 0.0)),
            height=float(d.get("height", 0.0)),
            number=int(d.get("number", 1)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "number": self.number,
        }


def default_zone() -> Zone:
    """Full-canvas zone used when a layout has no zones yet."""
    return Zone(generate_zone_id(), 0.0, 0.0, 100.0, 100.0, 1)


def validate_zone(zone: Zone, min_size: float = MIN_ZONE_SIZE, eps: float = EPSILON) -> List[str]:
    """Check a zone against the geometry invariants.

    Args:
        zone: Zone to check.
        min_size: Minimum width/height in percent.
        eps: Floating tolerance.

    Returns:
        A list of human-readable violations; empty when the zone is valid.
    """
    problems = []
    if zone.x < -eps:
        problems.append(f"{zone.id}: x={zone.x:g} is left of the canvas")
    if zone.y < -eps:
        problems.append(f"{zone.id}: y={zone.y:g} is above the canvas")
    if zone.right > CANVAS_MAX + eps:
        problems.append(f"{zone.id}: right edge {zone.right:g} is past the canvas")
    if zone.bottom > CANVAS_MAX + eps:
        problems.append(f"{zone.id}: bottom edge {zone.bottom:g} is past the canvas")
    if zone.width < min_size - eps:
        problems.append(f"{zone.id}: width {zone.width:g} is below {min_size:g}")
    if zone.height < min_size - eps:
        problems.append(f"{zone.id}: height {zone.height:g} is below {min_size:g}")
    return problems


def find_overlaps(zones: List[Zone], eps: float = EPSILON) -> List[Tuple[str, str]]:
    """Return id pairs of zones whose interiors overlap by more than *eps*."""
    pairs = []
    for i, a in enumerate(zones):
        for b in zones[i + 1:]:
            if (
                a.x < b.right - eps
                and a.right > b.x + eps
                and a.y < b.bottom - eps
                and a.bottom > b.y + eps
            ):
                pairs.append((a.id, b.id))
    return pairs


# ----------------------------
# Layout model
# ----------------------------

@dataclass
class ZoneLayout:
    """A saved, named snapshot of a zone collection.

    ``screen_width`` / ``screen_height`` are serialized as ``screenWidth`` /
    ``screenHeight`` and omitted when unknown.
    """
    id: str
    name: str
    zones: List[Zone] = field(default_factory=list)
    screen_width: Optional[int] = None
    screen_height: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ZoneLayout":
        return cls(
            id=str(d.get("id") or generate_layout_id()),
            name=str(d.get("name", "")),
            zones=[Zone.from_dict(z) for z in d.get("zones", [])],
            screen_width=d.get("screenWidth"),
            screen_height=d.get("screenHeight"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "zones": [z.to_dict() for z in self.zones],
        }
        if self.screen_width is not None:
            d["screenWidth"] = self.screen_width
        if self.screen_height is not None:
            d["screenHeight"] = self.screen_height
        return d


# ----------------------------
# Editing surface geometry
# ----------------------------

class SurfaceRect(NamedTuple):
    """Pixel bounding rectangle of the editing surface in client coordinates."""
    left: float
    top: float
    width: float
    height: float

    def to_percent_point(self, cx: float, cy: float) -> Tuple[float, float]:
        """Convert a client-space point to canvas percent."""
        return (
            (cx - self.left) / self.width * 100.0,
            (cy - self.top) / self.height * 100.0,
        )

    def to_percent_delta(self, dx: float, dy: float) -> Tuple[float, float]:
        """Convert a pixel delta to a canvas percent delta."""
        return dx / self.width * 100.0, dy / self.height * 100.0

    def to_pixel_rect(self, zone: Zone) -> Tuple[float, float, float, float]:
        """Return the zone's client-space ``(left, top, width, height)``."""
        return (
            self.left + zone.x / 100.0 * self.width,
            self.top + zone.y / 100.0 * self.height,
            zone.width / 100.0 * self.width,
            zone.height / 100.0 * self.height,
        )


# ----------------------------
# Editor constants
# ----------------------------

class SplitAxis:
    """Split direction constants.

    HORIZONTAL splits into left/right halves, VERTICAL into top/bottom.
    """
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ResizeHandle:
    """Resize handle constants (compass directions)."""
    N = "n"
    S = "s"
    E = "e"
    W = "w"
    NE = "ne"
    NW = "nw"
    SE = "se"
    SW = "sw"

    ALL = (N, S, E, W, NE, NW, SE, SW)
    # Handles that move the left/top edge (the right/bottom edge stays fixed)
    MOVES_LEFT = frozenset((W, NW, SW))
    MOVES_TOP = frozenset((N, NW, NE))
    MOVES_RIGHT = frozenset((E, NE, SE))
    MOVES_BOTTOM = frozenset((S, SE, SW))


class Key:
    """Keyboard keys the editor reacts to."""
    ESCAPE = "Escape"
    SHIFT = "Shift"
