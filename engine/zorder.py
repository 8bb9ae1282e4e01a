"""
engine/zorder.py

Stacking order for zones that overlap while they are being edited.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from models import Zone


def compute_z_order(
    zones: Iterable[Zone],
    base: int = 100,
    step: int = 1,
    active_id: Optional[str] = None,
) -> Dict[str, int]:
    """Map zone id to a stacking index.

    Smaller zones stack above larger ones so a zone nested under a bigger
    one stays clickable. The smallest zone gets ``base + N * step``, the
    largest ``base + step``; ties are broken by display number. The active
    (dragged or resized) zone is placed above all of them.
    """
    ordered = sorted(zones, key=lambda z: (z.area, z.number))
    n = len(ordered)
    z_map = {z.id: base + (n - index) * step for index, z in enumerate(ordered)}
    if active_id is not None and active_id in z_map:
        z_map[active_id] = base + (n + 1) * step
    return z_map


def paint_order(
    zones: Iterable[Zone],
    base: int = 100,
    step: int = 1,
    active_id: Optional[str] = None,
) -> List[Zone]:
    """Return the zones bottom-to-top, ready to be painted in sequence."""
    zones = list(zones)
    z_map = compute_z_order(zones, base, step, active_id)
    return sorted(zones, key=lambda z: z_map[z.id])
