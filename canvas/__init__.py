"""
canvas package

PyQt6 editing surface for zone layouts.
"""

from canvas.zone_view import ZoneCanvas, handle_points

__all__ = [
    "ZoneCanvas",
    "handle_points",
]
