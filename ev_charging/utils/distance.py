from __future__ import annotations

import math

from ev_charging.models.types import Location


def calculate_distance(loc1: Location, loc2: Location) -> float:
    """Euclidean distance between two grid locations (unit-less)."""
    dx = loc1.x - loc2.x
    dy = loc1.y - loc2.y
    return math.sqrt(dx * dx + dy * dy)
