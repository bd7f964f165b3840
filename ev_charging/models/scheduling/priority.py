from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ev_charging.config.scheduling_config import SCHEDULING_CONFIG
from ev_charging.models.types import Priority, Vehicle


def classify_priority(
    vehicle: Vehicle,
    now: Optional[datetime] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Priority:
    """
    Map a vehicle's state of charge and trip schedule onto a priority tier.

    Rules, first match wins:
    1. soc below the low threshold with the next trip departing soon -> high
    2. soc below the low threshold -> high
    3. soc below the medium threshold with any trip scheduled -> medium
    4. otherwise -> low
    Trip deadlines are measured from ``now`` (the wall clock when omitted).
    """
    cfg = config or SCHEDULING_CONFIG
    now = now or datetime.now()
    low_soc = cfg.get("low_soc_threshold", 30)
    medium_soc = cfg.get("medium_soc_threshold", 60)

    if vehicle.soc < low_soc and vehicle.trip_schedule:
        hours_until_trip = vehicle.hours_until_next_trip(now)
        if hours_until_trip < cfg.get("urgent_trip_hours", 6.0):
            return "high"

    if vehicle.soc < low_soc:
        return "high"

    if vehicle.soc < medium_soc and vehicle.trip_schedule:
        return "medium"

    return "low"
