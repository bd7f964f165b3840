"""
Forecasting for charging demand, energy prices, vehicle availability and battery health.

Every function draws its noise from an optional numpy Generator. Passing
``rng=None`` removes the noise (the midpoint of each jitter range is used),
which keeps forecasts reproducible in tests.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from ev_charging.models.types import (
    AvailabilityPoint,
    BatteryHealth,
    DemandPoint,
    PriceEntry,
    PricePoint,
    Vehicle,
)
from ev_charging.utils.logger import debug

# Demand multipliers by time of day
DEMAND_PROFILE = {
    'morning_peak': ((6, 9), 1.5),     # vehicles returning from night shifts
    'evening_peak': ((17, 20), 1.8),   # vehicles returning from day operations
    'night': ((22, 6), 2.0),           # cheapest window, most fleets plug in
}
OFF_PEAK_DEMAND_MULTIPLIER = 0.5
DEMAND_JITTER = (0.8, 1.2)

PRICE_VARIATION = 0.02          # total band, +/- 1%
STABLE_PRICE_CONFIDENCE = 0.9
VOLATILE_PRICE_CONFIDENCE = 0.7

TRIP_DRAIN_RANGE = (15.0, 25.0)   # SoC points consumed by a trip

MAX_AGE_MONTHS = 36.0
MAX_CYCLES = 1000.0
MAX_LIFE_MONTHS = 60


def _uniform(rng: Optional[np.random.Generator], low: float, high: float) -> float:
    if rng is None:
        return (low + high) / 2.0
    return float(rng.uniform(low, high))


def _demand_multiplier(hour: int) -> float:
    for (start, end), multiplier in DEMAND_PROFILE.values():
        if start < end and start <= hour < end:
            return multiplier
        if start > end and (hour >= start or hour < end):
            return multiplier
    return OFF_PEAK_DEMAND_MULTIPLIER


def predict_charging_demand(
    fleet: Sequence[Vehicle],
    rng: Optional[np.random.Generator] = None,
) -> List[DemandPoint]:
    """Expected share of the fleet needing a charger, hour by hour for the next day."""
    if not fleet:
        return [DemandPoint(hour=hour, expected_demand=0.0) for hour in range(24)]

    low_battery = sum(1 for v in fleet if v.soc < 30)
    base_demand = low_battery / len(fleet)

    predictions = []
    for hour in range(24):
        expected = base_demand * _demand_multiplier(hour) * _uniform(rng, *DEMAND_JITTER)
        predictions.append(DemandPoint(hour=hour, expected_demand=round(expected, 2)))
    debug(f"Demand forecast built from {low_battery}/{len(fleet)} low-battery vehicles", "forecasting")
    return predictions


def predict_energy_prices(
    pricing: Sequence[PriceEntry],
    rng: Optional[np.random.Generator] = None,
) -> List[PricePoint]:
    """Next-day price forecast; off-peak hours are the most stable."""
    predictions = []
    for entry in pricing:
        variation = _uniform(rng, -PRICE_VARIATION / 2, PRICE_VARIATION / 2)
        confidence = STABLE_PRICE_CONFIDENCE if entry.period == 'off_peak' else VOLATILE_PRICE_CONFIDENCE
        predictions.append(PricePoint(
            hour=entry.hour,
            predicted_price=round(entry.price * (1 + variation), 2),
            confidence=confidence,
        ))
    return predictions


def predict_vehicle_availability(
    fleet: Sequence[Vehicle],
    rng: Optional[np.random.Generator] = None,
) -> List[AvailabilityPoint]:
    """When in-use vehicles return and roughly how much charge they will have left."""
    predictions = []
    for vehicle in fleet:
        if vehicle.status != 'in_use' or not vehicle.trip_schedule:
            continue
        drain = _uniform(rng, *TRIP_DRAIN_RANGE)
        predictions.append(AvailabilityPoint(
            vehicle_id=vehicle.vehicle_id,
            available_at=vehicle.trip_schedule[0].arrival,
            predicted_soc=round(max(0.0, vehicle.soc - drain)),
        ))
    return sorted(predictions, key=lambda p: p.available_at)


def predict_battery_health(
    vehicle: Vehicle,
    rng: Optional[np.random.Generator] = None,
) -> BatteryHealth:
    """
    Simple degradation score (100 = new, 0 = needs replacement).

    Age and cycle count come from the vehicle record when known, otherwise
    they are sampled (or taken at mid-life without a generator).
    """
    age = vehicle.age_months if vehicle.age_months is not None else _uniform(rng, 0.0, MAX_AGE_MONTHS)
    cycles = vehicle.cycle_count if vehicle.cycle_count is not None else _uniform(rng, 0.0, MAX_CYCLES)

    health = 100.0
    health -= (age / MAX_AGE_MONTHS) * 20
    health -= (cycles / MAX_CYCLES) * 15
    if vehicle.soc < 20:
        health -= 10   # deep discharge stress
    health = max(0.0, min(100.0, health))

    if health < 30:
        recommendation = 'Critical: Battery replacement needed'
    elif health < 50:
        recommendation = 'Schedule battery inspection soon'
    else:
        recommendation = 'Good condition'

    return BatteryHealth(
        health_score=round(health),
        estimated_life_remaining=round(health / 100 * MAX_LIFE_MONTHS),
        maintenance_recommendation=recommendation,
    )
