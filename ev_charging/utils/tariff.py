from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ev_charging.config.pricing_config import PRICING_CONFIG, DEFAULT_PERIOD, HOURS_PER_DAY
from ev_charging.exceptions import ConfigurationError
from ev_charging.models.types import PriceEntry


def _hour_in_range(hour: int, start: int, end: int) -> bool:
    if start <= end:
        return start <= hour <= end
    # wraps past midnight
    return hour >= start or hour <= end


def period_for_hour(hour: int, pricing_config: Optional[Dict[str, Any]] = None) -> str:
    """Return the tariff period ('peak', 'off_peak' or 'shoulder') covering an hour of day."""
    tiers = pricing_config or PRICING_CONFIG
    for period, tier in tiers.items():
        if any(_hour_in_range(hour, start, end) for start, end in tier.get('hours', [])):
            return period
    return DEFAULT_PERIOD


def generate_energy_pricing(
    rng: Optional[np.random.Generator] = None,
    pricing_config: Optional[Dict[str, Any]] = None,
) -> List[PriceEntry]:
    """
    Build the standard 24-hour time-of-use price table.

    Rules (matching PRICING_CONFIG):
    - Off-peak 0.08 from 10 PM to 6 AM
    - Peak 0.20 from 2 PM to 8 PM
    - Shoulder 0.12 at all other times
    Demand is drawn uniformly from the tier's demand_range using ``rng``;
    without a generator the midpoint of the range is used so the table is
    fully deterministic.
    """
    tiers = pricing_config or PRICING_CONFIG
    pricing: List[PriceEntry] = []
    for hour in range(HOURS_PER_DAY):
        period = period_for_hour(hour, tiers)
        tier = tiers[period]
        low, high = tier.get('demand_range', (0, 0))
        if rng is None:
            demand = (low + high) / 2.0
        else:
            demand = float(rng.uniform(low, high))
        pricing.append(PriceEntry(
            hour=hour,
            price=round(float(tier['price']), 2),
            period=period,
            demand=round(min(demand, 100.0)),
        ))
    return pricing


def validate_price_table(pricing: Sequence[PriceEntry]) -> None:
    """Fail fast unless the table has exactly one entry per hour, indexed by hour."""
    if len(pricing) != HOURS_PER_DAY:
        raise ConfigurationError(
            f"price table must have {HOURS_PER_DAY} hourly entries, got {len(pricing)}"
        )
    for index, entry in enumerate(pricing):
        if entry.hour != index:
            raise ConfigurationError(
                f"price table entry at position {index} is for hour {entry.hour}"
            )


def get_price_per_kwh(pricing: Sequence[PriceEntry], when: datetime) -> float:
    """Return the price per kWh for a charge starting at 'when'."""
    return float(pricing[when.hour % HOURS_PER_DAY].price)


def max_price(pricing: Sequence[PriceEntry]) -> float:
    """Highest hourly price in the table, used as the peak-rate baseline."""
    return max(float(entry.price) for entry in pricing)


def calculate_charging_cost(
    energy_amount: float,
    start_hour: int,
    duration_hours: float,
    pricing: Sequence[PriceEntry],
    prorate: bool = False,
) -> float:
    """
    Cost of delivering ``energy_amount`` kWh over ``duration_hours`` starting at ``start_hour``.

    Charging is split into ceil(duration) hourly buckets, wrapping at midnight.
    By default every bucket is charged min(energy / duration, energy) kWh, which
    sums to more than ``energy_amount`` once the duration exceeds one hour.
    With ``prorate=True`` the energy is divided evenly across the buckets so
    the billed energy equals the total.
    """
    if duration_hours <= 0 or energy_amount <= 0:
        return 0.0

    hours_to_charge = math.ceil(duration_hours)
    if prorate:
        energy_per_hour = energy_amount / hours_to_charge
    else:
        energy_per_hour = min(energy_amount / duration_hours, energy_amount)

    total_cost = 0.0
    for i in range(hours_to_charge):
        hour = (start_hour + i) % HOURS_PER_DAY
        total_cost += energy_per_hour * float(pricing[hour].price)
    return total_cost
