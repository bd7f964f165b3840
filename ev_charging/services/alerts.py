from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from ev_charging.config.pricing_config import PRICING_CONFIG
from ev_charging.models.types import Alert, PriceEntry, Vehicle
from ev_charging.utils.tariff import period_for_hour, validate_price_table

LOW_BATTERY_SOC = 20
CRITICAL_BATTERY_SOC = 10
TRIP_CONFLICT_SOC = 50
TRIP_CONFLICT_HOURS = 4.0


def generate_alerts(
    fleet: Sequence[Vehicle],
    now: Optional[datetime] = None,
    pricing: Optional[Sequence[PriceEntry]] = None,
) -> List[Alert]:
    """
    Build alerts for low batteries, maintenance, trip conflicts and peak pricing.

    The peak check reads the period of the current hour from ``pricing`` when
    a price table is given, otherwise from the configured tariff tiers.
    """
    now = now or datetime.now()
    alerts: List[Alert] = []

    def add(**fields) -> None:
        alerts.append(Alert(id=f"ALERT-{len(alerts) + 1:03d}", timestamp=now, **fields))

    for vehicle in fleet:
        if vehicle.soc < LOW_BATTERY_SOC and vehicle.status != 'charging':
            add(
                type='low_battery',
                severity='critical' if vehicle.soc < CRITICAL_BATTERY_SOC else 'warning',
                vehicle_id=vehicle.vehicle_id,
                message=f"{vehicle.vehicle_id} has low battery ({vehicle.soc:.0f}% SoC) and needs charging",
            )

        if vehicle.status == 'maintenance':
            add(
                type='maintenance',
                severity='warning',
                vehicle_id=vehicle.vehicle_id,
                message=f"{vehicle.vehicle_id} requires maintenance attention",
            )

        hours_until_trip = vehicle.hours_until_next_trip(now)
        if (vehicle.soc < TRIP_CONFLICT_SOC and hours_until_trip is not None
                and hours_until_trip < TRIP_CONFLICT_HOURS):
            add(
                type='trip_conflict',
                severity='critical',
                vehicle_id=vehicle.vehicle_id,
                message=(f"{vehicle.vehicle_id} has upcoming trip in {hours_until_trip:.1f}h "
                         f"but only {vehicle.soc:.0f}% SoC"),
            )

    if pricing is not None:
        validate_price_table(pricing)
        period = pricing[now.hour].period
    else:
        period = period_for_hour(now.hour, PRICING_CONFIG)
    if period == 'peak':
        add(
            type='grid_peak',
            severity='info',
            message='Currently in peak pricing period. Consider delaying non-urgent charging.',
        )

    return alerts
