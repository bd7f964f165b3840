"""
Greedy charging optimization for the EV fleet.

Each cycle sorts vehicles by priority, assigns every vehicle the nearest free
station, picks the cheapest feasible start hour from the time-of-use table and
prices the session. Stations are only reserved for the duration of a cycle;
the station records passed in are never mutated.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from ev_charging.config.scheduling_config import SCHEDULING_CONFIG, PRIORITY_ORDER
from ev_charging.exceptions import ConfigurationError
from ev_charging.models.scheduling.priority import classify_priority
from ev_charging.models.types import (
    ChargingPlan,
    OptimizationMetrics,
    PriceEntry,
    Priority,
    Station,
    Vehicle,
)
from ev_charging.utils.distance import calculate_distance
from ev_charging.utils.logger import debug, info, log_detailed
from ev_charging.utils.tariff import (
    calculate_charging_cost,
    max_price,
    validate_price_table,
)


def find_optimal_charging_window(
    vehicle: Vehicle,
    duration_hours: float,
    pricing: Sequence[PriceEntry],
    now: Optional[datetime] = None,
    config: Optional[Dict[str, Any]] = None,
) -> int:
    """
    Return the hour of day (0-23) at which charging should start.

    A trip departing within (duration + buffer) hours forces an immediate
    start. Otherwise the next 24 start hours are scanned from the current
    hour, wrapping at midnight, and the cheapest one for a normalized 1 kWh
    block wins; ties keep the earliest hour in scan order.
    """
    cfg = config or SCHEDULING_CONFIG
    now = now or datetime.now()
    current_hour = now.hour

    if vehicle.trip_schedule:
        hours_until_trip = vehicle.hours_until_next_trip(now)
        if hours_until_trip < duration_hours + cfg.get("deadline_buffer_hours", 2.0):
            return current_hour

    prorate = bool(cfg.get("prorate_hourly_cost", False))
    min_cost = float("inf")
    optimal_hour = current_hour
    for offset in range(int(cfg.get("window_search_hours", 24))):
        hour = (current_hour + offset) % 24
        cost = calculate_charging_cost(1.0, hour, duration_hours, pricing, prorate=prorate)
        log_detailed(f"{vehicle.vehicle_id} start {hour:02d}h cost/kWh {cost:.4f}", "window_search", "optimization")
        if cost < min_cost:
            min_cost = cost
            optimal_hour = hour
    return optimal_hour


class ChargingScheduler:
    """Greedy priority-based scheduler producing one charging plan per served vehicle."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.config = {**SCHEDULING_CONFIG, **(config or {})}

    def needs_charging(self, vehicle: Vehicle) -> bool:
        return (
            vehicle.soc < self.config["charge_threshold_soc"]
            and vehicle.status not in self.config["excluded_statuses"]
        )

    def energy_needed(self, vehicle: Vehicle) -> float:
        """kWh required to bring the vehicle up to the target SoC."""
        return vehicle.battery_capacity * (self.config["target_soc"] - vehicle.soc) / 100.0

    def prioritize(self, fleet: Sequence[Vehicle], now: datetime) -> List[Tuple[Vehicle, Priority]]:
        """Candidate vehicles, highest priority first, fleet order kept within a tier."""
        candidates = [
            (vehicle, classify_priority(vehicle, now, self.config))
            for vehicle in fleet
            if self.needs_charging(vehicle)
        ]
        # sorted() is stable, so equal priorities keep their fleet order
        return sorted(candidates, key=lambda item: -PRIORITY_ORDER[item[1]])

    @staticmethod
    def nearest_station(
        vehicle: Vehicle,
        stations: Sequence[Station],
        reserved: Set[str],
    ) -> Tuple[Optional[Station], float]:
        nearest: Optional[Station] = None
        min_distance = float("inf")
        for station in stations:
            if not station.available or station.station_id in reserved:
                continue
            distance = calculate_distance(vehicle.location, station.location)
            log_detailed(
                f"{vehicle.vehicle_id} -> {station.station_id}: {distance:.2f}",
                "station_selection",
                "optimization",
            )
            if distance < min_distance:
                min_distance = distance
                nearest = station
        return nearest, min_distance

    def resolve_start_time(self, optimal_hour: int, priority: Priority, now: datetime) -> datetime:
        if priority == "high":
            return now
        start_time = now.replace(hour=optimal_hour, minute=0, second=0, microsecond=0)
        if optimal_hour < now.hour:
            start_time += timedelta(days=1)
        return start_time

    def optimize(
        self,
        fleet: Sequence[Vehicle],
        stations: Sequence[Station],
        pricing: Sequence[PriceEntry],
        now: Optional[datetime] = None,
    ) -> List[ChargingPlan]:
        if not stations:
            raise ConfigurationError("station list must be non-empty")
        validate_price_table(pricing)
        now = now or datetime.now()
        prorate = bool(self.config.get("prorate_hourly_cost", False))

        plans: List[ChargingPlan] = []
        reserved: Set[str] = set()

        for vehicle, priority in self.prioritize(fleet, now):
            energy = self.energy_needed(vehicle)
            if energy <= 0:
                continue

            station, distance = self.nearest_station(vehicle, stations, reserved)
            if station is None:
                debug(f"No free station left for {vehicle.vehicle_id}, skipping", "optimization")
                continue

            charging_rate = min(station.max_power, vehicle.charging_speed)
            duration_hours = energy / charging_rate

            optimal_hour = find_optimal_charging_window(vehicle, duration_hours, pricing, now, self.config)
            start_time = self.resolve_start_time(optimal_hour, priority, now)
            end_time = start_time + timedelta(hours=duration_hours)
            cost = calculate_charging_cost(energy, optimal_hour, duration_hours, pricing, prorate=prorate)

            plans.append(ChargingPlan(
                vehicle_id=vehicle.vehicle_id,
                station_id=station.station_id,
                start_time=start_time,
                end_time=end_time,
                energy_to_charge=round(energy, 1),
                estimated_cost=round(cost, 2),
                priority=priority,
                distance_to_station=round(distance, 1),
            ))
            reserved.add(station.station_id)

        info(f"Optimization complete: {len(plans)} charging plans created", "optimization")
        return plans


def optimize_charging_schedule(
    fleet: Sequence[Vehicle],
    stations: Sequence[Station],
    pricing: Sequence[PriceEntry],
    now: Optional[datetime] = None,
    config: Optional[Dict[str, Any]] = None,
) -> List[ChargingPlan]:
    """Run one greedy optimization cycle over the whole fleet."""
    return ChargingScheduler(config).optimize(fleet, stations, pricing, now)


def calculate_optimization_metrics(
    plans: Sequence[ChargingPlan],
    stations: Sequence[Station],
    pricing: Sequence[PriceEntry],
    config: Optional[Dict[str, Any]] = None,
) -> OptimizationMetrics:
    """Aggregate cost, duration, utilization and savings figures for a plan set."""
    if not plans:
        return OptimizationMetrics()
    if not stations:
        raise ConfigurationError("station list must be non-empty")

    cfg = config or SCHEDULING_CONFIG
    co2_per_kwh = cfg.get("co2_kg_per_kwh_off_peak", 0.5)

    total_cost = sum(plan.estimated_cost for plan in plans)
    avg_charging_time = sum(plan.duration_hours for plan in plans) / len(plans)

    used_stations = len({plan.station_id for plan in plans})
    station_utilization = used_stations / len(stations) * 100.0

    # Off-peak charging leans on cleaner generation
    co2_saved = sum(
        plan.energy_to_charge * co2_per_kwh
        for plan in plans
        if pricing[plan.start_time.hour].period == "off_peak"
    )

    total_energy = sum(plan.energy_to_charge for plan in plans)
    cost_savings = total_energy * max_price(pricing) - total_cost

    return OptimizationMetrics(
        total_energy_cost=round(total_cost, 2),
        average_charging_time=round(avg_charging_time, 2),
        station_utilization=round(station_utilization, 1),
        vehicles_optimized=len(plans),
        co2_saved=round(co2_saved, 1),
        cost_savings=round(cost_savings, 2),
    )
