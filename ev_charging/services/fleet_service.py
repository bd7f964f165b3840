"""
Fleet charging service - owns the state of one charging optimization context.

A service instance holds the fleet, stations, price table, current plans and
the learning agent. Nothing is shared between instances, so several services
(for example one per test) can run side by side.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ev_charging.config.fleet_config import SIMULATION_CONFIG
from ev_charging.data_generation.synthetic_fleet import SyntheticFleetGenerator
from ev_charging.models.forecasting.predictive_models import (
    predict_charging_demand,
    predict_energy_prices,
    predict_vehicle_availability,
)
from ev_charging.models.rl.q_learning import ChargingAction, QLearningAgent
from ev_charging.models.scheduling.optimization import (
    ChargingScheduler,
    calculate_optimization_metrics,
)
from ev_charging.models.types import (
    Alert,
    ChargingPlan,
    DashboardState,
    OptimizationMetrics,
    PriceEntry,
    Station,
    Vehicle,
)
from ev_charging.services.alerts import generate_alerts
from ev_charging.utils.distance import calculate_distance
from ev_charging.utils.logger import info, warning
from ev_charging.utils.tariff import generate_energy_pricing, get_price_per_kwh


class FleetChargingService:
    """Explicit state context for fleet charging optimization."""

    def __init__(
        self,
        fleet: Optional[List[Vehicle]] = None,
        stations: Optional[List[Station]] = None,
        pricing: Optional[List[PriceEntry]] = None,
        agent: Optional[QLearningAgent] = None,
        scheduler_config: Optional[Dict[str, Any]] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.fleet: List[Vehicle] = list(fleet or [])
        self.stations: List[Station] = list(stations or [])
        self.pricing: List[PriceEntry] = list(pricing) if pricing is not None else generate_energy_pricing()
        self.agent = agent if agent is not None else QLearningAgent(rng=self.rng)
        self.scheduler = ChargingScheduler(scheduler_config)
        self.pricing_config: Optional[Dict[str, Any]] = None
        self.fleet_config: Optional[Dict[str, Any]] = None

        self.plans: List[ChargingPlan] = []
        self.alerts: List[Alert] = []
        self.metrics = OptimizationMetrics()
        self.last_updated = datetime.now()

    @classmethod
    def from_config(cls, path: Optional[str] = None,
                    rng: Optional[np.random.Generator] = None) -> "FleetChargingService":
        """Build a service from the defaults merged with a YAML overrides file"""
        from ev_charging.services.config_service import merged_runtime_config

        runtime = merged_runtime_config(path)
        rng = rng if rng is not None else np.random.default_rng()
        service = cls(
            pricing=generate_energy_pricing(None, runtime["pricing"]),
            agent=QLearningAgent(config=runtime["rl"], rng=rng),
            scheduler_config=runtime["scheduling"],
            rng=rng,
        )
        service.pricing_config = runtime["pricing"]
        service.fleet_config = runtime["fleet"]
        return service

    def initialize(self, fleet_size: Optional[int] = None, station_count: Optional[int] = None,
                   now: Optional[datetime] = None) -> None:
        """Populate the context with synthetic data and run a first optimization cycle"""
        info("Initializing fleet charging service with synthetic data...", "fleet_service")
        generator = SyntheticFleetGenerator(
            self.rng, {"fleet": self.fleet_config} if self.fleet_config else None
        )
        fleet_size = generator.config["fleet"]["fleet_size"] if fleet_size is None else fleet_size
        self.fleet = generator.generate_fleet(fleet_size, now)
        self.stations = generator.generate_stations(station_count, fleet_size)
        self.pricing = generate_energy_pricing(self.rng, self.pricing_config)

        self.run_optimization(now)
        info(f"Initialized: {len(self.fleet)} vehicles, {len(self.stations)} stations", "fleet_service")

    # ------------------------------------------------------------------
    # Optimization cycle
    # ------------------------------------------------------------------

    def station_availability(self) -> float:
        if not self.stations:
            return 0.0
        return sum(1 for s in self.stations if s.available) / len(self.stations)

    def run_optimization(self, now: Optional[datetime] = None) -> List[ChargingPlan]:
        """Plans -> metrics -> alerts -> agent training, as one synchronous cycle"""
        now = now or datetime.now()
        info("Running optimization algorithm...", "fleet_service")

        self.plans = self.scheduler.optimize(self.fleet, self.stations, self.pricing, now)
        self.metrics = calculate_optimization_metrics(
            self.plans, self.stations, self.pricing, self.scheduler.config
        )
        self.alerts = generate_alerts(self.fleet, now, self.pricing)
        self.train_agent(now)

        self.last_updated = now
        return self.plans

    def train_agent(self, now: Optional[datetime] = None) -> int:
        """Feed one experience per current plan to the agent; returns the number learned"""
        now = now or datetime.now()
        current_hour = now.hour
        next_hour = (current_hour + 1) % 24
        current_price = get_price_per_kwh(self.pricing, now)
        availability = self.station_availability()
        target_soc = int(self.scheduler.config["target_soc"])
        vehicles = {v.vehicle_id: v for v in self.fleet}

        learned = 0
        for plan in self.plans:
            vehicle = vehicles.get(plan.vehicle_id)
            if vehicle is None:
                continue

            state = self.agent.build_state(current_hour, vehicle.soc, current_price, availability)
            action = ChargingAction(should_charge=True, target_soc=target_soc, urgency=plan.priority)
            reward = self.agent.calculate_reward(
                vehicle, action, current_price, plan.estimated_cost, plan.duration_hours, now
            )
            # After charging the vehicle sits at the target SoC an hour later
            next_state = self.agent.build_state(
                next_hour, target_soc, float(self.pricing[next_hour].price), availability
            )
            self.agent.learn(state, action, reward, next_state)
            learned += 1
        return learned

    # ------------------------------------------------------------------
    # Overrides and live updates
    # ------------------------------------------------------------------

    def manual_assignment(self, vehicle_id: str, station_id: str,
                          now: Optional[datetime] = None) -> Optional[ChargingPlan]:
        """
        Assign a vehicle to a station immediately, superseding any existing plan

        Returns None for unknown ids, for a station occupied by another
        vehicle, and for a vehicle already at the target SoC.
        """
        vehicle = self.get_vehicle(vehicle_id)
        station = self.get_station(station_id)
        if vehicle is None or station is None:
            return None
        if station.occupied_by and station.occupied_by != vehicle_id:
            warning(f"{station_id} is occupied by {station.occupied_by}, {vehicle_id} not assigned", "fleet_service")
            return None

        now = now or datetime.now()
        energy_needed = self.scheduler.energy_needed(vehicle)
        if energy_needed <= 0:
            warning(f"{vehicle_id} is already above the target SoC, no plan created", "fleet_service")
            return None

        charging_rate = min(station.max_power, vehicle.charging_speed)
        duration_hours = energy_needed / charging_rate
        # Manual sessions start now, so they pay the current hour's price
        estimated_cost = energy_needed * get_price_per_kwh(self.pricing, now)

        new_plan = ChargingPlan(
            vehicle_id=vehicle_id,
            station_id=station_id,
            start_time=now,
            end_time=now + timedelta(hours=duration_hours),
            energy_to_charge=round(energy_needed, 1),
            estimated_cost=round(estimated_cost, 2),
            priority="medium",
            distance_to_station=round(calculate_distance(vehicle.location, station.location), 1),
        )

        # One plan per vehicle and per station
        displaced = [p for p in self.plans if p.station_id == station_id and p.vehicle_id != vehicle_id]
        for plan in displaced:
            warning(f"{plan.vehicle_id} loses its plan at {station_id} to {vehicle_id}", "fleet_service")
        self.plans = [
            p for p in self.plans if p.vehicle_id != vehicle_id and p.station_id != station_id
        ] + [new_plan]

        vehicle.status = "charging"
        station.available = False
        station.occupied_by = vehicle_id
        self.last_updated = now
        info(f"Manual assignment: {vehicle_id} -> {station_id}", "fleet_service")
        return new_plan

    def simulate_updates(self, rng: Optional[np.random.Generator] = None,
                         minutes: Optional[float] = None) -> None:
        """Advance charging vehicles by a few minutes and occasionally flip a station"""
        rng = rng if rng is not None else self.rng
        cfg = SIMULATION_CONFIG
        for vehicle in self.fleet:
            if vehicle.status != "charging":
                continue
            elapsed = minutes if minutes is not None else float(rng.uniform(*cfg["update_minutes"]))
            charge_added = vehicle.charging_speed / 60.0 * elapsed
            vehicle.current_charge = min(vehicle.current_charge + charge_added, vehicle.battery_capacity)
            vehicle.soc = round(vehicle.current_charge / vehicle.battery_capacity * 100)
            if vehicle.soc >= cfg["charging_complete_soc"]:
                vehicle.status = "idle"

        if self.stations and rng.random() < cfg["station_toggle_probability"]:
            station = self.stations[int(rng.integers(len(self.stations)))]
            station.available = not station.available
            if station.available:
                station.current_usage = 0.0
                station.occupied_by = None

        self.last_updated = datetime.now()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        return next((v for v in self.fleet if v.vehicle_id == vehicle_id), None)

    def get_station(self, station_id: str) -> Optional[Station]:
        return next((s for s in self.stations if s.station_id == station_id), None)

    def recommend(self, vehicle_id: str, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
        """Agent recommendation for one vehicle under current price and availability"""
        vehicle = self.get_vehicle(vehicle_id)
        if vehicle is None:
            return None
        now = now or datetime.now()
        return self.agent.recommend_strategy(
            vehicle, now.hour, get_price_per_kwh(self.pricing, now), self.station_availability()
        )

    def agent_metrics(self) -> Dict[str, Any]:
        return self.agent.get_performance_metrics()

    def get_forecasts(self, rng: Optional[np.random.Generator] = None) -> Dict[str, List[Any]]:
        return {
            "demand": predict_charging_demand(self.fleet, rng),
            "prices": predict_energy_prices(self.pricing, rng),
            "availability": predict_vehicle_availability(self.fleet, rng),
        }

    def get_dashboard_state(self) -> DashboardState:
        return DashboardState(
            fleet=self.fleet,
            stations=self.stations,
            charging_plans=self.plans,
            energy_pricing=self.pricing,
            alerts=self.alerts,
            metrics=self.metrics,
            last_updated=self.last_updated,
        )

    def plans_frame(self) -> pd.DataFrame:
        """Current plans as a DataFrame, one row per plan"""
        columns = list(ChargingPlan.model_fields.keys()) + ["duration_hours"]
        rows = [{**plan.model_dump(), "duration_hours": plan.duration_hours} for plan in self.plans]
        return pd.DataFrame(rows, columns=columns)
