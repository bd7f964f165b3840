"""
Synthetic EV fleet data generator
Creates demo vehicles, trip schedules and charging stations on the service grid
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

import numpy as np

from ev_charging.config.fleet_config import FLEET_CONFIG, TRIP_CONFIG, STATION_CONFIG
from ev_charging.models.types import Location, Station, TripSchedule, Vehicle
from ev_charging.utils.logger import info


class SyntheticFleetGenerator:
    def __init__(self, rng: Optional[np.random.Generator] = None,
                 config_override: Optional[Dict] = None):
        """Initialize the generator; pass a seeded Generator for reproducible fleets"""
        self.rng = rng if rng is not None else np.random.default_rng()
        self.config = self._merge_config(config_override)

    def _merge_config(self, override: Optional[Dict]) -> Dict:
        """Merge the default fleet, trip and station settings with per-section overrides"""
        config = {
            'fleet': dict(FLEET_CONFIG),
            'trips': dict(TRIP_CONFIG),
            'stations': dict(STATION_CONFIG),
        }
        for section, values in (override or {}).items():
            if section in config and isinstance(values, dict):
                config[section].update(values)
        return config

    def _random_location(self) -> Location:
        grid = self.config['fleet']['grid_size']
        return Location(x=float(self.rng.integers(0, grid)), y=float(self.rng.integers(0, grid)))

    def generate_trip_schedules(self, now: datetime) -> List[TripSchedule]:
        """1-3 upcoming trips spread through the day"""
        cfg = self.config['trips']
        min_trips, max_trips = cfg['trips_per_vehicle']
        num_trips = int(self.rng.integers(min_trips, max_trips + 1))

        schedules = []
        for i in range(num_trips):
            hours_until_departure = (i + 1) * cfg['spacing_hours'] + self.rng.uniform(0, cfg['spacing_jitter_hours'])
            trip_duration = self.rng.uniform(*cfg['duration_hours'])
            departure = now + timedelta(hours=float(hours_until_departure))
            schedules.append(TripSchedule(
                departure=departure,
                arrival=departure + timedelta(hours=float(trip_duration)),
                destination=str(self.rng.choice(cfg['destinations'])),
            ))
        return schedules

    def _select_status(self) -> str:
        weights = self.config['fleet']['status_weights']
        statuses = list(weights.keys())
        probabilities = np.array(list(weights.values()), dtype=float)
        return str(self.rng.choice(statuses, p=probabilities / probabilities.sum()))

    def generate_fleet(self, count: Optional[int] = None, now: Optional[datetime] = None) -> List[Vehicle]:
        """Generate a fleet of electric vehicles with realistic attributes"""
        cfg = self.config['fleet']
        count = cfg['fleet_size'] if count is None else count
        now = now or datetime.now()

        fleet = []
        for i in range(count):
            battery_capacity = float(round(self.rng.uniform(*cfg['battery_capacity_range'])))
            current_charge = min(round(float(self.rng.uniform(0, battery_capacity)), 1), battery_capacity)
            fleet.append(Vehicle(
                vehicle_id=f"EV-{i + 1:03d}",
                battery_capacity=battery_capacity,
                current_charge=current_charge,
                soc=round(current_charge / battery_capacity * 100),
                location=self._random_location(),
                trip_schedule=self.generate_trip_schedules(now),
                status=self._select_status(),
                model=str(self.rng.choice(cfg['vehicle_models'])),
                charging_speed=float(self.rng.choice(cfg['charging_speeds'])),
            ))

        info(f"Generated {len(fleet)} vehicles", "synthetic_fleet")
        return fleet

    def generate_stations(self, count: Optional[int] = None, fleet_size: Optional[int] = None) -> List[Station]:
        """Generate charging stations across the service area"""
        cfg = self.config['stations']
        count = self.config['fleet']['station_count'] if count is None else count
        fleet_size = self.config['fleet']['fleet_size'] if fleet_size is None else fleet_size
        power_by_type = cfg['power_by_type']

        stations = []
        for i in range(count):
            station_type = str(self.rng.choice(list(power_by_type.keys())))
            max_power = float(power_by_type[station_type])
            available = bool(self.rng.random() < cfg['availability_probability'])
            occupied_by = None
            current_usage = 0.0
            if not available:
                occupied_by = f"EV-{int(self.rng.integers(1, max(fleet_size, 1) + 1)):03d}"
                current_usage = float(self.rng.uniform(0, max_power))
            stations.append(Station(
                station_id=f"CS-{i + 1:03d}",
                location=self._random_location(),
                max_power=max_power,
                available=available,
                current_usage=current_usage,
                occupied_by=occupied_by,
                type=station_type,
            ))

        info(f"Generated {len(stations)} charging stations", "synthetic_fleet")
        return stations


def generate_ev_fleet(count: int = 20, rng: Optional[np.random.Generator] = None,
                      now: Optional[datetime] = None) -> List[Vehicle]:
    return SyntheticFleetGenerator(rng).generate_fleet(count, now)


def generate_charging_stations(count: int = 10, rng: Optional[np.random.Generator] = None) -> List[Station]:
    return SyntheticFleetGenerator(rng).generate_stations(count)
