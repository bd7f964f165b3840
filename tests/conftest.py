"""
Shared pytest fixtures for the EV charge scheduler test suite.
"""

from datetime import datetime, timedelta

import numpy as np
import pytest

from ev_charging.models.types import Location, Station, TripSchedule, Vehicle
from ev_charging.utils.logger import setup_logger_for_mode
from ev_charging.utils.tariff import generate_energy_pricing

# Monday 10:00, a shoulder-price hour
NOW = datetime(2024, 1, 15, 10, 0, 0)


@pytest.fixture(autouse=True, scope="session")
def silent_logging():
    """Keep test output free of scheduler logging."""
    setup_logger_for_mode("SILENT")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def pricing():
    """The standard deterministic tariff: 0.08 off-peak, 0.12 shoulder, 0.20 peak."""
    return generate_energy_pricing()


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def make_vehicle():
    """Factory for vehicles; soc is given in percent and charge derived from it."""
    def _make(vehicle_id="EV-001", soc=50.0, capacity=60.0, x=0.0, y=0.0,
              trip_in_hours=None, status="idle", charging_speed=50.0, **kwargs):
        trips = []
        if trip_in_hours is not None:
            departure = NOW + timedelta(hours=trip_in_hours)
            trips.append(TripSchedule(departure=departure, arrival=departure + timedelta(hours=2)))
        return Vehicle(
            vehicle_id=vehicle_id,
            battery_capacity=capacity,
            current_charge=capacity * soc / 100.0,
            soc=soc,
            location=Location(x=x, y=y),
            trip_schedule=trips,
            status=status,
            charging_speed=charging_speed,
            **kwargs,
        )
    return _make


@pytest.fixture
def make_station():
    def _make(station_id="CS-001", x=0.0, y=0.0, max_power=50.0, available=True, **kwargs):
        return Station(
            station_id=station_id,
            location=Location(x=x, y=y),
            max_power=max_power,
            available=available,
            **kwargs,
        )
    return _make
