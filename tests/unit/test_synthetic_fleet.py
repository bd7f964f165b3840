"""
Unit tests for the synthetic fleet generator.

Covers:
- generate_ev_fleet(): ids, attribute ranges, SoC consistency, trip schedules
- generate_charging_stations(): ids, power by type, occupancy invariant
- seeded reproducibility and config overrides
"""

from datetime import datetime

import numpy as np

from ev_charging.config.fleet_config import FLEET_CONFIG, STATION_CONFIG
from ev_charging.data_generation.synthetic_fleet import (
    SyntheticFleetGenerator,
    generate_charging_stations,
    generate_ev_fleet,
)

NOW = datetime(2024, 1, 15, 10, 0, 0)


class TestGenerateFleet:
    def test_fleet_size_and_ids(self):
        fleet = generate_ev_fleet(20, np.random.default_rng(42), NOW)
        assert len(fleet) == 20
        assert fleet[0].vehicle_id == "EV-001"
        assert fleet[-1].vehicle_id == "EV-020"

    def test_attributes_within_configured_ranges(self):
        fleet = generate_ev_fleet(30, np.random.default_rng(1), NOW)
        low, high = FLEET_CONFIG["battery_capacity_range"]
        for vehicle in fleet:
            assert low <= vehicle.battery_capacity <= high
            assert 0 <= vehicle.current_charge <= vehicle.battery_capacity
            assert vehicle.charging_speed in FLEET_CONFIG["charging_speeds"]
            assert vehicle.status in FLEET_CONFIG["status_weights"]
            assert vehicle.model in FLEET_CONFIG["vehicle_models"]

    def test_soc_matches_charge(self):
        for vehicle in generate_ev_fleet(10, np.random.default_rng(2), NOW):
            expected = vehicle.current_charge / vehicle.battery_capacity * 100
            assert abs(vehicle.soc - expected) <= 0.5

    def test_trips_are_upcoming_and_ordered(self):
        for vehicle in generate_ev_fleet(10, np.random.default_rng(3), NOW):
            assert 1 <= len(vehicle.trip_schedule) <= 3
            departures = [trip.departure for trip in vehicle.trip_schedule]
            assert departures == sorted(departures)
            assert departures[0] > NOW
            for trip in vehicle.trip_schedule:
                assert trip.arrival > trip.departure

    def test_same_seed_same_fleet(self):
        first = generate_ev_fleet(5, np.random.default_rng(7), NOW)
        second = generate_ev_fleet(5, np.random.default_rng(7), NOW)
        assert [v.model_dump() for v in first] == [v.model_dump() for v in second]

    def test_grid_override(self):
        generator = SyntheticFleetGenerator(np.random.default_rng(4), {"fleet": {"grid_size": 5}})
        for vehicle in generator.generate_fleet(10, NOW):
            assert 0 <= vehicle.location.x < 5
            assert 0 <= vehicle.location.y < 5


class TestGenerateStations:
    def test_station_count_and_ids(self):
        stations = generate_charging_stations(10, np.random.default_rng(42))
        assert [s.station_id for s in stations] == [f"CS-{i:03d}" for i in range(1, 11)]

    def test_power_follows_type(self):
        for station in generate_charging_stations(20, np.random.default_rng(5)):
            assert station.max_power == STATION_CONFIG["power_by_type"][station.type]

    def test_available_stations_are_free(self):
        for station in generate_charging_stations(30, np.random.default_rng(6)):
            if station.available:
                assert station.occupied_by is None
                assert station.current_usage == 0
            else:
                assert station.occupied_by.startswith("EV-")
                assert 0 <= station.current_usage <= station.max_power
