"""
Unit tests for the validated data model.

Covers:
- Vehicle: derived SoC, explicit SoC consistency, charge above capacity, non-positive speed
- Vehicle trip helpers with naive and UTC clocks
- Station: available-but-occupied rejection
- PriceEntry: hour range
- ChargingPlan: duration
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from ev_charging.models.types import ChargingPlan, PriceEntry, Station, TripSchedule, Vehicle

NOW = datetime(2024, 1, 15, 10, 0, 0)


class TestVehicle:
    def test_soc_derived_from_charge(self):
        vehicle = Vehicle(vehicle_id="EV-001", battery_capacity=80.0, current_charge=20.0, charging_speed=11.0)
        assert vehicle.soc == pytest.approx(25.0)

    def test_explicit_soc_kept(self):
        vehicle = Vehicle(vehicle_id="EV-001", battery_capacity=80.0, current_charge=20.0,
                          soc=26, charging_speed=11.0)
        assert vehicle.soc == 26

    def test_soc_within_rounding_accepted(self):
        vehicle = Vehicle(vehicle_id="EV-001", battery_capacity=80.0, current_charge=20.3,
                          soc=25, charging_speed=11.0)
        assert vehicle.soc == 25

    def test_soc_contradicting_charge_rejected(self):
        with pytest.raises(ValidationError):
            Vehicle(vehicle_id="EV-001", battery_capacity=60.0, current_charge=0.0,
                    soc=90, charging_speed=11.0)

    def test_charge_above_capacity_rejected(self):
        with pytest.raises(ValidationError):
            Vehicle(vehicle_id="EV-001", battery_capacity=50.0, current_charge=60.0, charging_speed=11.0)

    def test_soc_above_hundred_rejected(self):
        with pytest.raises(ValidationError):
            Vehicle(vehicle_id="EV-001", battery_capacity=50.0, current_charge=50.0,
                    soc=120, charging_speed=11.0)

    def test_zero_charging_speed_rejected(self):
        with pytest.raises(ValidationError):
            Vehicle(vehicle_id="EV-001", battery_capacity=50.0, current_charge=10.0, charging_speed=0)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Vehicle(vehicle_id="EV-001", battery_capacity=50.0, current_charge=10.0,
                    charging_speed=11.0, status="parked")

    def test_hours_until_next_trip(self):
        trip = TripSchedule(departure=NOW + timedelta(hours=3), arrival=NOW + timedelta(hours=5))
        vehicle = Vehicle(vehicle_id="EV-001", battery_capacity=50.0, current_charge=10.0,
                          charging_speed=11.0, trip_schedule=[trip])
        assert vehicle.next_trip == trip
        assert vehicle.hours_until_next_trip(NOW) == pytest.approx(3.0)

    def test_hours_until_utc_trip_from_naive_clock(self):
        departure = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        trip = TripSchedule(departure=departure, arrival=departure + timedelta(hours=2))
        vehicle = Vehicle(vehicle_id="EV-001", battery_capacity=50.0, current_charge=10.0,
                          charging_speed=11.0, trip_schedule=[trip])
        local_now = (departure - timedelta(hours=3)).astimezone().replace(tzinfo=None)
        assert vehicle.hours_until_next_trip(local_now) == pytest.approx(3.0)

    def test_hours_until_naive_trip_from_utc_clock(self):
        trip = TripSchedule(departure=NOW + timedelta(hours=3), arrival=NOW + timedelta(hours=5))
        vehicle = Vehicle(vehicle_id="EV-001", battery_capacity=50.0, current_charge=10.0,
                          charging_speed=11.0, trip_schedule=[trip])
        assert vehicle.hours_until_next_trip(NOW.astimezone(timezone.utc)) == pytest.approx(3.0)

    def test_no_trip(self):
        vehicle = Vehicle(vehicle_id="EV-001", battery_capacity=50.0, current_charge=10.0, charging_speed=11.0)
        assert vehicle.next_trip is None
        assert vehicle.hours_until_next_trip(NOW) is None


class TestStation:
    def test_available_and_occupied_rejected(self):
        with pytest.raises(ValidationError):
            Station(station_id="CS-001", max_power=50.0, available=True, occupied_by="EV-001")

    def test_unavailable_without_occupant_allowed(self):
        station = Station(station_id="CS-001", max_power=50.0, available=False)
        assert station.occupied_by is None

    def test_non_positive_power_rejected(self):
        with pytest.raises(ValidationError):
            Station(station_id="CS-001", max_power=0)


class TestPriceEntryAndPlan:
    def test_hour_out_of_range(self):
        with pytest.raises(ValidationError):
            PriceEntry(hour=24, price=0.1, period="peak")

    def test_plan_duration(self):
        plan = ChargingPlan(
            vehicle_id="EV-001", station_id="CS-001",
            start_time=NOW, end_time=NOW + timedelta(minutes=90),
            energy_to_charge=10.0, estimated_cost=1.0, priority="low", distance_to_station=0.0,
        )
        assert plan.duration_hours == pytest.approx(1.5)
