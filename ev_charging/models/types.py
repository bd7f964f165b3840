"""
Data model for the EV fleet charging scheduler.

Input records (vehicles, stations, price entries) validate their invariants
on construction, so malformed data is rejected at the boundary where it
enters the system rather than inside the scheduler.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

Priority = Literal["high", "medium", "low"]
VehicleStatus = Literal["idle", "charging", "in_use", "maintenance"]
StationType = Literal["standard", "fast", "ultra_fast"]
PricePeriod = Literal["peak", "off_peak", "shoulder"]
AlertType = Literal["low_battery", "maintenance", "charging_complete", "trip_conflict", "grid_peak"]
AlertSeverity = Literal["critical", "warning", "info"]

# Charge may exceed capacity by this much (kWh) to absorb rounding in upstream data
_CHARGE_TOLERANCE_KWH = 1e-6

# An explicit soc may differ from the charge ratio by this much (percentage points),
# enough for whole-percent rounding
_SOC_TOLERANCE_PERCENT = 1.0


class Location(BaseModel):
    """Point on the service grid (unit-less coordinates, 0-100 by convention)."""

    x: float
    y: float


class TripSchedule(BaseModel):
    departure: datetime
    arrival: datetime
    destination: Optional[str] = None


class Vehicle(BaseModel):
    """Electric vehicle in the fleet.

    ``soc`` is the state of charge in percent. When omitted it is derived
    from ``current_charge / battery_capacity * 100``; when given it must
    agree with that ratio to within a percentage point.
    """

    vehicle_id: str
    battery_capacity: float = Field(gt=0, description="Total battery capacity in kWh")
    current_charge: float = Field(ge=0, description="Current charge level in kWh")
    soc: Optional[float] = Field(default=None, ge=0, le=100)
    location: Location = Field(default_factory=lambda: Location(x=0.0, y=0.0))
    trip_schedule: List[TripSchedule] = Field(default_factory=list)
    status: VehicleStatus = "idle"
    model: str = "unknown"
    charging_speed: float = Field(gt=0, description="Max charging speed in kW")
    # Only used by the battery health forecast
    age_months: Optional[float] = Field(default=None, ge=0)
    cycle_count: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_charge(self) -> "Vehicle":
        if self.current_charge > self.battery_capacity + _CHARGE_TOLERANCE_KWH:
            raise ValueError(
                f"current_charge {self.current_charge} exceeds battery_capacity {self.battery_capacity}"
            )
        derived_soc = self.current_charge / self.battery_capacity * 100.0
        if self.soc is None:
            self.soc = derived_soc
        elif abs(self.soc - derived_soc) > _SOC_TOLERANCE_PERCENT:
            raise ValueError(
                f"soc {self.soc} does not match current_charge/battery_capacity ({derived_soc:.1f}%)"
            )
        return self

    @property
    def next_trip(self) -> Optional[TripSchedule]:
        return self.trip_schedule[0] if self.trip_schedule else None

    def hours_until_next_trip(self, now: datetime) -> Optional[float]:
        trip = self.next_trip
        if trip is None:
            return None
        departure = trip.departure
        if (departure.tzinfo is None) != (now.tzinfo is None):
            # naive datetimes are local wall-clock time
            departure, now = departure.astimezone(), now.astimezone()
        return (departure - now).total_seconds() / 3600.0


class Station(BaseModel):
    """Charging station. An available station cannot be occupied."""

    station_id: str
    location: Location = Field(default_factory=lambda: Location(x=0.0, y=0.0))
    max_power: float = Field(gt=0, description="Maximum charging power in kW")
    available: bool = True
    current_usage: float = Field(default=0.0, ge=0)
    occupied_by: Optional[str] = None
    type: StationType = "standard"

    @model_validator(mode="after")
    def _check_occupancy(self) -> "Station":
        if self.available and self.occupied_by:
            raise ValueError(
                f"station {self.station_id} is flagged available but occupied by {self.occupied_by}"
            )
        return self


class PriceEntry(BaseModel):
    hour: int = Field(ge=0, le=23)
    price: float = Field(ge=0, description="Price per kWh")
    period: PricePeriod
    demand: float = Field(default=0.0, ge=0, le=100)


class ChargingPlan(BaseModel):
    vehicle_id: str
    station_id: str
    start_time: datetime
    end_time: datetime
    energy_to_charge: float
    estimated_cost: float
    priority: Priority
    distance_to_station: float

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600.0


class OptimizationMetrics(BaseModel):
    total_energy_cost: float = 0.0
    average_charging_time: float = 0.0
    station_utilization: float = 0.0
    vehicles_optimized: int = 0
    co2_saved: float = 0.0
    cost_savings: float = 0.0


class Alert(BaseModel):
    id: str
    type: AlertType
    severity: AlertSeverity
    vehicle_id: Optional[str] = None
    station_id: Optional[str] = None
    message: str
    timestamp: datetime
    resolved: bool = False


class DashboardState(BaseModel):
    fleet: List[Vehicle]
    stations: List[Station]
    charging_plans: List[ChargingPlan]
    energy_pricing: List[PriceEntry]
    alerts: List[Alert]
    metrics: OptimizationMetrics
    last_updated: datetime


# --- Forecast results (one struct per prediction kind) ---

class DemandPoint(BaseModel):
    kind: Literal["demand"] = "demand"
    hour: int
    expected_demand: float


class PricePoint(BaseModel):
    kind: Literal["price"] = "price"
    hour: int
    predicted_price: float
    confidence: float


class AvailabilityPoint(BaseModel):
    kind: Literal["availability"] = "availability"
    vehicle_id: str
    available_at: datetime
    predicted_soc: float


class BatteryHealth(BaseModel):
    kind: Literal["battery_health"] = "battery_health"
    health_score: float
    estimated_life_remaining: int
    maintenance_recommendation: str
