"""
EV Charge Scheduler
Charging optimization for electric vehicle fleets: priority-based scheduling
against time-of-use prices, plus a Q-learning agent that scores decisions.
"""

from ev_charging.exceptions import EVChargingError, ConfigurationError
from ev_charging.models.types import (
    Location,
    TripSchedule,
    Vehicle,
    Station,
    PriceEntry,
    ChargingPlan,
    OptimizationMetrics,
    Alert,
)
from ev_charging.models.scheduling.priority import classify_priority
from ev_charging.models.scheduling.optimization import (
    ChargingScheduler,
    find_optimal_charging_window,
    optimize_charging_schedule,
    calculate_optimization_metrics,
)
from ev_charging.models.rl.q_learning import (
    ChargingState,
    ChargingAction,
    QLearningAgent,
)
from ev_charging.utils.tariff import generate_energy_pricing, calculate_charging_cost

__version__ = "1.0.0"

__all__ = [
    "EVChargingError",
    "ConfigurationError",
    "Location",
    "TripSchedule",
    "Vehicle",
    "Station",
    "PriceEntry",
    "ChargingPlan",
    "OptimizationMetrics",
    "Alert",
    "classify_priority",
    "ChargingScheduler",
    "find_optimal_charging_window",
    "optimize_charging_schedule",
    "calculate_optimization_metrics",
    "ChargingState",
    "ChargingAction",
    "QLearningAgent",
    "generate_energy_pricing",
    "calculate_charging_cost",
]
