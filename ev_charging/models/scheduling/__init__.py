from .priority import classify_priority
from .optimization import (
    ChargingScheduler,
    find_optimal_charging_window,
    optimize_charging_schedule,
    calculate_optimization_metrics,
)

__all__ = [
    'classify_priority',
    'ChargingScheduler',
    'find_optimal_charging_window',
    'optimize_charging_schedule',
    'calculate_optimization_metrics',
]
