"""
Centralized configuration for the charging scheduler.

Only scheduling-related knobs live here to keep concerns separate from
pricing tiers, the learning agent and synthetic fleet generation.
"""

SCHEDULING_CONFIG = {
    # Vehicles at or above this SoC (%) are not scheduled at all
    "charge_threshold_soc": 80,
    # Every plan charges the vehicle up to this SoC (%), leaving a buffer
    "target_soc": 90,
    # Statuses that exclude a vehicle from the optimization cycle
    "excluded_statuses": ("maintenance", "in_use"),

    # Priority classification
    # soc below this (%) is always high priority
    "low_soc_threshold": 30,
    # soc below this (%) with any scheduled trip is medium priority
    "medium_soc_threshold": 60,
    # A trip departing within this many hours is imminent
    "urgent_trip_hours": 6.0,

    # Window selection
    # Charge immediately if the next trip departs within (duration + buffer) hours
    "deadline_buffer_hours": 2.0,
    # Number of hourly slots scanned for the cheapest start
    "window_search_hours": 24,

    # Hourly cost model
    # False (default): every hourly bucket is charged
    # min(energy / duration, energy), so durations above one hour over-count.
    # True divides the energy evenly across ceil(duration) buckets.
    "prorate_hourly_cost": False,

    # Metrics
    # kg of CO2 saved per kWh delivered when a plan starts in an off-peak hour
    "co2_kg_per_kwh_off_peak": 0.5,
}

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}

__all__ = ["SCHEDULING_CONFIG", "PRIORITY_ORDER"]
