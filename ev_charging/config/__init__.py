"""
Configuration package for the EV charging scheduler
Combines all configuration dictionaries and provides easy access
"""

from .scheduling_config import SCHEDULING_CONFIG, PRIORITY_ORDER
from .pricing_config import PRICING_CONFIG, DEFAULT_PERIOD, HOURS_PER_DAY
from .rl_config import RL_CONFIG, REWARD_CONFIG
from .fleet_config import FLEET_CONFIG, TRIP_CONFIG, STATION_CONFIG, SIMULATION_CONFIG

__all__ = [
    'SCHEDULING_CONFIG',
    'PRIORITY_ORDER',
    'PRICING_CONFIG',
    'DEFAULT_PERIOD',
    'HOURS_PER_DAY',
    'RL_CONFIG',
    'REWARD_CONFIG',
    'FLEET_CONFIG',
    'TRIP_CONFIG',
    'STATION_CONFIG',
    'SIMULATION_CONFIG',
]
