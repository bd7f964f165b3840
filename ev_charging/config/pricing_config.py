"""
Time-of-use energy pricing tiers
Defines the standard 24-hour tariff used when no external price table is supplied
"""

# Hour ranges are inclusive on both ends; a range whose start is greater than
# its end wraps past midnight, e.g. (22, 5) covers 22, 23, 0 ... 5.
PRICING_CONFIG = {
    'off_peak': {
        'price': 0.08,          # currency units per kWh (night time)
        'hours': [(22, 5)],     # 10 PM - 6 AM
        'demand_range': (20, 40),
    },
    'peak': {
        'price': 0.20,          # afternoon
        'hours': [(14, 19)],    # 2 PM - 8 PM
        'demand_range': (70, 100),
    },
    'shoulder': {
        'price': 0.12,          # everything else
        'hours': [],
        'demand_range': (40, 70),
    },
}

# Tier used for hours not covered by any explicit range
DEFAULT_PERIOD = 'shoulder'

HOURS_PER_DAY = 24

__all__ = ['PRICING_CONFIG', 'DEFAULT_PERIOD', 'HOURS_PER_DAY']
