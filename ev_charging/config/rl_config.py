"""
Configuration for the tabular Q-learning charging agent.
"""

RL_CONFIG = {
    # Q-learning hyper-parameters
    "learning_rate": 0.1,       # alpha
    "discount_factor": 0.95,    # gamma
    "epsilon": 0.1,             # exploration rate

    # Number of most recent rewards averaged in performance reports
    "reward_window": 100,

    # State discretization
    "hour_bucket_size": 4,      # 6 time buckets per day
    "soc_bucket_size": 20,      # 5 SoC buckets
    # (high, medium) lower bounds, strictly greater than
    "price_thresholds": (0.15, 0.10),
    "availability_thresholds": (0.7, 0.4),

    # Action space
    "target_soc_options": (80, 90, 100),
    "urgency_levels": ("low", "medium", "high"),
}

# Reward shaping weights
REWARD_CONFIG = {
    "healthy_soc_range": (50, 80),
    "healthy_soc_bonus": 10.0,
    "critical_soc": 20,
    "critical_soc_penalty": 20.0,
    "cheap_price": 0.10,
    "cheap_charge_bonus": 15.0,
    "expensive_price": 0.15,
    "expensive_charge_penalty": 10.0,
    "cost_weight": 10.0,        # reward units per currency unit
    "time_weight": 2.0,         # reward units per hour of charging
    "trip_readiness_hours": 2.0,
    "ready_soc": 80,
    "ready_bonus": 25.0,
    "unready_soc": 50,
    "unready_penalty": 30.0,
}

# Maps a Q-value onto a [0, 1] confidence: clamp((q + offset) / scale)
CONFIDENCE_OFFSET = 50.0
CONFIDENCE_SCALE = 100.0

__all__ = ["RL_CONFIG", "REWARD_CONFIG", "CONFIDENCE_OFFSET", "CONFIDENCE_SCALE"]
