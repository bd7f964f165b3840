"""
Synthetic fleet configuration
Parameters for generating demo vehicles and charging stations on the service grid
"""

# Fleet Configuration
FLEET_CONFIG = {
    'fleet_size': 20,
    'station_count': 10,
    'grid_size': 100,                 # locations are drawn from a 0-100 square
    'battery_capacity_range': (50, 100),   # kWh
    'charging_speeds': [7, 11, 22, 50, 150],  # kW
    'status_weights': {
        'idle': 0.4,
        'charging': 0.3,
        'in_use': 0.25,
        'maintenance': 0.05,
    },
    'vehicle_models': [
        'Tesla Model 3',
        'Nissan Leaf',
        'Chevy Bolt',
        'BMW i3',
        'Ford Mustang Mach-E',
        'VW ID.4',
    ],
}

# Trip generation
TRIP_CONFIG = {
    'trips_per_vehicle': (1, 3),
    'spacing_hours': 4.0,             # trip i departs after (i + 1) * spacing + jitter
    'spacing_jitter_hours': 4.0,
    'duration_hours': (1.0, 4.0),
    'destinations': ['Downtown', 'Airport', 'Warehouse', 'Depot', 'Client Site'],
}

# Charging Infrastructure
STATION_CONFIG = {
    'power_by_type': {
        'standard': 11,      # kW
        'fast': 50,
        'ultra_fast': 150,
    },
    'availability_probability': 0.7,
}

# Live simulation
SIMULATION_CONFIG = {
    'update_minutes': (5, 10),        # charge added per simulated tick
    'station_toggle_probability': 0.1,
    'charging_complete_soc': 90,
}

__all__ = [
    'FLEET_CONFIG',
    'TRIP_CONFIG',
    'STATION_CONFIG',
    'SIMULATION_CONFIG',
]
