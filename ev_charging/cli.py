"""
EV Charge Scheduler - command line entry point
Runs optimization cycles over a synthetic fleet and prints a summary.
"""

import argparse
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

import numpy as np
from dotenv import load_dotenv
from tqdm import tqdm

from ev_charging.config.logging_config import LOGGING_MODES
from ev_charging.exceptions import EVChargingError
from ev_charging.services.fleet_service import FleetChargingService
from ev_charging.utils.logger import error, info, print_summary, setup_logger_for_mode


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="EV fleet charging scheduler",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--cycles", type=int, default=1,
        help="Number of optimization cycles to run, one simulated hour apart"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for reproducible fleets"
    )
    parser.add_argument(
        "--fleet-size", type=int, default=None,
        help="Number of synthetic vehicles (defaults to the configured fleet size)"
    )
    parser.add_argument(
        "--stations", type=int, default=None,
        help="Number of synthetic charging stations"
    )
    parser.add_argument(
        "--config", type=str, default=os.getenv("EV_CHARGING_OVERRIDES"),
        help="YAML overrides file"
    )
    parser.add_argument(
        "--log-mode", default=os.getenv("EV_CHARGING_LOG_MODE", "DEVELOPMENT"),
        type=str.upper, choices=list(LOGGING_MODES),
        help="Logging mode"
    )
    parser.add_argument(
        "--export-csv", type=str, default=None,
        help="Write the final charging plans to this CSV file"
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> FleetChargingService:
    rng = np.random.default_rng(args.seed)
    service = FleetChargingService.from_config(args.config, rng=rng)

    now = datetime.now().replace(minute=0, second=0, microsecond=0)
    service.initialize(args.fleet_size, args.stations, now)

    # initialize already ran the first cycle
    for cycle in tqdm(range(1, args.cycles), desc="Cycles", disable=args.cycles <= 1):
        service.simulate_updates(rng)
        service.run_optimization(now + timedelta(hours=cycle))

    metrics = service.metrics
    agent = service.agent_metrics()
    print_summary("CHARGING OPTIMIZATION SUMMARY", {
        "Vehicles": len(service.fleet),
        "Stations": len(service.stations),
        "Charging plans": len(service.plans),
        "Alerts": len(service.alerts),
        "Total cost": f"{metrics.total_energy_cost:.2f}",
        "Cost savings": f"{metrics.cost_savings:.2f}",
        "Avg charging time (h)": f"{metrics.average_charging_time:.2f}",
        "Station utilization (%)": f"{metrics.station_utilization:.1f}",
        "CO2 saved (kg)": f"{metrics.co2_saved:.1f}",
        "States learned": agent["states_learned"],
        "Average reward": agent["average_reward"],
    })

    if args.export_csv:
        output = Path(args.export_csv)
        output.parent.mkdir(parents=True, exist_ok=True)
        service.plans_frame().to_csv(output, index=False)
        info(f"Exported {len(service.plans)} plans to {output}", "cli")

    return service


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    setup_logger_for_mode(args.log_mode)

    try:
        run(args)
    except EVChargingError as e:
        error(f"Charging optimization failed: {e}", "cli")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
