from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, conint, confloat

from ev_charging.exceptions import ConfigurationError
from ev_charging.utils.logger import info


DEFAULT_OVERRIDES_PATH = Path("config/overrides.yaml")


class SchedulingConfigSchema(BaseModel):
    charge_threshold_soc: confloat(ge=0, le=100) = 80
    target_soc: confloat(ge=0, le=100) = 90
    low_soc_threshold: confloat(ge=0, le=100) = 30
    medium_soc_threshold: confloat(ge=0, le=100) = 60
    urgent_trip_hours: confloat(ge=0, le=48) = 6.0
    deadline_buffer_hours: confloat(ge=0, le=24) = 2.0
    window_search_hours: conint(ge=1, le=24) = 24
    prorate_hourly_cost: bool = False
    co2_kg_per_kwh_off_peak: confloat(ge=0, le=5) = 0.5


class RLConfigSchema(BaseModel):
    learning_rate: confloat(gt=0, le=1) = 0.1
    discount_factor: confloat(ge=0, le=1) = 0.95
    epsilon: confloat(ge=0, le=1) = 0.1
    reward_window: conint(ge=1, le=100000) = 100


class PricingConfigSchema(BaseModel):
    # Price per kWh for each tariff tier; hour ranges stay as configured
    off_peak_price: confloat(ge=0, le=10) = 0.08
    shoulder_price: confloat(ge=0, le=10) = 0.12
    peak_price: confloat(ge=0, le=10) = 0.20


class FleetConfigSchema(BaseModel):
    fleet_size: conint(ge=1, le=1000) = Field(20)
    station_count: conint(ge=1, le=500) = Field(10)
    grid_size: conint(ge=1, le=10000) = Field(100)


class RuntimeOverrides(BaseModel):
    scheduling: SchedulingConfigSchema = SchedulingConfigSchema()
    rl: RLConfigSchema = RLConfigSchema()
    pricing: PricingConfigSchema = PricingConfigSchema()
    fleet: FleetConfigSchema = FleetConfigSchema()


def load_overrides(path: Optional[Union[str, Path]] = None) -> RuntimeOverrides:
    """Read overrides from YAML; a missing file yields the defaults."""
    overrides_path = Path(path) if path is not None else DEFAULT_OVERRIDES_PATH
    if not overrides_path.exists():
        return RuntimeOverrides()

    try:
        data = yaml.safe_load(overrides_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse overrides file {overrides_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Overrides file {overrides_path} must contain a mapping")

    try:
        overrides = RuntimeOverrides(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid overrides in {overrides_path}: {e}") from e

    info(f"Loaded configuration overrides from {overrides_path}", "config_service")
    return overrides


def save_overrides(overrides: RuntimeOverrides, path: Optional[Union[str, Path]] = None) -> Path:
    overrides_path = Path(path) if path is not None else DEFAULT_OVERRIDES_PATH
    overrides_path.parent.mkdir(parents=True, exist_ok=True)
    overrides_path.write_text(yaml.safe_dump(overrides.model_dump(), sort_keys=False), encoding="utf-8")
    return overrides_path


def merged_runtime_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    from ev_charging.config.fleet_config import FLEET_CONFIG as FLEET_DEFAULT
    from ev_charging.config.pricing_config import PRICING_CONFIG as PRICING_DEFAULT
    from ev_charging.config.rl_config import RL_CONFIG as RL_DEFAULT
    from ev_charging.config.scheduling_config import SCHEDULING_CONFIG as SCHEDULING_DEFAULT

    overrides = load_overrides(path)

    scheduling = {**SCHEDULING_DEFAULT, **overrides.scheduling.model_dump()}
    rl = {**RL_DEFAULT, **overrides.rl.model_dump()}
    fleet = {**FLEET_DEFAULT, **overrides.fleet.model_dump()}

    # Copy tiers so the module-level tariff is never mutated
    pricing = {period: dict(tier) for period, tier in PRICING_DEFAULT.items()}
    for period, price in (
        ("off_peak", overrides.pricing.off_peak_price),
        ("shoulder", overrides.pricing.shoulder_price),
        ("peak", overrides.pricing.peak_price),
    ):
        if period in pricing:
            pricing[period]["price"] = float(price)

    return {
        "scheduling": scheduling,
        "rl": rl,
        "pricing": pricing,
        "fleet": fleet,
    }
