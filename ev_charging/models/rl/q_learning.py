"""
Tabular Q-learning agent that scores charging decisions.

The agent discretizes (hour, SoC, energy price, station availability) into
buckets and keeps a value table over (state, action) pairs. Entries are
created lazily with value 0 the first time a pair is referenced and are never
pruned; the table lives exactly as long as the agent instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ev_charging.config.rl_config import (
    RL_CONFIG,
    REWARD_CONFIG,
    CONFIDENCE_OFFSET,
    CONFIDENCE_SCALE,
)
from ev_charging.models.types import Vehicle
from ev_charging.utils.logger import log_detailed


@dataclass(frozen=True)
class ChargingState:
    hour: int
    vehicle_soc: float
    energy_price: float
    station_availability: float


@dataclass(frozen=True)
class ChargingAction:
    should_charge: bool
    target_soc: int
    urgency: str


@dataclass
class QValue:
    state: str
    action: str
    value: float = 0.0
    visits: int = 0


class QLearningAgent:
    """
    Q-learning with epsilon-greedy exploration over a fixed 10-action space.

    Randomness comes only from ``rng`` so a seeded generator makes action
    selection reproducible.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 rng: Optional[np.random.Generator] = None,
                 reward_config: Optional[Dict[str, Any]] = None):
        self.config = {**RL_CONFIG, **(config or {})}
        self.reward_config = {**REWARD_CONFIG, **(reward_config or {})}
        self.learning_rate = float(self.config["learning_rate"])
        self.discount_factor = float(self.config["discount_factor"])
        self.epsilon = float(self.config["epsilon"])
        self.rng = rng if rng is not None else np.random.default_rng()

        self.q_table: Dict[str, Dict[str, QValue]] = {}
        self.reward_history: List[float] = []
        self._actions = self._build_action_space()

    # ------------------------------------------------------------------
    # Discretization
    # ------------------------------------------------------------------

    def _build_action_space(self) -> List[ChargingAction]:
        actions = [
            ChargingAction(True, int(target), urgency)
            for target in self.config["target_soc_options"]
            for urgency in self.config["urgency_levels"]
        ]
        # Not charging has a single variant; target and urgency carry no meaning
        actions.append(ChargingAction(False, 0, "low"))
        return actions

    @staticmethod
    def _bucket(value: float, thresholds) -> str:
        high, medium = thresholds
        if value > high:
            return "high"
        if value > medium:
            return "med"
        return "low"

    def state_to_key(self, state: ChargingState) -> str:
        hour_bucket = int(state.hour // self.config["hour_bucket_size"])
        soc_bucket = int(state.vehicle_soc // self.config["soc_bucket_size"])
        price_bucket = self._bucket(state.energy_price, self.config["price_thresholds"])
        avail_bucket = self._bucket(state.station_availability, self.config["availability_thresholds"])
        return f"{hour_bucket}-{soc_bucket}-{price_bucket}-{avail_bucket}"

    @staticmethod
    def action_to_key(action: ChargingAction) -> str:
        return f"{str(action.should_charge).lower()}-{action.target_soc}-{action.urgency}"

    def possible_actions(self, state: Optional[ChargingState] = None) -> List[ChargingAction]:
        """The action space is the same for every state."""
        return list(self._actions)

    @staticmethod
    def build_state(hour: int, vehicle_soc: float, energy_price: float,
                    station_availability: float) -> ChargingState:
        return ChargingState(
            hour=hour,
            vehicle_soc=vehicle_soc,
            energy_price=energy_price,
            station_availability=station_availability,
        )

    # ------------------------------------------------------------------
    # Q-table access
    # ------------------------------------------------------------------

    def _entry(self, state: ChargingState, action: ChargingAction) -> QValue:
        state_key = self.state_to_key(state)
        action_key = self.action_to_key(action)
        actions = self.q_table.setdefault(state_key, {})
        if action_key not in actions:
            actions[action_key] = QValue(state=state_key, action=action_key)
        return actions[action_key]

    def get_q_value(self, state: ChargingState, action: ChargingAction) -> float:
        return self._entry(state, action).value

    def get_visits(self, state: ChargingState, action: ChargingAction) -> int:
        return self._entry(state, action).visits

    def _max_q(self, state: ChargingState) -> float:
        return max(self.get_q_value(state, a) for a in self.possible_actions(state))

    # ------------------------------------------------------------------
    # Policy and learning
    # ------------------------------------------------------------------

    def select_action(self, state: ChargingState) -> ChargingAction:
        """Epsilon-greedy: a random action with probability epsilon, else the best known one."""
        actions = self.possible_actions(state)
        if self.rng.random() < self.epsilon:
            return actions[int(self.rng.integers(len(actions)))]

        best_action = actions[0]
        best_value = self.get_q_value(state, best_action)
        for action in actions[1:]:
            value = self.get_q_value(state, action)
            if value > best_value:
                best_value = value
                best_action = action
        return best_action

    def learn(self, state: ChargingState, action: ChargingAction,
              reward: float, next_state: ChargingState) -> None:
        """One-step update: Q(s,a) += alpha * (r + gamma * max Q(s',a') - Q(s,a))."""
        entry = self._entry(state, action)
        current_q = entry.value
        max_next_q = self._max_q(next_state)

        entry.value = current_q + self.learning_rate * (
            reward + self.discount_factor * max_next_q - current_q
        )
        entry.visits += 1
        self.reward_history.append(float(reward))
        log_detailed(
            f"Q[{entry.state}][{entry.action}] {current_q:.3f} -> {entry.value:.3f} (r={reward:.2f})",
            "q_updates",
            "q_learning",
        )

    def calculate_reward(
        self,
        vehicle: Vehicle,
        action: ChargingAction,
        energy_price: float,
        charging_cost: float,
        time_used: float,
        now: Optional[datetime] = None,
    ) -> float:
        """Score a charging decision; higher is better."""
        cfg = self.reward_config
        now = now or datetime.now()
        reward = 0.0

        # Keeping the battery in its healthy band
        healthy_low, healthy_high = cfg["healthy_soc_range"]
        if healthy_low <= vehicle.soc <= healthy_high:
            reward += cfg["healthy_soc_bonus"]

        # Risk of the vehicle becoming unavailable
        if vehicle.soc < cfg["critical_soc"]:
            reward -= cfg["critical_soc_penalty"]

        if action.should_charge and energy_price < cfg["cheap_price"]:
            reward += cfg["cheap_charge_bonus"]
        elif action.should_charge and energy_price > cfg["expensive_price"]:
            reward -= cfg["expensive_charge_penalty"]

        reward -= charging_cost * cfg["cost_weight"]
        reward -= time_used * cfg["time_weight"]

        # Vehicle ready when its next trip leaves
        hours_until_trip = vehicle.hours_until_next_trip(now)
        if hours_until_trip is not None and hours_until_trip < cfg["trip_readiness_hours"]:
            if vehicle.soc >= cfg["ready_soc"]:
                reward += cfg["ready_bonus"]
            elif vehicle.soc < cfg["unready_soc"]:
                reward -= cfg["unready_penalty"]

        return reward

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def get_performance_metrics(self) -> Dict[str, Any]:
        window = int(self.config["reward_window"])
        recent = self.reward_history[-window:]
        avg_reward = sum(recent) / len(recent) if recent else 0.0
        return {
            "states_learned": len(self.q_table),
            "average_reward": round(avg_reward, 2),
            "exploration_rate": self.epsilon,
        }

    def recommend_strategy(
        self,
        vehicle: Vehicle,
        current_hour: int,
        energy_price: float,
        station_availability: float,
    ) -> Dict[str, Any]:
        """Recommend whether to charge now, with a confidence derived from the learned value."""
        state = self.build_state(current_hour, vehicle.soc, energy_price, station_availability)
        action = self.select_action(state)
        q_value = self.get_q_value(state, action)

        confidence = min(1.0, max(0.0, (q_value + CONFIDENCE_OFFSET) / CONFIDENCE_SCALE))

        cheap = self.reward_config["cheap_price"]
        expensive = self.reward_config["expensive_price"]
        if action.should_charge:
            reasoning = f"Charge to {action.target_soc}% ({action.urgency} urgency). "
            if energy_price < cheap:
                reasoning += "Low energy price detected. "
            if vehicle.soc < 30:
                reasoning += "Battery level critical. "
        else:
            reasoning = "Wait for better conditions. "
            if energy_price > expensive:
                reasoning += "Energy price too high. "
            if vehicle.soc > 70:
                reasoning += "Battery level sufficient. "

        return {
            "should_charge": action.should_charge,
            "reasoning": reasoning.strip(),
            "confidence": round(confidence, 2),
        }

    def q_table_frame(self) -> pd.DataFrame:
        """Flatten the value table into one row per (state, action) entry."""
        rows = [
            {"state": q.state, "action": q.action, "value": q.value, "visits": q.visits}
            for actions in self.q_table.values()
            for q in actions.values()
        ]
        return pd.DataFrame(rows, columns=["state", "action", "value", "visits"])
