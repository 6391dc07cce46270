"""Prestige formulas — reward curve and threshold evaluation."""

from __future__ import annotations

import math
from dataclasses import dataclass

from clicker.data.balance import BALANCE
from clicker.data.worlds import PrestigeThreshold, ThresholdType
from clicker.engine.world_state import WorldState


@dataclass(frozen=True)
class PrestigeReward:
    """What a world prestige pays out."""

    general_coins_earned: float = 0.0
    prestige_multiplier: float = 0.0
    xp_grant: int = 0


def prestige_multiplier_gain(prestige_count: int) -> float:
    """Multiplicative gain for the prestige after ``prestige_count`` earlier ones.

    First prestige grants ×1.5; later gains shrink but stay above 1.0.
    """
    return 1.0 + BALANCE.prestige.gain_numerator / math.sqrt(prestige_count + 1)


def calculate_prestige_reward(
    total_coins_earned: float, prestige_count: int, current_multiplier: float
) -> PrestigeReward:
    """Reward for prestiging a world with the given lifetime earnings."""
    bal = BALANCE.prestige
    return PrestigeReward(
        general_coins_earned=math.sqrt(max(total_coins_earned, 0.0)) * bal.general_coin_factor,
        prestige_multiplier=current_multiplier * prestige_multiplier_gain(prestige_count),
        xp_grant=bal.xp_per_prestige * (prestige_count + 1),
    )


def threshold_progress(state: WorldState, threshold: PrestigeThreshold) -> tuple[float, float] | None:
    """Return ``(current, target)`` for a threshold, or None for an unknown kind."""
    if threshold.type == ThresholdType.COINS_EARNED:
        return state.total_coins_earned, threshold.value
    if threshold.type == ThresholdType.BUY_ONS_OWNED:
        return float(state.total_buy_ons()), threshold.value
    if threshold.type == ThresholdType.COMPLETION_PERCENT:
        return state.completion_percent * 100, threshold.value
    return None


def threshold_met(state: WorldState, threshold: PrestigeThreshold) -> bool:
    """True when the world satisfies a prestige threshold of a known kind."""
    progress = threshold_progress(state, threshold)
    if progress is None:
        return False
    current, target = progress
    return current >= target
