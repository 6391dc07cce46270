"""Tests for the prestige reward curve and thresholds."""

import math

import pytest

from clicker.data.worlds import PrestigeThreshold, ThresholdType
from clicker.engine.prestige import (
    calculate_prestige_reward,
    prestige_multiplier_gain,
    threshold_met,
    threshold_progress,
)
from clicker.engine.world_state import WorldState


# ── Reward curve ─────────────────────────────────────────────────────────────

def test_first_prestige_gains_half():
    assert prestige_multiplier_gain(0) == pytest.approx(1.5)


def test_gain_diminishes_but_stays_above_one():
    assert prestige_multiplier_gain(3) == pytest.approx(1.25)
    gains = [prestige_multiplier_gain(n) for n in range(50)]
    assert all(g > 1.0 for g in gains)
    assert gains == sorted(gains, reverse=True)


def test_reward_at_one_million():
    reward = calculate_prestige_reward(1_000_000, 0, 1.0)
    assert reward.general_coins_earned == pytest.approx(100)
    assert reward.prestige_multiplier == pytest.approx(1.5)
    assert reward.xp_grant == 500


def test_multiplier_compounds():
    reward = calculate_prestige_reward(1_000_000, 1, 1.5)
    assert reward.prestige_multiplier == pytest.approx(1.5 * (1 + 0.5 / math.sqrt(2)))
    assert reward.xp_grant == 1000


# ── Thresholds ───────────────────────────────────────────────────────────────

def test_coins_earned_threshold():
    t = PrestigeThreshold(ThresholdType.COINS_EARNED.value, 1_000_000)
    ws = WorldState(total_coins_earned=999_999)
    assert not threshold_met(ws, t)
    ws.total_coins_earned = 1_000_000
    assert threshold_met(ws, t)


def test_buy_ons_owned_threshold():
    t = PrestigeThreshold(ThresholdType.BUY_ONS_OWNED.value, 150)
    ws = WorldState(buy_on_counts={"kelp_farm": 100, "pearl_diver": 50})
    assert threshold_met(ws, t)
    assert threshold_progress(ws, t) == (150.0, 150)


def test_completion_threshold_compares_percent():
    t = PrestigeThreshold(ThresholdType.COMPLETION_PERCENT.value, 50)
    ws = WorldState(completion_percent=0.49)
    assert not threshold_met(ws, t)
    ws.completion_percent = 0.5
    assert threshold_met(ws, t)


def test_unknown_threshold_never_qualifies():
    t = PrestigeThreshold("moon_phase", 0)
    ws = WorldState(total_coins_earned=1e12)
    assert threshold_progress(ws, t) is None
    assert not threshold_met(ws, t)
