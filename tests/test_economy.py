"""Tests for the economy formulas."""

import pytest

from clicker.data.worlds import TERRA
from clicker.engine.economy import (
    ExchangeBoostResult,
    calculate_exchange_boost,
    calculate_offline_income,
    calculate_overview_offline_income,
    cost_for_next,
    effective_multiplier,
    format_coins,
    format_coins_bare,
    format_cps,
)
from clicker.engine.world_state import WorldState, effective_offline_cap_hours

AUTO_MINER = TERRA.buy_ons[0]


# ── Buy-on cost ──────────────────────────────────────────────────────────────

def test_first_unit_costs_base_cost():
    assert cost_for_next(AUTO_MINER, 0) == 15


def test_cost_scales_geometrically():
    assert cost_for_next(AUTO_MINER, 1) == pytest.approx(17.25)
    assert cost_for_next(AUTO_MINER, 10) == pytest.approx(15 * 1.15 ** 10)


def test_effective_multiplier_only_counts_purchased_upgrades():
    assert effective_multiplier("auto_miner", TERRA.upgrades, {}) == 1.0
    assert effective_multiplier("auto_miner", TERRA.upgrades, {"diamond_drills": True}) == 2.0
    # Upgrade for another buy-on has no effect
    assert effective_multiplier("auto_miner", TERRA.upgrades, {"blast_furnace": True}) == 1.0


# ── Exchange boost ───────────────────────────────────────────────────────────

def test_exchange_boost_costs_twenty_percent():
    result = calculate_exchange_boost(1000, 0.001)
    assert result.world_coins_cost == pytest.approx(200)
    assert result.general_coins_earned == pytest.approx(0.2)
    assert result.new_exchange_rate == pytest.approx(0.00101)


def test_exchange_boost_on_empty_balance_is_zero():
    assert calculate_exchange_boost(0, 0.001) == ExchangeBoostResult()
    assert calculate_exchange_boost(-5, 0.001) == ExchangeBoostResult()


# ── Offline income ───────────────────────────────────────────────────────────

def test_offline_income_below_cap():
    assert calculate_offline_income(10, 0.10, 3600, 8) == pytest.approx(3600)


def test_offline_income_is_capped():
    assert calculate_offline_income(10, 0.10, 24 * 3600, 8) == pytest.approx(28_800)


def test_offline_income_zero_for_no_production():
    assert calculate_offline_income(0, 0.10, 3600, 8) == 0.0
    assert calculate_offline_income(10, 0.10, -1, 8) == 0.0


def test_overview_income_caps_at_one_hundred():
    assert calculate_overview_offline_income(0.01, 3600, 100) == pytest.approx(36)
    assert calculate_overview_offline_income(0.01, 20_000, 100) == 100


def test_cap_upgrades_add_two_hours_each():
    ws = WorldState(world_id="terra", offline_cap_upgrade_level=3)
    assert effective_offline_cap_hours(ws, 8.0) == 14.0


# ── Formatting ───────────────────────────────────────────────────────────────

def test_format_small_numbers_have_no_decimals():
    assert format_coins_bare(0) == "0"
    assert format_coins_bare(999) == "999"


def test_format_suffixes():
    assert format_coins_bare(1500) == "1.50K"
    assert format_coins_bare(1_230_000) == "1.23M"
    assert format_coins_bare(4.5e9) == "4.50B"
    assert format_coins_bare(2e12) == "2.00T"
    assert format_coins_bare(1e15) == "1.00Q"


def test_format_negative():
    assert format_coins_bare(-1500) == "-1.50K"


def test_format_with_symbol():
    assert format_coins(1500, "TC") == "TC: 1.50K"


def test_format_cps_keeps_two_decimals():
    assert format_cps(0.5) == "0.50"
    assert format_cps(2500) == "2.50K"
