"""Economy formulas — costs, exchange boosts, offline income, number formatting.

Everything here is pure: no state is read or written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from clicker.data.balance import BALANCE
from clicker.data.worlds import BuyOnDef, UpgradeDef


@dataclass(frozen=True)
class ExchangeBoostResult:
    """Outcome of converting part of a world balance into general coins."""

    general_coins_earned: float = 0.0
    world_coins_cost: float = 0.0
    new_exchange_rate: float = 0.0


# ── Buy-ons ──────────────────────────────────────────────────────


def cost_for_next(buy_on: BuyOnDef, owned: int) -> float:
    """Coin cost of the next unit given how many are already owned."""
    return buy_on.base_cost * (buy_on.cost_scaling ** owned)


def effective_multiplier(
    buy_on_id: str,
    upgrades: Iterable[UpgradeDef],
    purchased: Mapping[str, bool],
) -> float:
    """Combined multiplier of every purchased upgrade targeting ``buy_on_id``."""
    mult = 1.0
    for upg in upgrades:
        if upg.target_buy_on_id == buy_on_id and purchased.get(upg.id, False):
            mult *= upg.multiplier
    return mult


# ── Exchange boost ───────────────────────────────────────────────


def calculate_exchange_boost(balance: float, exchange_rate: float) -> ExchangeBoostResult:
    """Sacrifice a fraction of ``balance`` for general coins and a better rate.

    A non-positive balance yields an all-zero result; callers gate on
    ``balance > 0`` before applying it.
    """
    if balance <= 0:
        return ExchangeBoostResult()
    bal = BALANCE.economy
    cost = balance * bal.exchange_cost_fraction
    return ExchangeBoostResult(
        general_coins_earned=cost * exchange_rate,
        world_coins_cost=cost,
        new_exchange_rate=exchange_rate * bal.exchange_rate_growth,
    )


# ── Offline income ───────────────────────────────────────────────


def calculate_offline_income(
    cps: float, offline_pct: float, elapsed_s: float, cap_hours: float
) -> float:
    """World coins earned while closed: min(cps·pct·elapsed, cps·cap·3600·pct)."""
    if cps <= 0 or offline_pct <= 0 or elapsed_s <= 0 or cap_hours <= 0:
        return 0.0
    earned = cps * offline_pct * elapsed_s
    cap = cps * cap_hours * 3600 * offline_pct
    return min(earned, cap)


def calculate_overview_offline_income(rate_per_s: float, elapsed_s: float, cap: float) -> float:
    """General coins earned while closed from the overview screen."""
    if rate_per_s <= 0 or elapsed_s <= 0 or cap <= 0:
        return 0.0
    return min(rate_per_s * elapsed_s, cap)


# ── Formatting ───────────────────────────────────────────────────


def format_coins_bare(amount: float) -> str:
    """Format a coin amount with SI suffixes and no symbol (``1.50K``)."""
    if amount < 0:
        return f"-{format_coins_bare(-amount)}"

    for threshold, suffix in BALANCE.economy.suffixes:
        if amount >= threshold:
            return f"{amount / threshold:.2f}{suffix}"
    return f"{amount:.0f}"


def format_coins(amount: float, symbol: str) -> str:
    """Format a coin amount with a currency symbol prefix (``TC: 1.50K``)."""
    return f"{symbol}: {format_coins_bare(amount)}"


def format_cps(amount: float) -> str:
    """Format an income rate, always with two decimals."""
    for threshold, suffix in BALANCE.economy.suffixes:
        if amount >= threshold:
            return f"{amount / threshold:.2f}{suffix}"
    return f"{amount:.2f}"
