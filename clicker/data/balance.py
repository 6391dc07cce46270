"""Balance constants — all tuning knobs in one place.

Tweak these to adjust pacing and reward curves.
Buy-on costs follow: base_cost * (cost_scaling ^ times_purchased)
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EconomyBalance:
    """Tuning for clicks, exchange boosts and number formatting."""

    # Coins per manual click before prestige / global multipliers
    base_click_power: float = 1.0

    # Exchange boost: fraction of the balance sacrificed per boost
    exchange_cost_fraction: float = 0.20
    # Exchange rate improvement per boost (multiplicative)
    exchange_rate_growth: float = 1.01

    # Large number formatting thresholds, largest first
    suffixes: tuple[tuple[float, str], ...] = (
        (1e15, "Q"),
        (1e12, "T"),
        (1e9, "B"),
        (1e6, "M"),
        (1e3, "K"),
    )


@dataclass(frozen=True)
class PrestigeBalance:
    """Tuning for world prestige."""

    # Multiplier gain: 1 + gain_numerator / sqrt(prestige_count + 1)
    gain_numerator: float = 0.5
    # General coins granted = sqrt(total_coins_earned) * general_coin_factor
    general_coin_factor: float = 0.1
    # XP granted = xp_per_prestige * (prestige_count + 1)
    xp_per_prestige: int = 500


@dataclass(frozen=True)
class ProgressionBalance:
    """Tuning for the account XP curve."""

    # XP cost of the level 1 → 2 step
    base_level_xp: float = 100.0
    # Each level step costs this much more than the previous one
    level_xp_growth: float = 1.5


@dataclass(frozen=True)
class OfflineBalance:
    """Tuning for income earned while the game is closed."""

    # Extra offline hours granted per offline-cap upgrade level
    hours_per_cap_upgrade: float = 2.0
    # General coins per second when the player quit from a non-world screen
    overview_rate_per_s: float = 0.01
    # Hard cap on overview offline general coins
    overview_cap: float = 100.0


@dataclass(frozen=True)
class TimingBalance:
    """Debounce intervals for the simulation step (simulated seconds)."""

    achievement_check_interval_s: float = 5.0
    autosave_interval_s: float = 30.0
    # Nominal driver tick length
    tick_interval_s: float = 0.1
    # Longest real-time gap a driver catches up in one go
    max_catch_up_s: float = 60.0


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    economy: EconomyBalance = field(default_factory=EconomyBalance)
    prestige: PrestigeBalance = field(default_factory=PrestigeBalance)
    progression: ProgressionBalance = field(default_factory=ProgressionBalance)
    offline: OfflineBalance = field(default_factory=OfflineBalance)
    timing: TimingBalance = field(default_factory=TimingBalance)


# Shared instance, import this everywhere
BALANCE = GameBalance()
