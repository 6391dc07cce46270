"""World state — mutable runtime economy of a single world."""

from __future__ import annotations

from dataclasses import dataclass, field

from clicker.data.balance import BALANCE


@dataclass
class WorldState:
    """Complete mutable state for one world."""

    world_id: str = ""

    # ── Economy ──────────────────────────────────────────
    coins: float = 0.0
    total_coins_earned: float = 0.0   # lifetime, never reset
    cps: float = 0.0                  # cached, recomputed after purchase/prestige

    # ── Buy-ons & upgrades ───────────────────────────────
    buy_on_counts: dict[str, int] = field(default_factory=dict)
    purchased_upgrades: dict[str, bool] = field(default_factory=dict)

    # ── Prestige ─────────────────────────────────────────
    prestige_count: int = 0
    prestige_multiplier: float = 1.0

    # ── Exchange boost ───────────────────────────────────
    exchange_rate: float = 0.0

    # ── Offline cap upgrades purchased ───────────────────
    offline_cap_upgrade_level: int = 0

    # ── Completion (ratio 0..1, shown ×100) ──────────────
    completion_percent: float = 0.0

    # ── Clicks ───────────────────────────────────────────
    total_clicks: int = 0

    @classmethod
    def fresh(cls, world_id: str, base_exchange_rate: float) -> WorldState:
        """A never-visited world seeded with its base exchange rate."""
        return cls(world_id=world_id, exchange_rate=base_exchange_rate)

    def total_buy_ons(self) -> int:
        return sum(self.buy_on_counts.values())


def effective_offline_cap_hours(state: WorldState, base_cap_hours: float) -> float:
    """Offline cap for a world, including purchased cap upgrades."""
    return base_cap_hours + state.offline_cap_upgrade_level * BALANCE.offline.hours_per_cap_upgrade
