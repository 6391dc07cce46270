"""Player — account-wide progress that survives every prestige."""

from __future__ import annotations

from dataclasses import dataclass, field

from clicker.data.balance import BALANCE


@dataclass
class Player:
    """Global player state shared by all worlds."""

    xp: int = 0
    level: int = 1
    general_coins: float = 0.0
    lifetime_general_coins: float = 0.0
    total_clicks: int = 0
    total_play_seconds: float = 0.0
    # world id → lifetime coins earned there
    world_total_coins_earned: dict[str, float] = field(default_factory=dict)

    def add_general_coins(self, amount: float) -> None:
        """Credit general coins to both the balance and the lifetime total."""
        self.general_coins += amount
        self.lifetime_general_coins += amount


def xp_for_level(n: int) -> int:
    """Cumulative XP required to reach level ``n`` from level 1.

    Each step costs ``base_level_xp * growth^(i-1)``, truncated to an int
    before it is added, so ``xp_for_level(6) == 100+150+225+337+506``.
    """
    if n <= 1:
        return 0
    prog = BALANCE.progression
    total = 0
    step = prog.base_level_xp
    for _ in range(1, n):
        total += int(step)
        step *= prog.level_xp_growth
    return total


def xp_needed_for_next_level(n: int) -> int:
    """XP needed to advance from level ``n`` to ``n + 1``."""
    return xp_for_level(n + 1) - xp_for_level(n)


def add_xp(player: Player, xp: int) -> bool:
    """Grant XP, levelling up as many times as needed. Returns True on any level-up."""
    player.xp += xp
    leveled = False
    while player.xp >= xp_for_level(player.level + 1):
        player.level += 1
        leveled = True
    return leveled


def level_gate_check(player: Player, required: int) -> bool:
    """True if the player meets a level requirement (<= 0 means ungated)."""
    if required <= 0:
        return True
    return player.level >= required
