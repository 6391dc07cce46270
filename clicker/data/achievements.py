"""Achievement definitions — unlock conditions and their rewards."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from clicker.engine.game_state import GameState


class RewardType(str, Enum):
    """Kinds of one-time reward an achievement can carry."""

    NONE = "none"
    XP = "xp"
    GENERAL_COINS = "general_coins"
    MULTIPLIER = "multiplier"
    COSMETIC = "cosmetic"


@dataclass(frozen=True)
class Reward:
    """One-time payload granted on unlock."""

    type: RewardType
    value: float = 0.0
    # Set for cosmetic rewards only
    cosmetic_id: str = ""


@dataclass(frozen=True)
class Achievement:
    """A single trackable achievement."""

    id: str
    name: str
    description: str
    condition: Callable[[GameState], bool]
    xp_grant: int = 0
    # Hidden achievements show as "???" until earned
    hidden: bool = False
    reward: Reward | None = None


def _worlds_with_earnings(gs: GameState) -> int:
    return sum(1 for earned in gs.player.world_total_coins_earned.values() if earned > 0)


def _world_earned(gs: GameState, world_id: str, amount: float) -> bool:
    ws = gs.worlds.get(world_id)
    return ws is not None and ws.total_coins_earned >= amount


# ── Baseline achievement set ─────────────────────────────────────

DEFAULT_ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement(
        id="first_click",
        name="First Click",
        description="Click once in any world.",
        xp_grant=25,
        condition=lambda gs: gs.player.total_clicks >= 1,
    ),
    Achievement(
        id="click_apprentice",
        name="Click Apprentice",
        description="Reach 100 total clicks.",
        xp_grant=50,
        condition=lambda gs: gs.player.total_clicks >= 100,
    ),
    Achievement(
        id="first_buyon",
        name="Automation Begins",
        description="Buy your first buy-on.",
        xp_grant=40,
        condition=lambda gs: gs.total_buy_ons() >= 1,
    ),
    Achievement(
        id="collector_10",
        name="Collector",
        description="Own 10 total buy-ons across all worlds.",
        xp_grant=100,
        condition=lambda gs: gs.total_buy_ons() >= 10,
    ),
    Achievement(
        id="terra_million",
        name="Terra Millionaire",
        description="Earn 1,000,000 Terra-Coins.",
        xp_grant=150,
        condition=lambda gs: _world_earned(gs, "terra", 1_000_000),
    ),
    Achievement(
        id="aqua_million",
        name="Aqua Millionaire",
        description="Earn 1,000,000 Aqua-Coins.",
        xp_grant=150,
        condition=lambda gs: _world_earned(gs, "aqua", 1_000_000),
    ),
    Achievement(
        id="first_prestige",
        name="Ascension I",
        description="Perform your first prestige.",
        xp_grant=180,
        reward=Reward(RewardType.GENERAL_COINS, 25),
        condition=lambda gs: gs.total_prestiges() >= 1,
    ),
    Achievement(
        id="prestige_10",
        name="Prestige Veteran",
        description="Reach 10 total prestiges across worlds.",
        xp_grant=300,
        reward=Reward(RewardType.GENERAL_COINS, 100),
        condition=lambda gs: gs.total_prestiges() >= 10,
    ),
    Achievement(
        id="worldhopper",
        name="Worldhopper",
        description="Earn coins in two different worlds.",
        xp_grant=90,
        hidden=True,
        condition=lambda gs: _worlds_with_earnings(gs) >= 2,
    ),
    Achievement(
        id="level_5",
        name="Rising Star",
        description="Reach account level 5.",
        xp_grant=120,
        condition=lambda gs: gs.player.level >= 5,
    ),
)
