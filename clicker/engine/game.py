"""Engine — owns the game state and applies every player action and tick.

All methods are synchronous and never read a clock: drivers pass the
elapsed simulated time to :meth:`Engine.tick`. Expected refusals come back
as a ``False`` success flag or a zero result, never as an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from clicker.data.achievements import RewardType
from clicker.data.balance import BALANCE
from clicker.data.worlds import ThresholdType
from clicker.engine.achievements import check_achievements
from clicker.engine.economy import ExchangeBoostResult, calculate_exchange_boost, cost_for_next
from clicker.engine.game_state import GameState
from clicker.engine.player import add_xp
from clicker.engine.prestige import (
    PrestigeReward,
    calculate_prestige_reward,
    threshold_met,
    threshold_progress,
)
from clicker.engine.registry import AchievementRegistry, WorldRegistry
from clicker.engine.upgrades import WorldUpgradeRegistry, calculate_world_cps
from clicker.engine.world_state import WorldState

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Kinds of side effect reported by :meth:`Engine.tick`."""

    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    LEVEL_UP = "level_up"
    AUTOSAVE = "autosave"


@dataclass(frozen=True)
class EngineEvent:
    """Something the driver should react to (notify, save)."""

    type: EventType
    # For ACHIEVEMENT_UNLOCKED
    achievement_id: str = ""
    # For LEVEL_UP
    new_level: int = 0


class Engine:
    """Deterministic game core driven by clicks, purchases and ticks."""

    def __init__(
        self,
        state: GameState,
        world_registry: WorldRegistry,
        achievement_registry: AchievementRegistry,
        earned: dict[str, bool] | None = None,
    ) -> None:
        self.state = state
        self.world_registry = world_registry
        self.achievement_registry = achievement_registry
        world_registry.seal()
        achievement_registry.seal()
        self.upgrade_registries: dict[str, WorldUpgradeRegistry] = {
            w.id: WorldUpgradeRegistry.from_world(w) for w in world_registry
        }
        # Global CPS bonus from account-wide sources (none in the core yet)
        self.global_cps_multiplier: float = 1.0
        # Saved CPS may predate a catalog rebalance
        for world_id in state.worlds:
            self.recompute_cps(world_id)
        self.earned: dict[str, bool] = earned if earned is not None else {}

        self._achievement_timer: float = 0.0
        self._autosave_timer: float = 0.0

    # ── Clicking ─────────────────────────────────────────

    def click_power(self, world_id: str, global_click_multiplier: float = 1.0) -> float:
        """Coins per manual click in a world; 0 for an unknown world."""
        ws = self.state.worlds.get(world_id)
        if ws is None:
            return 0.0
        power = BALANCE.economy.base_click_power * ws.prestige_multiplier
        if global_click_multiplier > 0:
            power *= global_click_multiplier
        return power

    def handle_click(self, world_id: str, global_click_multiplier: float = 1.0) -> float:
        """Record a manual click. Returns coins earned (0 for an unknown world)."""
        ws = self.state.worlds.get(world_id)
        if ws is None:
            return 0.0
        earned = self.click_power(world_id, global_click_multiplier)
        self._credit(world_id, ws, earned)
        ws.total_clicks += 1
        self.state.player.total_clicks += 1
        self.update_completion(world_id)
        return earned

    # ── Purchases ────────────────────────────────────────

    def purchase_buy_on(
        self, world_id: str, buy_on_id: str, player_level: int | None = None
    ) -> tuple[float, bool]:
        """Buy exactly one unit of a buy-on. Returns ``(cost, success)``."""
        ws = self.state.worlds.get(world_id)
        reg = self.upgrade_registries.get(world_id)
        if ws is None or reg is None:
            return 0.0, False
        buy_on = reg.get_buy_on(buy_on_id)
        if buy_on is None:
            return 0.0, False
        level = self.state.player.level if player_level is None else player_level
        if buy_on.level_requirement > level:
            return 0.0, False

        count = ws.buy_on_counts.get(buy_on_id, 0)
        cost = cost_for_next(buy_on, count)
        if ws.coins < cost:
            return 0.0, False

        ws.coins -= cost
        ws.buy_on_counts[buy_on_id] = count + 1
        self.recompute_cps(world_id)
        self.update_completion(world_id)
        return cost, True

    def purchase_upgrade(
        self, world_id: str, upgrade_id: str, player_level: int | None = None
    ) -> tuple[float, bool]:
        """Buy a one-time buy-on upgrade. Returns ``(cost, success)``."""
        ws = self.state.worlds.get(world_id)
        reg = self.upgrade_registries.get(world_id)
        if ws is None or reg is None:
            return 0.0, False
        upgrade = reg.get_upgrade(upgrade_id)
        if upgrade is None or ws.purchased_upgrades.get(upgrade_id, False):
            return 0.0, False
        level = self.state.player.level if player_level is None else player_level
        if upgrade.level_requirement > level:
            return 0.0, False
        if ws.coins < upgrade.cost:
            return 0.0, False

        ws.coins -= upgrade.cost
        ws.purchased_upgrades[upgrade_id] = True
        self.recompute_cps(world_id)
        return upgrade.cost, True

    def recompute_cps(self, world_id: str) -> float:
        """Refresh a world's cached CPS from its ownership and upgrades."""
        ws = self.state.worlds.get(world_id)
        reg = self.upgrade_registries.get(world_id)
        if ws is None or reg is None:
            return 0.0
        ws.cps = calculate_world_cps(
            reg,
            ws.buy_on_counts,
            ws.purchased_upgrades,
            ws.prestige_multiplier,
            self.global_cps_multiplier,
        )
        return ws.cps

    # ── Prestige ─────────────────────────────────────────

    def can_prestige(self, world_id: str) -> bool:
        ws = self.state.worlds.get(world_id)
        world = self.world_registry.get(world_id)
        if ws is None or world is None:
            return False
        return threshold_met(ws, world.prestige_threshold)

    def prestige_progress(self, world_id: str) -> tuple[float, float]:
        """``(current, threshold)`` for a progress bar; ``(0, 1)`` if unknown."""
        ws = self.state.worlds.get(world_id)
        world = self.world_registry.get(world_id)
        if ws is None or world is None:
            return 0.0, 1.0
        progress = threshold_progress(ws, world.prestige_threshold)
        if progress is None:
            return 0.0, world.prestige_threshold.value
        return progress

    def execute_prestige(self, world_id: str) -> tuple[PrestigeReward, bool]:
        """Prestige a world: pay out, bump the multiplier, reset the economy.

        Kept across the reset: prestige count and multiplier, exchange rate,
        offline cap upgrades, lifetime coins and clicks, completion.
        """
        if not self.can_prestige(world_id):
            return PrestigeReward(), False

        ws = self.state.worlds[world_id]
        reward = calculate_prestige_reward(
            ws.total_coins_earned, ws.prestige_count, ws.prestige_multiplier
        )

        player = self.state.player
        player.add_general_coins(reward.general_coins_earned)
        add_xp(player, reward.xp_grant)

        ws.prestige_count += 1
        ws.prestige_multiplier = reward.prestige_multiplier

        ws.coins = 0.0
        ws.buy_on_counts = {}
        ws.purchased_upgrades = {}
        ws.cps = 0.0

        self.update_completion(world_id)
        logger.debug(
            "prestiged %s (#%d), multiplier now %.3f",
            world_id, ws.prestige_count, ws.prestige_multiplier,
        )
        return reward, True

    # ── Exchange boost ───────────────────────────────────

    def can_exchange_boost(self, world_id: str) -> bool:
        ws = self.state.worlds.get(world_id)
        return ws is not None and ws.coins > 0

    def exchange_boost_preview(self, world_id: str) -> ExchangeBoostResult:
        """Projected boost result; never mutates state."""
        ws = self.state.worlds.get(world_id)
        if ws is None:
            return ExchangeBoostResult()
        return calculate_exchange_boost(ws.coins, ws.exchange_rate)

    def execute_exchange_boost(self, world_id: str) -> tuple[ExchangeBoostResult, bool]:
        """Convert 20% of the world balance to general coins and improve the rate."""
        if not self.can_exchange_boost(world_id):
            return ExchangeBoostResult(), False
        ws = self.state.worlds[world_id]
        result = calculate_exchange_boost(ws.coins, ws.exchange_rate)
        ws.coins -= result.world_coins_cost
        ws.exchange_rate = result.new_exchange_rate
        self.state.player.add_general_coins(result.general_coins_earned)
        return result, True

    # ── Completion ───────────────────────────────────────

    def update_completion(self, world_id: str) -> float:
        """Raise a world's completion ratio to the weight of its met milestones."""
        ws = self.state.worlds.get(world_id)
        world = self.world_registry.get(world_id)
        if ws is None or world is None:
            return 0.0
        ratio = 0.0
        for milestone in world.completion_milestones:
            if milestone.type == ThresholdType.COINS_EARNED:
                current = ws.total_coins_earned
            elif milestone.type == ThresholdType.BUY_ONS_OWNED:
                current = float(ws.total_buy_ons())
            elif milestone.type == ThresholdType.PRESTIGE_COUNT:
                current = float(ws.prestige_count)
            else:
                continue
            if current >= milestone.value:
                ratio += milestone.weight
        ws.completion_percent = max(ws.completion_percent, min(ratio, 1.0))
        return ws.completion_percent

    # ── Simulation step ──────────────────────────────────

    def tick(self, dt: float) -> list[EngineEvent]:
        """Advance the simulation by ``dt`` seconds and report notable events.

        Order within one tick: income accrual, play time, the debounced
        achievement pass, then the debounced autosave request.
        """
        events: list[EngineEvent] = []

        for world_id, ws in self.state.worlds.items():
            if ws.cps > 0:
                self._credit(world_id, ws, ws.cps * dt)

        self.state.player.total_play_seconds += dt

        self._achievement_timer += dt
        if self._achievement_timer >= BALANCE.timing.achievement_check_interval_s:
            self._achievement_timer = 0.0
            events.extend(self._run_achievement_pass())

        self._autosave_timer += dt
        if self._autosave_timer >= BALANCE.timing.autosave_interval_s:
            self._autosave_timer = 0.0
            events.append(EngineEvent(EventType.AUTOSAVE))

        return events

    def _run_achievement_pass(self) -> list[EngineEvent]:
        events: list[EngineEvent] = []
        for world_id in self.state.worlds:
            self.update_completion(world_id)

        player = self.state.player
        for ach_id in check_achievements(self.state, self.achievement_registry, self.earned):
            ach = self.achievement_registry.get(ach_id)
            if ach is None:
                continue
            self.earned[ach_id] = True
            leveled = add_xp(player, ach.xp_grant)

            reward = ach.reward
            if reward is not None:
                if reward.type == RewardType.GENERAL_COINS:
                    player.add_general_coins(reward.value)
                elif reward.type == RewardType.XP:
                    leveled = add_xp(player, int(reward.value)) or leveled
                # Multiplier and cosmetic rewards are recorded by the unlock only

            if leveled:
                logger.debug("level up to %d from achievement %s", player.level, ach_id)
                events.append(EngineEvent(EventType.LEVEL_UP, new_level=player.level))
            events.append(EngineEvent(EventType.ACHIEVEMENT_UNLOCKED, achievement_id=ach_id))
        return events

    def _credit(self, world_id: str, ws: WorldState, amount: float) -> None:
        ws.coins += amount
        ws.total_coins_earned += amount
        totals = self.state.player.world_total_coins_earned
        totals[world_id] = totals.get(world_id, 0.0) + amount
