"""Offline progress — income credited for the time the game was closed."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from clicker.data.balance import BALANCE
from clicker.engine.economy import calculate_offline_income, calculate_overview_offline_income
from clicker.engine.game_state import GameState, Screen
from clicker.engine.registry import WorldRegistry
from clicker.engine.world_state import effective_offline_cap_hours


@dataclass(frozen=True)
class OfflineResult:
    """What was credited on relaunch, for the offline report."""

    world_id: str = ""
    world_coins: float = 0.0
    general_coins: float = 0.0
    duration_seconds: float = 0.0


def apply_offline(
    last_screen: str,
    last_world_id: str,
    saved_at: dt.datetime,
    state: GameState,
    world_registry: WorldRegistry,
    now: dt.datetime | None = None,
) -> OfflineResult:
    """Credit offline income to ``state`` and report it.

    Quitting from a world screen keeps that world producing at its offline
    percentage up to its (upgraded) cap. Quitting anywhere else trickles
    general coins at a flat rate.
    """
    now = now or dt.datetime.now(dt.timezone.utc)
    elapsed = max((now - saved_at).total_seconds(), 0.0)

    if last_screen == Screen.WORLD.value and last_world_id:
        ws = state.worlds.get(last_world_id)
        world = world_registry.get(last_world_id)
        if ws is None or world is None:
            return OfflineResult(duration_seconds=elapsed)
        cap_hours = effective_offline_cap_hours(ws, world.offline_cap_hours)
        earned = calculate_offline_income(ws.cps, world.offline_percentage, elapsed, cap_hours)
        if earned > 0:
            ws.coins += earned
            ws.total_coins_earned += earned
            totals = state.player.world_total_coins_earned
            totals[last_world_id] = totals.get(last_world_id, 0.0) + earned
        return OfflineResult(world_id=last_world_id, world_coins=earned, duration_seconds=elapsed)

    bal = BALANCE.offline
    gc = calculate_overview_offline_income(bal.overview_rate_per_s, elapsed, bal.overview_cap)
    if gc > 0:
        state.player.add_general_coins(gc)
    return OfflineResult(general_coins=gc, duration_seconds=elapsed)
