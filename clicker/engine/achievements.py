"""Achievement tracker — pure evaluation of unearned unlock conditions."""

from __future__ import annotations

from typing import Mapping

from clicker.engine.game_state import GameState
from clicker.engine.registry import AchievementRegistry


def check_achievements(
    state: GameState,
    registry: AchievementRegistry,
    earned: Mapping[str, bool],
) -> list[str]:
    """Return ids of achievements whose condition now holds, in registration order.

    Does not mutate ``earned``; the engine records unlocks and applies rewards.
    """
    unlocked: list[str] = []
    for ach in registry:
        if earned.get(ach.id, False):
            continue
        if ach.condition(state):
            unlocked.append(ach.id)
    return unlocked
