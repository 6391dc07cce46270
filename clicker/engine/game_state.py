"""Game state — single source of truth for the whole save."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from clicker.engine.player import Player
from clicker.engine.world_state import WorldState


class Screen(str, Enum):
    """Which screen the player was on (drives offline income on relaunch)."""

    OVERVIEW = "overview"
    WORLD = "world"
    DASHBOARD = "dashboard"
    OFFLINE_REPORT = "offline_report"


@dataclass
class GameState:
    """Player plus every world's state."""

    player: Player = field(default_factory=Player)
    # world id → state
    worlds: dict[str, WorldState] = field(default_factory=dict)

    # ── Navigation ───────────────────────────────────────
    last_screen: str = Screen.OVERVIEW.value
    last_world_id: str = ""
    active_world_id: str = ""

    def total_buy_ons(self) -> int:
        """Buy-ons owned across all worlds."""
        return sum(ws.total_buy_ons() for ws in self.worlds.values())

    def total_prestiges(self) -> int:
        """Prestiges performed across all worlds."""
        return sum(ws.prestige_count for ws in self.worlds.values())
