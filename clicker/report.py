"""Status report — rich text summary printed by the CLI driver."""

from __future__ import annotations

from rich.text import Text

from clicker.engine.economy import format_coins, format_coins_bare, format_cps
from clicker.engine.game_state import GameState
from clicker.engine.offline import OfflineResult
from clicker.engine.player import xp_for_level
from clicker.engine.prestige import threshold_progress
from clicker.engine.registry import WorldRegistry


def _format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def render_offline(result: OfflineResult, world_registry: WorldRegistry) -> Text:
    text = Text()
    text.append("  ─── While you were away ───\n", style="bold yellow")
    text.append(f"  Away for {_format_duration(result.duration_seconds)}\n", style="dim")
    if result.world_id:
        world = world_registry.get(result.world_id)
        name = world.name if world else result.world_id
        symbol = world.coin_symbol if world else ""
        text.append(f"  {name}: ", style="dim")
        text.append(f"+{format_coins(result.world_coins, symbol)}\n", style="bold green")
    else:
        text.append("  General coins: ", style="dim")
        text.append(f"+{format_coins_bare(result.general_coins)}\n", style="bold green")
    return text


def render_status(state: GameState, world_registry: WorldRegistry) -> Text:
    """Player summary followed by one block per registered world."""
    text = Text()
    player = state.player

    text.append(f"  === Level {player.level} ===\n", style="bold cyan")
    text.append("  XP: ", style="dim")
    text.append(f"{player.xp}/{xp_for_level(player.level + 1)}\n", style="cyan")
    text.append("  General coins: ", style="dim")
    text.append(f"{format_coins_bare(player.general_coins)}\n", style="bold yellow")
    text.append("\n")

    for world in world_registry:
        ws = state.worlds.get(world.id)
        if ws is None:
            continue
        text.append(f"  ─── {world.name} ───\n", style=f"bold {world.accent_color}")
        text.append("  Coins: ", style="dim")
        text.append(f"{format_coins(ws.coins, world.coin_symbol)}\n", style="bold green")
        text.append("  Income: ", style="dim")
        text.append(f"{format_cps(ws.cps)}/s\n", style="green")
        text.append("  Prestige: ", style="dim")
        text.append(f"#{ws.prestige_count} (x{ws.prestige_multiplier:.2f})\n", style="yellow")
        text.append("  Completion: ", style="dim")
        text.append(f"{ws.completion_percent * 100:.0f}%\n", style="magenta")

        progress = threshold_progress(ws, world.prestige_threshold)
        if progress is not None:
            current, target = progress
            text.append(
                f"  Next prestige: {format_coins_bare(current)}/{format_coins_bare(target)}\n",
                style="dim",
            )
        text.append("\n")

    return text
