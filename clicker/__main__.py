"""Entry point for the clicker core: python -m clicker"""

from __future__ import annotations

import argparse
import datetime as dt
import logging
from pathlib import Path

from rich.console import Console

from clicker.engine.game import Engine
from clicker.engine.offline import apply_offline
from clicker.engine.registry import default_achievement_registry, default_world_registry
from clicker.engine.errors import SaveError
from clicker.engine.save import LOG_FILE, SAVE_FILE, game_state_from_save, load_game, save_game
from clicker.logging_config import configure_logging
from clicker.report import render_offline, render_status

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="clicker", description="Idle clicker — status report")
    parser.add_argument("--save", type=Path, default=SAVE_FILE, help=f"Save file (default: {SAVE_FILE})")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $CLICKER_LOG_LEVEL or WARNING)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level, LOG_FILE)

    worlds = default_world_registry()
    achievements = default_achievement_registry()

    save_file = load_game(args.save)
    state = game_state_from_save(save_file, worlds)
    offline = apply_offline(
        save_file.last_screen,
        save_file.last_world_id,
        save_file.saved_at,
        state,
        worlds,
        dt.datetime.now(dt.timezone.utc),
    )
    engine = Engine(state, worlds, achievements, dict(save_file.achievements))
    for world_id in state.worlds:
        engine.update_completion(world_id)

    console = Console()
    console.print(render_offline(offline, worlds))
    console.print(render_status(state, worlds))

    try:
        save_game(state, engine.earned, save_file.settings, args.save)
    except SaveError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
