"""Clicker Web — Flask server that wraps the game engine.

Exposes a JSON API for game actions. The game loop ticks are driven
lazily: each API request catches up on elapsed time before returning the
current state.
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
import time
from pathlib import Path

from flask import Flask, jsonify

from clicker.data.balance import BALANCE
from clicker.engine.economy import cost_for_next, format_coins, format_coins_bare, format_cps
from clicker.engine.errors import SaveError
from clicker.engine.game import Engine, EventType
from clicker.engine.game_state import Screen
from clicker.engine.offline import OfflineResult, apply_offline
from clicker.engine.player import level_gate_check, xp_for_level
from clicker.engine.registry import default_achievement_registry, default_world_registry
from clicker.engine.save import SAVE_FILE, Settings, game_state_from_save, load_game, save_game

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------

app = Flask(__name__)
app.config["SAVE_PATH"] = SAVE_FILE

# ---------------------------------------------------------------------------
# In-memory game session (single-player)
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_engine: Engine | None = None
_settings: Settings | None = None
_offline: OfflineResult | None = None
_last_tick: float = 0.0
_pending_notifications: list[dict] = []


def _save_path() -> Path:
    return Path(app.config["SAVE_PATH"])


def _ensure_game() -> None:
    """Load the save and apply offline income if not yet started."""
    global _engine, _settings, _offline, _last_tick
    if _engine is not None:
        return
    worlds = default_world_registry()
    save_file = load_game(_save_path())
    state = game_state_from_save(save_file, worlds)
    _offline = apply_offline(
        save_file.last_screen,
        save_file.last_world_id,
        save_file.saved_at,
        state,
        worlds,
        dt.datetime.now(dt.timezone.utc),
    )
    _settings = save_file.settings
    _engine = Engine(state, worlds, default_achievement_registry(), dict(save_file.achievements))
    _last_tick = time.time()


def reset_game() -> None:
    """Drop the in-memory session so the next request reloads from disk."""
    global _engine, _settings, _offline, _last_tick
    with _lock:
        _engine = None
        _settings = None
        _offline = None
        _last_tick = 0.0
        _pending_notifications.clear()


def _autosave() -> bool:
    assert _engine is not None and _settings is not None
    try:
        save_game(_engine.state, _engine.earned, _settings, _save_path())
    except SaveError as exc:
        logger.error("autosave failed: %s", exc)
        return False
    return True


def _do_ticks() -> None:
    """Catch up game ticks since the last call."""
    assert _engine is not None
    global _last_tick
    now = time.time()
    elapsed = now - _last_tick
    if elapsed <= 0:
        return
    # Cap catch-up to avoid mega-ticks after long AFK
    elapsed = min(elapsed, BALANCE.timing.max_catch_up_s)
    _last_tick = now

    for event in _engine.tick(elapsed):
        if event.type == EventType.AUTOSAVE:
            _autosave()
        elif event.type == EventType.LEVEL_UP:
            _pending_notifications.append({"type": "level_up", "level": event.new_level})
        elif event.type == EventType.ACHIEVEMENT_UNLOCKED:
            ach = _engine.achievement_registry.get(event.achievement_id)
            _pending_notifications.append({
                "type": "achievement",
                "id": event.achievement_id,
                "name": ach.name if ach else event.achievement_id,
            })


def _world_json(world_id: str) -> dict:
    assert _engine is not None
    engine = _engine
    world = engine.world_registry.get(world_id)
    ws = engine.state.worlds[world_id]
    reg = engine.upgrade_registries[world_id]
    player = engine.state.player

    buy_ons = []
    for b in reg.list_buy_ons():
        count = ws.buy_on_counts.get(b.id, 0)
        cost = cost_for_next(b, count)
        buy_ons.append({
            "id": b.id,
            "name": b.name,
            "description": b.description,
            "count": count,
            "cost": format_coins_bare(cost),
            "cost_raw": cost,
            "can_afford": ws.coins >= cost,
            "unlocked": level_gate_check(player, b.level_requirement),
        })

    upgrades = []
    for u in reg.list_upgrades():
        upgrades.append({
            "id": u.id,
            "name": u.name,
            "description": u.description,
            "cost": format_coins_bare(u.cost),
            "cost_raw": u.cost,
            "purchased": ws.purchased_upgrades.get(u.id, False),
            "can_afford": ws.coins >= u.cost,
            "unlocked": level_gate_check(player, u.level_requirement),
        })

    current, target = engine.prestige_progress(world_id)
    preview = engine.exchange_boost_preview(world_id)
    return {
        "id": world_id,
        "name": world.name if world else world_id,
        "coins": format_coins(ws.coins, world.coin_symbol if world else ""),
        "coins_raw": ws.coins,
        "total_coins_earned": ws.total_coins_earned,
        "cps": f"{format_cps(ws.cps)}/s",
        "cps_raw": ws.cps,
        "click_power": engine.click_power(world_id),
        "prestige_count": ws.prestige_count,
        "prestige_multiplier": ws.prestige_multiplier,
        "can_prestige": engine.can_prestige(world_id),
        "prestige_progress": {"current": current, "threshold": target},
        "exchange_rate": ws.exchange_rate,
        "exchange_preview": {
            "general_coins": preview.general_coins_earned,
            "cost": preview.world_coins_cost,
        },
        "completion_percent": ws.completion_percent * 100,
        "buy_ons": buy_ons,
        "upgrades": upgrades,
    }


def _state_json() -> dict:
    """Build the JSON blob sent to the frontend."""
    assert _engine is not None
    player = _engine.state.player

    notifs = list(_pending_notifications)
    _pending_notifications.clear()

    offline = None
    if _offline is not None:
        offline = {
            "world_id": _offline.world_id,
            "world_coins": _offline.world_coins,
            "general_coins": _offline.general_coins,
            "duration_seconds": _offline.duration_seconds,
        }

    return {
        "player": {
            "level": player.level,
            "xp": player.xp,
            "xp_next_level": xp_for_level(player.level + 1),
            "general_coins": format_coins_bare(player.general_coins),
            "general_coins_raw": player.general_coins,
            "total_clicks": player.total_clicks,
            "play_seconds": player.total_play_seconds,
        },
        "worlds": [_world_json(wid) for wid in _engine.state.worlds],
        "achievements": sorted(k for k, v in _engine.earned.items() if v),
        "offline": offline,
        "notifications": notifs,
        "server_time": time.time(),
    }


def _unknown_world(world_id: str):
    return jsonify({"error": f"Unknown world: {world_id}"}), 404


def _enter_world(world_id: str) -> None:
    assert _engine is not None
    state = _engine.state
    state.last_screen = Screen.WORLD.value
    state.last_world_id = world_id
    state.active_world_id = world_id


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.route("/api/state")
def api_state():
    with _lock:
        _ensure_game()
        _do_ticks()
        return jsonify(_state_json())


@app.route("/api/action/click/<world_id>", methods=["POST"])
def action_click(world_id: str):
    with _lock:
        _ensure_game()
        assert _engine is not None
        if world_id not in _engine.state.worlds:
            return _unknown_world(world_id)
        _do_ticks()
        _enter_world(world_id)
        earned = _engine.handle_click(world_id)
        data = _state_json()
        data["click_earned"] = earned
        return jsonify(data)


@app.route("/api/action/buy/<world_id>/<buy_on_id>", methods=["POST"])
def action_buy(world_id: str, buy_on_id: str):
    with _lock:
        _ensure_game()
        assert _engine is not None
        if world_id not in _engine.state.worlds:
            return _unknown_world(world_id)
        _do_ticks()
        _enter_world(world_id)
        cost, result = _engine.purchase_buy_on(world_id, buy_on_id)
        data = _state_json()
        data["purchase_result"] = result
        data["cost"] = cost
        return jsonify(data)


@app.route("/api/action/upgrade/<world_id>/<upgrade_id>", methods=["POST"])
def action_upgrade(world_id: str, upgrade_id: str):
    with _lock:
        _ensure_game()
        assert _engine is not None
        if world_id not in _engine.state.worlds:
            return _unknown_world(world_id)
        _do_ticks()
        _enter_world(world_id)
        cost, result = _engine.purchase_upgrade(world_id, upgrade_id)
        data = _state_json()
        data["purchase_result"] = result
        data["cost"] = cost
        return jsonify(data)


@app.route("/api/action/prestige/<world_id>", methods=["POST"])
def action_prestige(world_id: str):
    with _lock:
        _ensure_game()
        assert _engine is not None
        if world_id not in _engine.state.worlds:
            return _unknown_world(world_id)
        _do_ticks()
        reward, result = _engine.execute_prestige(world_id)
        if result:
            _autosave()
        data = _state_json()
        data["prestige_result"] = result
        data["general_coins_earned"] = reward.general_coins_earned
        data["new_multiplier"] = reward.prestige_multiplier
        return jsonify(data)


@app.route("/api/action/exchange/<world_id>", methods=["POST"])
def action_exchange(world_id: str):
    with _lock:
        _ensure_game()
        assert _engine is not None
        if world_id not in _engine.state.worlds:
            return _unknown_world(world_id)
        _do_ticks()
        boost, result = _engine.execute_exchange_boost(world_id)
        data = _state_json()
        data["exchange_result"] = result
        data["general_coins_earned"] = boost.general_coins_earned
        data["world_coins_cost"] = boost.world_coins_cost
        return jsonify(data)


@app.route("/api/action/save", methods=["POST"])
def action_save():
    with _lock:
        _ensure_game()
        _do_ticks()
        return jsonify({"saved": _autosave()})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run_server(host: str = "127.0.0.1", port: int = 5000, debug: bool = False) -> None:
    """Start the Flask development server."""
    app.run(host=host, port=port, debug=debug, use_reloader=False)
