"""Save/load — signed on-disk snapshot of the whole game.

On-disk format (JSON envelope)::

    {
      "data": "<base64 of the JSON save document>",
      "signature": "<hex HMAC-SHA256 of the data string>"
    }

The HMAC key is embedded in the program. It deters casual editing and
catches corruption; it is not a secret from a determined player.

Loading never fails on a missing or damaged file: it logs a warning and
hands back a fresh save. Only a file written by a newer schema raises.
"""

from __future__ import annotations

import base64
import binascii
import copy
import datetime as dt
import hmac
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from hashlib import sha256
from pathlib import Path
from typing import Any

from clicker.engine.errors import SaveError, SaveVersionError
from clicker.engine.game_state import GameState, Screen
from clicker.engine.player import Player
from clicker.engine.registry import WorldRegistry
from clicker.engine.world_state import WorldState

logger = logging.getLogger(__name__)

SAVE_DIR = Path(os.environ.get("CLICKER_HOME", Path.home() / ".clicker"))
SAVE_FILE = SAVE_DIR / "save.json"
LOG_FILE = SAVE_DIR / "clicker.log"

CURRENT_VERSION = 1

_HMAC_KEY = b"clicker-save-v1-7d0c41b9e25a46f3b8e1c9027a5d6f14"


@dataclass
class Settings:
    """User preferences stored alongside the game."""

    animations_enabled: bool = True
    active_theme: str = "space"


@dataclass
class SaveFile:
    """Everything persisted between sessions. Rebuilt on every save."""

    version: int = CURRENT_VERSION
    saved_at: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    last_screen: str = Screen.OVERVIEW.value
    last_world_id: str = ""
    player: Player = field(default_factory=Player)
    worlds: dict[str, WorldState] = field(default_factory=dict)
    # achievement id → earned
    achievements: dict[str, bool] = field(default_factory=dict)
    settings: Settings = field(default_factory=Settings)


def default_save_file() -> SaveFile:
    """A fresh save for a first launch (or a save that could not be trusted)."""
    return SaveFile()


# ── Signing ──────────────────────────────────────────────────────


def sign(data: bytes) -> str:
    """Hex HMAC-SHA256 of ``data`` under the embedded key."""
    return hmac.new(_HMAC_KEY, data, sha256).hexdigest()


def verify(data: bytes, signature: str) -> bool:
    """Constant-time check of ``signature`` against ``data``."""
    try:
        given = bytes.fromhex(signature)
    except ValueError:
        return False
    expected = hmac.new(_HMAC_KEY, data, sha256).digest()
    return hmac.compare_digest(expected, given)


# ── Serialisation helpers ────────────────────────────────────────


def _player_to_dict(p: Player) -> dict:
    return {
        "xp": p.xp,
        "level": p.level,
        "general_coins": p.general_coins,
        "lifetime_general_coins": p.lifetime_general_coins,
        "total_clicks": p.total_clicks,
        "total_play_seconds": p.total_play_seconds,
        "world_total_coins_earned": dict(p.world_total_coins_earned),
    }


def _dict_to_player(d: dict) -> Player:
    return Player(
        xp=int(d.get("xp", 0)),
        level=int(d.get("level", 1)),
        general_coins=float(d.get("general_coins", 0.0)),
        lifetime_general_coins=float(d.get("lifetime_general_coins", 0.0)),
        total_clicks=int(d.get("total_clicks", 0)),
        total_play_seconds=float(d.get("total_play_seconds", 0.0)),
        world_total_coins_earned={
            k: float(v) for k, v in (d.get("world_total_coins_earned") or {}).items()
        },
    )


def _world_to_dict(ws: WorldState) -> dict:
    return {
        "world_id": ws.world_id,
        "coins": ws.coins,
        "total_coins_earned": ws.total_coins_earned,
        "cps": ws.cps,
        "buy_on_counts": dict(ws.buy_on_counts),
        "purchased_upgrades": dict(ws.purchased_upgrades),
        "prestige_count": ws.prestige_count,
        "prestige_multiplier": ws.prestige_multiplier,
        "exchange_rate": ws.exchange_rate,
        "offline_cap_upgrade_level": ws.offline_cap_upgrade_level,
        "completion_percent": ws.completion_percent,
        "total_clicks": ws.total_clicks,
    }


def _dict_to_world(world_id: str, d: dict) -> WorldState:
    return WorldState(
        world_id=d.get("world_id", world_id),
        coins=float(d.get("coins", 0.0)),
        total_coins_earned=float(d.get("total_coins_earned", 0.0)),
        cps=float(d.get("cps", 0.0)),
        buy_on_counts={k: int(v) for k, v in (d.get("buy_on_counts") or {}).items()},
        purchased_upgrades={k: bool(v) for k, v in (d.get("purchased_upgrades") or {}).items()},
        prestige_count=int(d.get("prestige_count", 0)),
        prestige_multiplier=float(d.get("prestige_multiplier", 1.0)),
        exchange_rate=float(d.get("exchange_rate", 0.0)),
        offline_cap_upgrade_level=int(d.get("offline_cap_upgrade_level", 0)),
        completion_percent=float(d.get("completion_percent", 0.0)),
        total_clicks=int(d.get("total_clicks", 0)),
    )


def _save_to_dict(sf: SaveFile) -> dict:
    return {
        "version": sf.version,
        "saved_at": sf.saved_at.isoformat(),
        "last_screen": sf.last_screen,
        "last_world_id": sf.last_world_id,
        "player": _player_to_dict(sf.player),
        "worlds": {wid: _world_to_dict(ws) for wid, ws in sf.worlds.items()},
        "achievements": dict(sf.achievements),
        "settings": {
            "animations_enabled": sf.settings.animations_enabled,
            "active_theme": sf.settings.active_theme,
        },
    }


def _dict_to_save(d: dict) -> SaveFile:
    settings_d = d.get("settings") or {}
    saved_at = dt.datetime.fromisoformat(d["saved_at"]) if d.get("saved_at") else dt.datetime.now(dt.timezone.utc)
    if saved_at.tzinfo is None:
        saved_at = saved_at.replace(tzinfo=dt.timezone.utc)
    return SaveFile(
        version=int(d.get("version", CURRENT_VERSION)),
        saved_at=saved_at,
        last_screen=str(d.get("last_screen", Screen.OVERVIEW.value)),
        last_world_id=str(d.get("last_world_id", "")),
        player=_dict_to_player(d.get("player") or {}),
        worlds={wid: _dict_to_world(wid, wd) for wid, wd in (d.get("worlds") or {}).items()},
        achievements={k: bool(v) for k, v in (d.get("achievements") or {}).items()},
        settings=Settings(
            animations_enabled=bool(settings_d.get("animations_enabled", True)),
            active_theme=str(settings_d.get("active_theme", "space")),
        ),
    )


# ── Migration ────────────────────────────────────────────────────


def migrate(data: dict[str, Any]) -> dict[str, Any]:
    """Bring a decoded save document up to ``CURRENT_VERSION`` in place.

    Each schema bump adds one gated step here, e.g.::

        if version < 2:
            data["worlds"] = _rename_fields_v2(data["worlds"])
            version = 2
    """
    version = int(data.get("version", CURRENT_VERSION))
    if version > CURRENT_VERSION:
        raise SaveVersionError(version, CURRENT_VERSION)
    data["version"] = CURRENT_VERSION
    return data


# ── Snapshot / state reconstruction ──────────────────────────────


def snapshot(
    state: GameState,
    earned: dict[str, bool],
    settings: Settings,
    now: dt.datetime | None = None,
) -> SaveFile:
    """Capture live state as a SaveFile that shares no mutable data with it."""
    return SaveFile(
        version=CURRENT_VERSION,
        saved_at=now or dt.datetime.now(dt.timezone.utc),
        last_screen=state.last_screen,
        last_world_id=state.last_world_id,
        player=copy.deepcopy(state.player),
        worlds={wid: copy.deepcopy(ws) for wid, ws in state.worlds.items()},
        achievements={k: v for k, v in earned.items() if v},
        settings=copy.deepcopy(settings),
    )


def game_state_from_save(sf: SaveFile, world_registry: WorldRegistry) -> GameState:
    """Rebuild a GameState with an entry for every registered world.

    Worlds missing from the save (new since it was written) start fresh
    with their base exchange rate, as do saved worlds without a usable rate.
    """
    state = GameState(
        player=copy.deepcopy(sf.player),
        last_screen=sf.last_screen,
        last_world_id=sf.last_world_id,
        active_world_id=sf.last_world_id,
    )
    for world in world_registry:
        saved = sf.worlds.get(world.id)
        if saved is not None:
            ws = copy.deepcopy(saved)
            ws.world_id = world.id
            if ws.exchange_rate <= 0:
                ws.exchange_rate = world.base_exchange_rate
        else:
            ws = WorldState.fresh(world.id, world.base_exchange_rate)
        state.worlds[world.id] = ws
    return state


# ── Encoding ─────────────────────────────────────────────────────


def encode_save(sf: SaveFile, signed: bool = True) -> bytes:
    """Serialise a SaveFile; ``signed`` wraps it in the HMAC envelope."""
    document = json.dumps(_save_to_dict(sf), indent=2)
    if not signed:
        return document.encode("utf-8")
    encoded = base64.b64encode(document.encode("utf-8")).decode("ascii")
    envelope = {"data": encoded, "signature": sign(encoded.encode("ascii"))}
    return json.dumps(envelope, indent=2).encode("utf-8")


def decode_save(raw: bytes, signed: bool = True, source: str = "<bytes>") -> SaveFile:
    """Parse saved bytes, falling back to a fresh save on any corruption.

    Raises SaveVersionError only for a document from a newer schema.
    """
    try:
        outer = json.loads(raw)
    except (RecursionError, UnicodeDecodeError, ValueError):
        logger.warning("unrecognised save format at %s, starting fresh", source)
        return default_save_file()

    if signed:
        if not isinstance(outer, dict) or not isinstance(outer.get("data"), str) or not outer["data"]:
            logger.warning("unrecognised save format at %s, starting fresh", source)
            return default_save_file()
        signature = outer.get("signature")
        encoded = outer["data"]
        if not isinstance(signature, str) or not verify(encoded.encode("ascii", "replace"), signature):
            logger.warning(
                "signature mismatch at %s, file may have been tampered with, starting fresh", source
            )
            return default_save_file()
        try:
            payload = base64.b64decode(encoded, validate=True)
            data = json.loads(payload)
        except (binascii.Error, RecursionError, UnicodeDecodeError, ValueError) as exc:
            logger.warning("corrupt save payload at %s, starting fresh: %s", source, exc)
            return default_save_file()
    else:
        data = outer

    if not isinstance(data, dict):
        logger.warning("corrupt save payload at %s, starting fresh", source)
        return default_save_file()

    try:
        version = int(data.get("version", CURRENT_VERSION))
    except (TypeError, ValueError):
        logger.warning("corrupt save version at %s, starting fresh", source)
        return default_save_file()
    if version > CURRENT_VERSION:
        raise SaveVersionError(version, CURRENT_VERSION)

    try:
        return _dict_to_save(migrate(data))
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("corrupt save payload at %s, starting fresh: %s", source, exc)
        return default_save_file()


# ── Public API ───────────────────────────────────────────────────


def _atomic_write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name, dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def save_game(
    state: GameState,
    earned: dict[str, bool],
    settings: Settings,
    path: Path | None = None,
) -> SaveFile:
    """Snapshot live state and write it as a signed envelope. Returns the snapshot."""
    path = path or SAVE_FILE
    sf = snapshot(state, earned, settings)
    try:
        _atomic_write(path, encode_save(sf))
    except OSError as exc:
        raise SaveError(f"could not write save to {path}: {exc}") from exc
    logger.info("saved game to %s", path)
    return sf


def load_game(path: Path | None = None) -> SaveFile:
    """Load the save at ``path``; missing or corrupt files yield a fresh save."""
    path = path or SAVE_FILE
    if not path.exists():
        logger.warning("no save file at %s, starting fresh", path)
        return default_save_file()
    try:
        raw = path.read_bytes()
    except OSError as exc:
        logger.warning("could not read save at %s, starting fresh: %s", path, exc)
        return default_save_file()
    return decode_save(raw, source=str(path))
