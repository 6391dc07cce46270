"""Tests for the signed save format and state reconstruction."""

import base64
import json
import logging

import pytest

from clicker.engine.errors import SaveError, SaveVersionError
from clicker.engine.game import Engine
from clicker.engine.registry import default_achievement_registry, default_world_registry
from clicker.engine.save import (
    CURRENT_VERSION,
    SaveFile,
    Settings,
    decode_save,
    default_save_file,
    encode_save,
    game_state_from_save,
    load_game,
    migrate,
    save_game,
    sign,
    snapshot,
)
from clicker.engine.world_state import WorldState


def _played_engine() -> Engine:
    worlds = default_world_registry()
    state = game_state_from_save(default_save_file(), worlds)
    eng = Engine(state, worlds, default_achievement_registry())
    for _ in range(40):
        eng.handle_click("terra")
    eng.purchase_buy_on("terra", "auto_miner")
    eng.handle_click("aqua")
    eng.execute_exchange_boost("terra")
    eng.tick(5.0)
    state.last_screen = "world"
    state.last_world_id = "terra"
    return eng


# ── Round trip ───────────────────────────────────────────────────────────────

def test_save_then_load_restores_everything(tmp_path):
    eng = _played_engine()
    settings = Settings(animations_enabled=False, active_theme="ocean")
    path = tmp_path / "save.json"

    written = save_game(eng.state, eng.earned, settings, path)
    loaded = load_game(path)

    assert loaded.version == CURRENT_VERSION
    assert loaded.saved_at == written.saved_at
    assert loaded.last_screen == "world"
    assert loaded.last_world_id == "terra"
    assert loaded.player == eng.state.player
    assert loaded.worlds == eng.state.worlds
    assert loaded.achievements == {"first_click": True, "first_buyon": True, "worldhopper": True}
    assert loaded.settings == settings


def test_rebuilt_state_matches_live_state(tmp_path):
    eng = _played_engine()
    path = tmp_path / "save.json"
    save_game(eng.state, eng.earned, Settings(), path)

    state = game_state_from_save(load_game(path), default_world_registry())

    assert state.player == eng.state.player
    assert state.worlds == eng.state.worlds
    assert state.active_world_id == "terra"


def test_file_is_a_signed_envelope(tmp_path):
    path = tmp_path / "save.json"
    save_game(_played_engine().state, {}, Settings(), path)
    envelope = json.loads(path.read_text())
    assert set(envelope) == {"data", "signature"}
    assert envelope["signature"] == sign(envelope["data"].encode("ascii"))
    payload = json.loads(base64.b64decode(envelope["data"]))
    assert payload["version"] == CURRENT_VERSION


def test_unsigned_variant_round_trips():
    sf = snapshot(_played_engine().state, {"first_click": True}, Settings())
    raw = encode_save(sf, signed=False)
    assert json.loads(raw)["version"] == CURRENT_VERSION
    assert decode_save(raw, signed=False) == sf


def test_snapshot_shares_no_mutable_data():
    eng = _played_engine()
    sf = snapshot(eng.state, eng.earned, Settings())
    eng.state.worlds["terra"].buy_on_counts["auto_miner"] = 99
    eng.state.player.world_total_coins_earned["terra"] = -1
    eng.earned["level_5"] = True
    assert sf.worlds["terra"].buy_on_counts["auto_miner"] == 1
    assert sf.player.world_total_coins_earned["terra"] > 0
    assert "level_5" not in sf.achievements


# ── Degradation ──────────────────────────────────────────────────────────────

def test_missing_file_gives_default_with_warning(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        sf = load_game(tmp_path / "nope.json")
    assert sf == SaveFile(saved_at=sf.saved_at)
    assert "no save file" in caplog.text


def test_garbage_gives_default(caplog):
    with caplog.at_level(logging.WARNING):
        sf = decode_save(b"\x00not json at all")
    assert sf.player.level == 1
    assert sf.worlds == {}
    assert "unrecognised" in caplog.text


def test_tampered_payload_is_rejected(caplog):
    sf = snapshot(_played_engine().state, {}, Settings())
    envelope = json.loads(encode_save(sf))
    payload = json.loads(base64.b64decode(envelope["data"]))
    payload["player"]["general_coins"] = 1e12
    envelope["data"] = base64.b64encode(json.dumps(payload).encode()).decode()

    with caplog.at_level(logging.WARNING):
        loaded = decode_save(json.dumps(envelope).encode())

    assert loaded.player.general_coins == 0
    assert "signature mismatch" in caplog.text


def test_forged_signature_is_rejected():
    sf = snapshot(_played_engine().state, {}, Settings())
    envelope = json.loads(encode_save(sf))
    envelope["signature"] = "00" * 32
    loaded = decode_save(json.dumps(envelope).encode())
    assert loaded.worlds == {}


def test_missing_signature_is_rejected():
    sf = snapshot(_played_engine().state, {}, Settings())
    envelope = json.loads(encode_save(sf))
    del envelope["signature"]
    assert decode_save(json.dumps(envelope).encode()).worlds == {}


def test_signed_bad_base64_is_rejected(caplog):
    data = "!!!not-base64!!!"
    raw = json.dumps({"data": data, "signature": sign(data.encode())}).encode()
    with caplog.at_level(logging.WARNING):
        assert decode_save(raw).worlds == {}
    assert "corrupt" in caplog.text


def test_signed_non_json_payload_is_rejected():
    data = base64.b64encode(b"not json").decode()
    raw = json.dumps({"data": data, "signature": sign(data.encode())}).encode()
    assert decode_save(raw).worlds == {}


def test_future_version_raises():
    raw = encode_save(SaveFile(version=CURRENT_VERSION + 1))
    with pytest.raises(SaveVersionError) as exc:
        decode_save(raw)
    assert exc.value.version == CURRENT_VERSION + 1


def test_write_failure_raises_save_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("in the way")
    with pytest.raises(SaveError):
        save_game(_played_engine().state, {}, Settings(), blocker / "save.json")


# ── Migration and new worlds ─────────────────────────────────────────────────

def test_migrate_current_version_is_a_no_op():
    data = {"version": CURRENT_VERSION, "last_screen": "world"}
    assert migrate(data) == {"version": CURRENT_VERSION, "last_screen": "world"}


def test_migrate_fills_missing_version():
    assert migrate({})["version"] == CURRENT_VERSION


def test_migrate_rejects_future_version():
    with pytest.raises(SaveVersionError):
        migrate({"version": CURRENT_VERSION + 5})


def test_new_world_starts_fresh_with_base_rate():
    sf = default_save_file()
    sf.worlds["terra"] = WorldState(world_id="terra", coins=42, exchange_rate=0.005)
    sf.worlds["retired"] = WorldState(world_id="retired", coins=1)

    state = game_state_from_save(sf, default_world_registry())

    assert list(state.worlds) == ["terra", "aqua"]
    assert state.worlds["terra"].coins == 42
    assert state.worlds["aqua"] == WorldState(world_id="aqua", exchange_rate=0.0008)


def test_default_save_file():
    sf = default_save_file()
    assert sf.version == 1
    assert sf.last_screen == "overview"
    assert sf.settings == Settings(animations_enabled=True, active_theme="space")
    assert sf.achievements == {}


def test_deeply_nested_file_gives_default(tmp_path, caplog):
    path = tmp_path / "save.json"
    path.write_bytes(b"[" * 100_000 + b"]" * 100_000)
    with caplog.at_level(logging.WARNING):
        sf = load_game(path)
    assert sf.worlds == {}
    assert "unrecognised" in caplog.text


def test_deeply_nested_signed_payload_gives_default():
    data = base64.b64encode(b"[" * 100_000 + b"]" * 100_000).decode()
    raw = json.dumps({"data": data, "signature": sign(data.encode())}).encode()
    assert decode_save(raw).worlds == {}


def test_saved_world_without_rate_gets_base_rate():
    document = {"version": CURRENT_VERSION, "worlds": {"terra": {"coins": 5.0}}}
    data = base64.b64encode(json.dumps(document).encode()).decode()
    raw = json.dumps({"data": data, "signature": sign(data.encode())}).encode()

    state = game_state_from_save(decode_save(raw), default_world_registry())

    terra = state.worlds["terra"]
    assert terra.coins == 5.0
    assert terra.exchange_rate == 0.001
