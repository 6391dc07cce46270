"""Tests for the command-line status report."""

from unittest.mock import patch

from clicker.__main__ import main
from clicker.engine.save import encode_save, load_game


@patch("clicker.__main__.configure_logging")
def test_first_run_writes_a_save(_configure, tmp_path, capsys):
    path = tmp_path / "save.json"
    assert main(["--save", str(path)]) == 0
    out = capsys.readouterr().out
    assert "While you were away" in out
    assert "Terra" in out
    assert "Aqua" in out
    assert path.exists()
    assert set(load_game(path).worlds) == {"terra", "aqua"}


@patch("clicker.__main__.configure_logging")
def test_report_reflects_saved_progress(_configure, tmp_path, capsys):
    path = tmp_path / "save.json"
    main(["--save", str(path)])
    capsys.readouterr()

    sf = load_game(path)
    sf.worlds["terra"].prestige_count = 2
    path.write_bytes(encode_save(sf))

    main(["--save", str(path)])
    out = capsys.readouterr().out
    assert "#2" in out
