import json
from pathlib import Path

from gridbattle.presentation.cli import app


def test_parse_args_defaults() -> None:
    args = app.parse_args(["--stage", "forest_edge"])

    assert args.stage == "forest_edge"
    assert args.heroes is None
    assert args.seed is None
    assert not args.json


def test_main_prints_json_log(capsys) -> None:
    exit_code = app.main(["--stage", "forest_edge", "--heroes", "blood_knight,quester", "--seed", "5", "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["seed"] == 5
    assert payload["winner"] in ("heroes", "enemies")
    assert payload["events"][0]["type"] == "battle_start"
    assert payload["events"][-1]["type"] in ("victory", "defeat")


def test_main_is_reproducible_for_a_seed(capsys) -> None:
    argv = ["--stage", "forest_edge", "--heroes", "ironheart", "--seed", "77", "--json"]
    app.main(argv)
    first = capsys.readouterr().out
    app.main(argv)
    second = capsys.readouterr().out

    assert first == second


def test_main_prints_text_report(capsys) -> None:
    exit_code = app.main(["--stage", "forest_edge", "--heroes", "witch_hunter", "--seed", "3"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "=== Stage forest_edge (seed 3) ===" in out
    assert "=== Final board ===" in out
    assert "Winner:" in out


def test_main_reports_unknown_stage(capsys) -> None:
    exit_code = app.main(["--stage", "nowhere", "--seed", "1"])

    assert exit_code == 2
    assert "error: Stage 'nowhere' not found." in capsys.readouterr().err


def test_main_reports_bad_settings(tmp_path: Path, capsys) -> None:
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"grid_width": 0}), encoding="utf-8")

    exit_code = app.main(["--stage", "forest_edge", "--seed", "1", "--config", str(settings)])

    assert exit_code == 2
    assert "grid_width" in capsys.readouterr().err
