import json
from pathlib import Path

import pytest

from gridbattle.data.errors import DataLoadError, DataReferenceError, DataValidationError
from gridbattle.data.repositories import AbilitiesRepository, StagesRepository, UnitsRepository
from gridbattle.domain.defs import AoePattern, EffectType, StatusEffectType, TargetType


def test_abilities_repo_parses_effects(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "abilities.json",
        {
            "searing_arc": {
                "name": "Searing Arc",
                "type": "offensive",
                "range": 3,
                "cooldown": 4,
                "effects": [
                    {"type": "damage", "target_type": "aoe", "value": 20, "pattern": "fireball"},
                    {"type": "status", "target_type": "aoe", "status_type": "burn", "duration": 2, "damage_per_tick": 5},
                ],
            },
            "war_cry": {
                "name": "War Cry",
                "type": "support",
                "range": 0,
                "cooldown": 5,
                "description": "Raises allied damage.",
                "effects": [
                    {
                        "type": "buff",
                        "target_type": "aoe",
                        "duration": 3,
                        "stat_modifier": {"stat": "damage", "value": 25, "is_percent": True},
                    }
                ],
            },
        },
    )

    repo = AbilitiesRepository(base_path=definitions_dir)

    arc = repo.get("searing_arc")
    assert arc.range == 3
    assert arc.effects[0].pattern is AoePattern.FIREBALL
    assert arc.effects[1].status_type is StatusEffectType.BURN
    assert arc.effects[1].damage_per_tick == 5
    cry = repo.get("war_cry")
    assert cry.effects[0].type is EffectType.BUFF
    assert cry.effects[0].target_type is TargetType.AOE
    assert cry.effects[0].stat_modifier.is_percent
    assert [ability.id for ability in repo.all()] == ["searing_arc", "war_cry"]


@pytest.mark.parametrize(
    ("effect", "message"),
    [
        ({"type": "damage", "target_type": "enemy"}, "requires a value"),
        ({"type": "status", "target_type": "enemy"}, "requires a status_type"),
        ({"type": "buff", "target_type": "aoe"}, "requires a stat_modifier"),
        ({"type": "status", "target_type": "enemy", "status_type": "glitter"}, "must be one of"),
        ({"type": "damage", "target_type": "everyone", "value": 1}, "must be one of"),
        ({"type": "damage", "target_type": "enemy", "value": 1, "colour": "red"}, "unknown fields"),
        (
            {"type": "buff", "target_type": "aoe", "stat_modifier": {"stat": "hp", "value": 5}},
            "stat",
        ),
    ],
)
def test_abilities_repo_rejects_bad_effects(tmp_path: Path, effect: dict, message: str) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "abilities.json",
        {"broken": {"name": "Broken", "type": "offensive", "range": 1, "cooldown": 1, "effects": [effect]}},
    )

    with pytest.raises(DataValidationError, match=message):
        AbilitiesRepository(base_path=definitions_dir).get("broken")


def test_abilities_repo_requires_effects(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "abilities.json",
        {"empty": {"name": "Empty", "type": "support", "range": 0, "cooldown": 0, "effects": []}},
    )

    with pytest.raises(DataValidationError, match="non-empty"):
        AbilitiesRepository(base_path=definitions_dir).all()


def test_units_repo_loads_templates_by_side(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _seed_abilities(definitions_dir)
    _write_json(
        definitions_dir / "units.json",
        {
            "squire": _unit_payload("hero", abilities=["jab"]),
            "rat": _unit_payload("enemy", lifesteal=0.1),
        },
    )

    repo = UnitsRepository(base_path=definitions_dir, abilities_repo=AbilitiesRepository(base_path=definitions_dir))

    assert [unit.id for unit in repo.by_side("hero")] == ["squire"]
    assert repo.get("squire").ability_ids == ("jab",)
    rat = repo.get("rat")
    assert rat.lifesteal == 0.1
    assert rat.penetration == 0.0


def test_units_repo_rejects_unknown_ability(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _seed_abilities(definitions_dir)
    _write_json(definitions_dir / "units.json", {"squire": _unit_payload("hero", abilities=["missing"])})

    repo = UnitsRepository(base_path=definitions_dir, abilities_repo=AbilitiesRepository(base_path=definitions_dir))
    with pytest.raises(DataReferenceError, match="missing"):
        repo.all()


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"side": "neutral"}, "side"),
        ({"hp": 0}, "hp must be positive"),
        ({"speed": -5}, "must be >= 0"),
        ({"evasion": 1.5}, "between 0 and 1"),
        ({"damage": "lots"}, "must be a number"),
        ({"crit_chance": True}, "must be a number"),
    ],
)
def test_units_repo_rejects_bad_stats(tmp_path: Path, overrides: dict, message: str) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    payload = _unit_payload("hero")
    payload.update(overrides)
    _write_json(definitions_dir / "units.json", {"squire": payload})

    with pytest.raises(DataValidationError, match=message):
        UnitsRepository(base_path=definitions_dir).get("squire")


def test_units_repo_reports_missing_fields(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    payload = _unit_payload("enemy")
    del payload["accuracy"]
    _write_json(definitions_dir / "units.json", {"rat": payload})

    with pytest.raises(DataValidationError, match="missing fields: \\['accuracy'\\]"):
        UnitsRepository(base_path=definitions_dir).all()


def test_stages_repo_loads_waves_in_order(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "units.json", {"rat": _unit_payload("enemy"), "bat": _unit_payload("enemy")})
    _write_json(
        definitions_dir / "stages.json",
        {"cellar": {"name": "Cellar", "level": 3, "waves": [["rat", "rat"], ["bat"]]}},
    )

    repo = StagesRepository(base_path=definitions_dir, units_repo=UnitsRepository(base_path=definitions_dir))
    stage = repo.get("cellar")

    assert stage.level == 3
    assert stage.waves == (("rat", "rat"), ("bat",))
    assert stage.total_waves == 2


@pytest.mark.parametrize(
    ("stage", "error", "message"),
    [
        ({"name": "Cellar", "level": 1, "waves": []}, DataValidationError, "non-empty"),
        ({"name": "Cellar", "level": 1, "waves": [[]]}, DataValidationError, "wave 1 must not be empty"),
        ({"name": "Cellar", "level": 0, "waves": [["rat"]]}, DataValidationError, "level"),
        ({"name": "Cellar", "level": 1, "waves": [["ghost"]]}, DataReferenceError, "ghost"),
        ({"name": "Cellar", "level": 1, "waves": [["squire"]]}, DataValidationError, "hero template"),
    ],
)
def test_stages_repo_rejects_bad_waves(tmp_path: Path, stage: dict, error: type, message: str) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "units.json", {"rat": _unit_payload("enemy"), "squire": _unit_payload("hero")})
    _write_json(definitions_dir / "stages.json", {"cellar": stage})

    repo = StagesRepository(base_path=definitions_dir, units_repo=UnitsRepository(base_path=definitions_dir))
    with pytest.raises(error, match=message):
        repo.get("cellar")


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)

    with pytest.raises(DataLoadError, match="units.json"):
        UnitsRepository(base_path=definitions_dir).all()


def test_malformed_json_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "stages.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(DataLoadError, match="Invalid JSON"):
        StagesRepository(base_path=definitions_dir).all()


def test_top_level_must_be_object(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "abilities.json").write_text("[]", encoding="utf-8")

    with pytest.raises(DataValidationError, match="top-level object"):
        AbilitiesRepository(base_path=definitions_dir).all()


def test_unknown_id_raises_key_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "units.json", {"rat": _unit_payload("enemy")})

    repo = UnitsRepository(base_path=definitions_dir)
    assert not repo.has("dragon")
    with pytest.raises(KeyError):
        repo.get("dragon")


def _unit_payload(side: str, **extra) -> dict:
    payload = {
        "name": "Test Unit",
        "side": side,
        "hp": 50,
        "damage": 8,
        "speed": 100,
        "defense": 2,
        "crit_chance": 0.1,
        "crit_damage": 1.5,
        "evasion": 0.05,
        "accuracy": 0.9,
    }
    payload.update(extra)
    return payload


def _seed_abilities(definitions_dir: Path) -> None:
    _write_json(
        definitions_dir / "abilities.json",
        {
            "jab": {
                "name": "Jab",
                "type": "offensive",
                "range": 1,
                "cooldown": 1,
                "effects": [{"type": "damage", "target_type": "enemy", "value": 4}],
            }
        },
    )


def _write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


def _make_definitions_dir(tmp_path: Path) -> Path:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    return definitions_dir
