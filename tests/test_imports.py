def test_import_gridbattle_package() -> None:
    import importlib

    module = importlib.import_module("gridbattle")
    assert module is not None


def test_import_rng_no_side_effects() -> None:
    from gridbattle.core.rng import RNG

    rng = RNG(42)
    value = rng.randint(0, 1)
    assert value in (0, 1)


def test_services_expose_engine_entry_points() -> None:
    from gridbattle.services import BattleEngine, BattleService, simulate_battle

    assert callable(simulate_battle)
    assert BattleEngine.__name__ == "BattleEngine"
    assert BattleService.__name__ == "BattleService"
