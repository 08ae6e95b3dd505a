import pytest

from gridbattle.domain.battle_models import BattleUnit
from gridbattle.domain.defs import (
    AbilityDef,
    AbilityEffectDef,
    AbilityType,
    AoePattern,
    EffectType,
    StatModifier,
    StatusEffectType,
    TargetType,
)
from gridbattle.domain.events import (
    AbilityUsedEvent,
    AttackEvent,
    BattleEventType,
    CriticalHitEvent,
    DamageEvent,
    EvadedEvent,
    HealEvent,
    StatusAppliedEvent,
)
from gridbattle.services.combat.ability_resolver import basic_attack, resolve_action

from tests.helpers.builders import damage_ability, make_battle_unit, make_context
from tests.helpers.scripted_rng import ScriptedRNG


def _shockwave() -> AbilityDef:
    return AbilityDef(
        id="shockwave",
        name="Shockwave",
        type=AbilityType.OFFENSIVE,
        range=2,
        cooldown=3,
        effects=(
            AbilityEffectDef(type=EffectType.DAMAGE, target_type=TargetType.AOE, value=10, radius=1),
            AbilityEffectDef(type=EffectType.LIFESTEAL, target_type=TargetType.SELF, value=0.5),
        ),
    )


def _ready(unit: BattleUnit) -> BattleUnit:
    unit.cooldown = 100.0
    return unit


def test_aoe_radius_one_hits_all_three_and_lifesteal_heals_by_sum() -> None:
    caster = _ready(make_battle_unit("caster", (3, 3), is_hero=True, hp=100, abilities=[_shockwave()]))
    caster.stats.hp = 40
    near = make_battle_unit("near", (3, 5), is_hero=False)
    side = make_battle_unit("side", (2, 5), is_hero=False)
    back = make_battle_unit("back", (4, 6), is_hero=False)
    ctx = make_context([caster], [near, side, back])

    resolve_action(ctx, caster, set())

    events = ctx.state.events
    assert events.types() == [
        BattleEventType.ABILITY_USED,
        BattleEventType.DAMAGE,
        BattleEventType.DAMAGE,
        BattleEventType.DAMAGE,
        BattleEventType.HEAL,
    ]
    assert events.of_type(AbilityUsedEvent)[0].target_ids == ("near", "side", "back")
    assert [e.target_id for e in events.of_type(DamageEvent)] == ["near", "side", "back"]
    assert all(unit.stats.hp == 90 for unit in (near, side, back))
    heal = events.of_type(HealEvent)[0]
    assert heal.amount == 15
    assert heal.source == "lifesteal"
    assert caster.stats.hp == 55
    assert caster.cooldown == 0
    assert caster.ability_cooldowns["shockwave"] == 3


def test_ability_without_target_falls_through_without_cooldown() -> None:
    sweep = AbilityDef(
        id="sweep",
        name="Sweep",
        type=AbilityType.OFFENSIVE,
        range=3,
        cooldown=4,
        effects=(
            AbilityEffectDef(type=EffectType.DAMAGE, target_type=TargetType.AOE, value=50, pattern=AoePattern.CLEAVE),
        ),
    )
    caster = _ready(make_battle_unit("caster", (3, 3), is_hero=True, damage=7, abilities=[sweep]))
    enemy = make_battle_unit("enemy", (3, 5), is_hero=False)
    ctx = make_context([caster], [enemy])

    resolve_action(ctx, caster, set())

    assert ctx.state.events.of_type(AbilityUsedEvent) == []
    assert ctx.state.events.of_type(AttackEvent)[0].damage == 7
    assert caster.ability_cooldowns["sweep"] == 0


def test_out_of_range_unit_moves_instead_of_attacking() -> None:
    caster = _ready(make_battle_unit("caster", (3, 0), is_hero=True, abilities=[damage_ability("jab", 5)]))
    enemy = make_battle_unit("enemy", (3, 7), is_hero=False)
    ctx = make_context([caster], [enemy])

    resolve_action(ctx, caster, set())

    assert ctx.state.events.types() == [BattleEventType.MOVE]
    assert caster.cooldown == 0


def test_used_ability_cooldown_counts_down_per_action() -> None:
    caster = _ready(make_battle_unit("caster", (3, 3), is_hero=True, abilities=[damage_ability("jab", 5, cooldown=2)]))
    enemy = make_battle_unit("enemy", (3, 4), is_hero=False, hp=1000)
    ctx = make_context([caster], [enemy])

    resolve_action(ctx, caster, set())
    assert caster.ability_cooldowns["jab"] == 2
    _ready(caster)
    resolve_action(ctx, caster, set())
    assert caster.ability_cooldowns["jab"] == 1
    _ready(caster)
    resolve_action(ctx, caster, set())
    assert caster.ability_cooldowns["jab"] == 0

    kinds = [e.type for e in ctx.state.events if e.type in (BattleEventType.ABILITY_USED, BattleEventType.ATTACK)]
    assert kinds == [BattleEventType.ABILITY_USED, BattleEventType.ATTACK, BattleEventType.ATTACK]


def test_heal_goes_to_wounded_allies_only() -> None:
    mend = AbilityDef(
        id="mend",
        name="Mend",
        type=AbilityType.SUPPORT,
        range=0,
        cooldown=3,
        effects=(AbilityEffectDef(type=EffectType.HEAL, target_type=TargetType.AOE, value=30),),
    )
    healer = _ready(make_battle_unit("healer", (3, 0), is_hero=True, abilities=[mend]))
    wounded = make_battle_unit("wounded", (4, 0), is_hero=True, hp=100)
    wounded.stats.hp = 80
    healthy = make_battle_unit("healthy", (5, 0), is_hero=True)
    enemy = make_battle_unit("enemy", (3, 7), is_hero=False)
    ctx = make_context([healer, wounded, healthy], [enemy])

    resolve_action(ctx, healer, set())

    used = ctx.state.events.of_type(AbilityUsedEvent)[0]
    assert used.target_ids == ("wounded",)
    heal = ctx.state.events.of_type(HealEvent)[0]
    assert heal.amount == 20
    assert wounded.stats.hp == 100
    assert healer.ability_cooldowns["mend"] == 3


def test_buff_is_not_recast_while_active() -> None:
    rally = AbilityDef(
        id="rally",
        name="Rally",
        type=AbilityType.SUPPORT,
        range=0,
        cooldown=0,
        effects=(
            AbilityEffectDef(
                type=EffectType.BUFF,
                target_type=TargetType.AOE,
                duration=3,
                stat_modifier=StatModifier(stat="damage", value=50, is_percent=True),
            ),
        ),
    )
    leader = _ready(make_battle_unit("leader", (3, 0), is_hero=True, damage=10, abilities=[rally]))
    follower = make_battle_unit("follower", (4, 0), is_hero=True, damage=20)
    enemy = make_battle_unit("enemy", (3, 7), is_hero=False)
    ctx = make_context([leader, follower], [enemy])

    resolve_action(ctx, leader, set())

    applied = ctx.state.events.of_type(StatusAppliedEvent)
    assert [e.target_id for e in applied] == ["leader", "follower"]
    assert all(e.status_type is StatusEffectType.SHIELD for e in applied)
    assert leader.stats.damage == 15
    assert follower.stats.damage == 30

    _ready(leader)
    resolve_action(ctx, leader, set())
    assert len(ctx.state.events.of_type(AbilityUsedEvent)) == 1
    assert ctx.state.events[-1].type is BattleEventType.MOVE


def test_status_effect_uses_value_as_damage_per_tick_for_dots() -> None:
    bite = AbilityDef(
        id="bite",
        name="Bite",
        type=AbilityType.OFFENSIVE,
        range=1,
        cooldown=2,
        effects=(
            AbilityEffectDef(
                type=EffectType.STATUS,
                target_type=TargetType.ENEMY,
                status_type=StatusEffectType.POISON,
                value=4,
            ),
        ),
    )
    caster = _ready(make_battle_unit("caster", (3, 3), is_hero=True, abilities=[bite]))
    enemy = make_battle_unit("enemy", (3, 4), is_hero=False)
    ctx = make_context([caster], [enemy])

    resolve_action(ctx, caster, set())

    poison = enemy.status_effects[0]
    assert poison.damage_per_tick == 4
    assert poison.remaining_duration == 3
    assert poison.source_id == "caster"


def test_basic_attack_crit_applies_mitigation_and_lifesteal() -> None:
    attacker = make_battle_unit(
        "attacker",
        (3, 3),
        is_hero=True,
        hp=100,
        damage=20,
        crit_chance=0.5,
        crit_damage=2.0,
        penetration=0.5,
        lifesteal=0.2,
    )
    attacker.stats.hp = 50
    target = make_battle_unit("target", (3, 4), is_hero=False, hp=100, defense=10)
    ctx = make_context([attacker], [target], rng=ScriptedRNG([0.5, 0.0]))

    basic_attack(ctx, attacker, target)

    assert ctx.state.events.types() == [
        BattleEventType.ATTACK,
        BattleEventType.CRITICAL_HIT,
        BattleEventType.DAMAGE,
        BattleEventType.HEAL,
    ]
    assert ctx.state.events.of_type(CriticalHitEvent)[0].multiplier == 2.0
    assert target.stats.hp == pytest.approx(100 - 37.5)
    assert attacker.stats.hp == pytest.approx(50 + 7.5)


def test_basic_attack_deals_at_least_one_damage() -> None:
    attacker = make_battle_unit("attacker", (3, 3), is_hero=True, damage=1)
    target = make_battle_unit("target", (3, 4), is_hero=False, hp=10, defense=100)
    ctx = make_context([attacker], [target])

    basic_attack(ctx, attacker, target)

    assert target.stats.hp == 9


def test_forced_evasion_leaves_target_untouched() -> None:
    attacker = _ready(make_battle_unit("attacker", (3, 3), is_hero=True, damage=50, accuracy=1.0))
    target = make_battle_unit("target", (3, 4), is_hero=False, hp=30, evasion=0.5)
    ctx = make_context([attacker], [target], rng=ScriptedRNG([0.1]))

    resolve_action(ctx, attacker, set())

    assert ctx.state.events.types() == [BattleEventType.EVADED]
    evaded = ctx.state.events.of_type(EvadedEvent)[0]
    assert (evaded.attacker_id, evaded.target_id) == ("attacker", "target")
    assert target.stats.hp == 30
    assert attacker.cooldown == 0


def test_evasion_is_capped() -> None:
    attacker = make_battle_unit("attacker", (3, 3), is_hero=True, damage=5, accuracy=1.0)
    target = make_battle_unit("target", (3, 4), is_hero=False, hp=30, evasion=2.0)
    ctx = make_context([attacker], [target], rng=ScriptedRNG([0.96]))

    basic_attack(ctx, attacker, target)

    assert ctx.state.events.of_type(EvadedEvent) == []
    assert target.stats.hp == 25


def test_support_status_on_an_enemy_is_not_recast_while_active() -> None:
    hex_ = AbilityDef(
        id="hex",
        name="Hex",
        type=AbilityType.SUPPORT,
        range=3,
        cooldown=0,
        effects=(
            AbilityEffectDef(
                type=EffectType.STATUS,
                target_type=TargetType.ENEMY,
                status_type=StatusEffectType.SLOW,
                duration=3,
            ),
        ),
    )
    caster = _ready(make_battle_unit("caster", (3, 3), is_hero=True, damage=10, abilities=[hex_]))
    enemy = make_battle_unit("enemy", (3, 4), is_hero=False, hp=1000)
    ctx = make_context([caster], [enemy])

    resolve_action(ctx, caster, set())
    assert [effect.status_type for effect in enemy.status_effects] == [StatusEffectType.SLOW]

    _ready(caster)
    resolve_action(ctx, caster, set())

    assert len(ctx.state.events.of_type(AbilityUsedEvent)) == 1
    assert len(enemy.status_effects) == 1
    assert len(ctx.state.events.of_type(AttackEvent)) == 1
    assert enemy.stats.hp == 990
