"""Status effect kinds and their fixed classification."""
from __future__ import annotations

from enum import Enum
from typing import Dict


class StatusEffectType(str, Enum):
    # control
    STUN = "stun"
    ROOT = "root"
    SILENCE = "silence"
    DISARM = "disarm"
    FEAR = "fear"
    CHARM = "charm"
    SLEEP = "sleep"
    # damage over time
    POISON = "poison"
    BURN = "burn"
    BLEED = "bleed"
    # debuffs
    SLOW = "slow"
    ARMOR_BREAK = "armor_break"
    WEAKENED = "weakened"
    VULNERABLE = "vulnerable"
    DISEASE = "disease"
    CURSE = "curse"
    TERROR = "terror"
    MARKED = "marked"
    # buffs
    SHIELD = "shield"
    REGENERATION = "regeneration"
    ENRAGE = "enrage"
    FRENZY = "frenzy"
    INCORPOREAL = "incorporeal"
    FORTIFY = "fortify"
    HASTE = "haste"
    INVISIBILITY = "invisibility"
    # special
    TAUNT = "taunt"
    THORNS = "thorns"
    BURNING_GROUND = "burning_ground"
    SCORCHED_EARTH = "scorched_earth"
    PLAGUE_ZONE = "plague_zone"
    ENTANGLE = "entangle"


class StatusCategory(str, Enum):
    BUFF = "buff"
    DEBUFF = "debuff"
    CONTROL = "control"
    DOT = "dot"
    SPECIAL = "special"


_CONTROL = (
    StatusEffectType.STUN,
    StatusEffectType.ROOT,
    StatusEffectType.SILENCE,
    StatusEffectType.DISARM,
    StatusEffectType.FEAR,
    StatusEffectType.CHARM,
    StatusEffectType.SLEEP,
)
_DOT = (StatusEffectType.POISON, StatusEffectType.BURN, StatusEffectType.BLEED)
_BUFF = (
    StatusEffectType.SHIELD,
    StatusEffectType.REGENERATION,
    StatusEffectType.ENRAGE,
    StatusEffectType.FRENZY,
    StatusEffectType.FORTIFY,
    StatusEffectType.HASTE,
    StatusEffectType.INVISIBILITY,
    StatusEffectType.INCORPOREAL,
)
_DEBUFF = (
    StatusEffectType.SLOW,
    StatusEffectType.ARMOR_BREAK,
    StatusEffectType.WEAKENED,
    StatusEffectType.VULNERABLE,
    StatusEffectType.DISEASE,
    StatusEffectType.CURSE,
    StatusEffectType.TERROR,
    StatusEffectType.MARKED,
)


def _build_table() -> Dict[StatusEffectType, StatusCategory]:
    table = {status: StatusCategory.SPECIAL for status in StatusEffectType}
    for group, category in (
        (_CONTROL, StatusCategory.CONTROL),
        (_DOT, StatusCategory.DOT),
        (_BUFF, StatusCategory.BUFF),
        (_DEBUFF, StatusCategory.DEBUFF),
    ):
        for status in group:
            table[status] = category
    return table


STATUS_CATEGORIES: Dict[StatusEffectType, StatusCategory] = _build_table()


def category_for(status_type: StatusEffectType) -> StatusCategory:
    return STATUS_CATEGORIES[status_type]
