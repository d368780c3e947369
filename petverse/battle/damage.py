"""Damage math for regular attacks and abilities.

Functions here never clamp to zero; the turn orchestrator floors the final
number before applying it.
"""
from __future__ import annotations
import math
import random
from typing import Optional

from petverse.data import catalog
from .models import Ability, AbilityType, BaseStats, EffectKind, Pet, StatusName
from .stats import technique_damage_multiplier

_RNG = random.Random()

STRONG = 1.5
WEAK = 0.5
DEFAULT_REGULAR_POWER = 10
DEFAULT_ABILITY_POWER = 20
DEFAULT_CRIT_DAMAGE = 1.5
DEFAULT_HIT_COUNT = 3
DEFAULT_EFFECT_CHANCE = 0.3


def get_type_effectiveness(attacker_type: Optional[str], defender_type: Optional[str]) -> float:
    attacking = catalog.get_type(attacker_type)
    defending = catalog.get_type(defender_type)
    if not attacking or not defending:
        return 1.0
    target = str(defender_type).upper()
    if target in (s.upper() for s in attacking.get("strengths", [])):
        return STRONG
    if target in (w.upper() for w in attacking.get("weaknesses", [])):
        return WEAK
    return 1.0


def compute_damage(base_power: float, attacker_level: int, defender_level: int, type_mult: float,
                   crit_mult: float = 1.0, technique_mult: float = 1.0) -> int:
    level_factor = 1 + (attacker_level - defender_level) * 0.05
    return math.floor(base_power * level_factor * type_mult * crit_mult * technique_mult)


def calculate_regular_damage(attacker_stats: BaseStats, attacker: Pet, defender: Pet,
                             attacker_action: Optional[str] = None, defender_action: Optional[str] = None,
                             rng: Optional[random.Random] = None) -> int:
    """Plain attack damage. The actions are carried for narration only."""
    rng = rng or _RNG
    base_power = attacker_stats.dmg or DEFAULT_REGULAR_POWER
    type_mult = get_type_effectiveness(attacker.type, defender.type)
    technique_mult = technique_damage_multiplier(attacker)
    crit_chance = attacker_stats.crit_chance or 0
    crit_mult = attacker_stats.crit_damage or DEFAULT_CRIT_DAMAGE
    is_crit = rng.random() < crit_chance
    return compute_damage(base_power, attacker.level, defender.level, type_mult,
                          crit_mult if is_crit else 1.0, technique_mult)


def _missing_hp_ratio(pet: Pet) -> float:
    if pet.max_hp <= 0:
        return 0.0
    return (pet.max_hp - (pet.current_hp or 0)) / pet.max_hp


def _has_guaranteed_crit(pet: Pet) -> bool:
    return any(se.name == StatusName.CRITICAL_GUARANTEE or getattr(se, "guaranteed_critical", False)
               for se in pet.status_effects)


def calculate_ability_damage(ability: Ability, attacker: Pet, defender: Pet, attacker_stats: BaseStats,
                             rng: Optional[random.Random] = None) -> int:
    """Ability damage: power x type x level x technique, then effect-kind modifiers.

    MULTI_HIT sums floored sub-hits, so the total can come out up to
    ``hit_count - 1`` below the unsplit value.
    """
    rng = rng or _RNG
    base_power = ability.power or DEFAULT_ABILITY_POWER
    type_mult = get_type_effectiveness(ability.element, defender.type)
    level_mult = 1 + (attacker.level - 1) * 0.05
    technique_mult = technique_damage_multiplier(attacker)

    damage: float = math.floor(base_power * type_mult * level_mult * technique_mult)

    if ability.effect == EffectKind.EXECUTE:
        damage *= 1 + _missing_hp_ratio(defender)
    if ability.effect == EffectKind.SCALING_DAMAGE:
        damage *= 1 + attacker.fallen_teammates() * 0.3

    if ability.type == AbilityType.OFFENSIVE:
        crit_chance = attacker_stats.crit_chance or 0
        crit_mult = attacker_stats.crit_damage or DEFAULT_CRIT_DAMAGE
        if _has_guaranteed_crit(attacker) or rng.random() < crit_chance:
            damage = math.floor(damage * crit_mult)

    if ability.effect == EffectKind.MULTI_HIT:
        hits = int(ability.params.get("hit_count", DEFAULT_HIT_COUNT)) or DEFAULT_HIT_COUNT
        damage = sum(math.floor(damage / hits) for _ in range(hits))

    if ability.effect == EffectKind.INSTANT_KILL:
        chance = ability.effect_chance if ability.effect_chance is not None else DEFAULT_EFFECT_CHANCE
        if rng.random() < chance:
            damage = defender.current_hp or 0

    return math.floor(damage)


__all__ = [
    "get_type_effectiveness", "compute_damage", "calculate_regular_damage",
    "calculate_ability_damage",
]
