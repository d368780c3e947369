"""Ability side effects and per-turn status processing.

``apply_ability_effect`` rolls the ability's trigger chance and dispatches to
one handler per ``EffectKind``. Handlers push status effects onto pets,
change HP directly, or raise flags on the shared ``TurnContext`` for the
damage step to read back.

Stacks of the same status coexist; nothing here deduplicates.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
import math
import random
from typing import Callable, Dict, List, Optional, Tuple

from petverse.core.logging import logger
from petverse.data import catalog
from .models import (
    PERMANENT_DURATION, Ability, AccuracyReduction, BaseStats, Confusion, CriticalGuarantee,
    DamageAmplification, DamageOverTime, DamageReduction, EffectCategory, EffectKind, EscalatingDamage,
    EvasionBonus, HealingReduction, HealOverTime, Marker, Pet, StatModifier, StatusEffect, StatusName,
    Transformation, TurnContext, TurnDelay,
)

_RNG = random.Random()

DEFAULT_EFFECT_CHANCE = 0.3

CLEANSABLE = frozenset({
    StatusName.BURN, StatusName.PERMANENT_BURN, StatusName.STUN, StatusName.DEFENSE_DOWN,
    StatusName.ATTACK_DOWN, StatusName.SLOW, StatusName.DAMAGE_OVER_TIME, StatusName.SLEEP,
    StatusName.CONFUSION, StatusName.ACCURACY_DOWN, StatusName.PERMANENT_STAT_REDUCTION,
    StatusName.HEALING_REDUCTION, StatusName.HEAL_REVERSAL, StatusName.SILENCE, StatusName.TURN_DELAY,
})
_CLEANSABLE_VALUES = frozenset(n.value for n in CLEANSABLE)

RANDOM_DEBUFFS: Tuple[EffectKind, ...] = (
    EffectKind.DEFENSE_DOWN, EffectKind.ATTACK_DOWN, EffectKind.SLOW,
    EffectKind.ACCURACY_DOWN, EffectKind.CONFUSION,
)


@dataclass
class EffectCall:
    """Everything a handler may read or mutate for one triggered effect."""
    ability: Ability
    attacker: Pet
    defender: Pet
    context: TurnContext
    stats: BaseStats
    rng: random.Random
    chance: float
    dot_duration: float = 1.0
    dot_damage: float = 1.0


EffectHandler = Callable[[EffectCall], None]
EFFECT_HANDLERS: Dict[EffectKind, EffectHandler] = {}


def handles(*kinds: EffectKind):
    def register(fn: EffectHandler) -> EffectHandler:
        for kind in kinds:
            EFFECT_HANDLERS[kind] = fn
        return fn
    return register


def _turns(base: int, multiplier: float) -> int:
    return math.floor(base * multiplier)


def _per_turn(total: float, turns: int) -> int:
    return math.floor(total / max(1, turns))

# ---------------------------------------------------------------------------
# Damage over time
# ---------------------------------------------------------------------------

@handles(EffectKind.BURN)
def _burn(c: EffectCall):
    c.defender.status_effects.append(DamageOverTime(
        name=StatusName.BURN,
        duration=_turns(3, c.dot_duration),
        damage_per_turn=math.floor(c.stats.dmg * 0.1 * c.dot_damage),
    ))

@handles(EffectKind.PERMANENT_BURN)
def _permanent_burn(c: EffectCall):
    c.defender.status_effects.append(DamageOverTime(
        name=StatusName.PERMANENT_BURN,
        duration=PERMANENT_DURATION,
        damage_per_turn=math.floor(c.stats.dmg * 0.2),
    ))

@handles(EffectKind.DOT)
def _dot(c: EffectCall):
    turns = _turns(2, c.dot_duration)
    c.defender.status_effects.append(DamageOverTime(
        name=StatusName.DAMAGE_OVER_TIME,
        duration=turns,
        damage_per_turn=_per_turn((c.ability.power or 15) * c.dot_damage, turns),
    ))

@handles(EffectKind.DAMAGE_OVER_TIME)
def _damage_over_time(c: EffectCall):
    turns = _turns(3, c.dot_duration)
    c.defender.status_effects.append(DamageOverTime(
        name=StatusName.DAMAGE_OVER_TIME,
        duration=turns,
        damage_per_turn=_per_turn((c.ability.power or 20) * c.dot_damage, turns),
    ))

@handles(EffectKind.ESCALATING_DOT)
def _escalating_dot(c: EffectCall):
    c.defender.status_effects.append(EscalatingDamage(
        name=StatusName.ESCALATING_DOT,
        duration=_turns(3, c.dot_duration),
        base_damage=math.floor(c.stats.dmg * 0.05 * c.dot_damage),
        current_turn=0,
    ))

# ---------------------------------------------------------------------------
# Healing
# ---------------------------------------------------------------------------

@handles(EffectKind.HEAL)
def _heal(c: EffectCall):
    c.attacker.heal(c.ability.power or 20)

@handles(EffectKind.FULL_HEAL)
def _full_heal(c: EffectCall):
    c.attacker.current_hp = c.attacker.max_hp
    for pet in c.attacker.team or []:
        pet.current_hp = pet.max_hp

@handles(EffectKind.HEAL_OVER_TIME)
def _heal_over_time(c: EffectCall):
    turns = _turns(3, c.dot_duration)
    c.attacker.status_effects.append(HealOverTime(
        name=StatusName.HEAL_OVER_TIME,
        duration=turns,
        heal_per_turn=_per_turn(c.ability.power or 15, turns),
    ))

# ---------------------------------------------------------------------------
# Stat modifiers, buffs and debuffs
# ---------------------------------------------------------------------------

def _debuff(name: StatusName, duration: int, **mult) -> StatModifier:
    return StatModifier(name=name, duration=duration, category=EffectCategory.DEBUFF, **mult)

def _buff(name: StatusName, duration: int, **mult) -> StatModifier:
    return StatModifier(name=name, duration=duration, category=EffectCategory.BUFF, **mult)

@handles(EffectKind.DEFENSE_UP)
def _defense_up(c: EffectCall):
    c.attacker.status_effects.append(_buff(StatusName.DEFENSE_UP, 3, defense_multiplier=1.3))

@handles(EffectKind.DEFENSE_DOWN)
def _defense_down(c: EffectCall):
    c.defender.status_effects.append(_debuff(StatusName.DEFENSE_DOWN, 3, defense_multiplier=0.7))

@handles(EffectKind.ATTACK_DOWN)
def _attack_down(c: EffectCall):
    c.defender.status_effects.append(_debuff(StatusName.ATTACK_DOWN, 3, attack_multiplier=0.6))

@handles(EffectKind.SLOW)
def _slow(c: EffectCall):
    c.defender.status_effects.append(_debuff(StatusName.SLOW, 2, speed_multiplier=0.7))

@handles(EffectKind.SPEED_UP)
def _speed_up(c: EffectCall):
    c.attacker.status_effects.append(_buff(StatusName.SPEED_UP, 3, speed_multiplier=1.4))

@handles(EffectKind.STAT_REDUCTION)
def _stat_reduction(c: EffectCall):
    c.defender.status_effects.append(_debuff(
        StatusName.STAT_REDUCTION, 3,
        attack_multiplier=0.8, defense_multiplier=0.8, speed_multiplier=0.8,
    ))

@handles(EffectKind.PERMANENT_STAT_REDUCTION)
def _permanent_stat_reduction(c: EffectCall):
    c.defender.status_effects.append(_debuff(
        StatusName.PERMANENT_STAT_REDUCTION, PERMANENT_DURATION,
        attack_multiplier=0.7, defense_multiplier=0.7, speed_multiplier=0.7,
    ))

@handles(EffectKind.EVASION_UP)
def _evasion_up(c: EffectCall):
    c.attacker.status_effects.append(EvasionBonus(name=StatusName.EVASION_UP, duration=3, evasion_bonus=0.5))

@handles(EffectKind.ACCURACY_DOWN)
def _accuracy_down(c: EffectCall):
    c.defender.status_effects.append(
        AccuracyReduction(name=StatusName.ACCURACY_DOWN, duration=3, accuracy_reduction=0.6))

@handles(EffectKind.DAMAGE_REDUCTION)
def _damage_reduction(c: EffectCall):
    c.attacker.status_effects.append(
        DamageReduction(name=StatusName.DAMAGE_REDUCTION, duration=1, damage_reduction=0.5))

@handles(EffectKind.BARRIER)
def _barrier(c: EffectCall):
    c.attacker.status_effects.append(DamageReduction(name=StatusName.BARRIER, duration=3, damage_reduction=0.8))

@handles(EffectKind.DAMAGE_IMMUNITY)
def _damage_immunity(c: EffectCall):
    c.attacker.status_effects.append(
        Marker(name=StatusName.DAMAGE_IMMUNITY, duration=1, category=EffectCategory.BUFF))

@handles(EffectKind.IMMORTALITY)
def _immortality(c: EffectCall):
    c.attacker.status_effects.append(Marker(name=StatusName.IMMORTALITY, duration=1, category=EffectCategory.BUFF))

@handles(EffectKind.HEALING_REDUCTION)
def _healing_reduction(c: EffectCall):
    c.defender.status_effects.append(
        HealingReduction(name=StatusName.HEALING_REDUCTION, duration=4, healing_reduction=0.8))

@handles(EffectKind.HEAL_REVERSAL)
def _heal_reversal(c: EffectCall):
    c.defender.status_effects.append(
        Marker(name=StatusName.HEAL_REVERSAL, duration=3, category=EffectCategory.DEBUFF))

@handles(EffectKind.DAMAGE_AMPLIFICATION)
def _damage_amplification(c: EffectCall):
    c.defender.status_effects.append(DamageAmplification(
        name=StatusName.DAMAGE_AMPLIFICATION, duration=3, damage_taken_multiplier=1.2))

@handles(EffectKind.TRANSFORMATION)
def _transformation(c: EffectCall):
    c.attacker.status_effects.append(Transformation(
        name=StatusName.TRANSFORMATION, duration=PERMANENT_DURATION,
        evasion_bonus=0.4, critical_chance=0.3,
    ))

@handles(EffectKind.BATTLE_RESET)
def _battle_reset(c: EffectCall):
    # Consumed by the battle controller, not by the engine.
    c.attacker.status_effects.append(Marker(
        name=StatusName.BATTLE_RESET_READY, duration=PERMANENT_DURATION, category=EffectCategory.BUFF))

@handles(EffectKind.CRITICAL_GUARANTEE)
def _critical_guarantee(c: EffectCall):
    c.attacker.status_effects.append(CriticalGuarantee(name=StatusName.CRITICAL_GUARANTEE, duration=1))

# ---------------------------------------------------------------------------
# Control
# ---------------------------------------------------------------------------

@handles(EffectKind.STUN)
def _stun(c: EffectCall):
    c.defender.status_effects.append(Marker(name=StatusName.STUN, duration=1, category=EffectCategory.STUN))
    c.context.controlled.append(StatusName.STUN)

@handles(EffectKind.SLEEP)
def _sleep(c: EffectCall):
    turns = int(1 + c.rng.random())
    c.defender.status_effects.append(Marker(name=StatusName.SLEEP, duration=turns, category=EffectCategory.STUN))
    c.context.controlled.append(StatusName.SLEEP)

@handles(EffectKind.CONFUSION)
def _confusion(c: EffectCall):
    c.defender.status_effects.append(Confusion(name=StatusName.CONFUSION, duration=2, self_damage_chance=0.3))

@handles(EffectKind.TURN_DELAY)
def _turn_delay(c: EffectCall):
    c.defender.status_effects.append(TurnDelay(name=StatusName.TURN_DELAY, duration=1, turns_delayed=1))
    c.context.controlled.append(StatusName.TURN_DELAY)

@handles(EffectKind.SILENCE)
def _silence(c: EffectCall):
    c.defender.status_effects.append(Marker(name=StatusName.SILENCE, duration=2, category=EffectCategory.DEBUFF))

# ---------------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------------

def cleanse(pet: Pet) -> int:
    """Drop every cleansable (harmful) status from ``pet``; returns how many went."""
    before = len(pet.status_effects)
    pet.status_effects = [se for se in pet.status_effects if str(getattr(se.name, "value", se.name))
                          not in _CLEANSABLE_VALUES]
    return before - len(pet.status_effects)

def remove_buffs(pet: Pet) -> int:
    before = len(pet.status_effects)
    pet.status_effects = [se for se in pet.status_effects if se.category != EffectCategory.BUFF]
    return before - len(pet.status_effects)

@handles(EffectKind.CLEANSE)
def _cleanse(c: EffectCall):
    cleanse(c.attacker)

@handles(EffectKind.BUFF_REMOVAL)
def _buff_removal(c: EffectCall):
    remove_buffs(c.defender)

@handles(EffectKind.RANDOM_DEBUFF)
def _random_debuff(c: EffectCall):
    kind = RANDOM_DEBUFFS[math.floor(c.rng.random() * len(RANDOM_DEBUFFS))]
    forced = replace(c.ability, effect=kind, effect_chance=1.0)
    apply_ability_effect(forced, c.attacker, c.defender, c.context, c.stats, rng=c.rng)

# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------

@handles(EffectKind.RESURRECTION)
def _resurrection(c: EffectCall):
    for pet in c.attacker.team or []:
        if (pet.current_hp or 0) <= 0:
            pet.current_hp = math.floor(pet.max_hp * 0.5)
        pet.status_effects.append(_buff(
            StatusName.RESURRECTION_BOOST, 3,
            attack_multiplier=1.2, defense_multiplier=1.2, speed_multiplier=1.2,
        ))

# ---------------------------------------------------------------------------
# Meta effects (flags for the damage step)
# ---------------------------------------------------------------------------

@handles(EffectKind.LIFE_STEAL)
def _life_steal(c: EffectCall):
    c.attacker.heal(math.floor(c.context.damage * 0.5))

@handles(EffectKind.EXECUTE)
def _execute(c: EffectCall):
    d = c.defender
    missing = (d.max_hp - (d.current_hp or 0)) / d.max_hp if d.max_hp > 0 else 0.0
    c.context.execute_multiplier = 1 + missing

@handles(EffectKind.SCALING_DAMAGE)
def _scaling_damage(c: EffectCall):
    c.context.scaling_multiplier = 1 + c.attacker.fallen_teammates() * 0.3

@handles(EffectKind.MULTI_HIT)
def _multi_hit(c: EffectCall):
    c.context.multi_hit = True
    c.context.hit_count = int(c.ability.params.get("hit_count", 3)) or 3

@handles(EffectKind.INSTANT_KILL)
def _instant_kill(c: EffectCall):
    if c.rng.random() < c.chance:
        c.defender.current_hp = 0
        c.context.instant_kill = True

@handles(EffectKind.TRUE_DAMAGE)
def _true_damage(c: EffectCall):
    c.context.true_damage = True

@handles(EffectKind.DEFENSE_IGNORE)
def _defense_ignore(c: EffectCall):
    c.context.ignore_defense = True

@handles(EffectKind.TYPE_ADVANTAGE)
def _type_advantage(c: EffectCall):
    c.context.type_advantage = True

# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def apply_ability_effect(ability: Ability, attacker: Pet, defender: Pet,
                         context: Optional[TurnContext] = None,
                         attacker_stats: Optional[BaseStats] = None,
                         rng: Optional[random.Random] = None) -> bool:
    """Roll the ability's trigger chance and apply its effect.

    Returns True when the roll succeeded and a handler ran.
    """
    if ability.effect is None:
        return False
    rng = rng or _RNG
    context = context if context is not None else TurnContext()
    chance = ability.effect_chance if ability.effect_chance is not None else DEFAULT_EFFECT_CHANCE
    if rng.random() >= chance:
        return False
    handler = EFFECT_HANDLERS.get(ability.effect)
    if handler is None:
        logger.debug("EffectUnhandled", ability=ability.id, effect=ability.effect)
        return False
    mult = catalog.technique_multipliers(attacker.technique, attacker.technique_level or 1)
    handler(EffectCall(
        ability=ability,
        attacker=attacker,
        defender=defender,
        context=context,
        stats=attacker_stats if attacker_stats is not None else attacker.stats,
        rng=rng,
        chance=chance,
        dot_duration=mult.dot_duration or 1.0,
        dot_damage=mult.dot_damage or 1.0,
    ))
    logger.debug("EffectApplied", ability=ability.id, effect=getattr(ability.effect, "value", ability.effect),
                 attacker=attacker.name, defender=defender.name)
    return True


def _tick_one(pet: Pet, se: StatusEffect, rng: random.Random) -> int:
    """Apply one status for this turn; returns the HP delta (negative = damage)."""
    if isinstance(se, EscalatingDamage):
        se.current_turn += 1
        dealt = se.base_damage * se.current_turn
        old = pet.current_hp
        pet.current_hp = max(0, pet.current_hp - dealt)
        return pet.current_hp - old
    if isinstance(se, Confusion):
        if rng.random() < se.self_damage_chance:
            old = pet.current_hp
            pet.current_hp = max(0, pet.current_hp - math.floor(pet.stats.dmg * 0.3))
            return pet.current_hp - old
        return 0
    if se.name == StatusName.HEAL_REVERSAL:
        return 0
    if se.category == EffectCategory.DAMAGE and getattr(se, "damage_per_turn", 0):
        pet.current_hp -= se.damage_per_turn
        return -se.damage_per_turn
    if se.category == EffectCategory.HEAL and getattr(se, "heal_per_turn", 0):
        old = pet.current_hp
        pet.current_hp = min(pet.max_hp, pet.current_hp + se.heal_per_turn)
        return pet.current_hp - old
    return 0


def tick_status_effects(pet: Pet, rng: Optional[random.Random] = None) -> List[Tuple[str, int]]:
    """Advance every status on ``pet`` by one turn.

    Each effect loses one turn of duration, then acts, and is kept only while
    it has turns left. HP is floored at 0 once all effects have acted.
    Returns ``(status name, hp delta)`` for every effect that changed HP.
    """
    rng = rng or _RNG
    changes: List[Tuple[str, int]] = []
    kept: List[StatusEffect] = []
    for se in pet.status_effects:
        se.duration -= 1
        delta = _tick_one(pet, se, rng)
        if delta:
            changes.append((str(getattr(se.name, "value", se.name)), delta))
        if se.duration > 0:
            kept.append(se)
    pet.current_hp = max(0, pet.current_hp)
    pet.status_effects = kept
    return changes


__all__ = [
    "EFFECT_HANDLERS", "EffectCall", "handles", "apply_ability_effect", "tick_status_effects",
    "cleanse", "remove_buffs", "CLEANSABLE", "RANDOM_DEBUFFS",
]
