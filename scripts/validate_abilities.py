"""Smoke validator for the ability catalog.

Runs each ability once in a simple 1v1 with its trigger forced, and reports
whether something observable happened (damage, HP change, status pushed or
removed, turn flag raised). Abilities whose effect kind has no handler are
reported separately.

Outputs a concise console summary and a JSON report under scripts/reports/.
Usage: python scripts/validate_abilities.py
"""
from __future__ import annotations
import json
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any, Dict, List, Tuple
import random

from petverse.battle.damage import calculate_ability_damage
from petverse.battle.effects import EFFECT_HANDLERS, apply_ability_effect
from petverse.battle.models import (
    Ability, BaseStats, DamageOverTime, EffectCategory, EffectKind, Pet, StatModifier, StatusName, TurnContext,
)
from petverse.battle.stats import get_effective_stats
from petverse.core.types import format_types
from petverse.data.catalog import all_abilities

REPO_ROOT = Path(__file__).resolve().parents[1]
REPORT_DIR = REPO_ROOT / "scripts" / "reports"
REPORT_PATH = REPORT_DIR / "ability_smoke_report.json"


def _pet(name: str, type_: str) -> Pet:
    return Pet(name=name, type=type_, level=10,
               stats=BaseStats(hp=200, dmg=40, crit_chance=0.0, crit_damage=1.5))


def _setup(ability: Ability) -> Tuple[Pet, Pet]:
    attacker = _pet("Tester", ability.element)
    defender = _pet("Dummy", "LIGHT" if ability.element != "LIGHT" else "FIRE")
    # Give every effect kind something to act on
    attacker.current_hp = 120
    attacker.status_effects.append(DamageOverTime(name=StatusName.BURN, duration=3, damage_per_turn=4))
    defender.status_effects.append(StatModifier(name=StatusName.DEFENSE_UP, duration=3,
                                                category=EffectCategory.BUFF, defense_multiplier=1.3))
    fallen = _pet("Fallen", ability.element)
    fallen.current_hp = 0
    team = [attacker, fallen]
    attacker.team = team
    fallen.team = team
    return attacker, defender


def _snapshot(pets: List[Pet]) -> List[Dict[str, Any]]:
    return [{"hp": p.current_hp, "status": [se.to_dict() for se in p.status_effects]} for p in pets]


def simulate_ability(ability: Ability) -> Tuple[bool, Dict[str, Any]]:
    rng = random.Random(123)
    forced = replace(ability, effect_chance=1.0)
    attacker, defender = _setup(forced)
    pets = [attacker, defender] + [p for p in attacker.team or [] if p is not attacker]
    before = _snapshot(pets)

    stats = get_effective_stats(attacker)
    damage = max(0, calculate_ability_damage(forced, attacker, defender, stats, rng=rng))
    defender.take_damage(damage)
    context = TurnContext(damage=damage)
    triggered = apply_ability_effect(forced, attacker, defender, context, stats, rng=rng)

    after = _snapshot(pets)
    flags = {k: v for k, v in asdict(context).items() if k != "damage" and v not in (None, False, 1)}
    changed = before != after or bool(flags)
    reasons: List[str] = []
    if forced.effect is not None and forced.effect not in EFFECT_HANDLERS:
        reasons.append("no handler for effect kind")
    if forced.effect is not None and not triggered:
        reasons.append("effect did not trigger with forced chance")
    if not changed and damage <= 0:
        reasons.append("no observable change")
    success = not reasons
    return success, {
        "id": ability.id,
        "element": ability.element,
        "effect": forced.effect.value if forced.effect else None,
        "damage": damage,
        "flags": flags,
        "reasons": reasons,
    }


def main():
    abilities = all_abilities()
    results: List[Dict[str, Any]] = []
    ok = 0
    for aid in sorted(abilities):
        success, info = simulate_ability(abilities[aid])
        info["success"] = success
        results.append(info)
        if success:
            ok += 1
    unhandled = sorted(k.value for k in EffectKind if k not in EFFECT_HANDLERS)
    REPORT_DIR.mkdir(parents=True, exist_ok=True)
    REPORT_PATH.write_text(json.dumps({"results": results, "unhandled_kinds": unhandled}, indent=2))
    print(f"Abilities OK: {ok}/{len(results)}")
    for r in results:
        if not r["success"]:
            print(f"  FAIL {r['id']} [{format_types((r['element'],))}] ({r['effect']}): {', '.join(r['reasons'])}")
    if unhandled:
        print(f"Effect kinds without handler: {', '.join(unhandled)}")
    print(f"Report: {REPORT_PATH}")


if __name__ == "__main__":
    main()
